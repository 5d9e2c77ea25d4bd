"""Standardized parameter table -> typed nodes and edges.

Strict two-stage pipeline over an immutable sequence of ParameterRecords:

1. Edges: significant non-self relations, mapped operator -> EdgeKind.
   Latent names are then read off the loading edges.
2. Nodes: one per self-referential (variance) record, flagged latent when the
   name is in the set from stage 1.

Variables referenced by an edge but lacking a variance record get no node.
The renderer may show such edges dangling; nothing is synthesized here.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from semgraph.schemas import (
    OPERATOR_EDGE_KINDS,
    Edge,
    EdgeKind,
    ModelGraph,
    Node,
    ParameterRecord,
)

logger = logging.getLogger(__name__)

DEFAULT_P_MAX = 0.10


def validate_p_max(p_max: float) -> float:
    """Return p_max unchanged if it is a usable threshold, else raise ValueError."""
    if not 0 < p_max <= 1:
        raise ValueError(f"p_max must be in (0, 1], got {p_max}")
    return p_max


def is_edge_record(record: ParameterRecord, p_max: float = DEFAULT_P_MAX) -> bool:
    """True if the record is drawn as an edge.

    The comparison is strict: p_value == p_max is excluded. A NaN p_value
    (fixed parameter) never passes.
    """
    return (
        record.operator in OPERATOR_EDGE_KINDS
        and record.lhs != record.rhs
        and record.p_value < p_max
    )


def edge_from_record(record: ParameterRecord) -> Edge:
    """Map a relation record to an Edge with ``to = lhs`` and ``from = rhs``."""
    return Edge(
        source=record.rhs,
        target=record.lhs,
        value=record.estimate,
        kind=OPERATOR_EDGE_KINDS[record.operator],
    )


def build_edges(
    records: Iterable[ParameterRecord], p_max: float = DEFAULT_P_MAX
) -> list[Edge]:
    """Edges for every significant relation, in input order."""
    return [edge_from_record(r) for r in records if is_edge_record(r, p_max)]


def latent_names(edges: Iterable[Edge]) -> set[str]:
    """Names modeled as common factors: the ``to`` side of any loading edge."""
    return {edge.target for edge in edges if edge.kind == EdgeKind.LOADING}


def build_nodes(records: Iterable[ParameterRecord], latent: set[str]) -> list[Node]:
    """Nodes for every self-referential record, in input order."""
    return [
        Node(name=r.lhs, residual_estimate=r.estimate, is_latent=r.lhs in latent)
        for r in records
        if r.is_self_referential
    ]


def model_to_graph(
    records: Sequence[ParameterRecord], p_max: float | None = None
) -> ModelGraph:
    """Transform a standardized parameter table into a ModelGraph.

    Args:
        records: Parameter records in table order. Not modified.
        p_max: Significance threshold for edges. None uses the configured
            ``transform.p_max`` (0.10 unless overridden).

    Returns:
        ModelGraph with nodes and edges in the relative order of their source
        records. Empty input gives an empty graph.

    Raises:
        ValueError: If p_max is outside (0, 1].
    """
    if p_max is None:
        from semgraph.utils.config import get_config

        p_max = get_config().transform.p_max
    validate_p_max(p_max)

    records = list(records)
    edges = build_edges(records, p_max)
    latent = latent_names(edges)
    nodes = build_nodes(records, latent)

    graph = ModelGraph(nodes=nodes, edges=edges)

    dangling = graph.dangling_references()
    if dangling:
        logger.debug("Edges reference variables without a node: %s", ", ".join(dangling))
    logger.debug(
        "Transformed %d records -> %d nodes (%d latent), %d edges (p_max=%s)",
        len(records),
        len(nodes),
        sum(node.is_latent for node in nodes),
        len(edges),
        p_max,
    )
    return graph
