"""Typed records for SEM parameter tables and the graphs derived from them.

Two layers:
1. ParameterRecord - one standardized estimate from a fitted model (input)
2. Node / Edge / ModelGraph - typed containers handed to a graph renderer (output)
"""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class Operator(StrEnum):
    """Relationship type of a parameter, as emitted by the modeling library."""

    LOADING = "loading"  # factor =~ indicator
    REGRESSION = "regression"  # outcome ~ predictor
    COVARIANCE = "covariance"  # a ~~ b
    VARIANCE = "variance"  # a ~~ a (residual)


class EdgeKind(StrEnum):
    """How an edge is drawn."""

    LOADING = "loading"
    REGRESSION = "regression"
    CORRELATION = "correlation"


# Operators that become edges, and the kind each one is drawn as
OPERATOR_EDGE_KINDS: dict[Operator, EdgeKind] = {
    Operator.LOADING: EdgeKind.LOADING,
    Operator.REGRESSION: EdgeKind.REGRESSION,
    Operator.COVARIANCE: EdgeKind.CORRELATION,
}


# ══════════════════════════════════════════════════════════════════════════════
# INPUT (one row of a standardized parameter table)
# ══════════════════════════════════════════════════════════════════════════════


class ParameterRecord(BaseModel):
    """A single standardized estimate from a fitted structural equation model.

    ``lhs`` and ``rhs`` follow the model syntax: for ``f =~ x`` the factor is
    ``lhs`` and the indicator is ``rhs``; for ``y ~ x`` the outcome is ``lhs``.
    Variance (residual) terms are self-referential, ``lhs == rhs``.
    """

    model_config = ConfigDict(frozen=True)

    lhs: str = Field(description="Left-hand side variable of the model relation")
    rhs: str = Field(description="Right-hand side variable of the model relation")
    operator: Operator = Field(description="Relationship type")
    estimate: float = Field(description="Standardized coefficient")
    p_value: float = Field(
        description="Significance of the estimate. NaN for fixed parameters."
    )

    @property
    def is_self_referential(self) -> bool:
        return self.lhs == self.rhs


# ══════════════════════════════════════════════════════════════════════════════
# OUTPUT (what the renderer consumes)
# ══════════════════════════════════════════════════════════════════════════════


class Edge(BaseModel):
    """A significant relation between two variables.

    ``target`` (serialized as ``to``) is always the left-hand side term of the
    model syntax and ``source`` (serialized as ``from``) the right-hand side.
    For loadings this means ``to`` is the factor, so renderers must reverse the
    arrow to draw factor -> indicator.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    source: str = Field(alias="from", description="Right-hand side term")
    target: str = Field(alias="to", description="Left-hand side term")
    value: float = Field(description="Standardized estimate")
    kind: EdgeKind

    def endpoints(self) -> tuple[str, str]:
        return self.source, self.target


class Node(BaseModel):
    """A variable that has a residual/variance record in the parameter table."""

    model_config = ConfigDict(frozen=True)

    name: str
    residual_estimate: float = Field(description="Standardized residual variance")
    is_latent: bool = Field(
        default=False,
        description="True if the variable is the factor of at least one loading edge",
    )


class ModelGraph(BaseModel):
    """Nodes and edges derived from one parameter table."""

    model_config = ConfigDict(frozen=True)

    nodes: list[Node] = Field(default_factory=list)
    edges: list[Edge] = Field(default_factory=list)

    def node_names(self) -> list[str]:
        return [node.name for node in self.nodes]

    def latent_node_names(self) -> set[str]:
        """Names of nodes flagged latent. Factors without a variance record have no node."""
        return {node.name for node in self.nodes if node.is_latent}

    def dangling_references(self) -> list[str]:
        """Variables referenced by an edge that have no node.

        These come from variables without a variance record. They are reported
        here but never synthesized into nodes. Order follows first appearance.
        """
        known = set(self.node_names())
        dangling: list[str] = []
        for edge in self.edges:
            for name in edge.endpoints():
                if name not in known and name not in dangling:
                    dangling.append(name)
        return dangling

    def to_dict(self) -> dict:
        """JSON-serializable payload using ``from``/``to`` edge keys."""
        return {
            "nodes": [node.model_dump(mode="json") for node in self.nodes],
            "edges": [edge.model_dump(mode="json", by_alias=True) for edge in self.edges],
        }

    def to_networkx(self):
        """Convert to a plain NetworkX MultiDiGraph (no styling).

        Edges point ``from`` -> ``to`` exactly as stored; see
        ``semgraph.render.to_networkx`` for draw-ready direction and attributes.
        Dangling edge endpoints are added by networkx as attribute-less nodes.
        """
        import networkx as nx

        G = nx.MultiDiGraph()
        for node in self.nodes:
            G.add_node(node.name, **node.model_dump())
        for edge in self.edges:
            G.add_edge(edge.source, edge.target, value=edge.value, kind=edge.kind.value)
        return G
