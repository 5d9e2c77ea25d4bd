"""Rendering attributes for a ModelGraph.

Nothing here draws. Nodes and edges are mapped to graphviz-style attributes
that a layout engine (graphviz ``dot``, vis.js via streamlit-agraph, ...)
consumes:

- Node shape/size/fill by ``is_latent``
- Edge line style, label and arrowheads by ``kind``
- Edge colour from the signed estimate on a diverging scale
"""

from __future__ import annotations

import logging
from functools import lru_cache

import networkx as nx
from matplotlib.colors import LinearSegmentedColormap, Normalize, to_hex

from semgraph.schemas import Edge, EdgeKind, ModelGraph, Node
from semgraph.utils.config import PaletteConfig, StyleConfig, get_config

logger = logging.getLogger(__name__)

# Standardized estimates are drawn on [-1, 1]; anything outside is clipped
VALUE_RANGE = (-1.0, 1.0)

# kind -> (graphviz line style, labelled, graphviz dir)
EDGE_STYLES: dict[EdgeKind, tuple[str, bool, str]] = {
    EdgeKind.REGRESSION: ("solid", True, "forward"),
    EdgeKind.LOADING: ("dotted", False, "forward"),
    EdgeKind.CORRELATION: ("dashed", False, "both"),
}


def _style(style: StyleConfig | None) -> StyleConfig:
    return style if style is not None else get_config().style


@lru_cache(maxsize=8)
def diverging_colormap(palette: PaletteConfig) -> LinearSegmentedColormap:
    """negative -> neutral -> positive colormap for signed estimates."""
    # Odd N puts an entry exactly on 0 so it maps to the neutral colour
    return LinearSegmentedColormap.from_list(
        "semgraph_diverging",
        [palette.negative, palette.neutral, palette.positive],
        N=257,
    )


def value_color(value: float, palette: PaletteConfig | None = None) -> str:
    """Hex colour for a standardized estimate (clipped to [-1, 1])."""
    palette = palette if palette is not None else get_config().style.palette
    norm = Normalize(vmin=VALUE_RANGE[0], vmax=VALUE_RANGE[1], clip=True)
    return to_hex(diverging_colormap(palette)(norm(value)))


def draw_endpoints(edge: Edge) -> tuple[str, str]:
    """(tail, head) of the drawn arrow.

    Loadings are stored with ``to`` = factor, so the arrow is reversed to run
    factor -> indicator. Other kinds are drawn ``from`` -> ``to``.
    """
    if edge.kind == EdgeKind.LOADING:
        return edge.target, edge.source
    return edge.source, edge.target


def node_style(node: Node, style: StyleConfig | None = None) -> dict:
    """Graphviz node attributes."""
    style = _style(style)
    if node.is_latent:
        shape, size, fill = "ellipse", style.latent_size, style.palette.latent_fill
    else:
        shape, size, fill = "box", style.observed_size, style.palette.observed_fill
    return {
        "label": node.name,
        "shape": shape,
        "width": size,
        "height": size / 2,
        "style": "filled",
        "fillcolor": fill,
    }


def edge_style(edge: Edge, style: StyleConfig | None = None) -> dict:
    """Graphviz edge attributes."""
    style = _style(style)
    line, labelled, direction = EDGE_STYLES[edge.kind]
    attrs = {
        "style": line,
        "dir": direction,
        "arrowhead": "normal",
        "color": value_color(edge.value, style.palette),
        "kind": edge.kind.value,
        "value": edge.value,
    }
    if direction == "both":
        attrs["arrowtail"] = "normal"
    if labelled:
        attrs["label"] = f"{edge.value:.{style.label_digits}f}"
    return attrs


def to_networkx(graph: ModelGraph, style: StyleConfig | None = None) -> nx.MultiDiGraph:
    """Build a draw-ready MultiDiGraph.

    Edge direction follows ``draw_endpoints``. Variables referenced only by
    edges (no variance record) appear as unstyled nodes.
    """
    style = _style(style)

    G = nx.MultiDiGraph()
    G.graph["graph"] = {"rankdir": style.rankdir, "layout": style.layout}
    for node in graph.nodes:
        G.add_node(node.name, **node_style(node, style))
    for edge in graph.edges:
        tail, head = draw_endpoints(edge)
        G.add_edge(tail, head, **edge_style(edge, style))

    dangling = graph.dangling_references()
    if dangling:
        logger.warning("Rendering edges to variables without a node: %s", ", ".join(dangling))
    return G


def to_dot(graph: ModelGraph, style: StyleConfig | None = None, layout: str | None = None) -> str:
    """DOT source for the graph, ready for ``dot -Tsvg``.

    Args:
        graph: Transformed model graph
        style: Rendering settings (configured ``style`` section if None)
        layout: Graphviz layout program, overriding ``style.layout``
    """
    style = _style(style)
    G = to_networkx(graph, style)
    if layout is not None:
        G.graph["graph"]["layout"] = layout
    return nx.nx_pydot.to_pydot(G).to_string()
