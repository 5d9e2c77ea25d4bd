"""
SEM Explorer - Streamlit UI for fitted-model graphs.

Run with: uv run streamlit run tools/sem_explorer.py
"""

import io

import polars as pl
import streamlit as st
from streamlit_agraph import Config, Edge, Node, agraph

from semgraph.render import draw_endpoints, edge_style, node_style
from semgraph.schemas import ModelGraph
from semgraph.tables import MISSING_MARKERS, graph_to_frames, records_from_frame
from semgraph.transform import latent_names, model_to_graph
from semgraph.utils.config import get_config

st.set_page_config(page_title="SEM Explorer", layout="wide")

# vis.js has no dotted style; dashes arrays approximate graphviz styles
DASHES = {
    "solid": False,
    "dotted": [2, 4],
    "dashed": [8, 6],
}


def create_agraph_elements(graph: ModelGraph) -> tuple[list[Node], list[Edge]]:
    """Create agraph nodes and edges from a transformed model graph.

    Latent factors are drawn as ellipses, observed variables as boxes. Edges
    keep the draw direction from semgraph.render (loadings point factor ->
    indicator) and colour from the signed estimate.
    """
    style = get_config().style
    nodes = []
    edges = []

    for node in graph.nodes:
        attrs = node_style(node, style)
        nodes.append(
            Node(
                id=node.name,
                label=f"{node.name}\n({node.residual_estimate:.2f})",
                shape=attrs["shape"],
                size=int(attrs["width"] * 25),
                color={
                    "background": attrs["fillcolor"],
                    "border": "#30363d",
                    "highlight": {"background": attrs["fillcolor"], "border": "#f0f6fc"},
                },
                font={"color": "#ffffff"},
            )
        )

    # Variables without a variance record still need an anchor in vis.js
    for name in graph.dangling_references():
        nodes.append(
            Node(
                id=name,
                label=name,
                shape="box",
                color={"background": "#161b22", "border": "#8b949e"},
                shapeProperties={"borderDashes": [5, 5]},
                font={"color": "#8b949e"},
            )
        )

    for edge in graph.edges:
        attrs = edge_style(edge, style)
        tail, head = draw_endpoints(edge)
        arrows = "to, from" if attrs["dir"] == "both" else "to"
        edges.append(
            Edge(
                source=tail,
                target=head,
                color=attrs["color"],
                label=attrs.get("label", ""),
                dashes=DASHES[attrs["style"]],
                arrows=arrows,
                width=1.5,
                smooth={"enabled": edge.kind.value == "correlation", "type": "curvedCW"},
            )
        )

    return nodes, edges


# =============================================================================
# Main UI
# =============================================================================

st.title("SEM Explorer")

col_input, col_graph, col_info = st.columns([1, 2, 1])

with col_input:
    st.subheader("Input")
    uploaded = st.file_uploader("Standardized parameter table (CSV)", type=["csv"])
    p_max = st.slider(
        "Significance threshold (p < ...)",
        min_value=0.001,
        max_value=1.0,
        value=float(get_config().transform.p_max),
        step=0.005,
    )

    st.markdown("---")
    st.markdown("**Legend**")
    st.markdown(
        """
        <div style="font-size: 12px; color: #8b949e;">
            <div>◯ Latent factor (ellipse)</div>
            <div>▢ Observed variable (box)</div>
            <div>— Regression (labelled)</div>
            <div>┈ Loading</div>
            <div>┅ Correlation (both ends)</div>
            <div>Colour: negative → neutral → positive</div>
        </div>
        """,
        unsafe_allow_html=True,
    )

graph, error = None, None
if uploaded is not None:
    try:
        frame = pl.read_csv(io.BytesIO(uploaded.getvalue()), null_values=MISSING_MARKERS)
        graph = model_to_graph(records_from_frame(frame), p_max=p_max)
    except ValueError as e:
        error = str(e)

with col_graph:
    st.subheader("Graph")
    if error:
        st.error(error)
    elif graph:
        nodes, edges = create_agraph_elements(graph)
        config = Config(
            width="100%",
            height=600,
            directed=True,
            hierarchical=True,
            levelSeparation=150,
            nodeSpacing=150,
            physics=False,
            nodeHighlightBehavior=True,
            highlightColor="#f0f6fc",
            collapsible=False,
        )
        agraph(nodes=nodes, edges=edges, config=config)
        st.caption(
            f"**Nodes:** {len(graph.nodes)} | **Edges:** {len(graph.edges)} | "
            f"**Latent:** {len(latent_names(graph.edges))}"
        )

with col_info:
    st.subheader("Tables")
    if graph:
        nodes_df, edges_df = graph_to_frames(graph)
        st.dataframe(nodes_df, hide_index=True)
        st.dataframe(edges_df, hide_index=True)
        dangling = graph.dangling_references()
        if dangling:
            st.warning(f"No variance record for: {', '.join(dangling)}")
