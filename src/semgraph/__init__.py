"""semgraph: fitted SEM parameter tables -> typed nodes and edges for graph rendering."""

from semgraph.schemas import Edge, EdgeKind, ModelGraph, Node, Operator, ParameterRecord
from semgraph.transform import build_edges, build_nodes, latent_names, model_to_graph

__all__ = [
    "Edge",
    "EdgeKind",
    "ModelGraph",
    "Node",
    "Operator",
    "ParameterRecord",
    "build_edges",
    "build_nodes",
    "latent_names",
    "model_to_graph",
]
