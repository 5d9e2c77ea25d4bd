"""Utility functions for semgraph."""

from semgraph.utils.config import (
    PaletteConfig,
    SemgraphConfig,
    StyleConfig,
    TransformConfig,
    get_config,
    load_config,
)

__all__ = [
    "PaletteConfig",
    "SemgraphConfig",
    "StyleConfig",
    "TransformConfig",
    "get_config",
    "load_config",
]
