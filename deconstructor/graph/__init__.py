"""Decomposition graph construction and layout."""

from .builder import build_graph
from .layout import DEFAULT_LAYOUT, LayoutConfig, layout_nodes
from .nodes import (
    CombinationData,
    GraphEdge,
    GraphNode,
    InputData,
    NodeKind,
    OriginData,
    PartChunkData,
    Point,
    Size,
)

__all__ = [
    "build_graph",
    "layout_nodes",
    "LayoutConfig",
    "DEFAULT_LAYOUT",
    "GraphNode",
    "GraphEdge",
    "NodeKind",
    "InputData",
    "PartChunkData",
    "OriginData",
    "CombinationData",
    "Point",
    "Size",
]
