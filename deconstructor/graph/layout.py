"""Deterministic vertically-layered layout.

Single top-to-bottom pass: each layer is centered about x=0 with its nodes
left to right in input order, and layers stack downwards separated by a
vertical gap plus the tallest node of the layer above. No crossing
minimization, no backtracking.
"""

from __future__ import annotations

from dataclasses import dataclass

from .nodes import INPUT_LAYER, ORIGIN_LAYER, PART_CHUNK_LAYER, GraphEdge, GraphNode


@dataclass(frozen=True)
class LayoutConfig:
    part_gap: float = 3.0
    origin_gap: float = 10.0
    combination_gap: float = 10.0
    vertical_gap: float = 50.0

    def gap_for(self, layer: int) -> float:
        """Horizontal gap between neighbours in a layer."""
        if layer == INPUT_LAYER:
            return 0.0
        if layer == PART_CHUNK_LAYER:
            return self.part_gap
        if layer == ORIGIN_LAYER:
            return self.origin_gap
        return self.combination_gap


DEFAULT_LAYOUT = LayoutConfig()


def group_by_layer(nodes: list[GraphNode]) -> list[tuple[int, list[GraphNode]]]:
    """Group nodes by layer index, ascending, keeping input order inside a layer.

    Layer indices between the lowest and highest present are included even
    when empty so that an empty combination layer still occupies its slot.
    """
    groups: dict[int, list[GraphNode]] = {}
    for node in nodes:
        groups.setdefault(node.layer, []).append(node)
    if not groups:
        return []
    lo, hi = min(groups), max(groups)
    return [(layer, groups.get(layer, [])) for layer in range(lo, hi + 1)]


def layout_nodes(
    nodes: list[GraphNode],
    edges: list[GraphEdge] | None = None,
    *,
    config: LayoutConfig = DEFAULT_LAYOUT,
) -> list[GraphNode]:
    """Return the nodes with positions assigned.

    Unmeasured nodes count as zero-sized. Edges do not influence placement.
    The result is in the same order as the input.
    """
    positions: list[tuple[float, float]] = [(0.0, 0.0)] * len(nodes)
    by_layer: dict[int, list[int]] = {}
    for index, node in enumerate(nodes):
        by_layer.setdefault(node.layer, []).append(index)

    y = 0.0
    for layer, _ in group_by_layer(nodes):
        members = by_layer.get(layer, [])
        gap = config.gap_for(layer)
        total_width = sum(nodes[i].width for i in members) + gap * max(0, len(members) - 1)

        x = -total_width / 2
        for i in members:
            positions[i] = (x, y)
            x += nodes[i].width + gap

        y += config.vertical_gap + max((nodes[i].height for i in members), default=0.0)

    return [node.with_position(x, y) for node, (x, y) in zip(nodes, positions)]
