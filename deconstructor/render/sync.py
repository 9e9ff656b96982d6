"""Measure-then-layout pipeline.

Phases, restarted in full on every structural commit:

    STRUCTURAL  nodes committed at (0, 0), waiting for sizes
    MEASURED    every node has a size; the layout ran exactly once
    SETTLED     the viewport was asked to frame the positioned nodes

The readiness predicate (`all_measured`) is level-triggered: it stays true
until the structure changes, and `sync()` may observe it any number of
times without re-running the layout or re-fitting the viewport.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, replace
from enum import Enum
from typing import Protocol

from ..graph.layout import DEFAULT_LAYOUT, LayoutConfig, layout_nodes
from ..graph.nodes import GraphEdge, GraphNode, Size

logger = logging.getLogger(__name__)

FIT_DURATION_MS = 1000


class RenderPhase(str, Enum):
    EMPTY = "empty"
    STRUCTURAL = "structural"
    MEASURED = "measured"
    SETTLED = "settled"


@dataclass(frozen=True)
class Frame:
    """A rectangle in graph coordinates."""

    x: float
    y: float
    width: float
    height: float

    @property
    def view_box(self) -> str:
        return f"{self.x:.1f} {self.y:.1f} {self.width:.1f} {self.height:.1f}"


def bounding_frame(nodes: list[GraphNode], *, padding: float = 0.1) -> Frame:
    """Smallest frame holding every node, grown by `padding` (fraction of size) per side."""
    if not nodes:
        return Frame(0.0, 0.0, 0.0, 0.0)
    left = min(n.position.x for n in nodes)
    top = min(n.position.y for n in nodes)
    right = max(n.position.x + n.width for n in nodes)
    bottom = max(n.position.y + n.height for n in nodes)
    width = right - left
    height = bottom - top
    pad_x = width * padding
    pad_y = height * padding
    return Frame(left - pad_x, top - pad_y, width + 2 * pad_x, height + 2 * pad_y)


class Viewport(Protocol):
    def fit_view(self, nodes: list[GraphNode], *, duration_ms: int) -> None:
        ...


class FitViewport:
    """Viewport that records the frame it was last asked to show."""

    def __init__(self, padding: float = 0.1) -> None:
        self.padding = padding
        self.frame: Frame | None = None
        self.fit_count = 0
        self.last_duration_ms: int | None = None

    def fit_view(self, nodes: list[GraphNode], *, duration_ms: int) -> None:
        self.frame = bounding_frame(nodes, padding=self.padding)
        self.fit_count += 1
        self.last_duration_ms = duration_ms


class RenderSync:
    """Drives GraphBuilder output through measurement, layout and viewport fit."""

    def __init__(
        self,
        viewport: Viewport | None = None,
        *,
        layout_config: LayoutConfig = DEFAULT_LAYOUT,
        fit_duration_ms: int = FIT_DURATION_MS,
    ) -> None:
        self.viewport: Viewport = viewport if viewport is not None else FitViewport()
        self.layout_config = layout_config
        self.fit_duration_ms = fit_duration_ms

        self.nodes: list[GraphNode] = []
        self.edges: list[GraphEdge] = []
        self.phase = RenderPhase.EMPTY
        self.structure_version = 0
        self.layout_runs = 0

        self._position_version = 0
        self._fitted_version = 0

    # -- phase 1 ---------------------------------------------------------

    def commit_structure(self, nodes: list[GraphNode], edges: list[GraphEdge]) -> None:
        """Replace the whole graph; positions and sizes start over."""
        self.nodes = [n.with_position(0.0, 0.0).with_measured(None) for n in nodes]
        self.edges = list(edges)
        self.structure_version += 1
        self.phase = RenderPhase.STRUCTURAL if self.nodes else RenderPhase.EMPTY
        logger.debug(
            "Committed structure v%d: %d nodes, %d edges",
            self.structure_version,
            len(self.nodes),
            len(self.edges),
        )

    def refresh_data(self, nodes: list[GraphNode]) -> bool:
        """Swap node payloads in place when the structure is unchanged.

        Returns False (and changes nothing) if the ids differ from the
        committed graph; callers then commit a new structure instead.
        """
        if [n.id for n in nodes] != [n.id for n in self.nodes]:
            return False
        self.nodes = [
            replace(current, data=fresh.data)
            for current, fresh in zip(self.nodes, nodes)
        ]
        return True

    # -- phase 2 ---------------------------------------------------------

    @property
    def all_measured(self) -> bool:
        return bool(self.nodes) and all(n.measured is not None for n in self.nodes)

    def report_sizes(self, sizes: Mapping[str, Size]) -> None:
        """Record sizes measured by the host surface, then advance the pipeline."""
        known = {n.id for n in self.nodes}
        unknown = [node_id for node_id in sizes if node_id not in known]
        if unknown:
            logger.debug("Ignoring sizes for unknown nodes: %s", ", ".join(sorted(unknown)))
        self.nodes = [n.with_measured(sizes[n.id]) if n.id in sizes else n for n in self.nodes]
        self.sync()

    def sync(self) -> bool:
        """Advance as far as the current state allows. Returns True if anything ran."""
        ran = False
        if self.phase == RenderPhase.STRUCTURAL and self.all_measured:
            self.nodes = layout_nodes(self.nodes, self.edges, config=self.layout_config)
            self.layout_runs += 1
            self._position_version += 1
            self.phase = RenderPhase.MEASURED
            ran = True
        if self.phase == RenderPhase.MEASURED:
            ran = self._settle() or ran
        return ran

    # -- phase 3 ---------------------------------------------------------

    def _settle(self) -> bool:
        if self._fitted_version == self._position_version:
            self.phase = RenderPhase.SETTLED
            return False
        self.viewport.fit_view(self.nodes, duration_ms=self.fit_duration_ms)
        self._fitted_version = self._position_version
        self.phase = RenderPhase.SETTLED
        return True
