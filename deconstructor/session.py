"""Session facade: the surface a host (CLI, UI) drives.

Data flow on every controller change:

    AnalysisController.definition
      -> build_graph (nodes, edges)
      -> RenderSync.commit_structure   (new definition: full restart)
         or RenderSync.refresh_data    (same definition: payload-only update)
      -> host measures nodes -> RenderSync.report_sizes -> layout -> viewport fit
"""

from __future__ import annotations

from collections.abc import Callable

from .analyze.base import Analyzer
from .controller import AnalysisController, Notification
from .events import EventLog
from .graph.builder import build_graph
from .graph.layout import DEFAULT_LAYOUT, LayoutConfig
from .graph.nodes import GraphEdge, GraphNode
from .models import Definition
from .render.measure import TextMeasurer
from .render.sync import RenderSync, Viewport
from .storage import CounterStore


class Deconstructor:
    """Controller, graph builder and render pipeline wired together.

    With a `measurer`, sizes are reported immediately after each structural
    commit. Without one, the host must call `sync.report_sizes` itself.
    """

    def __init__(
        self,
        analyzer: Analyzer,
        *,
        store: CounterStore | None = None,
        events: EventLog | None = None,
        measurer: TextMeasurer | None = None,
        viewport: Viewport | None = None,
        layout_config: LayoutConfig = DEFAULT_LAYOUT,
        on_notify: Callable[[Notification], None] | None = None,
        input_disabled: bool = False,
    ) -> None:
        self.measurer = measurer
        self.input_disabled = input_disabled
        self.sync = RenderSync(viewport, layout_config=layout_config)
        self._shown: Definition | None = None
        self.controller = AnalysisController(
            analyzer,
            store=store,
            events=events,
            on_change=lambda _controller: self._rebuild(),
            on_notify=on_notify,
        )
        self._rebuild()

    @property
    def nodes(self) -> list[GraphNode]:
        return self.sync.nodes

    @property
    def edges(self) -> list[GraphEdge]:
        return self.sync.edges

    @property
    def is_loading(self) -> bool:
        return self.controller.is_loading

    def submit(self, word: str) -> bool:
        """Analyze a word; resubmitting the displayed word regenerates it."""
        return self.controller.submit(word)

    def load_static(self, word: str, definition: Definition) -> None:
        self.controller.load_static(word, definition)

    def _rebuild(self) -> None:
        c = self.controller
        nodes, edges = build_graph(
            c.definition,
            on_submit=self.submit,
            initial_word=c.current_word,
            is_disabled=self.input_disabled,
            has_analyzed=c.has_analyzed,
            analyzed_word=c.analyzed_word,
            is_loading=c.is_loading,
        )

        if c.definition is self._shown and self.sync.refresh_data(nodes):
            return

        self._shown = c.definition
        self.sync.commit_structure(nodes, edges)
        if self.measurer is not None:
            self.sync.report_sizes(self.measurer.measure_all(self.sync.nodes))
