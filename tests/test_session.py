from deconstructor.analyze.base import AnalysisResult
from deconstructor.controller import AnalysisState
from deconstructor.graph.nodes import NodeKind
from deconstructor.models import DEFAULT_DEFINITION
from deconstructor.render.measure import TextMeasurer
from deconstructor.render.sync import FitViewport, RenderPhase
from deconstructor.session import Deconstructor


class SnoopingAnalyzer:
    """Captures what the session exposes while a request is outstanding."""

    def __init__(self, result: AnalysisResult) -> None:
        self.result = result
        self.session: Deconstructor | None = None
        self.loading_seen: list[bool] = []
        self.node_flags: list[bool] = []
        self.layout_runs_during: int | None = None

    def analyze(self, word: str, *, force_update: bool = False) -> AnalysisResult:
        assert self.session is not None
        self.loading_seen.append(self.session.is_loading)
        self.node_flags = [n.data.is_loading for n in self.session.nodes]
        self.layout_runs_during = self.session.sync.layout_runs
        return self.result


def _session(analyzer) -> tuple[Deconstructor, FitViewport]:
    viewport = FitViewport()
    session = Deconstructor(analyzer, measurer=TextMeasurer(), viewport=viewport)
    if isinstance(analyzer, SnoopingAnalyzer):
        analyzer.session = session
    return session, viewport


def test_initial_placeholder_is_laid_out() -> None:
    session, viewport = _session(SnoopingAnalyzer(AnalysisResult.failure("unused")))

    assert len(session.nodes) == 9
    assert len(session.edges) == 7
    assert session.sync.phase == RenderPhase.SETTLED
    assert session.sync.layout_runs == 1
    assert viewport.fit_count == 1
    assert session.controller.definition is DEFAULT_DEFINITION


def test_loading_flag_reaches_nodes_without_relayout() -> None:
    analyzer = SnoopingAnalyzer(AnalysisResult.failure("boom"))
    session, viewport = _session(analyzer)

    session.submit("telephone")

    assert analyzer.loading_seen == [True]
    assert analyzer.node_flags and all(analyzer.node_flags)
    assert analyzer.layout_runs_during == 1

    # Failure: same definition, so only payloads change back.
    assert not session.is_loading
    assert not any(n.data.is_loading for n in session.nodes)
    assert session.sync.structure_version == 1
    assert session.sync.layout_runs == 1
    assert viewport.fit_count == 1


def test_new_definition_restarts_render(definition) -> None:
    session, viewport = _session(SnoopingAnalyzer(AnalysisResult.success(definition)))
    session.submit("deconstructor")

    assert session.controller.state == AnalysisState.READY
    assert session.sync.structure_version == 2
    assert session.sync.layout_runs == 2
    assert viewport.fit_count == 2
    assert session.sync.phase == RenderPhase.SETTLED


def test_input_node_reflects_analyzed_word(definition) -> None:
    session, _ = _session(SnoopingAnalyzer(AnalysisResult.success(definition)))
    session.submit("deconstructor")

    input_node = session.nodes[0]
    assert input_node.kind == NodeKind.INPUT
    assert input_node.data.initial_word == "deconstructor"
    assert input_node.data.button_label == "Try Again"


def test_submit_callback_on_input_node(definition) -> None:
    analyzer = SnoopingAnalyzer(AnalysisResult.success(definition))
    session, _ = _session(analyzer)

    session.nodes[0].data.on_submit("deconstructor")
    assert session.controller.analyzed_word == "deconstructor"
    assert analyzer.loading_seen == [True]


def test_input_disabled_flag(definition) -> None:
    session = Deconstructor(SnoopingAnalyzer(AnalysisResult.success(definition)), input_disabled=True)
    assert session.nodes[0].data.is_disabled
    # without a measurer the host reports sizes itself
    assert session.sync.phase == RenderPhase.STRUCTURAL


def test_load_static(definition) -> None:
    session, viewport = _session(SnoopingAnalyzer(AnalysisResult.failure("unused")))
    session.load_static("deconstructor", definition)

    assert session.controller.location == "/w/deconstructor"
    assert session.sync.layout_runs == 2
    assert viewport.frame is not None
