"""Analyze and shell commands - run words through the analysis service."""

from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console
from rich.panel import Panel

from ..analyze.base import Analyzer
from ..analyze.http import HttpAnalyzer, HttpAnalyzerConfig
from ..analyze.static import StaticAnalyzer
from ..config import DeconstructorConfig
from ..controller import AnalysisState, Notification, NotificationLevel
from ..events import EventLog, get_events_log_path
from ..render.measure import TextMeasurer
from ..render.sync import FitViewport
from ..session import Deconstructor
from ..storage import JsonFileStore, get_counter_store_path
from .render_cmd import emit_graph

_NOTIFY_STYLE = {
    NotificationLevel.SUCCESS: "green",
    NotificationLevel.INFO: "cyan",
    NotificationLevel.WARNING: "yellow",
}

PROMPT_TEXT = (
    "You've deconstructed a few words now. Want to hear about new features?\n"
    "Run `deconstructor opt-in` to stop seeing this reminder."
)


def build_analyzer(cfg: DeconstructorConfig) -> Analyzer:
    if cfg.static_dir is not None:
        return StaticAnalyzer(cfg.static_dir.expanduser())
    return HttpAnalyzer(HttpAnalyzerConfig(api_url=cfg.api_url, timeout_s=cfg.timeout_s))


def open_session(
    cfg: DeconstructorConfig,
    *,
    console: Console,
    analyzer: Analyzer | None = None,
) -> tuple[Deconstructor, FitViewport]:
    """Create a session persisting counters and events under the state dir."""
    state_dir = cfg.resolved_state_dir

    def on_notify(n: Notification) -> None:
        console.print(n.message, style=_NOTIFY_STYLE[n.level])

    viewport = FitViewport()
    session = Deconstructor(
        analyzer if analyzer is not None else build_analyzer(cfg),
        store=JsonFileStore(get_counter_store_path(state_dir)),
        events=EventLog(get_events_log_path(state_dir)),
        measurer=TextMeasurer(),
        viewport=viewport,
        layout_config=cfg.layout,
        on_notify=on_notify,
    )
    return session, viewport


def run_analyze(
    cfg: DeconstructorConfig,
    word: str,
    *,
    force: bool = False,
    fmt: str = "rich",
    out: Path | None = None,
    analyzer: Analyzer | None = None,
) -> int:
    """Analyze one word and write the resulting graph.

    Returns 0 on success (full or degraded), 1 on failure.
    """
    console = Console(stderr=True)
    session, viewport = open_session(cfg, console=console, analyzer=analyzer)
    controller = session.controller

    with console.status(f"Deconstructing [bold]{word}[/bold]..."):
        accepted = controller.run(word, force_update=force)

    if not accepted:
        console.print("[red]Nothing to analyze.[/red]")
        return 1
    if controller.state != AnalysisState.READY:
        return 1

    if controller.gate.prompt_open:
        console.print(Panel(PROMPT_TEXT, title="deconstructor"))
        controller.dismiss_prompt()

    emit_graph(
        session.nodes,
        session.edges,
        definition=controller.definition,
        viewport=viewport,
        fmt=fmt,
        out=out,
        title=f"deconstructor: {controller.analyzed_word}",
    )
    if controller.location:
        console.print(f"[dim]Share: {controller.location}[/dim]")
    return 0


def run_shell(
    cfg: DeconstructorConfig,
    *,
    out: Path | None = None,
    analyzer: Analyzer | None = None,
) -> int:
    """
    Interactive loop: enter words, resubmit the same word to regenerate.

    An empty line or end of input exits. With `out`, the current graph is
    written there as HTML after every successful analysis.
    """
    console = Console(stderr=True)
    session, viewport = open_session(cfg, console=console, analyzer=analyzer)
    controller = session.controller

    console.print("[bold]deconstructor[/bold] - enter a word (blank line to quit)")
    while True:
        try:
            word = click.prompt("word", default="", show_default=False)
        except (click.Abort, EOFError):
            break
        if not word.strip():
            break

        if controller.is_regeneration(word):
            console.print("[dim]Same word again: generating a fresh analysis[/dim]")

        with console.status(f"Deconstructing [bold]{word.strip()}[/bold]..."):
            session.submit(word)

        if controller.state == AnalysisState.READY:
            emit_graph(
                session.nodes,
                session.edges,
                definition=controller.definition,
                viewport=viewport,
                fmt="html" if out else "rich",
                out=out,
                title=f"deconstructor: {controller.analyzed_word}",
            )

        if controller.gate.prompt_open:
            console.print(Panel(PROMPT_TEXT, title="deconstructor"))
            if click.confirm("Opt in to updates?", default=False):
                controller.gate.opt_in()
            else:
                controller.dismiss_prompt()

    console.print(f"[dim]{controller.gate.count} words deconstructed so far.[/dim]")
    return 0
