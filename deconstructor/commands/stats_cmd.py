"""Usage counters and event log inspection."""

from __future__ import annotations

import json
from pathlib import Path

from rich.console import Console
from rich.table import Table

from ..events import format_event, get_events_log_path, read_events
from ..storage import (
    DISMISS_COUNT_KEY,
    OPTED_IN_KEY,
    WORD_COUNT_KEY,
    JsonFileStore,
    get_counter_store_path,
    read_counter,
)


def run_stats(state_dir: Path, *, output_json: bool = False) -> int:
    store = JsonFileStore(get_counter_store_path(state_dir))
    payload = {
        "words_deconstructed": read_counter(store, WORD_COUNT_KEY),
        "prompt_dismissals": read_counter(store, DISMISS_COUNT_KEY),
        "opted_in": bool(store.get(OPTED_IN_KEY, False)),
        "state_dir": str(state_dir),
    }

    if output_json:
        print(json.dumps(payload, indent=2, sort_keys=True))
        return 0

    t = Table(title="Usage", show_header=False)
    t.add_column("Metric", style="cyan")
    t.add_column("Value", justify="right")
    t.add_row("Words deconstructed", str(payload["words_deconstructed"]))
    t.add_row("Prompt dismissals", str(payload["prompt_dismissals"]))
    t.add_row("Opted in", "yes" if payload["opted_in"] else "no")
    Console().print(t)
    return 0


def run_events(
    state_dir: Path,
    *,
    last_n: int | None = None,
    name: str | None = None,
    output_json: bool = False,
) -> int:
    """Display events from the event log, oldest first."""
    events = read_events(get_events_log_path(state_dir), last_n=last_n, name=name)

    if output_json:
        print(json.dumps([e.to_dict() for e in events], indent=2))
        return 0

    console = Console()
    if not events:
        console.print("[dim]No events recorded.[/dim]")
        return 0
    for event in events:
        console.print(format_event(event), highlight=False, markup=False)
    return 0


def run_opt_in(state_dir: Path) -> int:
    store = JsonFileStore(get_counter_store_path(state_dir))
    store.set(OPTED_IN_KEY, True)
    Console(stderr=True).print("Opted in. The usage reminder will no longer be shown.", style="green")
    return 0
