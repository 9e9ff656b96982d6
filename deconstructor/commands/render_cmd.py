"""Render and check commands - work on definition files, no analysis service needed."""

from __future__ import annotations

import json
from pathlib import Path

from rich.console import Console
from rich.table import Table

from ..analyze.base import AnalysisResult
from ..graph.layout import DEFAULT_LAYOUT, LayoutConfig
from ..graph.nodes import GraphEdge, GraphNode
from ..models import Definition, DefinitionError, load_definition, validate_definition
from ..render.measure import TextMeasurer
from ..render.svg import to_json, to_svg, wrap_html
from ..render.sync import FitViewport
from ..session import Deconstructor

FORMATS = ["rich", "md", "json", "svg", "html"]


class _NoAnalyzer:
    """Analyzer stand-in for offline rendering; every request fails."""

    def analyze(self, word: str, *, force_update: bool = False) -> AnalysisResult:
        return AnalysisResult.failure("offline: no analysis service configured")


def run_render(
    path: Path,
    *,
    fmt: str = "svg",
    out: Path | None = None,
    word: str | None = None,
    layout_config: LayoutConfig = DEFAULT_LAYOUT,
) -> int:
    """Lay out a definition file and write it in the requested format."""
    console = Console(stderr=True)

    try:
        definition = load_definition(path)
    except DefinitionError as e:
        console.print(f"[red]Invalid definition:[/red] {e}")
        return 1

    for issue in validate_definition(definition):
        style = "red" if issue.severity == "error" else "yellow"
        console.print(f"[{style}]{issue.severity}[/{style}] {issue.code}: {issue.message}")

    final = definition.final_combination
    display_word = word or (final.text if final else path.stem)

    viewport = FitViewport()
    session = Deconstructor(
        _NoAnalyzer(),
        measurer=TextMeasurer(),
        viewport=viewport,
        layout_config=layout_config,
    )
    session.load_static(display_word, definition)

    emit_graph(
        session.nodes,
        session.edges,
        definition=definition,
        viewport=viewport,
        fmt=fmt,
        out=out,
        title=f"deconstructor: {display_word}",
    )
    return 0


def run_check(path: Path, *, output_json: bool = False) -> int:
    """Validate a definition file. Exit code 1 if any error-level issue is found."""
    console = Console(stderr=True)

    try:
        definition = load_definition(path)
    except DefinitionError as e:
        if output_json:
            print(json.dumps({"valid": False, "issues": [{"code": "schema", "severity": "error", "message": str(e), "subject": ""}]}, indent=2))
        else:
            console.print(f"[red]Invalid definition:[/red] {e}")
        return 1

    issues = validate_definition(definition)
    has_errors = any(i.severity == "error" for i in issues)

    if output_json:
        payload = {"valid": not has_errors, "issues": [i.to_dict() for i in issues]}
        print(json.dumps(payload, indent=2, sort_keys=True))
        return 1 if has_errors else 0

    if not issues:
        console.print(f"[green]OK[/green] {path.name}: {len(definition.parts)} parts, {len(definition.layers)} layers")
        return 0

    table = Table(title=f"Issues in {path.name}", show_header=True, header_style="bold")
    table.add_column("Severity")
    table.add_column("Code", style="cyan", no_wrap=True)
    table.add_column("Message")
    for issue in issues:
        style = "red" if issue.severity == "error" else "yellow"
        table.add_row(f"[{style}]{issue.severity}[/{style}]", issue.code, issue.message)
    Console().print(table)
    return 1 if has_errors else 0


def emit_graph(
    nodes: list[GraphNode],
    edges: list[GraphEdge],
    *,
    definition: Definition,
    viewport: FitViewport,
    fmt: str,
    out: Path | None,
    title: str,
) -> None:
    """Write the positioned graph (or a definition summary) to `out` or stdout."""
    console = Console(stderr=True)

    if fmt == "rich":
        if out:
            rich_console = Console(record=True)
            print_definition(definition, console=rich_console)
            out.write_text(rich_console.export_text(), encoding="utf-8")
            console.print(f"Wrote {fmt} output to {out}", style="green")
        else:
            print_definition(definition, console=Console())
        return

    if fmt == "json":
        text = to_json(nodes, edges)
    elif fmt == "svg":
        text = to_svg(nodes, edges, frame=viewport.frame, title=title)
    elif fmt == "html":
        text = wrap_html(to_svg(nodes, edges, frame=viewport.frame, title=title), title=title)
    else:
        text = definition_to_markdown(definition, title=title)

    if out:
        out.write_text(text, encoding="utf-8")
        console.print(f"Wrote {fmt} output to {out}", style="green")
    else:
        print(text, end="" if text.endswith("\n") else "\n")


def print_definition(definition: Definition, *, console: Console) -> None:
    parts = Table(title="Parts", show_header=True, header_style="bold")
    parts.add_column("Part", style="cyan", no_wrap=True)
    parts.add_column("Original")
    parts.add_column("Origin")
    parts.add_column("Meaning")
    for p in definition.parts:
        parts.add_row(p.text, p.original_word, p.origin, p.meaning)
    console.print(parts)
    console.print()

    for index, layer in enumerate(definition.layers, start=1):
        t = Table(title=f"Layer {index}", show_header=True, header_style="bold")
        t.add_column("Term", style="cyan", no_wrap=True)
        t.add_column("From")
        t.add_column("Definition")
        for c in layer:
            t.add_row(c.text, " + ".join(c.source_ids), c.definition)
        console.print(t)
        console.print()


def definition_to_markdown(definition: Definition, *, title: str) -> str:
    lines: list[str] = []
    lines.append(f"## {title}")
    lines.append("")
    lines.append("### Parts")
    lines.append("")
    lines.append("| Part | Original | Origin | Meaning |")
    lines.append("|---|---|---|---|")
    for p in definition.parts:
        lines.append(f"| `{p.text}` | {p.original_word} | {p.origin} | {p.meaning} |")
    lines.append("")

    for index, layer in enumerate(definition.layers, start=1):
        lines.append(f"### Layer {index}")
        lines.append("")
        lines.append("| Term | From | Definition |")
        lines.append("|---|---|---|")
        for c in layer:
            sources = " + ".join(f"`{s}`" for s in c.source_ids)
            lines.append(f"| `{c.text}` | {sources} | {c.definition} |")
        lines.append("")

    return "\n".join(lines).rstrip() + "\n"
