"""CLI entrypoint for deconstructor."""

import logging
import sys
from dataclasses import replace
from pathlib import Path

import click
from rich.logging import RichHandler

from . import __version__
from .config import ConfigError, DeconstructorConfig, load_config
from .commands.render_cmd import FORMATS


def _configure_logging(verbose: int) -> None:
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose >= 2:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


@click.group()
@click.version_option(__version__, prog_name="deconstructor")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=False, dir_okay=False, path_type=Path),
    default=None,
    help="Path to a TOML config file",
)
@click.option(
    "--state-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory for usage counters and the event log (default: ~/.deconstructor)",
)
@click.option("--verbose", "-v", count=True, help="Increase log verbosity (-v info, -vv debug)")
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, state_dir: Path | None, verbose: int) -> None:
    """deconstructor - Break words into morphemes and trace how they combine.

    Analyze a word through the analysis service, or render saved definitions
    as a layered graph.
    """
    _configure_logging(verbose)
    ctx.ensure_object(dict)
    try:
        cfg = load_config(config_path)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e

    if state_dir is not None:
        cfg = replace(cfg, state_dir=state_dir)
    ctx.obj["config"] = cfg


def _config(ctx: click.Context) -> DeconstructorConfig:
    return ctx.obj["config"]


@cli.command()
@click.argument("word")
@click.option("--force", is_flag=True, help="Bypass any cached analysis and generate a fresh one")
@click.option(
    "--format",
    "fmt",
    type=click.Choice(FORMATS),
    default="rich",
    help="Output format",
)
@click.option(
    "--out",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write output to a file instead of stdout",
)
@click.option("--api-url", default=None, help="Analysis endpoint (overrides config)")
@click.option(
    "--static-dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Look words up in a directory of saved definitions instead of calling the service",
)
@click.pass_context
def analyze(
    ctx: click.Context,
    word: str,
    force: bool,
    fmt: str,
    out: Path | None,
    api_url: str | None,
    static_dir: Path | None,
) -> None:
    """Deconstruct WORD and print or save its graph.

    Examples:

        deconstructor analyze deconstructor

        deconstructor analyze telephone --format html --out telephone.html

        deconstructor analyze telephone --force
    """
    from .commands.analyze_cmd import run_analyze

    cfg = _config(ctx)
    if api_url:
        cfg = replace(cfg, api_url=api_url)
    if static_dir is not None:
        cfg = replace(cfg, static_dir=static_dir)

    sys.exit(run_analyze(cfg, word, force=force, fmt=fmt, out=out))


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--format",
    "fmt",
    type=click.Choice(FORMATS),
    default="svg",
    help="Output format",
)
@click.option(
    "--out",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write output to a file instead of stdout",
)
@click.option("--word", default=None, help="Word shown in the input node (defaults to the final term)")
@click.pass_context
def render(ctx: click.Context, file: Path, fmt: str, out: Path | None, word: str | None) -> None:
    """Lay out a saved definition FILE (JSON or YAML) without calling the service."""
    from .commands.render_cmd import run_render

    cfg = _config(ctx)
    sys.exit(run_render(file, fmt=fmt, out=out, word=word, layout_config=cfg.layout))


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--json", "output_json", is_flag=True, help="Output results as JSON")
def check(file: Path, output_json: bool) -> None:
    """Validate a definition FILE: ids, references and layer shape."""
    from .commands.render_cmd import run_check

    sys.exit(run_check(file, output_json=output_json))


@cli.command()
@click.option(
    "--out",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Rewrite this HTML file after every analysis",
)
@click.pass_context
def shell(ctx: click.Context, out: Path | None) -> None:
    """Interactive session. Enter the same word twice to regenerate it."""
    from .commands.analyze_cmd import run_shell

    sys.exit(run_shell(_config(ctx), out=out))


@cli.command()
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
@click.pass_context
def stats(ctx: click.Context, output_json: bool) -> None:
    """Show usage counters."""
    from .commands.stats_cmd import run_stats

    sys.exit(run_stats(_config(ctx).resolved_state_dir, output_json=output_json))


@cli.command()
@click.option("--last", "last_n", type=int, default=None, help="Show only the last N events")
@click.option("--name", default=None, help="Filter by event name (e.g. deconstruct_error)")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
@click.pass_context
def events(ctx: click.Context, last_n: int | None, name: str | None, output_json: bool) -> None:
    """Show recorded analytics events."""
    from .commands.stats_cmd import run_events

    sys.exit(run_events(_config(ctx).resolved_state_dir, last_n=last_n, name=name, output_json=output_json))


@cli.command("opt-in")
@click.pass_context
def opt_in(ctx: click.Context) -> None:
    """Stop showing the periodic usage reminder."""
    from .commands.stats_cmd import run_opt_in

    sys.exit(run_opt_in(_config(ctx).resolved_state_dir))


def main() -> None:
    """Main entrypoint."""
    cli()


if __name__ == "__main__":
    main()
