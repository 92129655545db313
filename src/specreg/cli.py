"""Root CLI group for specreg with global flags and command registration."""

from __future__ import annotations

from pathlib import Path

import click

from specreg import __version__
from specreg.commands import register_commands
from specreg.commands._context import AppContext
from specreg.config.settings import SpecregSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="specreg")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option(
    "--trace-loads", is_flag=True, help="Debug logs for project and typekit loading only."
)
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option(
    "-I",
    "--search-path",
    "search_paths",
    multiple=True,
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory to search for sources (repeatable, searched first).",
)
@click.option("--dummy-types", is_flag=True, help="Create placeholders for unknown types.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    trace_loads: bool,
    config_path: str | None,
    search_paths: tuple[Path, ...],
    dummy_types: bool,
) -> None:
    """specreg — lazy loader and registry for component models."""
    ctx.ensure_object(dict)
    settings = SpecregSettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
        trace_loads=trace_loads,
        dummy_types=dummy_types,
        extra_search_paths=[p.resolve() for p in search_paths],
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
