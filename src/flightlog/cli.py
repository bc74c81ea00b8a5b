"""Root CLI group: global output flags, config and data-root selection."""

from __future__ import annotations

from pathlib import Path

import click

from flightlog import __version__
from flightlog.commands import register_commands
from flightlog.commands._context import AppContext
from flightlog.config.settings import FlightlogSettings


@click.group(
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.version_option(version=__version__, prog_name="flightlog")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="One line per session, no tables.")
@click.option("-v", "--verbose", is_flag=True, help="Error codes, cumulative hours, debug logs.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Use this flightlog.toml.")
@click.option(
    "-C",
    "--root",
    default=None,
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory holding .flightlog/ (default: discovered).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    root: Path | None,
) -> None:
    """flightlog: flight sessions and concession fees from a status log."""
    app = AppContext(
        FlightlogSettings.from_cli(
            config_path=config_path,
            root=root,
            json_output=json_output,
            quiet=quiet,
            verbose=verbose,
            log_json=log_json,
        )
    )
    ctx.obj = app
    ctx.call_on_close(app.close)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
