"""Root CLI group for kihopunch with global flags and command registration."""

from __future__ import annotations

import click

from kihopunch import __version__
from kihopunch.commands import register_commands
from kihopunch.commands._context import AppContext
from kihopunch.config.settings import PunchSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="kihopunch")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option(
    "-v", "--verbose", count=True, help="More output; -vv for HTTP details and timings."
)
@click.option("-d", "--debug", is_flag=True, help="Debug-level logging.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("--dry-run", is_flag=True, help="Do not send punches, only show them.")
@click.option("--no-interact", is_flag=True, help="Non-interactive mode (no prompts).")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: int,
    debug: bool,
    log_json: bool,
    dry_run: bool,
    no_interact: bool,
    config_path: str | None,
) -> None:
    """kihopunch — keep track of your Kiho worktime from the command line."""
    ctx.ensure_object(dict)
    settings = PunchSettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        debug=debug,
        log_json=log_json,
        dry_run=dry_run,
        no_interact=no_interact,
    )
    app = AppContext(settings)
    ctx.obj = app
    ctx.call_on_close(app.close)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
