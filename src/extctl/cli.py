"""``extctl`` entry point.

The root group turns global flags into an :class:`ExtSettings`, hands an
:class:`AppContext` to the subcommands and registers them. Each subcommand
builds its own ExtensionManager from those settings plus its ``-p`` roots.
"""

from __future__ import annotations

import click

from extctl import __version__
from extctl.commands import register_commands
from extctl.commands._context import AppContext
from extctl.config.settings import ExtSettings

_EPILOG = (
    "Extension roots come from [extensions].paths in extctl.toml, then from "
    "each command's -p options. Use 'extctl COMMAND --examples' for usage."
)


@click.group(invoke_without_command=True, epilog=_EPILOG)
@click.version_option(__version__, "-V", "--version", prog_name="extctl")
@click.option("--json", "json_output", is_flag=True, help="Print results as JSON on stdout.")
@click.option("-v", "--verbose", is_flag=True, help="Extra columns and DEBUG logs for extctl.")
@click.option("--log-json", is_flag=True, help="Write log records to stderr as JSON lines.")
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    help="Read this extctl.toml instead of searching upward from the working directory.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
) -> None:
    """Discover extensions, run their lifecycle and report what happened."""
    ctx.obj = AppContext(
        ExtSettings.from_cli(
            config_path=config_path,
            json_output=json_output,
            verbose=verbose,
            log_json=log_json,
        )
    )
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
