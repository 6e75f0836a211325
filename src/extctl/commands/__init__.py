"""Subcommand modules for extctl.

Provides register_commands() which uses deferred imports to keep
``extctl --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from extctl.commands.check import check
    from extctl.commands.list_cmd import list_cmd
    from extctl.commands.paths import paths_cmd

    cli.add_command(list_cmd)
    cli.add_command(check)
    cli.add_command(paths_cmd)
