"""Command: list discovered extensions and their origin directories."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from extctl.commands._base import ExtCommand, path_option

if TYPE_CHECKING:
    from extctl.commands._context import AppContext


@click.command(
    "list",
    cls=ExtCommand,
    examples="""\
  extctl list
  extctl list -p ./extensions
  extctl --json list -p ./extensions -p ~/.local/share/extctl""",
)
@path_option
@click.pass_obj
def list_cmd(app: AppContext, paths: tuple[str, ...]) -> None:
    """Run setup, print every registered extension, then shut down."""
    from extctl.services.inventory import InventoryService

    with app.extension_host(paths) as manager:
        result = InventoryService(manager).list_extensions()
    app.emit(result)
