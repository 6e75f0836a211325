"""Command: show registered extension roots in search order."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from extctl.commands._base import ExtCommand, path_option

if TYPE_CHECKING:
    from extctl.commands._context import AppContext


@click.command("paths", cls=ExtCommand, examples="  extctl paths -p ./extensions")
@path_option
@click.pass_obj
def paths_cmd(app: AppContext, paths: tuple[str, ...]) -> None:
    """Print extension roots; index 0 is the built-in root."""
    from extctl.services.inventory import InventoryService

    manager = app.build_manager(paths)
    app.emit(InventoryService(manager).list_paths())
