"""Command: report diagnostics from a full setup/shutdown cycle."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from extctl.commands._base import ExtCommand, path_option

if TYPE_CHECKING:
    from extctl.commands._context import AppContext


@click.command(
    cls=ExtCommand,
    examples="""\
  extctl check
  extctl check -p ./extensions
  extctl --json check""",
)
@path_option
@click.pass_obj
def check(app: AppContext, paths: tuple[str, ...]) -> None:
    """Run setup and shutdown, then list every diagnostic.

    Exits with code 1 when any diagnostic has severity ``error``.
    """
    from extctl.services.inventory import InventoryService

    manager = app.build_manager(paths)
    manager.setup()
    manager.shutdown()
    result = InventoryService(manager).check()
    app.emit(result)
    if not result.data["healthy"]:
        raise SystemExit(1)
