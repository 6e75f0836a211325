"""Rich console factory and the extctl theme.

Consoles render into a StringIO buffer so renderers can return plain
strings. Rich drops color codes when it detects no terminal (CliRunner,
pipes).
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

DEFAULT_WIDTH = 120

EXT_THEME = Theme(
    {
        "ext.ok": "bold green",
        "ext.error": "bold red",
        "ext.warning": "bold yellow",
        "ext.op": "bold cyan",
        "ext.key": "dim",
        "ext.name": "bold blue",
        "ext.path": "dim",
        "ext.builtin": "magenta",
    }
)


def style_for_severity(severity: str) -> str:
    """Theme style for a diagnostic severity; unknown values are unstyled."""
    return {"error": "ext.error", "warning": "ext.warning"}.get(severity, "")


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    return Console(
        file=StringIO(),
        theme=EXT_THEME,
        no_color=no_color,
        highlight=False,
        width=width or DEFAULT_WIDTH,
    )


def get_output(console: Console) -> str:
    """Return everything printed to a console made by :func:`create_console`."""
    buffer = console.file
    if not isinstance(buffer, StringIO):
        raise TypeError("console was not created by create_console()")
    return buffer.getvalue()
