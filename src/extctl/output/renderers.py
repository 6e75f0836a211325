"""Rich renderers for ServiceResult, one per ``result.op``.

Ops without a dedicated renderer get a key/value dump. Every renderer
prints into a StringIO console, so output is plain text under CliRunner
and pipes.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from extctl.output.console import create_console, get_output, style_for_severity

if TYPE_CHECKING:
    from rich.console import Console

    from extctl.services.result import ServiceResult

Renderer = Callable[..., None]


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render *result* for a human reader."""
    console = create_console()
    renderer: Renderer = _OP_RENDERERS.get(result.op, _render_generic) if result.ok else _render_error
    renderer(result, console, verbose=verbose)
    return get_output(console).rstrip("\n")


def _headline(label: str, style: str, op: str) -> Text:
    return Text.assemble((label, style), "  ", (op, "ext.op"))


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    error = result.error
    line = _headline("ERROR", "ext.error", result.op)
    line.append(f": {error.message if error else 'unknown error'}")
    console.print(line)
    if verbose and error:
        console.print(Text(f"  code: {error.code}", style="dim"))
        for key, value in error.detail.items():
            console.print(Text(f"  {key}: {value}", style="dim"))


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    console.print(_headline("OK", "ext.ok", result.op))
    for key, value in result.data.items():
        console.print(Text.assemble((f"  {key}: ", "ext.key"), str(value)))


def _render_extensions(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items: list[dict[str, Any]] = result.data.get("items", [])
    if not items:
        console.print("No extensions registered.")
        return

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Name", style="ext.name", no_wrap=True)
    table.add_column("Builtin", style="ext.builtin")
    table.add_column("Origin", style="ext.path")
    if verbose:
        table.add_column("Type", style="dim")

    for item in items:
        row = [
            str(item["name"]),
            "yes" if item.get("builtin") else "no",
            item.get("origin") or "-",
        ]
        if verbose:
            row.append(str(item.get("type", "")))
        table.add_row(*row)

    console.print(table)
    console.print(f"\n{len(items)} extensions")


def _render_paths(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    for item in result.data.get("items", []):
        line = Text(f"  [{item['index']}] ")
        line.append(item["path"], style="ext.path")
        if item.get("builtin"):
            line.append(" (builtin)", style="ext.builtin")
        console.print(line)


def _render_check(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render diagnostics grouped by kind."""
    issues: list[dict[str, Any]] = result.data.get("issues", [])
    if not issues:
        console.print("[ext.ok]OK[/ext.ok]  No issues found.")
        return

    by_kind: dict[str, list[dict[str, Any]]] = {}
    for issue in issues:
        by_kind.setdefault(str(issue.get("kind", "unknown")), []).append(issue)

    for kind, kind_issues in by_kind.items():
        console.print(f"\n[bold]{kind}[/bold]")
        for issue in kind_issues:
            sev = str(issue.get("severity", "warning"))
            line = Text("  ")
            line.append(sev, style=style_for_severity(sev))
            if issue.get("extension"):
                line.append(f" [{issue['extension']}]", style="ext.name")
            line.append(f": {issue.get('message', '')}")
            console.print(line)
            if verbose and issue.get("path"):
                console.print(f"    path: {issue['path']}")

    errors = result.data.get("error_count", 0)
    warnings = result.data.get("warning_count", 0)
    console.print(f"\n{errors} errors, {warnings} warnings")


_OP_RENDERERS: dict[str, Renderer] = {
    "list_extensions": _render_extensions,
    "list_paths": _render_paths,
    "check_extensions": _render_check,
}
