"""Shared Click building blocks for extctl commands."""

from __future__ import annotations

from typing import Any

import click


class ExtCommand(click.Command):
    """Command with an optional ``--examples`` flag.

    ``--examples`` prints the usage examples given at definition time and
    exits, so ``--help`` can stay short.
    """

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            self.params.append(
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=self._print_examples,
                    help="Show usage examples.",
                )
            )

    def _print_examples(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(self.examples)
        ctx.exit(0)


path_option = click.option(
    "-p",
    "--path",
    "paths",
    multiple=True,
    type=click.Path(file_okay=False),
    help="Extra extension root (repeatable), registered after configured paths.",
)
