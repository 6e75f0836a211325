"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Builds the ExtensionManager on demand and
centralizes result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import TYPE_CHECKING

import click

from extctl.config.logging import configure_logging
from extctl.errors import ExtctlError
from extctl.output.formatters import format_result
from extctl.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from extctl.config.settings import ExtSettings
    from extctl.extensions.manager import ExtensionManager


class AppContext:
    """Shared context flowing through Click's command hierarchy."""

    def __init__(self, settings: ExtSettings) -> None:
        self.settings = settings
        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    def build_manager(self, extra_paths: Sequence[str] = ()) -> ExtensionManager:
        """Create a manager from settings plus *extra_paths*.

        Path errors are emitted as a failed result (exit code 1).
        """
        from extctl.extensions.manager import ExtensionManager

        try:
            manager = ExtensionManager.from_settings(self.settings)
            for path in extra_paths:
                manager.add_extension_path(path)
        except ExtctlError as exc:
            self.emit(
                ServiceResult.failure("add_extension_path", ServiceError.from_exception(exc))
            )
            raise SystemExit(1) from exc
        return manager

    @contextmanager
    def extension_host(self, extra_paths: Sequence[str] = ()) -> Iterator[ExtensionManager]:
        """Yield a set-up manager; shut it down on exit."""
        manager = self.build_manager(extra_paths)
        manager.setup()
        try:
            yield manager
        finally:
            manager.shutdown()

    def emit(self, result: ServiceResult) -> None:
        """Print *result*; a failed result goes to stderr and exits 1.

        Human mode echoes ``result.warnings`` to stderr so piped stdout stays
        clean. JSON mode already carries them in the payload.
        """
        text = format_result(
            result,
            json_output=self.settings.json_output,
            verbose=self.settings.verbose,
        )
        if not result.ok:
            click.echo(text, err=True)
            raise SystemExit(1)

        click.echo(text)
        if not self.settings.json_output:
            for warning in result.warnings:
                click.echo(f"WARNING: {warning}", err=True)
