"""Non-fatal diagnostics produced while loading and driving extensions.

Every contained fault becomes a :class:`Diagnostic`: it is logged at its
severity and kept on the :class:`DiagnosticLog` so hosts (and the
``extctl check`` command) can inspect what went wrong after the fact.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from enum import StrEnum

from pydantic import BaseModel, computed_field

logger = logging.getLogger(__name__)


class Severity(StrEnum):
    WARNING = "warning"
    ERROR = "error"


class DiagnosticKind(StrEnum):
    DUPLICATE_PATH = "duplicate_path"
    LOAD_ERROR = "load_error"
    INSTANTIATION_ERROR = "instantiation_error"
    DUPLICATE_NAME = "duplicate_name"
    AMBIGUOUS_ORIGIN = "ambiguous_origin"
    ORIGIN_NOT_FOUND = "origin_not_found"
    LIFECYCLE_HOOK_ERROR = "lifecycle_hook_error"
    HOOK_NOT_RELAYED = "hook_not_relayed"


_SEVERITIES: dict[DiagnosticKind, Severity] = {
    DiagnosticKind.DUPLICATE_PATH: Severity.WARNING,
    DiagnosticKind.LOAD_ERROR: Severity.ERROR,
    DiagnosticKind.INSTANTIATION_ERROR: Severity.ERROR,
    DiagnosticKind.DUPLICATE_NAME: Severity.WARNING,
    DiagnosticKind.AMBIGUOUS_ORIGIN: Severity.WARNING,
    DiagnosticKind.ORIGIN_NOT_FOUND: Severity.ERROR,
    DiagnosticKind.LIFECYCLE_HOOK_ERROR: Severity.ERROR,
    DiagnosticKind.HOOK_NOT_RELAYED: Severity.WARNING,
}


class Diagnostic(BaseModel):
    """A single contained fault.

    Attributes:
        kind: What went wrong.
        message: Human-readable description, identical to the logged line.
        extension: Name of the extension involved, if any.
        path: Filesystem path involved, if any.
    """

    model_config = {"frozen": True}

    kind: DiagnosticKind
    message: str
    extension: str | None = None
    path: str | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def severity(self) -> Severity:
        return _SEVERITIES[self.kind]


class DiagnosticLog:
    """Ordered record of diagnostics, shared by every extension component."""

    def __init__(self) -> None:
        self._items: list[Diagnostic] = []

    def emit(
        self,
        kind: DiagnosticKind,
        message: str,
        *,
        extension: str | None = None,
        path: object | None = None,
        exc_info: bool = False,
    ) -> Diagnostic:
        """Record a diagnostic and log it at its severity."""
        diagnostic = Diagnostic(
            kind=kind,
            message=message,
            extension=extension,
            path=None if path is None else str(path),
        )
        self._items.append(diagnostic)
        level = logging.ERROR if diagnostic.severity is Severity.ERROR else logging.WARNING
        logger.log(level, message, exc_info=exc_info)
        return diagnostic

    def of_kind(self, kind: DiagnosticKind) -> list[Diagnostic]:
        return [d for d in self._items if d.kind == kind]

    @property
    def has_errors(self) -> bool:
        return any(d.severity is Severity.ERROR for d in self._items)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)
