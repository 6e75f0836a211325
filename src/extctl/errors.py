"""Exceptions raised to callers of the extension manager.

INVARIANT: Path registration and writes to a frozen registry are the only
faults raised to the caller. Every other fault is contained and reported
as a Diagnostic.
"""

from __future__ import annotations

from pathlib import Path


class ExtctlError(Exception):
    """Base class for all extctl exceptions."""


class InvalidPathError(ExtctlError, ValueError):
    """An extension path was ``None`` or empty."""


class PathNotFoundError(ExtctlError, FileNotFoundError):
    """An extension path does not point at an existing directory."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"Missing/invalid extension path: {path}")
        self.path = path


class RegistryFrozenError(ExtctlError, RuntimeError):
    """The extension registry was modified after setup completed."""
