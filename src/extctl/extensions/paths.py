"""Ordered, deduplicated registry of extension source roots.

Index 0 is reserved for the built-in root: it is registered by the
constructor before any caller-supplied path and never removed.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from pathlib import Path

from extctl.errors import InvalidPathError, PathNotFoundError
from extctl.extensions.diagnostics import DiagnosticKind, DiagnosticLog

logger = logging.getLogger(__name__)


class PathRegistry:
    """Source roots searched for extension origin directories."""

    def __init__(
        self,
        builtin_path: str | os.PathLike[str],
        *,
        diagnostics: DiagnosticLog | None = None,
    ) -> None:
        self._paths: list[Path] = []
        self._diagnostics = diagnostics if diagnostics is not None else DiagnosticLog()
        self.add(builtin_path)

    def add(self, path: str | os.PathLike[str] | None) -> Path:
        """Register *path* and return it.

        Raises:
            InvalidPathError: *path* is ``None`` or empty.
            PathNotFoundError: *path* is not an existing directory.

        A path that is already registered produces a ``duplicate_path``
        diagnostic and is otherwise ignored.
        """
        if path is None or not os.fspath(path):
            raise InvalidPathError("Extension path must be a non-empty path")

        candidate = Path(path).expanduser()
        existing = self._find(candidate)
        if existing is not None:
            self._diagnostics.emit(
                DiagnosticKind.DUPLICATE_PATH,
                f"Duplicate extension path to {candidate} requested. Path registration ignored.",
                path=candidate,
            )
            return existing

        if not candidate.is_dir():
            logger.error("Missing/invalid extension path: %s", candidate)
            raise PathNotFoundError(candidate)

        logger.info("Registering extension path: %s", candidate)
        self._paths.append(candidate)
        return candidate

    @property
    def builtin_path(self) -> Path:
        return self._paths[0]

    @property
    def extension_paths(self) -> list[Path]:
        """Caller-registered roots, in registration order (indexes 1..N)."""
        return self._paths[1:]

    def _find(self, candidate: Path) -> Path | None:
        key = candidate.absolute()
        for registered in self._paths:
            if registered.absolute() == key:
                return registered
        return None

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, (str, os.PathLike)):
            return False
        return self._find(Path(path).expanduser()) is not None

    def __getitem__(self, index: int) -> Path:
        return self._paths[index]

    def __iter__(self) -> Iterator[Path]:
        return iter(list(self._paths))

    def __len__(self) -> int:
        return len(self._paths)


def subdirectories(root: Path) -> list[Path]:
    """Immediate subdirectories of *root*, sorted by name.

    An unlistable root logs a warning and counts as empty.
    """
    try:
        return sorted(p for p in root.iterdir() if p.is_dir())
    except OSError:
        logger.warning("Could not list extension root %s", root, exc_info=True)
        return []
