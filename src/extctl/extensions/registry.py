"""Ordered registry of live extensions.

Append-only while setup runs, frozen afterwards. Insertion order is
discovery order and is the order every broadcast follows.
"""

from __future__ import annotations

from collections.abc import Iterator

from extctl.errors import RegistryFrozenError
from extctl.extensions.base import Extension
from extctl.extensions.diagnostics import DiagnosticKind, DiagnosticLog


class ExtensionRegistry:
    """Owns every extension instance created by the manager."""

    def __init__(self, *, diagnostics: DiagnosticLog | None = None) -> None:
        self._extensions: list[Extension] = []
        self._frozen = False
        self._diagnostics = diagnostics if diagnostics is not None else DiagnosticLog()

    def append(self, extension: Extension) -> None:
        """Add *extension*. Same-named extensions are kept but reported."""
        if self._frozen:
            msg = f"Cannot register extension {extension.name}: registry is frozen"
            raise RegistryFrozenError(msg)
        if self.get(extension.name) is not None:
            self._diagnostics.emit(
                DiagnosticKind.DUPLICATE_NAME,
                f"Multiple extensions named {extension.name} are registered; "
                "lookups by name return the first one",
                extension=extension.name,
            )
        self._extensions.append(extension)

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, name: str) -> Extension | None:
        """Return the first extension called *name*, or None."""
        for extension in self._extensions:
            if extension.name == name:
                return extension
        return None

    def names(self) -> list[str]:
        return [e.name for e in self._extensions]

    def __contains__(self, extension: object) -> bool:
        return any(e is extension for e in self._extensions)

    def __getitem__(self, index: int) -> Extension:
        return self._extensions[index]

    def __iter__(self) -> Iterator[Extension]:
        return iter(list(self._extensions))

    def __len__(self) -> int:
        return len(self._extensions)
