"""Origin resolution: which subdirectory of which root holds an extension.

Built-in extensions are searched for in root 0 only; every other
extension in roots 1..N. Within a root, only immediate subdirectories are
inspected, in name order, for a file called exactly
``<extension.name><source_suffix>``.

When more than one subdirectory matches, the :class:`OriginPolicy`
decides which one is kept; every extra match is reported as an
``ambiguous_origin`` diagnostic either way.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

from extctl.extensions.base import Extension
from extctl.extensions.diagnostics import DiagnosticKind, DiagnosticLog
from extctl.extensions.paths import subdirectories

logger = logging.getLogger(__name__)


class OriginPolicy(StrEnum):
    FIRST = "first"
    LAST = "last"


@dataclass(frozen=True)
class OriginResolution:
    """Outcome of resolving one extension.

    Attributes:
        origin: The directory kept as ``origin_directory``, or None.
        matches: Every subdirectory that contained the source file.
        searched: Every subdirectory inspected, in sweep order.
    """

    origin: Path | None
    matches: tuple[Path, ...]
    searched: tuple[Path, ...]

    @property
    def ambiguous(self) -> bool:
        return len(self.matches) > 1


def search_roots(extension: Extension, paths: Sequence[Path]) -> list[Path]:
    """Roots to search for *extension*: index 0 for built-ins, 1..N otherwise."""
    if extension.is_builtin:
        return [paths[0]]
    return list(paths[1:])


def resolve_origin(
    extension: Extension,
    paths: Sequence[Path],
    *,
    source_suffix: str = ".py",
    policy: OriginPolicy = OriginPolicy.FIRST,
    diagnostics: DiagnosticLog | None = None,
) -> OriginResolution:
    """Locate and assign ``extension.origin_directory``.

    An extension with no match keeps ``origin_directory`` unset and an
    ``origin_not_found`` diagnostic is emitted; it stays usable.
    """
    diagnostics = diagnostics if diagnostics is not None else DiagnosticLog()
    filename = f"{extension.name}{source_suffix}"
    searched: list[Path] = []
    matches: list[Path] = []
    origin: Path | None = None

    for root in search_roots(extension, paths):
        for entry in subdirectories(root):
            searched.append(entry)
            if not (entry / filename).is_file():
                continue
            matches.append(entry)
            if origin is None:
                origin = entry
                continue
            if policy == OriginPolicy.LAST:
                origin = entry
            diagnostics.emit(
                DiagnosticKind.AMBIGUOUS_ORIGIN,
                f"Multiple extensions with the same name {extension.name}: "
                f"{entry} also contains {filename}; using {origin}",
                extension=extension.name,
                path=entry,
            )

    if origin is None:
        searched_list = ", ".join(str(p) for p in searched) or "<no subdirectories>"
        diagnostics.emit(
            DiagnosticKind.ORIGIN_NOT_FOUND,
            f"Could not determine path for extension {extension.name} - is the class name "
            f"mismatched from the filename? Searched in {searched_list} for {filename!r}",
            extension=extension.name,
        )
    else:
        extension.origin_directory = origin
        logger.debug("Resolved extension %s to %s", extension.name, origin)

    return OriginResolution(origin=origin, matches=tuple(matches), searched=tuple(searched))
