"""Extension discovery: candidate classes to live extension instances.

Discovery order is catalog order. It is stable within a process but
otherwise unordered; do not rely on alphabetical or declaration order.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from extctl.extensions.base import Extension, is_concrete_extension, qualified_name
from extctl.extensions.diagnostics import DiagnosticKind, DiagnosticLog

logger = logging.getLogger(__name__)


def is_builtin_module(module_name: str, namespace: str) -> bool:
    """Whether *module_name* lives in the host's own *namespace*."""
    return module_name == namespace or module_name.startswith(f"{namespace}.")


def discover_extensions(
    candidates: Iterable[type[Extension]],
    *,
    builtin_namespace: str,
    diagnostics: DiagnosticLog,
) -> Iterator[Extension]:
    """Instantiate every concrete candidate, yielding each as it is built.

    A candidate whose constructor raises produces an ``instantiation_error``
    diagnostic and is skipped; the scan continues with the next one.
    """
    for cls in candidates:
        if not is_concrete_extension(cls):
            continue
        type_name = qualified_name(cls)
        logger.debug("Prepping extension: %s", type_name)
        try:
            extension = cls()
        except Exception as exc:
            diagnostics.emit(
                DiagnosticKind.INSTANTIATION_ERROR,
                f"Failed to create extension of type {type_name}: {exc}",
                extension=cls.__name__,
                exc_info=True,
            )
            continue

        extension.name = cls.__name__
        extension.is_builtin = is_builtin_module(cls.__module__, builtin_namespace)
        yield extension
