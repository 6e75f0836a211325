"""The extension capability contract.

An extension is any concrete subclass of :class:`Extension` with a
no-argument constructor. ``name``, ``origin_directory`` and ``is_builtin``
belong to the manager: they are assigned during setup and never written
by the extension itself.
"""

from __future__ import annotations

import inspect
from abc import ABC
from pathlib import Path
from typing import Any, ClassVar


class Extension(ABC):
    """Base class for every pluggable extension.

    Subclasses that only exist to share behaviour can opt out of discovery
    by declaring ``__abstract__ = True`` in their own class body, or by
    leaving an ``abc.abstractmethod`` unimplemented.
    """

    __abstract__: ClassVar[bool] = True

    name: str = ""
    origin_directory: Path | None = None
    is_builtin: bool = False

    def on_first_init(self) -> None:
        """Called once after every extension has been discovered."""

    def on_shutdown(self) -> None:
        """Called when the host shuts down."""

    def __repr__(self) -> str:
        return (
            f"<{type(self).__name__} name={self.name!r} "
            f"builtin={self.is_builtin} origin={self.origin_directory}>"
        )


def is_concrete_extension(obj: Any) -> bool:
    """Whether *obj* is a class the manager may instantiate."""
    if not inspect.isclass(obj) or not issubclass(obj, Extension):
        return False
    if obj.__dict__.get("__abstract__", False):
        return False
    return not inspect.isabstract(obj)


def qualified_name(cls: type) -> str:
    return f"{cls.__module__}.{cls.__qualname__}"
