"""Registration table of candidate extension classes.

Python has no runtime-wide "every loaded implementation of X" query that
is safe to scope per host, so candidates live in an explicit catalog.
It is populated four ways:

* ``register()`` — explicit registration, also usable as a decorator;
* ``load_builtin_package()`` — imports every module of the host's own
  built-in package;
* ``load_directory()`` — loads ``*.py`` files from the immediate
  subdirectories of an extension root;
* ``load_entry_points()`` — pip-installed extensions advertised under an
  entry-point group, loaded one at a time.

INVARIANT: Load failures are diagnostics, never errors. A broken source
file must not prevent the remaining extensions from loading.
"""

from __future__ import annotations

import importlib
import importlib.util
import inspect
import logging
import pkgutil
import re
import sys
from collections.abc import Iterator
from importlib import metadata
from pathlib import Path
from types import ModuleType

from extctl.extensions.base import Extension, is_concrete_extension
from extctl.extensions.diagnostics import DiagnosticKind, DiagnosticLog
from extctl.extensions.paths import subdirectories

logger = logging.getLogger(__name__)

LOCAL_MODULE_PREFIX = "extctl_ext_"

_UNSAFE_CHARS = re.compile(r"\W")


class ExtensionCatalog:
    """Ordered, duplicate-free collection of candidate extension classes."""

    def __init__(self) -> None:
        self._classes: list[type[Extension]] = []

    def register(self, cls: type[Extension]) -> type[Extension]:
        """Add *cls* to the catalog and return it unchanged.

        Abstract classes are accepted and filtered out by ``candidates()``.
        """
        if not inspect.isclass(cls) or not issubclass(cls, Extension):
            msg = f"{cls!r} is not an Extension subclass"
            raise TypeError(msg)
        if cls not in self._classes:
            self._classes.append(cls)
            logger.debug("Cataloged extension class %s.%s", cls.__module__, cls.__qualname__)
        return cls

    def candidates(self) -> list[type[Extension]]:
        """Concrete extension classes, in catalog order."""
        return [cls for cls in self._classes if is_concrete_extension(cls)]

    def __contains__(self, cls: object) -> bool:
        return cls in self._classes

    def __iter__(self) -> Iterator[type[Extension]]:
        return iter(list(self._classes))

    def __len__(self) -> int:
        return len(self._classes)

    # ------------------------------------------------------------------
    # Loaders
    # ------------------------------------------------------------------

    def load_builtin_package(
        self,
        package_name: str,
        *,
        diagnostics: DiagnosticLog | None = None,
    ) -> int:
        """Import *package_name* and all its submodules; catalog their extensions.

        Returns the number of classes added.
        """
        diagnostics = diagnostics if diagnostics is not None else DiagnosticLog()
        try:
            package = importlib.import_module(package_name)
        except Exception as exc:
            diagnostics.emit(
                DiagnosticKind.LOAD_ERROR,
                f"Failed to import built-in extension package {package_name}: {exc}",
                exc_info=True,
            )
            return 0

        before = len(self)
        self._register_module_members(package)
        search_path = getattr(package, "__path__", None)
        if search_path is None:
            return len(self) - before

        def on_error(name: str) -> None:
            diagnostics.emit(
                DiagnosticKind.LOAD_ERROR,
                f"Failed to import built-in extension package {name}",
                exc_info=True,
            )

        for info in pkgutil.walk_packages(search_path, prefix=f"{package.__name__}.", onerror=on_error):
            try:
                module = importlib.import_module(info.name)
            except Exception as exc:
                diagnostics.emit(
                    DiagnosticKind.LOAD_ERROR,
                    f"Failed to import built-in extension module {info.name}: {exc}",
                    exc_info=True,
                )
                continue
            self._register_module_members(module)
        return len(self) - before

    def load_directory(
        self,
        root: Path,
        *,
        diagnostics: DiagnosticLog | None = None,
    ) -> int:
        """Load single-file extension modules from the subdirectories of *root*.

        Each ``<root>/<subdir>/*.py`` file (excluding ``_``-prefixed names)
        is executed as module ``extctl_ext_<subdir>_<stem>``. Extension
        classes defined in that module are cataloged; imported ones are not.

        Returns the number of classes added.
        """
        diagnostics = diagnostics if diagnostics is not None else DiagnosticLog()
        before = len(self)
        for subdir in subdirectories(root):
            for py_file in sorted(subdir.glob("*.py")):
                if py_file.name.startswith("_"):
                    continue
                module = self._exec_source_file(py_file, diagnostics)
                if module is not None:
                    self._register_module_members(module)
        return len(self) - before

    def load_entry_points(
        self,
        group: str,
        *,
        diagnostics: DiagnosticLog | None = None,
    ) -> int:
        """Catalog extensions advertised under the *group* entry-point group.

        An entry point may name an extension class or a module; for a module,
        every extension class it defines is cataloged. Each entry point is
        loaded on its own, so one that fails to import becomes a
        ``load_error`` and the rest still load. When two distributions
        advertise the same name, the first one wins.
        """
        diagnostics = diagnostics if diagnostics is not None else DiagnosticLog()
        before = len(self)
        seen: set[str] = set()
        for ep in metadata.entry_points(group=group):
            if ep.name in seen:
                logger.warning("Ignoring duplicate entry point %s (%s)", ep.name, ep.value)
                continue
            seen.add(ep.name)
            try:
                target = ep.load()
            except Exception as exc:
                diagnostics.emit(
                    DiagnosticKind.LOAD_ERROR,
                    f"Failed to load extension entry point {ep.name} ({ep.value}): {exc}",
                    exc_info=True,
                )
                continue
            if isinstance(target, ModuleType):
                self._register_module_members(target)
            elif inspect.isclass(target) and issubclass(target, Extension):
                self.register(target)
            else:
                logger.warning("Ignoring entry point %s: not an Extension class or module", ep.name)
        return len(self) - before

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _exec_source_file(self, py_file: Path, diagnostics: DiagnosticLog) -> ModuleType | None:
        stem = _UNSAFE_CHARS.sub("_", f"{py_file.parent.name}_{py_file.stem}")
        module_name = f"{LOCAL_MODULE_PREFIX}{stem}"
        try:
            spec = importlib.util.spec_from_file_location(module_name, py_file)
            if spec is None or spec.loader is None:
                logger.warning("Could not create module spec for %s", py_file)
                return None
            module = importlib.util.module_from_spec(spec)
            sys.modules[module_name] = module
            spec.loader.exec_module(module)
        except Exception as exc:
            # Clean up partial module registration
            sys.modules.pop(module_name, None)
            diagnostics.emit(
                DiagnosticKind.LOAD_ERROR,
                f"Failed to load extension source {py_file}: {exc}",
                path=py_file,
                exc_info=True,
            )
            return None
        logger.debug("Loaded extension source %s as %s", py_file, module_name)
        return module

    def _register_module_members(self, module: ModuleType) -> None:
        # vars() keeps definition order; imported classes are skipped.
        for obj in list(vars(module).values()):
            if not inspect.isclass(obj) or not issubclass(obj, Extension):
                continue
            if obj.__module__ != module.__name__:
                continue
            self.register(obj)
