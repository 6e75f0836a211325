"""Extension lifecycle orchestration.

``setup()`` loads candidates, discovers and instantiates extensions,
resolves each one's origin directory and broadcasts ``on_first_init``.
``shutdown()`` broadcasts ``on_shutdown``; ``run_on_all()`` broadcasts any
caller-supplied action.

INVARIANT: One extension's fault never stops a broadcast. Each invocation
is wrapped on its own, logged with the extension's identity, and the loop
moves on. While an invocation runs, ``extension`` is bound in structlog
contextvars.

Single-threaded by contract: the host must not call ``setup()``
concurrently or interleave it with ``run_on_all()``.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from operator import methodcaller
from typing import TYPE_CHECKING, Any

import pluggy
import structlog

from extctl.builtins import BUILTIN_PATH
from extctl.extensions.base import Extension, qualified_name
from extctl.extensions.catalog import ExtensionCatalog
from extctl.extensions.diagnostics import DiagnosticKind, DiagnosticLog
from extctl.extensions.discovery import discover_extensions
from extctl.extensions.hookspecs import PROJECT_NAME, ExtensionHookSpec
from extctl.extensions.origin import OriginPolicy, resolve_origin
from extctl.extensions.paths import PathRegistry
from extctl.extensions.registry import ExtensionRegistry

if TYPE_CHECKING:
    from pathlib import Path

    from extctl.config.settings import ExtSettings

logger = logging.getLogger(__name__)


class _HookRelayManager(pluggy.PluginManager):
    """Pluggy manager that accepts undecorated hook implementations.

    Extensions override ``on_first_init`` and friends as plain methods, so
    any public method named after a known hookspec counts as an
    implementation, in addition to ``@hookimpl``-marked ones.
    """

    def parse_hookimpl_opts(self, plugin: Any, name: str) -> Any:
        opts = super().parse_hookimpl_opts(plugin, name)
        if opts is not None or name.startswith("_"):
            return opts
        caller = getattr(self.hook, name, None)
        if caller is None or caller.spec is None:
            return None
        if not callable(getattr(plugin, name, None)):
            return None
        return {}


class ExtensionManager:
    """Discovers extensions and drives their lifecycle.

    Parameters:
        builtin_path: Root searched for built-in extensions (index 0).
            Defaults to the directory of the ``extctl.builtins`` package.
        builtin_namespace: Module namespace marking an extension as built-in.
        builtin_package: Package imported at setup to catalog built-ins.
        source_suffix: Suffix of the source file that marks an origin directory.
        entry_point_group: Entry-point group scanned for installed extensions.
        origin_policy: Which directory wins when several match.
        autoload: Load candidates from the built-in package, extension roots
            and entry points during setup. When False, only classes
            registered on ``catalog`` are considered.
        catalog: Pre-populated candidate catalog.
    """

    def __init__(
        self,
        builtin_path: str | os.PathLike[str] | None = None,
        *,
        builtin_namespace: str = "extctl",
        builtin_package: str | None = "extctl.builtins",
        source_suffix: str = ".py",
        entry_point_group: str | None = "extctl.extensions",
        origin_policy: OriginPolicy = OriginPolicy.FIRST,
        autoload: bool = True,
        catalog: ExtensionCatalog | None = None,
    ) -> None:
        self.diagnostics = DiagnosticLog()
        self.catalog = catalog if catalog is not None else ExtensionCatalog()
        self._paths = PathRegistry(
            builtin_path if builtin_path is not None else BUILTIN_PATH,
            diagnostics=self.diagnostics,
        )
        self._registry = ExtensionRegistry(diagnostics=self.diagnostics)
        self._builtin_namespace = builtin_namespace
        self._builtin_package = builtin_package
        self._source_suffix = source_suffix
        self._entry_point_group = entry_point_group
        self._origin_policy = origin_policy
        self._autoload = autoload
        self._is_setup = False

        self._pm = _HookRelayManager(PROJECT_NAME)
        self._pm.add_hookspecs(ExtensionHookSpec)

    @classmethod
    def from_settings(cls, settings: ExtSettings) -> ExtensionManager:
        """Build a manager from ``[extensions]`` settings, registering its paths."""
        cfg = settings.extensions
        manager = cls(
            cfg.builtin_path,
            builtin_namespace=cfg.builtin_namespace,
            builtin_package=cfg.builtin_package,
            source_suffix=cfg.source_suffix,
            entry_point_group=cfg.entry_point_group,
            origin_policy=cfg.origin_policy,
            autoload=cfg.autoload,
        )
        for path in cfg.paths:
            manager.add_extension_path(path)
        return manager

    # ------------------------------------------------------------------
    # Host-facing surface
    # ------------------------------------------------------------------

    def add_extension_path(self, path: str | os.PathLike[str]) -> Path:
        """Register an extension root. Must be called before ``setup()``.

        Raises:
            InvalidPathError: *path* is empty.
            PathNotFoundError: *path* is not an existing directory.
        """
        return self._paths.add(path)

    def setup(self) -> None:
        """Discover, instantiate and resolve every extension, then init them.

        Must run once, after every path is registered. Repeated calls are
        ignored with a warning.
        """
        if self._is_setup:
            logger.warning("Extension setup already ran; ignoring repeated setup() call")
            return
        self._is_setup = True

        if self._autoload:
            self._load_candidates()

        for extension in discover_extensions(
            self.catalog.candidates(),
            builtin_namespace=self._builtin_namespace,
            diagnostics=self.diagnostics,
        ):
            self._registry.append(extension)
            self._relay_hooks(extension)
            resolve_origin(
                extension,
                list(self._paths),
                source_suffix=self._source_suffix,
                policy=self._origin_policy,
                diagnostics=self.diagnostics,
            )

        self._registry.freeze()
        logger.info("Loaded %d extensions: %s", len(self._registry), ", ".join(self._registry.names()))
        self.run_on_all(methodcaller("on_first_init"))

    def shutdown(self) -> list[Extension]:
        """Broadcast ``on_shutdown`` in registry order; return the extensions that raised."""
        return self.run_on_all(methodcaller("on_shutdown"))

    def run_on_all(self, action: Callable[[Extension], object]) -> list[Extension]:
        """Call *action* with every extension, in registry order.

        Returns the extensions whose invocation raised.
        """
        failed: list[Extension] = []
        for extension in self._registry:
            try:
                with structlog.contextvars.bound_contextvars(extension=extension.name):
                    action(extension)
            except Exception as exc:
                self.diagnostics.emit(
                    DiagnosticKind.LIFECYCLE_HOOK_ERROR,
                    f"Failed to run event on extension {qualified_name(type(extension))}: {exc}",
                    extension=extension.name,
                    exc_info=True,
                )
                failed.append(extension)
        return failed

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def extensions(self) -> ExtensionRegistry:
        return self._registry

    @property
    def paths(self) -> PathRegistry:
        return self._paths

    @property
    def is_setup(self) -> bool:
        return self._is_setup

    def get(self, name: str) -> Extension | None:
        return self._registry.get(name)

    def list_extension_names(self) -> list[str]:
        return self._registry.names()

    @property
    def hook(self) -> pluggy.HookRelay:
        """Pluggy relay for host-defined hooks implemented by extensions."""
        return self._pm.hook

    def add_hookspecs(self, module_or_class: object) -> None:
        """Add host hookspecs. Call before ``setup()`` so extensions pick them up."""
        self._pm.add_hookspecs(module_or_class)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _load_candidates(self) -> None:
        if self._builtin_package:
            self.catalog.load_builtin_package(self._builtin_package, diagnostics=self.diagnostics)
        for root in self._paths.extension_paths:
            self.catalog.load_directory(root, diagnostics=self.diagnostics)
        if self._entry_point_group:
            self.catalog.load_entry_points(self._entry_point_group, diagnostics=self.diagnostics)

    def _relay_hooks(self, extension: Extension) -> None:
        """Add *extension* to the hook relay unless pluggy rejects its hooks.

        A rejected extension stays registered. Lifecycle broadcasts call it
        directly, so a mismatched hook faults there as ``lifecycle_hook_error``.
        """
        plugin_name = f"{extension.name}@{id(extension):x}"
        try:
            self._pm.register(extension, name=plugin_name)
        except pluggy.PluginValidationError as exc:
            # pluggy keeps whatever it registered before validation failed
            if self._pm.has_plugin(plugin_name):
                self._pm.unregister(name=plugin_name)
            self.diagnostics.emit(
                DiagnosticKind.HOOK_NOT_RELAYED,
                f"Extension {qualified_name(type(extension))} left off the hook relay: {exc}",
                extension=extension.name,
            )
