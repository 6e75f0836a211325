"""Inventory service — reports on a set-up ExtensionManager."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from extctl.extensions.base import qualified_name
from extctl.extensions.diagnostics import Severity
from extctl.services.result import ServiceResult

if TYPE_CHECKING:
    from extctl.extensions.manager import ExtensionManager


class InventoryService:
    """Read-only views over a manager's registry, paths and diagnostics."""

    def __init__(self, manager: ExtensionManager) -> None:
        self._manager = manager

    def list_extensions(self) -> ServiceResult:
        items: list[dict[str, Any]] = [
            {
                "name": ext.name,
                "builtin": ext.is_builtin,
                "origin": str(ext.origin_directory) if ext.origin_directory else None,
                "type": qualified_name(type(ext)),
            }
            for ext in self._manager.extensions
        ]
        warnings = [d.message for d in self._manager.diagnostics]
        return ServiceResult.success(
            "list_extensions", {"count": len(items), "items": items}, warnings=warnings
        )

    def list_paths(self) -> ServiceResult:
        items = [
            {"index": index, "path": str(path), "builtin": index == 0}
            for index, path in enumerate(self._manager.paths)
        ]
        return ServiceResult.success("list_paths", {"count": len(items), "items": items})

    def check(self) -> ServiceResult:
        """Summarize every diagnostic recorded so far."""
        issues = [d.model_dump(mode="json") for d in self._manager.diagnostics]
        error_count = sum(1 for d in self._manager.diagnostics if d.severity is Severity.ERROR)
        return ServiceResult.success(
            "check_extensions",
            {
                "count": len(issues),
                "error_count": error_count,
                "warning_count": len(issues) - error_count,
                "healthy": error_count == 0,
                "extensions": len(self._manager.extensions),
                "issues": issues,
            },
        )
