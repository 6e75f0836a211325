"""Extension layer — discovery, origin resolution and lifecycle broadcast.

Discovery: built-in package, extension root directories, and
``extctl.extensions`` entry points (via pluggy).
INVARIANT: Extension failures are diagnostics, never errors.
"""

from extctl.extensions.base import Extension
from extctl.extensions.catalog import ExtensionCatalog
from extctl.extensions.diagnostics import Diagnostic, DiagnosticKind, DiagnosticLog, Severity
from extctl.extensions.hookspecs import hookimpl, hookspec
from extctl.extensions.manager import ExtensionManager
from extctl.extensions.origin import OriginPolicy, OriginResolution, resolve_origin
from extctl.extensions.paths import PathRegistry
from extctl.extensions.registry import ExtensionRegistry

__all__ = [
    "Diagnostic",
    "DiagnosticKind",
    "DiagnosticLog",
    "Extension",
    "ExtensionCatalog",
    "ExtensionManager",
    "ExtensionRegistry",
    "OriginPolicy",
    "OriginResolution",
    "PathRegistry",
    "Severity",
    "hookimpl",
    "hookspec",
    "resolve_origin",
]
