"""Pluggy hook specifications for the extension lifecycle.

Both hooks take no arguments and are broadcast by the manager one
extension at a time. Hosts may add their own specs through
``ExtensionManager.add_hookspecs`` before ``setup()``.
"""

from __future__ import annotations

import pluggy

PROJECT_NAME = "extctl"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class ExtensionHookSpec:
    """Hook specifications every extension implements."""

    @hookspec
    def on_first_init(self) -> None:
        """Called once, after every extension is discovered and resolved."""

    @hookspec
    def on_shutdown(self) -> None:
        """Called when the host shuts down."""
