"""Built-in extension that records when the extension host started and stopped."""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from extctl.extensions.base import Extension

logger = logging.getLogger(__name__)


class Heartbeat(Extension):
    """Logs the host lifecycle and exposes its uptime."""

    def __init__(self) -> None:
        self.started_at: datetime | None = None
        self.stopped_at: datetime | None = None

    def on_first_init(self) -> None:
        self.started_at = datetime.now(UTC)
        logger.info("Extension host started at %s", self.started_at.isoformat())

    def on_shutdown(self) -> None:
        self.stopped_at = datetime.now(UTC)
        logger.info("Extension host stopped after %.3fs", self.uptime())

    def uptime(self) -> float:
        """Seconds between first init and shutdown (or now, while running)."""
        if self.started_at is None:
            return 0.0
        end = self.stopped_at or datetime.now(UTC)
        return (end - self.started_at).total_seconds()
