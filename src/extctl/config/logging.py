"""Logging setup for extctl.

Library modules log through stdlib ``logging.getLogger(__name__)``.
:func:`configure_logging` routes those records, and structlog's own, to
stderr through a single ``ProcessorFormatter``:

- console lines by default, colored only on a TTY
- JSON lines with ``--log-json``, tracebacks rendered into the payload

Values bound with :func:`structlog.contextvars.bound_contextvars` are
merged into every record. The extension manager binds ``extension`` while
it dispatches a lifecycle event, so anything an extension logs from inside
a hook carries its name.
"""

from __future__ import annotations

import logging
import sys

import structlog
from structlog.types import Processor

LOGGER_NAME = "extctl"


def _pre_chain() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]


def _render_chain(log_json: bool) -> list[Processor]:
    if log_json:
        return [
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ]
    return [structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())]


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Install the stderr handler and set the ``extctl`` logger level.

    Safe to call repeatedly; each call replaces the root handler.

    Args:
        verbose: DEBUG for ``extctl.*`` loggers instead of WARNING.
        log_json: Emit JSON lines instead of console lines.
    """
    pre_chain = _pre_chain()

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *_render_chain(log_json),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    # Third-party loggers stay at WARNING regardless of --verbose.
    root.setLevel(logging.WARNING)
    logging.getLogger(LOGGER_NAME).setLevel(logging.DEBUG if verbose else logging.WARNING)
