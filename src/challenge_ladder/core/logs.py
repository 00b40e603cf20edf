"""structlog setup for the CLI."""

from __future__ import annotations

import logging

import structlog
from rich.console import Console
from rich.logging import RichHandler


def configure_logging(console: Console, verbose: bool = False, json_logs: bool = False) -> None:
    """Route structlog events through stdlib logging.

    Args:
        console: Console the rich handler writes to.
        verbose: Emit debug events (reconciliation details, exports).
        json_logs: Render one JSON object per event instead of console text.
    """
    renderer = (
        structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    if json_logs:
        handler: logging.Handler = logging.StreamHandler(console.file)
    else:
        handler = RichHandler(console=console, show_time=False, rich_tracebacks=True)

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[handler],
        force=True,
    )
