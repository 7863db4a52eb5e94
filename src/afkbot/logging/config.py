# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""structlog setup for afkbot.

One line per event on stderr, stdout stays free for command output. Console
lines are meant for a terminal; json lines (AFKBOT_LOG_FORMAT=json) suit a
service manager or log shipper. Session events carry the attempt generation
bound by the driver, so the lines of one connection can be grepped together.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from afkbot.settings import Settings

__all__ = ["get_logger", "configure_logging"]


def configure_logging(settings: Settings | None = None) -> None:
    """Configure structlog for afkbot.

    This should be called once at application startup.
    Respects AFKBOT_LOG_LEVEL and AFKBOT_LOG_FORMAT via Settings.

    Args:
        settings: Settings instance (will be created if None)
    """
    if settings is None:
        from afkbot.settings import Settings

        settings = Settings()

    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    processors: list[structlog.types.Processor] = [
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if settings.log_format == "json":
        # JSON output needs tracebacks rendered into the event dict
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a structlog logger instance.

    Args:
        name: Logger name (typically __name__ of calling module)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)
