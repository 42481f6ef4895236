"""structlog setup for the gitstream library and CLI.

Library modules only call ``structlog.get_logger``; nothing is configured
until an application (or the ``gitstream`` command) calls
``configure_logging``. Events such as ``git_process_started`` and
``incomplete_record_discarded`` then go to stderr, leaving stdout free for
the decoded records the CLI prints.
"""

import logging
import sys
from typing import Any

import structlog

from gitstream.config import settings

LOG_FORMATS = ("console", "json")


def configure_logging(
    log_level: str | None = None, log_format: str | None = None
) -> None:
    """Route gitstream's structlog events to stderr.

    Args:
        log_level: Level name; defaults to ``settings.log_level``
            (``GITSTREAM_LOG_LEVEL``)
        log_format: "console" or "json"; defaults to ``settings.log_format``
            (``GITSTREAM_LOG_FORMAT``)

    Raises:
        ValueError: If ``log_format`` is not one of ``LOG_FORMATS``
    """
    log_level = log_level or settings.log_level
    log_format = log_format or settings.log_format
    if log_format not in LOG_FORMATS:
        raise ValueError(f"unknown log format: {log_format!r}")

    level = getattr(logging, log_level.upper(), logging.WARNING)

    # force=True lets a second call (e.g. from tests) change the level
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=level,
        force=True,
    )

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if log_format == "json":
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
