# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Structured logging configuration using structlog.

Package modules log through ``logging.getLogger(__name__)``. setup_logging()
routes those records through a structlog ProcessorFormatter so they come
out as JSON in production and as colored console lines in development,
stamped with the game and session bound by bind_context().

Example:
    >>> import logging
    >>> from brainmatch_analytics.utils.logging import setup_logging, bind_context
    >>> from brainmatch_analytics.core.config import get_settings
    >>> setup_logging(get_settings())
    >>> bind_context(game_id="BrainMatch_Flags", session_id="session_1")
    >>> logging.getLogger("brainmatch_analytics.demo").info("Level %s done", 3)
"""

import logging
import sys
from typing import TYPE_CHECKING

import structlog
from structlog.types import Processor

if TYPE_CHECKING:
    from brainmatch_analytics.core.config.settings import Settings

PACKAGE_LOGGER = "brainmatch_analytics"


class _AnalyticsHandler(logging.StreamHandler):
    """Stream handler installed by setup_logging; replaced on reconfiguration."""


def setup_logging(settings: "Settings") -> None:
    """Configure structured output for the package loggers.

    - Development or debug: colored console output
    - Otherwise: one JSON object per line

    Calling it again replaces the previously installed handler. Records
    still propagate to the root logger, so host handlers keep working.

    Args:
        settings: Application settings containing log_level and debug flag.
    """
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if settings.is_development or settings.debug:
        renderers: list[Processor] = [structlog.dev.ConsoleRenderer(colors=True)]
    else:
        renderers = [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            *renderers,
        ],
    )

    handler = _AnalyticsHandler(sys.stdout)
    handler.setFormatter(formatter)

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for existing in list(package_logger.handlers):
        if isinstance(existing, _AnalyticsHandler):
            package_logger.removeHandler(existing)
    package_logger.addHandler(handler)
    package_logger.setLevel(log_level)

    # The redis client is chatty at DEBUG
    logging.getLogger("redis").setLevel(logging.WARNING)


def bind_context(**kwargs: object) -> None:
    """Bind context variables to all subsequent log records.

    Used to stamp game_id and session_id on every line of a session.

    Args:
        **kwargs: Key-value pairs to bind to the logging context.
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()
