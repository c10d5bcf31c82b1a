"""Structured logging configuration using ``structlog``.

Call :func:`setup_logging` once per generator run (the CLI does this) to
configure both ``structlog`` and the standard-library ``logging`` module.
Run-scoped values such as the command name are bound with
``structlog.contextvars`` and appear on every event of that run.
"""

from __future__ import annotations

import logging
import sys

import structlog


def setup_logging(log_level: str = "INFO", **context: object) -> None:
    """Configure structured logging for a generator run.

    Output goes to ``stderr`` so generated documents piped to ``stdout``
    stay clean.  Context left over from an earlier run is cleared.

    Args:
        log_level: Minimum severity level (e.g. ``"DEBUG"``, ``"INFO"``).
        **context: Values bound to every subsequent log event.
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=numeric_level,
    )

    structlog.contextvars.clear_contextvars()
    if context:
        structlog.contextvars.bind_contextvars(**context)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
