"""Structlog configuration for the score import service.

Logs are rendered as JSON by default; set ``SI_LOG_JSON=false`` for
human-readable console output during development.
"""

import logging

import structlog

from score_import.config import settings


def _resolve_level(level: str | None) -> int:
    if not level:
        return logging.INFO
    return logging.getLevelNamesMapping().get(level.strip().upper(), logging.INFO)


def setup_logging() -> None:
    level = _resolve_level(settings.log_level)
    logging.basicConfig(level=level)

    renderer = (
        structlog.processors.JSONRenderer()
        if settings.log_json
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
