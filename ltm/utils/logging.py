"""Structured logging setup using structlog.

One processor chain (context vars, log level, timestamps, stack info) ends
in either a coloured ConsoleRenderer or, when ``app_env`` is
``"production"``, a JSONRenderer.  ``app_env`` comes from
:class:`~ltm.config.settings.Settings` (``LTM_APP_ENV``) unless the caller
passes it, so :func:`ltm.factory.build_memory` and a bare
:func:`get_logger` pick the same renderer.

Standard-library ``logging`` is rewired through the same formatter so that
chromadb, httpx and aiosqlite records come out in the same shape.  Those
libraries are held at WARNING unless ``log_level`` is DEBUG.
"""

from __future__ import annotations

import logging
import sys

import structlog

from ltm.config.settings import Settings

# Chatty third-party loggers used by the backends.
_LIBRARY_LOGGERS = ("chromadb", "httpx", "httpcore", "aiosqlite", "openai")


def configure_logging(
    log_level: str = "INFO",
    json_output: bool = False,
    app_env: str | None = None,
) -> structlog.BoundLogger:
    """Configure structlog and route stdlib logging through it.

    Args:
        log_level: Logging level string (DEBUG, INFO, WARNING, ERROR).
        json_output: Force JSON output regardless of ``app_env``.
        app_env: Deployment environment; ``None`` reads ``Settings().app_env``.

    Returns:
        A configured structlog BoundLogger.
    """
    if app_env is None:
        app_env = Settings().app_env
    use_json = json_output or app_env == "production"
    level = log_level.upper()

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if use_json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            *shared_processors,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    library_level = logging.DEBUG if level == "DEBUG" else logging.WARNING
    for name in _LIBRARY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)

    return structlog.get_logger()


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a named structlog logger, configuring defaults on first use."""
    if not structlog.is_configured():
        configure_logging()

    return structlog.get_logger(logger_name=name)
