# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Structured logging configuration using structlog.

Services log through the standard library (``logging.getLogger(__name__)``
with %-style arguments); structlog renders those records through a
ProcessorFormatter installed on the root logger, so values bound with
bind_context() (the RPC method of the current request, for instance)
appear on every line. Output is JSON in production and colored console
output in development.

Example:
    >>> from integracao.utils.logging import setup_logging, bind_context
    >>> from integracao.core.config import get_settings
    >>> setup_logging(get_settings())
    >>> bind_context(rpc_method="create_course")
    >>> logging.getLogger("integracao.domains.course").info("Course created: trm_id=%s", 42)
"""

import logging
import sys
from typing import TYPE_CHECKING, TextIO

import structlog
from structlog.types import Processor

if TYPE_CHECKING:
    from integracao.core.config.settings import Settings

# Third-party loggers kept at WARNING
QUIET_LOGGERS = (
    "uvicorn",
    "uvicorn.access",
    "uvicorn.error",
    "httpx",
    "httpcore",
    "sqlalchemy",
    "aiosqlite",
    "asyncio",
)

# Root handler installed by the last setup_logging() call
_handler: logging.Handler | None = None


def setup_logging(settings: "Settings", stream: TextIO | None = None) -> None:
    """Configure structlog and route standard library records through it.

    Calling it again replaces the handler installed by the previous call.

    Args:
        settings: Application settings containing log_level and debug flag.
        stream: Output stream, stdout by default.
    """
    global _handler

    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.is_development or settings.debug:
        renderers: list[Processor] = [structlog.dev.ConsoleRenderer(colors=True)]
    else:
        renderers = [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ]

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *renderers,
            ],
        )
    )

    root = logging.getLogger()
    if _handler is not None:
        root.removeHandler(_handler)
    root.addHandler(handler)
    root.setLevel(log_level)
    _handler = handler

    for logger_name in QUIET_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)
    logging.getLogger("integracao").setLevel(log_level)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger that emits through the standard library.

    Example:
        >>> get_logger(__name__).info("Batch enrolled", count=3)
    """
    return structlog.get_logger(name)


def bind_context(**kwargs: object) -> None:
    """Bind values to every log line emitted in the current context.

    Example:
        >>> bind_context(rpc_method="enrol_student")
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Drop the values bound for the current request."""
    structlog.contextvars.clear_contextvars()
