# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Structured logging for PartnerHub.

Domain modules log with `logging.getLogger(__name__)`. setup_logging routes
those records through the same structlog processor chain as structlog
loggers, so every line carries the learner and College ids bound with
log_context. Output is JSON outside development.

Example:
    >>> setup_logging(get_settings())
    >>> with log_context(user_id="learner-1", college_id="c-1"):
    ...     await aggregator.record_lecture_event(...)
"""

import logging
import sys
from contextlib import contextmanager
from typing import TYPE_CHECKING, Iterator

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

if TYPE_CHECKING:
    from partnerhub.core.config.settings import Settings

PACKAGE_LOGGER = "partnerhub"


def add_partner_mode(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Flag lines emitted while a learner is branded as a College."""
    if "user_id" in event_dict:
        event_dict.setdefault("partner_mode", event_dict.get("college_id") is not None)
    return event_dict


def _shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        add_partner_mode,
    ]


def setup_logging(settings: "Settings") -> None:
    """Configure structlog and the partnerhub stdlib logger.

    Safe to call more than once; the package handler is replaced, not added.

    Args:
        settings: Application settings containing log_level and debug flag.
    """
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)
    shared = _shared_processors()

    renderer: list[Processor]
    if settings.is_development or settings.debug:
        renderer = [structlog.dev.ConsoleRenderer(colors=True)]
    else:
        renderer = [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *renderer],
        )
    )

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.handlers = [handler]
    package_logger.setLevel(log_level)
    package_logger.propagate = False

    for logger_name in ["sqlalchemy", "asyncio"]:
        logging.getLogger(logger_name).setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger; pass a name under `partnerhub` to use its handler."""
    return structlog.get_logger(name)


@contextmanager
def log_context(**ids: str | None) -> Iterator[None]:
    """Bind ids to every log line inside the block.

    None values are skipped so optional ids (a learner outside partner mode
    has no college_id) can be passed straight through. Previous bindings are
    restored on exit.

    Example:
        >>> with log_context(user_id=session.user_id, college_id=None):
        ...     logger.info("Recording lecture event")
    """
    bound = {key: value for key, value in ids.items() if value is not None}
    with structlog.contextvars.bound_contextvars(**bound):
        yield


def bind_context(**kwargs: object) -> None:
    """Bind context variables to all subsequent log calls in this context."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()
