"""Structured logging for postcollections.

structlog renders colored console lines in development and one JSON object
per line everywhere else. Values bound with ``LoggingContext`` or
``bind_correlation_id`` are merged into every entry logged while they are
bound, so a collection operation can be traced through the service and the
repository.
"""

import logging
import sys
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from postcollections.core.config import Settings, get_settings

DEFAULT_LOGGER_NAME = "postcollections"


def add_correlation_id(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Give entries logged outside a bound correlation ID a fresh one."""
    event_dict.setdefault("correlation_id", f"cid_{uuid.uuid4().hex[:12]}")
    return event_dict


def add_logger_name(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    # PrintLogger has no name; structlog.stdlib.add_logger_name would fail on it
    event_dict["logger"] = getattr(logger, "name", DEFAULT_LOGGER_NAME)
    return event_dict


def rename_message_field(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Store the event text under 'message' for log collectors."""
    if "event" in event_dict:
        event_dict["message"] = event_dict.pop("event")
    return event_dict


def _build_processors(settings: Settings) -> list[Processor]:
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        add_correlation_id,
    ]

    if settings.is_development or settings.log_format == "console":
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=True,
                exception_formatter=structlog.dev.plain_traceback,
            )
        )
    else:
        processors.append(structlog.processors.format_exc_info)
        processors.append(rename_message_field)
        processors.append(structlog.processors.JSONRenderer())

    return processors


def configure_logging(settings: Settings | None = None) -> None:
    """Configure structlog and the standard library root logger.

    Args:
        settings: Optional settings instance. If not provided, will load from environment.
    """
    settings = settings or get_settings()
    level = logging.getLevelName(settings.log_level)
    is_console = settings.is_development or settings.log_format == "console"

    structlog.configure(
        processors=_build_processors(settings),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        # Console configuration may be swapped at runtime by the CLI
        cache_logger_on_first_use=not is_console,
    )

    # SQLAlchemy and aiosqlite log through the standard library
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.db_echo else logging.WARNING
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger, named 'postcollections' by default."""
    return structlog.get_logger(name or DEFAULT_LOGGER_NAME)


@contextmanager
def LoggingContext(**values: Any) -> Iterator[None]:  # noqa: N802
    """Bind values to every entry logged inside the block.

    Example:
        with LoggingContext(collection_id=collection.id):
            logger.info("Collection edited")  # Will include collection_id

    Values bound by an enclosing block are restored on exit.
    """
    with structlog.contextvars.bound_contextvars(**values):
        yield


def bind_correlation_id(correlation_id: str) -> None:
    """Bind a correlation ID to the current logging context."""
    structlog.contextvars.bind_contextvars(correlation_id=correlation_id)


def clear_context() -> None:
    """Clear all context variables from the current logging context."""
    structlog.contextvars.clear_contextvars()
