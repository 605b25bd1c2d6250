"""
Structured logging helpers for motor-mongoose.

Adds a correlation ID and the current collection context to every record
emitted through the contextual logger.
"""

import contextvars
import logging
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from typing import Any

_correlation_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "correlation_id", default=None
)

_collection_context: contextvars.ContextVar[dict[str, Any] | None] = contextvars.ContextVar(
    "collection_context", default=None
)


def get_correlation_id() -> str | None:
    return _correlation_id.get()


def set_correlation_id(correlation_id: str | None = None) -> str:
    """
    Set a correlation ID in the current context.

    Args:
        correlation_id: Optional correlation ID (generates new one if None)

    Returns:
        The correlation ID that was set
    """
    if correlation_id is None:
        correlation_id = str(uuid.uuid4())
    _correlation_id.set(correlation_id)
    return correlation_id


def clear_correlation_id() -> None:
    _correlation_id.set(None)


def set_collection_context(
    collection: str | None = None, **kwargs: Any
) -> contextvars.Token[dict[str, Any] | None]:
    """
    Attach collection details to log records emitted from this context.

    Args:
        collection: Collection name
        **kwargs: Additional context (db_name, operation, etc.)

    Returns:
        Token that restores the previous context when passed to
        clear_collection_context()
    """
    return _collection_context.set({"collection": collection, **kwargs})


def clear_collection_context(
    token: contextvars.Token[dict[str, Any] | None] | None = None,
) -> None:
    if token is not None:
        _collection_context.reset(token)
    else:
        _collection_context.set(None)


@contextmanager
def collection_context(collection: str, **kwargs: Any) -> Iterator[None]:
    """
    Scope collection details to the enclosed block.

    Nested scopes restore the outer context on exit.
    """
    token = set_collection_context(collection, **kwargs)
    try:
        yield
    finally:
        clear_collection_context(token)


def get_logging_context() -> dict[str, Any]:
    """Current timestamp, correlation ID and collection context."""
    context: dict[str, Any] = {
        "timestamp": datetime.now().isoformat(),
    }

    correlation_id = get_correlation_id()
    if correlation_id:
        context["correlation_id"] = correlation_id

    scoped = _collection_context.get()
    if scoped:
        context.update(scoped)

    return context


class ContextualLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that merges the logging context into ``extra``."""

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        context = get_logging_context()
        extra = kwargs.get("extra", {})
        if extra:
            context.update(extra)
        kwargs["extra"] = context
        return msg, kwargs


def get_logger(name: str) -> ContextualLoggerAdapter:
    """
    Get a contextual logger that automatically adds correlation ID and context.

    Args:
        name: Logger name (typically __name__)
    """
    return ContextualLoggerAdapter(logging.getLogger(name), {})


def log_operation(
    logger: logging.Logger | logging.LoggerAdapter,
    operation: str,
    level: int = logging.DEBUG,
    success: bool = True,
    duration_ms: float | None = None,
    **context: Any,
) -> None:
    """
    Log an operation with structured context.

    Args:
        logger: Logger instance
        operation: Operation name
        level: Log level
        success: Whether operation succeeded
        duration_ms: Operation duration in milliseconds
        **context: Additional context
    """
    log_context = get_logging_context()
    log_context.update({"operation": operation, "success": success})
    if duration_ms is not None:
        log_context["duration_ms"] = round(duration_ms, 2)
    if context:
        log_context.update(context)

    message = f"Operation: {operation}" if success else f"Operation failed: {operation}"
    if duration_ms is not None:
        message += f" (duration: {duration_ms:.2f}ms)"

    logger.log(level, message, extra=log_context)
