"""Structured logging utilities with correlation ID support.

Provides:
- Correlation ID context management for request tracing
- Structured logging formatter for consistent log output
- Helper for logging reservation workflow transitions

Usage:
    from lilycrest_shared.utils.logging import get_logger, set_correlation_id

    # In middleware/request handler:
    set_correlation_id(request.headers.get("X-Correlation-ID"))

    # In service code:
    logger = get_logger(__name__)
    logger.info("Approving schedule", extra={"reservation_id": "65a1..."})
"""

import logging
import uuid
from contextvars import ContextVar
from typing import Any

# Context variable for correlation ID - thread-safe and async-safe
_correlation_id: ContextVar[str | None] = ContextVar("correlation_id", default=None)

NO_CORRELATION_ID = "no-correlation-id"


def generate_correlation_id() -> str:
    return str(uuid.uuid4())


def set_correlation_id(correlation_id: str | None = None) -> str:
    """Set the correlation ID for the current request context.

    Args:
        correlation_id: Optional existing correlation ID. If None, generates new one.

    Returns:
        The correlation ID that was set
    """
    cid = correlation_id or generate_correlation_id()
    _correlation_id.set(cid)
    return cid


def get_correlation_id() -> str | None:
    return _correlation_id.get()


def clear_correlation_id() -> None:
    _correlation_id.set(None)


class CorrelationIdFilter(logging.Filter):
    """Logging filter that adds correlation_id to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or NO_CORRELATION_ID
        return True


class StructuredFormatter(logging.Formatter):
    """Formatter that prefixes every line with the correlation ID."""

    def format(self, record: logging.LogRecord) -> str:
        if not hasattr(record, "correlation_id"):
            record.correlation_id = get_correlation_id() or NO_CORRELATION_ID

        base = super().format(record)

        # Prefix for easy grep/filtering
        return f"[{record.correlation_id}] {base}"


def get_logger(name: str) -> logging.Logger:
    """Get a logger with correlation ID support.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    if not any(isinstance(f, CorrelationIdFilter) for f in logger.filters):
        logger.addFilter(CorrelationIdFilter())

    return logger


def configure_logging(level: str | int = logging.INFO) -> None:
    """Install the structured formatter on the root logger.

    Safe to call more than once; an existing structured handler is reused.
    """
    root = logging.getLogger()
    root.setLevel(level)
    for handler in root.handlers:
        if isinstance(handler.formatter, StructuredFormatter):
            return
    handler = logging.StreamHandler()
    handler.setFormatter(
        StructuredFormatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    )
    root.addHandler(handler)


def log_reservation_transition(
    logger: logging.Logger,
    transition: str,
    *,
    reservation_id: str,
    actor_id: str | None = None,
    branch: str | None = None,
    reason: str | None = None,
    error: str | None = None,
    **extra: Any,
) -> None:
    """Log a reservation workflow transition with structured context.

    Args:
        logger: Logger instance
        transition: Transition name (e.g., "approve_schedule", "verify_payment")
        reservation_id: Reservation the transition applies to
        actor_id: User who performed the transition
        branch: Branch of the reservation's room
        reason: Reason given for rejections
        error: Error message if the transition was refused
        **extra: Additional context fields
    """
    context: dict[str, Any] = {
        "transition": transition,
        "reservation_id": reservation_id,
    }

    if actor_id:
        context["actor_id"] = actor_id
    if branch:
        context["branch"] = branch
    if reason:
        context["reason"] = reason
    if error:
        context["error"] = error

    context.update(extra)

    msg_parts = [f"Reservation transition: {transition}"]
    for key, value in context.items():
        if key != "transition":
            msg_parts.append(f"{key}={value}")

    message = " | ".join(msg_parts)

    if error:
        logger.warning(message, extra=context)
    else:
        logger.info(message, extra=context)
