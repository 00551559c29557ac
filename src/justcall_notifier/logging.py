"""Structured logging for send attempts, with secret and phone redaction."""

from __future__ import annotations

import uuid
from contextvars import ContextVar
from typing import Any

import structlog

__all__ = [
    "configure_logging",
    "correlation_id_var",
    "get_logger",
    "mask_phone",
    "new_correlation_id",
]

# Context variable for per-attempt correlation
correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")

_SECRET_KEYS = frozenset({"api_key", "api_secret", "authorization", "auth"})
_PHONE_KEYS = frozenset({"recipient", "recipient_phone", "contact_number", "to"})


def new_correlation_id() -> str:
    """Generate and set a new correlation ID for the current context."""
    cid = str(uuid.uuid4())
    correlation_id_var.set(cid)
    return cid


def mask_phone(phone: str) -> str:
    """Keep the country/area prefix only: ``+34600111222`` -> ``+34600***``."""
    if not phone:
        return phone
    return phone[:6] + "***"


def _add_correlation_id(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Inject correlation_id into every log entry."""
    cid = correlation_id_var.get("")
    if cid:
        event_dict["correlation_id"] = cid
    return event_dict


def _redact(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Never let credentials or full recipient numbers reach the log sink."""
    for key in event_dict.keys() & _SECRET_KEYS:
        event_dict[key] = "***"
    for key in event_dict.keys() & _PHONE_KEYS:
        value = event_dict[key]
        if isinstance(value, str):
            event_dict[key] = mask_phone(value)
    return event_dict


def configure_logging(*, json_output: bool = True, level: str = "INFO") -> None:
    """Configure structlog for the notifier.

    Args:
        json_output: True for JSON (production), False for console (dev).
        level: Log level string.
    """
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        _add_correlation_id,
        _redact,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level.lower()),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(**kwargs: Any) -> structlog.BoundLogger:
    """Get a bound logger with optional initial context."""
    return structlog.get_logger(**kwargs)  # type: ignore[no-any-return]
