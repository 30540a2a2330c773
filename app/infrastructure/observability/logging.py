"""
Structured logging setup for the True Companions API.
Provides JSON-formatted logs with consistent fields for production monitoring.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.stdlib import LoggerFactory


def setup_logging(log_level: str = "INFO") -> None:
    """
    Configure structured logging with JSON output.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            _drop_sensitive_fields,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper(), logging.INFO),
    )

    # Suppress noisy third-party loggers
    logging.getLogger("stripe").setLevel(logging.WARNING)
    logging.getLogger("psycopg.pool").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


SENSITIVE_LOG_FIELDS = frozenset({"contact_email", "mobile_number", "client_secret", "token"})


def _drop_sensitive_fields(logger, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Contact details and secrets never reach the log stream."""
    for key in SENSITIVE_LOG_FIELDS.intersection(event_dict):
        event_dict[key] = "[redacted]"
    return event_dict


def get_logger(name: str = None) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (usually __name__)
    """
    return structlog.get_logger(name)


def log_workflow_transition(
    entity: str,
    entity_id: Any,
    from_state: str | None,
    to_state: str,
    actor: str | None = None,
    transition: str | None = None,
):
    """Log a status transition with consistent fields."""
    logger = get_logger("workflow")
    logger.info(
        "Workflow transition applied",
        entity=entity,
        entity_id=entity_id,
        from_state=from_state,
        to_state=to_state,
        actor=actor,
        transition=transition,
        event_type="workflow_transition",
    )
