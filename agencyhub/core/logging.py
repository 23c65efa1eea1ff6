"""Logging and observability configuration using Pydantic Logfire.

This module provides standardized logging utilities and configuration.
All modules should use Python's standard logging library (logging.getLogger(__name__)),
and Logfire will automatically capture and enrich these logs.

Standard usage:
    import logging
    logger = logging.getLogger(__name__)
    logger.info("Message", extra={"key": "value"})

Structured logging utilities:
    log_with_context(logger, "info", "Rule matched", rule_id="auto-1", task_id="t-1")
"""

import logging

import logfire
from fastapi import FastAPI

from agencyhub.core.config import settings


def configure_logfire() -> None:
    """Configure Pydantic Logfire with token from environment.

    Standard logging records are routed through Logfire so engine logs and
    spans end up in the same trace.
    """
    logfire.configure(
        token=settings.logfire_token,
        service_name="agencyhub",
        service_version="0.1.0",
        environment=settings.environment,
        send_to_logfire="if-token-present",
    )
    logging.basicConfig(handlers=[logfire.LogfireLoggingHandler()], level=logging.INFO)

    logger = logging.getLogger(__name__)
    logger.info("Logfire configured successfully")


def instrument_fastapi(app: FastAPI) -> None:
    """Add Logfire instrumentation to FastAPI application."""
    logfire.instrument_fastapi(app)
    logger = logging.getLogger(__name__)
    logger.info("FastAPI instrumentation configured")


def span(name: str) -> logfire.LogfireSpan:
    """Create a custom span for service layer functions.

    Usage:
        with span("automation_service.dispatch"):
            # Your service logic here
            pass
    """
    return logfire.span(name)


def log_with_context(
    logger: logging.Logger,
    level: str,
    message: str,
    **context: object,
) -> None:
    """Log a message with structured context fields.

    Args:
        logger: Logger instance to use
        level: Log level ("debug", "info", "warning", "error", "critical")
        message: Log message
        **context: Additional context fields (rule_id, task_id, trigger_type, etc.)

    Usage:
        log_with_context(logger, "info", "Rule matched", rule_id="auto-1", trigger_type="task_created")
    """
    log_method = getattr(logger, level.lower())
    log_method(message, extra=context)


def log_with_rule_context(
    logger: logging.Logger,
    level: str,
    message: str,
    rule_id: str | None = None,
    **extra: object,
) -> None:
    """Log a message with automation rule context.

    Args:
        logger: Logger instance to use
        level: Log level ("debug", "info", "warning", "error", "critical")
        message: Log message
        rule_id: Automation rule ID to include in context
        **extra: Additional context fields

    Usage:
        log_with_rule_context(logger, "warning", "Action failed", rule_id="auto-1", action_type="add_tag")
    """
    context = {"rule_id": rule_id, **extra} if rule_id else extra
    log_with_context(logger, level, message, **context)
