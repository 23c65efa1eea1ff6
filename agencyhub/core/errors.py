"""Error classification utilities for the automation engine.

Engine operations are non-fatal by contract: unknown identifiers return
``False`` and malformed rules fail closed. The helpers here classify the
exceptions that do surface (from rule evaluation, side-effect ports or
request validation) so they can be logged and reported consistently.
"""

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ValidationError


class ErrorCategory(Enum):
    """Categories of errors that can occur while running automations."""

    RULE_NOT_FOUND = "rule_not_found"
    NOTIFICATION_NOT_FOUND = "notification_not_found"
    INVALID_RULE = "invalid_rule"
    CONDITION_EVALUATION_FAILED = "condition_evaluation_failed"
    ACTION_FAILED = "action_failed"
    NETWORK_ERROR = "network_error"
    UNKNOWN = "unknown"


class ErrorSeverity(Enum):
    """Severity levels for errors."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCode:
    """Error codes for specific error conditions."""

    # Lookup errors
    ERR_RULE_NOT_FOUND = "ERR_RULE_NOT_FOUND"
    ERR_NOTIFICATION_NOT_FOUND = "ERR_NOTIFICATION_NOT_FOUND"

    # Rule data errors
    ERR_INVALID_RULE = "ERR_INVALID_RULE"

    # Execution errors
    ERR_CONDITION_EVALUATION_FAILED = "ERR_CONDITION_EVALUATION_FAILED"
    ERR_ACTION_FAILED = "ERR_ACTION_FAILED"
    ERR_NETWORK_ERROR = "ERR_NETWORK_ERROR"

    # Generic errors
    ERR_UNKNOWN = "ERR_UNKNOWN"


class ErrorResponse(BaseModel):
    """Structured error response with user-friendly messaging."""

    code: str
    message: str
    suggestion: str
    severity: ErrorSeverity


_ERROR_PATTERNS: dict[Literal["network", "evaluation"], dict[str, list[str] | set[str]]] = {
    "network": {
        "phrases": [
            "connection",
            "timeout",
            "network",
            "503",
            "502",
            "504",
            "unreachable",
        ],
        "exception_types": {"ConnectionError", "TimeoutError"},
    },
    "evaluation": {
        "phrases": [],
        "exception_types": {"TypeError", "ValueError", "AttributeError", "KeyError"},
    },
}


def _match_error_pattern(
    *,
    error_str: str,
    exception_type: str,
    pattern_type: Literal["network", "evaluation"],
) -> bool:
    """Return True if the error matches the configured pattern type."""
    patterns = _ERROR_PATTERNS[pattern_type]
    return any(phrase in error_str for phrase in patterns["phrases"]) or exception_type in patterns["exception_types"]


def not_found_response(category: ErrorCategory, identifier: str) -> ErrorResponse:
    """Build the response for an unknown rule or notification identifier."""
    if category == ErrorCategory.RULE_NOT_FOUND:
        return ErrorResponse(
            code=ErrorCode.ERR_RULE_NOT_FOUND,
            message=f"Automation rule '{identifier}' not found.",
            suggestion="List the automation rules to find a valid identifier.",
            severity=ErrorSeverity.LOW,
        )
    return ErrorResponse(
        code=ErrorCode.ERR_NOTIFICATION_NOT_FOUND,
        message=f"Notification '{identifier}' not found.",
        suggestion="The notification may have been deleted or cleared.",
        severity=ErrorSeverity.LOW,
    )


def classify_automation_error(
    exception: Exception,
    *,
    stage: Literal["condition", "action"] | None = None,
) -> ErrorResponse:
    """Classify an error and return a structured response with recovery suggestions.

    Args:
        exception: The exception raised while handling an automation
        stage: Pipeline stage the exception escaped from, when known

    Returns:
        ErrorResponse with code, message, suggestion, and severity
    """
    error_str = str(exception).lower()
    exception_type = type(exception).__name__

    if isinstance(exception, ValidationError):
        return ErrorResponse(
            code=ErrorCode.ERR_INVALID_RULE,
            message="The automation rule data is invalid.",
            suggestion="Check the trigger type, condition fields and action parameters.",
            severity=ErrorSeverity.LOW,
        )

    if _match_error_pattern(error_str=error_str, exception_type=exception_type, pattern_type="network"):
        return ErrorResponse(
            code=ErrorCode.ERR_NETWORK_ERROR,
            message="A downstream service could not be reached.",
            suggestion="The automation will run again on the next matching event.",
            severity=ErrorSeverity.MEDIUM,
        )

    if stage == "condition" or (
        stage is None
        and _match_error_pattern(error_str=error_str, exception_type=exception_type, pattern_type="evaluation")
    ):
        return ErrorResponse(
            code=ErrorCode.ERR_CONDITION_EVALUATION_FAILED,
            message="An automation rule could not be evaluated and was skipped.",
            suggestion="Review the rule conditions for malformed values.",
            severity=ErrorSeverity.LOW,
        )

    if stage == "action":
        return ErrorResponse(
            code=ErrorCode.ERR_ACTION_FAILED,
            message="An automation action failed; the remaining actions still ran.",
            suggestion="Check the action parameters and the integration it calls.",
            severity=ErrorSeverity.MEDIUM,
        )

    return ErrorResponse(
        code=ErrorCode.ERR_UNKNOWN,
        message="An unexpected error occurred.",
        suggestion="Please try again later. If the problem persists, contact support.",
        severity=ErrorSeverity.MEDIUM,
    )
