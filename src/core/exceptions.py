"""Exception hierarchy for the envelope layer.

The envelope layer formats errors, it does not invent them. The exceptions
here exist so that code deep inside a request (guards, dependencies,
handlers) can hand an outcome to the exception handlers instead of
returning a response directly.

Key components:
- **ErrorCode enum**: Standardized error identifiers for logging
- **Severity enum**: Error classification for log levels
- **EnvelopeLayerError**: Base exception with code, severity and context
- **OutcomeError**: Carries an ``Outcome`` plus error messages to the handlers
- **GuardRejectedError**: Raised by validation guards on missing input
- **ResponseAlreadySentError**: A second outcome fired for one request
"""

from enum import Enum

from src.core.outcomes import ErrorInput, Outcome, normalize_errors, status_label
from src.core.types import LogContext


class ErrorCode(Enum):
    """Standardized error codes used in log records."""

    INTERNAL_ERROR = "INTERNAL_ERROR"
    """An unexpected internal error occurred in the system."""

    OUTCOME = "OUTCOME"
    """A handler requested an error outcome by raising."""

    MISSING_REQUIRED_INPUT = "MISSING_REQUIRED_INPUT"
    """A guard found required parameters or headers absent."""

    RESPONSE_ALREADY_SENT = "RESPONSE_ALREADY_SENT"
    """More than one outcome was invoked for the same request."""


class Severity(Enum):
    """Severity levels for errors raised by the envelope layer."""

    LOW = "LOW"
    """Expected errors caused by client input."""

    MEDIUM = "MEDIUM"
    """Errors that affect a single request."""

    HIGH = "HIGH"
    """Programming errors in the calling code."""

    CRITICAL = "CRITICAL"
    """Failures requiring immediate attention."""


class EnvelopeLayerError(Exception):
    """Base exception class for the envelope layer.

    Args:
        error_code: Unique identifier for the error type (string or ErrorCode enum)
        message: Human-readable error message
        severity: Severity level of the error (defaults to MEDIUM)
        context: Additional context information about the error
    """

    def __init__(
        self,
        error_code: str | ErrorCode,
        message: str,
        severity: Severity = Severity.MEDIUM,
        context: LogContext | None = None,
    ) -> None:
        self.error_code = (
            error_code.value if isinstance(error_code, ErrorCode) else error_code
        )
        self.message = message
        self.severity = severity
        self.context = context or {}
        super().__init__(message)

    @property
    def is_expected(self) -> bool:
        """Whether the error is part of normal operation (LOW or MEDIUM)."""
        return self.severity in (Severity.LOW, Severity.MEDIUM)

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        class_name = self.__class__.__name__
        context_str = f", context={self.context}" if self.context else ""
        return (
            f"{class_name}(error_code='{self.error_code}', "
            f"message='{self.message}', severity={self.severity.value}{context_str})"
        )


class OutcomeError(EnvelopeLayerError):
    """Request an error outcome from anywhere inside the request.

    The exception handlers translate this into the matching outcome method
    of the request's responder.

    Args:
        outcome: The error outcome to emit. Success outcomes are rejected.
        errors: A single message or an ordered sequence of messages.
        error_code: Error code for logging (defaults to OUTCOME)
        severity: Severity level (defaults to LOW)
        context: Additional context information about the error

    Raises:
        ValueError: If ``outcome`` is a success outcome.
    """

    def __init__(
        self,
        outcome: Outcome,
        errors: ErrorInput | None = None,
        error_code: str | ErrorCode = ErrorCode.OUTCOME,
        severity: Severity = Severity.LOW,
        context: LogContext | None = None,
    ) -> None:
        if outcome.is_success:
            msg = f"{outcome.name} is not an error outcome"
            raise ValueError(msg)
        self.outcome = outcome
        self.errors = normalize_errors(errors, outcome.reason)
        super().__init__(error_code, "; ".join(self.errors), severity, context)


class GuardRejectedError(OutcomeError):
    """Raised by a validation guard when required input is missing.

    Args:
        errors: The missing-input messages, in declaration order.
        context: Additional context information about the error
    """

    def __init__(
        self,
        errors: ErrorInput,
        context: LogContext | None = None,
    ) -> None:
        super().__init__(
            Outcome.BAD_REQUEST,
            errors,
            ErrorCode.MISSING_REQUIRED_INPUT,
            Severity.LOW,
            context,
        )


class ResponseAlreadySentError(EnvelopeLayerError):
    """Raised when a second outcome is invoked on the same responder.

    Args:
        first: Outcome (or raw status code) that was already emitted.
        second: Outcome (or raw status code) attempted afterwards.
    """

    def __init__(self, first: Outcome | int, second: Outcome | int) -> None:
        self.first = first
        self.second = second
        first_label, second_label = status_label(first), status_label(second)
        super().__init__(
            ErrorCode.RESPONSE_ALREADY_SENT,
            f"Response already sent as {first_label}; refusing {second_label}",
            Severity.HIGH,
            {"first": first_label, "second": second_label},
        )
