"""Semantic response outcomes and their fixed HTTP status codes.

Every response leaving the envelope layer is produced through exactly one
``Outcome``. The enum doubles as the status table: each member carries the
numeric status code emitted on the wire, and the mapping is fixed at import
time.

This module also normalizes the error input accepted by error outcomes.
Callers may hand over a single message or an ordered sequence of messages;
both are reduced to a ``list[str]`` once, at the boundary.
"""

from collections.abc import Sequence
from enum import Enum
from http import HTTPStatus

# A single message, or an ordered sequence of messages
type ErrorInput = str | Sequence[str]


class Outcome(Enum):
    """Named response outcomes bound to HTTP status codes."""

    OK = 200
    CREATED = 201
    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    FORBIDDEN = 403
    NOT_FOUND = 404
    UNSUPPORTED_ACTION = 405
    VALIDATION_FAILED = 422
    SERVER_ERROR = 500

    @property
    def status_code(self) -> int:
        """HTTP status code emitted for this outcome."""
        return self.value

    @property
    def is_success(self) -> bool:
        """Whether this outcome carries a payload rather than errors."""
        return self in (Outcome.OK, Outcome.CREATED)

    @property
    def reason(self) -> str:
        """Standard HTTP reason phrase for the status code."""
        return reason_phrase(self.value)

    @classmethod
    def from_status_code(cls, status_code: int) -> "Outcome | None":
        """Look up the outcome for a status code.

        Args:
            status_code: Numeric HTTP status code.

        Returns:
            Outcome | None: The matching outcome, or None for unmapped codes.
        """
        try:
            return cls(status_code)
        except ValueError:
            return None


# Reason used for status codes that HTTPStatus does not know
UNREGISTERED_STATUS_REASON = "Error"


def reason_phrase(status_code: int) -> str:
    """Return the standard reason phrase for ``status_code``.

    Codes missing from the IANA registry (e.g. 599) get ``"Error"``.
    """
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return UNREGISTERED_STATUS_REASON


def status_label(status: Outcome | int) -> str:
    """Name of an outcome, or the bare code for statuses outside the table."""
    return status.name if isinstance(status, Outcome) else str(status)


def normalize_errors(error: ErrorInput | None, fallback: str) -> list[str]:
    """Normalize an error input into an ordered, non-empty list of messages.

    Sequences (other than strings) are kept in order; anything else is
    wrapped into a one-element list. Non-string items are rendered with
    ``str()``.

    Args:
        error: A single error value or a sequence of them.
        fallback: Message used when the input is an empty sequence or None.

    Returns:
        list[str]: The error messages, never empty.

    Examples:
        >>> normalize_errors("boom", "Bad Request")
        ['boom']
        >>> normalize_errors(["a", "b"], "Bad Request")
        ['a', 'b']
        >>> normalize_errors([], "Bad Request")
        ['Bad Request']
    """
    if error is None:
        return [fallback]
    if isinstance(error, str):
        return [error]
    if isinstance(error, Sequence) and not isinstance(error, bytes | bytearray):
        messages = [item if isinstance(item, str) else str(item) for item in error]
        return messages or [fallback]
    return [str(error)]
