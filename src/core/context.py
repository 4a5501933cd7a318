"""Request-scoped correlation context.

A ``RequestContext`` is created once when a request enters the pipeline.
It captures the inbound correlation headers together with the monotonic
start token used to compute response latency. Instances are immutable and
owned by a single request; they live on ``request.state`` and are dropped
with it.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field

from src.core import timer
from src.core.constants import (
    REQUEST_LANGUAGE_HEADER,
    TRANS_ID_HEADER,
    TRANS_PARENT_ID_HEADER,
)


@dataclass(frozen=True, slots=True)
class RequestContext:
    """Correlation identifiers and timing for one request.

    Attributes:
        trans_id: Transaction id from the ``x-trans-id`` header.
        trans_parent_id: Parent transaction id from ``x-trans-parent-id``.
        language: Raw ``x-request-or-lang`` header value, if any.
        started_at: Monotonic start token from ``timer.start()``.
    """

    trans_id: str | None = None
    trans_parent_id: str | None = None
    language: str | None = None
    started_at: timer.StartToken = field(default_factory=timer.start)

    @classmethod
    def from_headers(cls, headers: Mapping[str, str]) -> "RequestContext":
        """Build a context from inbound headers and start the request timer.

        Missing headers yield ``None`` fields; no error is raised.

        Args:
            headers: Request headers. Starlette ``Headers`` match names
                case-insensitively.

        Returns:
            RequestContext: A new context with a fresh start token.
        """
        return cls(
            trans_id=headers.get(TRANS_ID_HEADER),
            trans_parent_id=headers.get(TRANS_PARENT_ID_HEADER),
            language=headers.get(REQUEST_LANGUAGE_HEADER),
            started_at=timer.start(),
        )

    def elapsed_ms(self) -> float:
        """Milliseconds since this request entered the pipeline."""
        return timer.elapsed_ms(self.started_at)

    def log_fields(self) -> dict[str, str]:
        """Correlation fields suitable for ``logger.contextualize``."""
        fields = {
            "trans_id": self.trans_id,
            "trans_parent_id": self.trans_parent_id,
        }
        return {key: value for key, value in fields.items() if value is not None}
