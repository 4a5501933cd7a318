"""Envelope construction.

``EnvelopeBuilder`` is a pure transformation from (request context, source
label, elapsed time, payload or errors) to an envelope model. It holds no
per-request state; one instance is created per responder from settings and
can be shared freely.
"""

from src.api.schemas.envelope import EnvelopeMeta, ErrorEnvelope, SuccessEnvelope
from src.core.constants import DEFAULT_LANGUAGE
from src.core.context import RequestContext
from src.core.outcomes import ErrorInput, Outcome, normalize_errors, reason_phrase
from src.core.types import JsonValue


class EnvelopeBuilder:
    """Builds ``meta`` blocks and success/error envelopes.

    Args:
        default_language: Language reported when the request did not send
            ``x-request-or-lang``.
    """

    def __init__(self, default_language: str = DEFAULT_LANGUAGE) -> None:
        self.default_language = default_language

    def build_meta(
        self, context: RequestContext, source: str, elapsed_ms: float
    ) -> EnvelopeMeta:
        """Assemble the meta block.

        Args:
            context: Correlation context of the request.
            source: Label of the component producing the response.
            elapsed_ms: Milliseconds since the request entered the pipeline.

        Returns:
            EnvelopeMeta: The meta block. Missing correlation ids stay None.
        """
        return EnvelopeMeta(
            trans_id=context.trans_id,
            trans_parent_id=context.trans_parent_id,
            language=context.language or self.default_language,
            source=source,
            response_time=elapsed_ms,
        )

    def build_success(
        self,
        context: RequestContext,
        source: str,
        elapsed_ms: float,
        payload: JsonValue | object = None,
    ) -> SuccessEnvelope:
        """Wrap a success payload, which may be None."""
        return SuccessEnvelope(
            meta=self.build_meta(context, source, elapsed_ms),
            response=payload,
        )

    def build_error(
        self,
        context: RequestContext,
        source: str,
        elapsed_ms: float,
        error: ErrorInput | None,
        status: Outcome | int = Outcome.SERVER_ERROR,
    ) -> ErrorEnvelope:
        """Wrap error input into an error envelope.

        A sequence of messages is kept in order; a single value becomes a
        one-element list. An empty input falls back to the reason phrase of
        ``status`` so ``exception`` is never empty.

        Args:
            context: Correlation context of the request.
            source: Label of the component producing the response.
            elapsed_ms: Milliseconds since the request entered the pipeline.
            error: One message or an ordered sequence of messages.
            status: Outcome being emitted, or the raw status code for codes
                outside the outcome table. Decides the fallback message.

        Returns:
            ErrorEnvelope: The error envelope.
        """
        status_code = status.status_code if isinstance(status, Outcome) else status
        return ErrorEnvelope(
            meta=self.build_meta(context, source, elapsed_ms),
            exception=normalize_errors(error, reason_phrase(status_code)),
        )
