"""Request-scoped responders carrying the nine outcome methods.

A ``Responder`` is installed once per request by the ``app_response``
dependency. It owns everything one response needs: the request's
``RequestContext`` (correlation ids and start token), the source label of
the pipeline segment, and an ``EnvelopeBuilder``. Handlers and exception
handlers call exactly one outcome method on it, which measures latency,
builds the envelope and returns the JSON response with the outcome's
status code.

Usage::

    router = APIRouter(dependencies=[Depends(app_response("users"))])

    @router.get("/users/{user_id}")
    async def read_user(
        user_id: str,
        responder: Annotated[Responder, Depends(get_responder)],
    ) -> Response:
        user = await users.find(user_id)
        if user is None:
            return responder.not_found(f"User {user_id} not found")
        return responder.ok(user)
"""

from collections.abc import Callable

from fastapi import Request
from loguru import logger

from src.api.middleware.request_context import ensure_request_context
from src.api.schemas.envelope import Envelope
from src.api.utils.envelope import EnvelopeBuilder
from src.api.utils.responses import ORJSONResponse
from src.core.config import get_settings
from src.core.constants import TRANS_ID_HEADER
from src.core.context import RequestContext
from src.core.exceptions import ResponseAlreadySentError
from src.core.outcomes import ErrorInput, Outcome, status_label
from src.core.types import JsonValue

RESPONDER_STATE_ATTR = "responder"


class Responder:
    """Emits enveloped responses for one request.

    Args:
        context: Correlation context of the request.
        source: Label of the component producing responses.
        builder: Envelope builder.
        enforce_single_response: Raise ``ResponseAlreadySentError`` when a
            second outcome is invoked. When False the last call wins.
        echo_trans_id: Copy ``x-trans-id`` onto the response headers.
    """

    def __init__(
        self,
        context: RequestContext,
        source: str,
        builder: EnvelopeBuilder,
        *,
        enforce_single_response: bool = True,
        echo_trans_id: bool = True,
    ) -> None:
        self.context = context
        self.source = source
        self.builder = builder
        self.enforce_single_response = enforce_single_response
        self.echo_trans_id = echo_trans_id
        self.sent: Outcome | int | None = None

    def respond(
        self, outcome: Outcome, body: JsonValue | ErrorInput | object = None
    ) -> ORJSONResponse:
        """Emit ``outcome`` with ``body`` as payload or error input.

        Args:
            outcome: Outcome to emit; decides the status code and whether
                ``body`` is a payload or error input.
            body: Success payload, or one or more error messages.

        Returns:
            ORJSONResponse: The enveloped response.

        Raises:
            ResponseAlreadySentError: If an outcome was already emitted and
                single responses are enforced.
        """
        self._ensure_unsent(outcome)

        elapsed_ms = self.context.elapsed_ms()
        envelope: Envelope
        if outcome.is_success:
            envelope = self.builder.build_success(
                self.context, self.source, elapsed_ms, body
            )
        else:
            envelope = self.builder.build_error(
                self.context, self.source, elapsed_ms, body, outcome
            )
        return self._emit(outcome, envelope, elapsed_ms)

    def respond_status(
        self, status_code: int, error: ErrorInput | None = None
    ) -> ORJSONResponse:
        """Emit an error envelope for a raw HTTP status code.

        Error codes in the outcome table go through ``respond``. Any other
        code (429, 503, ...) keeps its value on the wire, and an empty
        ``error`` falls back to that code's reason phrase.

        Args:
            status_code: HTTP status code to emit.
            error: One or more error messages.

        Returns:
            ORJSONResponse: The enveloped response.

        Raises:
            ResponseAlreadySentError: If an outcome was already emitted and
                single responses are enforced.
        """
        outcome = Outcome.from_status_code(status_code)
        if outcome is not None and not outcome.is_success:
            return self.respond(outcome, error)

        self._ensure_unsent(status_code)
        elapsed_ms = self.context.elapsed_ms()
        envelope = self.builder.build_error(
            self.context, self.source, elapsed_ms, error, status_code
        )
        return self._emit(status_code, envelope, elapsed_ms)

    def _ensure_unsent(self, attempted: Outcome | int) -> None:
        if self.sent is not None and self.enforce_single_response:
            raise ResponseAlreadySentError(self.sent, attempted)

    def _emit(
        self, status: Outcome | int, envelope: Envelope, elapsed_ms: float
    ) -> ORJSONResponse:
        status_code = status.status_code if isinstance(status, Outcome) else status
        self.sent = status
        logger.debug(
            "Responding with {}",
            status_label(status),
            outcome=status_label(status),
            status_code=status_code,
            source=self.source,
            duration_ms=round(elapsed_ms, 3),
        )

        headers = None
        if self.echo_trans_id and self.context.trans_id is not None:
            headers = {TRANS_ID_HEADER: self.context.trans_id}

        return ORJSONResponse(
            content=envelope, status_code=status_code, headers=headers
        )

    def reset(self) -> None:
        """Forget the emitted outcome.

        Only for exception handlers: a response built by an outcome method
        is discarded when the handler raises before returning it.
        """
        self.sent = None

    # Success outcomes

    def ok(self, data: JsonValue | object = None) -> ORJSONResponse:
        """200 with ``data`` as the response payload."""
        return self.respond(Outcome.OK, data)

    def created(self, data: JsonValue | object = None) -> ORJSONResponse:
        """201 with ``data`` as the response payload."""
        return self.respond(Outcome.CREATED, data)

    # Error outcomes

    def bad_request(self, error: ErrorInput | None = None) -> ORJSONResponse:
        """400 with the given error message(s)."""
        return self.respond(Outcome.BAD_REQUEST, error)

    def unauthorized(self, error: ErrorInput | None = None) -> ORJSONResponse:
        """401 with the given error message(s)."""
        return self.respond(Outcome.UNAUTHORIZED, error)

    def forbidden(self, error: ErrorInput | None = None) -> ORJSONResponse:
        """403 with the given error message(s)."""
        return self.respond(Outcome.FORBIDDEN, error)

    def not_found(self, error: ErrorInput | None = None) -> ORJSONResponse:
        """404 with the given error message(s)."""
        return self.respond(Outcome.NOT_FOUND, error)

    def unsupported_action(self, error: ErrorInput | None = None) -> ORJSONResponse:
        """405 with the given error message(s)."""
        return self.respond(Outcome.UNSUPPORTED_ACTION, error)

    def invalid(self, error: ErrorInput | None = None) -> ORJSONResponse:
        """422 with the given error message(s)."""
        return self.respond(Outcome.VALIDATION_FAILED, error)

    def server_error(self, error: ErrorInput | None = None) -> ORJSONResponse:
        """500 with the given error message(s)."""
        return self.respond(Outcome.SERVER_ERROR, error)


def install_responder(request: Request, source: str) -> Responder:
    """Create a responder for ``request`` and store it on ``request.state``.

    Args:
        request: The incoming request.
        source: Source label for every response of this request.

    Returns:
        Responder: The installed responder.
    """
    response_config = get_settings().response_config
    responder = Responder(
        ensure_request_context(request),
        source,
        EnvelopeBuilder(response_config.default_language),
        enforce_single_response=response_config.enforce_single_response,
        echo_trans_id=response_config.echo_trans_id,
    )
    setattr(request.state, RESPONDER_STATE_ATTR, responder)
    return responder


def app_response(source: str = "") -> Callable[[Request], Responder]:
    """Build a dependency installing a responder labelled ``source``.

    Add it to a router or route ``dependencies`` list ahead of any guard.

    Args:
        source: Source label reported in ``meta.source``.

    Returns:
        Callable[[Request], Responder]: FastAPI dependency.
    """

    def install(request: Request) -> Responder:
        return install_responder(request, source)

    install.__name__ = f"app_response_{source or 'default'}"
    return install


def get_responder(request: Request) -> Responder:
    """Return the request's responder, installing a default one if needed.

    Exception handlers may run before any dependency did (unknown routes,
    failures in middleware); those get a responder labelled with
    ``response_config.default_source``.

    Args:
        request: The incoming request.

    Returns:
        Responder: The responder for this request.
    """
    responder = getattr(request.state, RESPONDER_STATE_ATTR, None)
    if isinstance(responder, Responder):
        return responder
    return install_responder(request, get_settings().response_config.default_source)
