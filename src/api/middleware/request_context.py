"""Request context middleware for correlation and latency measurement.

This middleware is the pipeline entry point. For each request it:

- Starts the request timer (monotonic clock)
- Captures ``x-trans-id``, ``x-trans-parent-id`` and ``x-request-or-lang``
  into a ``RequestContext`` stored on ``request.state``
- Binds the transaction ids to Loguru for the duration of the request

Responders installed later read the context from ``request.state`` so the
reported ``response-time`` covers the whole pipeline, not only the route.
"""

from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from src.core.context import RequestContext

CONTEXT_STATE_ATTR = "request_context"


def ensure_request_context(request: Request) -> RequestContext:
    """Return the request's context, creating it if the middleware did not.

    Args:
        request: The incoming request.

    Returns:
        RequestContext: The context stored on ``request.state``.
    """
    context = getattr(request.state, CONTEXT_STATE_ATTR, None)
    if isinstance(context, RequestContext):
        return context
    context = RequestContext.from_headers(request.headers)
    setattr(request.state, CONTEXT_STATE_ATTR, context)
    return context


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Middleware that creates the ``RequestContext`` for every request."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Process the request with context management.

        Args:
            request: The incoming request.
            call_next: The next middleware/endpoint.

        Returns:
            Response: The response from the rest of the pipeline.
        """
        context = RequestContext.from_headers(request.headers)
        setattr(request.state, CONTEXT_STATE_ATTR, context)

        # contextualize scopes the ids to this request only
        with logger.contextualize(**context.log_fields()):
            return await call_next(request)
