"""Unit tests for RequestContextMiddleware."""

from collections.abc import Callable

import pytest
from pytest_mock import MockerFixture
from starlette.requests import Request
from starlette.responses import Response

from src.api.middleware.request_context import (
    CONTEXT_STATE_ATTR,
    RequestContextMiddleware,
    ensure_request_context,
)
from src.core.context import RequestContext


@pytest.fixture
def middleware(mocker: MockerFixture) -> RequestContextMiddleware:
    """Provide the middleware wrapped around a dummy ASGI app."""
    return RequestContextMiddleware(mocker.AsyncMock())


@pytest.mark.unit
class TestRequestContextMiddleware:
    """Test suite for RequestContextMiddleware."""

    async def test_dispatch_stores_context(
        self,
        middleware: RequestContextMiddleware,
        make_request: Callable[..., Request],
        mocker: MockerFixture,
    ) -> None:
        """The context is created from headers before calling the next stage."""
        request = make_request(
            headers={"x-trans-id": "t-1", "x-request-or-lang": "nl"}
        )
        response = Response()
        seen: list[RequestContext] = []

        async def call_next(req: Request) -> Response:
            seen.append(getattr(req.state, CONTEXT_STATE_ATTR))
            return response

        result = await middleware.dispatch(request, call_next)

        assert result is response
        assert seen[0].trans_id == "t-1"
        assert seen[0].language == "nl"

    async def test_dispatch_binds_trans_ids_to_logger(
        self,
        middleware: RequestContextMiddleware,
        make_request: Callable[..., Request],
        mocker: MockerFixture,
    ) -> None:
        """Transaction ids are bound to Loguru for the request only."""
        mock_ctx = mocker.MagicMock()
        mock_contextualize = mocker.patch(
            "src.api.middleware.request_context.logger.contextualize",
            return_value=mock_ctx,
        )
        request = make_request(
            headers={"x-trans-id": "t-1", "x-trans-parent-id": "p-1"}
        )

        await middleware.dispatch(request, mocker.AsyncMock(return_value=Response()))

        mock_contextualize.assert_called_once_with(
            trans_id="t-1", trans_parent_id="p-1"
        )
        assert mock_ctx.__enter__.called
        assert mock_ctx.__exit__.called

    async def test_dispatch_propagates_exceptions(
        self,
        middleware: RequestContextMiddleware,
        make_request: Callable[..., Request],
        mocker: MockerFixture,
    ) -> None:
        """Errors from later stages are not swallowed."""
        call_next = mocker.AsyncMock(side_effect=RuntimeError("boom"))

        with pytest.raises(RuntimeError, match="boom"):
            await middleware.dispatch(make_request(), call_next)


@pytest.mark.unit
class TestEnsureRequestContext:
    """Test lazy context creation."""

    def test_creates_context_when_missing(
        self, make_request: Callable[..., Request]
    ) -> None:
        """Without the middleware a context is created on first use."""
        request = make_request(headers={"x-trans-id": "lazy"})

        context = ensure_request_context(request)

        assert context.trans_id == "lazy"
        assert ensure_request_context(request) is context

    def test_returns_existing_context(
        self, make_request: Callable[..., Request]
    ) -> None:
        """An existing context is returned untouched."""
        request = make_request()
        existing = RequestContext(started_at=1)
        setattr(request.state, CONTEXT_STATE_ATTR, existing)

        assert ensure_request_context(request) is existing
