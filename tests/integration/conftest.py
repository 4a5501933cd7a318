"""Shared fixtures for integration tests.

The application under test is the real app factory plus a ``users`` router
that exercises every outcome, the guards and the exception handlers.
"""

import asyncio
from collections.abc import AsyncGenerator, Generator
from typing import Annotated

import pytest
from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request, Response
from httpx import ASGITransport, AsyncClient

from src.api.guards import require_headers, require_params
from src.api.main import create_app
from src.api.responder import Responder, app_response, get_responder
from src.core.config import Settings, get_settings
from src.core.exceptions import OutcomeError
from src.core.outcomes import Outcome

ResponderDep = Annotated[Responder, Depends(get_responder)]


def build_users_router() -> APIRouter:
    """Router labelled ``users`` covering the outcome surface."""
    router = APIRouter(prefix="/users", dependencies=[Depends(app_response("users"))])

    @router.get("/search", dependencies=[Depends(require_params(["q", "limit"]))])
    async def search_users(responder: ResponderDep) -> Response:
        return responder.ok([])

    @router.get("/page")
    async def page_users(limit: int, responder: ResponderDep) -> Response:
        return responder.ok({"limit": limit})

    @router.post(
        "",
        dependencies=[
            Depends(require_headers("x-api-key")),
            Depends(require_params(["email", "name"])),
        ],
    )
    async def create_user(request: Request, responder: ResponderDep) -> Response:
        return responder.created(await request.json())

    @router.get("/{user_id}")
    async def read_user(user_id: str, responder: ResponderDep) -> Response:
        if user_id == "missing":
            return responder.not_found(f"User {user_id} not found")
        return responder.ok({"id": user_id})

    @router.get("/{user_id}/slow")
    async def read_user_slowly(user_id: str, responder: ResponderDep) -> Response:
        await asyncio.sleep(0.02)
        return responder.ok({"id": user_id})

    @router.get("/{user_id}/profile", dependencies=[Depends(require_params("user_id"))])
    async def read_profile(user_id: str, responder: ResponderDep) -> Response:
        return responder.ok({"id": user_id, "profile": {}})

    @router.delete("/{user_id}")
    async def delete_user(user_id: str) -> Response:
        raise OutcomeError(Outcome.FORBIDDEN, [f"User {user_id} is protected"])

    @router.get("/{user_id}/boom")
    async def explode(user_id: str) -> Response:
        raise RuntimeError(f"storage unavailable for {user_id}")

    @router.get("/{user_id}/throttled")
    async def throttle(user_id: str) -> Response:
        raise HTTPException(status_code=429, detail=[], headers={"Retry-After": "30"})

    @router.get("/{user_id}/twice")
    async def respond_twice(responder: ResponderDep) -> Response:
        responder.ok()
        return responder.ok()

    return router


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """Clear the settings cache so environment fixtures take effect."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def app() -> FastAPI:
    """Provide a fresh application with the users router mounted."""
    application = create_app(Settings())
    application.include_router(build_users_router())
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Provide an HTTP client bound to the app.

    Unhandled exceptions are turned into responses by the app itself, so
    the transport must not re-raise them.
    """
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as http:
        yield http
