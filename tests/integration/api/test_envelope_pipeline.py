"""Integration tests for enveloped responses through the full pipeline."""

import pytest
from httpx import AsyncClient

CORRELATION_HEADERS = {
    "x-trans-id": "trans-abc",
    "x-trans-parent-id": "parent-def",
    "x-request-or-lang": "fr",
}


@pytest.mark.integration
class TestSuccessEnvelopes:
    """Success outcomes over HTTP."""

    async def test_ok_envelope(self, client: AsyncClient) -> None:
        """ok() yields 200 with meta and response."""
        response = await client.get("/users/42", headers=CORRELATION_HEADERS)

        body = response.json()
        assert response.status_code == 200
        assert set(body) == {"meta", "response"}
        assert body["response"] == {"id": "42"}
        meta = body["meta"]
        assert meta["x-trans-id"] == "trans-abc"
        assert meta["x-trans-parent-id"] == "parent-def"
        assert meta["x-request-or-lang"] == "fr"
        assert meta["source"] == "users"
        assert isinstance(meta["response-time"], float)
        assert meta["response-time"] >= 0

    async def test_created_envelope(self, client: AsyncClient) -> None:
        """created() yields 201 with the payload."""
        response = await client.post(
            "/users",
            headers={"x-api-key": "k"},
            json={"email": "ada@example.com", "name": "Ada"},
        )

        assert response.status_code == 201
        assert response.json()["response"] == {
            "email": "ada@example.com",
            "name": "Ada",
        }

    async def test_defaults_without_correlation_headers(
        self, client: AsyncClient
    ) -> None:
        """Missing headers give null ids and the "en" language."""
        response = await client.get("/users/42")

        meta = response.json()["meta"]
        assert meta["x-trans-id"] is None
        assert meta["x-trans-parent-id"] is None
        assert meta["x-request-or-lang"] == "en"
        assert "x-trans-id" not in response.headers

    async def test_trans_id_echoed(self, client: AsyncClient) -> None:
        """The transaction id is echoed as a response header."""
        response = await client.get("/users/42", headers=CORRELATION_HEADERS)

        assert response.headers["x-trans-id"] == "trans-abc"

    async def test_response_time_reflects_real_duration(
        self, client: AsyncClient
    ) -> None:
        """A handler that sleeps reports at least the sleep time."""
        response = await client.get("/users/42/slow")

        assert response.json()["meta"]["response-time"] >= 15

    async def test_health_uses_default_source(self, client: AsyncClient) -> None:
        """The health endpoint is enveloped too."""
        response = await client.get("/health")

        body = response.json()
        assert response.status_code == 200
        assert body["response"]["status"] == "healthy"
        assert body["meta"]["source"] == ""


@pytest.mark.integration
class TestErrorEnvelopes:
    """Error outcomes over HTTP."""

    async def test_not_found_from_handler(self, client: AsyncClient) -> None:
        """not_found() yields 404 with a one-element exception list."""
        response = await client.get("/users/missing")

        body = response.json()
        assert response.status_code == 404
        assert set(body) == {"meta", "exception"}
        assert body["exception"] == ["User missing not found"]

    async def test_raised_outcome(self, client: AsyncClient) -> None:
        """OutcomeError raised in a handler becomes its outcome."""
        response = await client.delete("/users/1")

        assert response.status_code == 403
        assert response.json()["exception"] == ["User 1 is protected"]
        assert response.json()["meta"]["source"] == "users"

    async def test_unhandled_exception_is_server_error(
        self, client: AsyncClient
    ) -> None:
        """Unexpected failures become a 500 envelope, never a stack trace."""
        response = await client.get("/users/1/boom", headers=CORRELATION_HEADERS)

        body = response.json()
        assert response.status_code == 500
        assert body["exception"] == [
            "Internal server error: RuntimeError: storage unavailable for 1"
        ]
        assert body["meta"]["x-trans-id"] == "trans-abc"

    async def test_unmapped_status_is_enveloped(self, client: AsyncClient) -> None:
        """Codes outside the outcome table keep their value and echo the id."""
        response = await client.get("/users/1/throttled", headers=CORRELATION_HEADERS)

        body = response.json()
        assert response.status_code == 429
        assert body["exception"] == ["Too Many Requests"]
        assert body["meta"]["source"] == "users"
        assert response.headers["x-trans-id"] == "trans-abc"
        assert response.headers["retry-after"] == "30"

    async def test_request_validation_is_invalid(self, client: AsyncClient) -> None:
        """FastAPI validation failures become 422 envelopes."""
        response = await client.get("/users/page", params={"limit": "many"})

        body = response.json()
        assert response.status_code == 422
        assert len(body["exception"]) == 1
        assert body["exception"][0].startswith("query.limit: ")

    async def test_unknown_route_is_not_found(self, client: AsyncClient) -> None:
        """Routing misses are enveloped with the default source."""
        response = await client.get("/nowhere")

        body = response.json()
        assert response.status_code == 404
        assert body["exception"] == ["Not Found"]
        assert body["meta"]["source"] == ""

    async def test_wrong_method_is_unsupported_action(
        self, client: AsyncClient
    ) -> None:
        """Method mismatches map to 405 and keep the Allow header."""
        response = await client.put("/health")

        assert response.status_code == 405
        assert response.json()["exception"] == ["Method Not Allowed"]
        assert "GET" in response.headers["allow"]

    async def test_second_outcome_is_a_server_error(
        self, client: AsyncClient
    ) -> None:
        """Invoking two outcomes for one request is refused."""
        response = await client.get("/users/1/twice")

        assert response.status_code == 500
        assert "ResponseAlreadySentError" in response.json()["exception"][0]
