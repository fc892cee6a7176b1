"""Unit tests for the request context middleware."""

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from libs.auth.tokens import create_access_token
from libs.common.logging import get_request_id, get_request_user_id
from libs.common.middleware import add_observability_middleware


def _app() -> FastAPI:
    app = FastAPI()
    add_observability_middleware(app)

    @app.get("/whoami")
    async def whoami():
        return {"requestId": get_request_id(), "userId": get_request_user_id()}

    @app.get("/boom")
    async def boom():
        raise RuntimeError("unexpected")

    return app


@pytest.mark.asyncio
@pytest.mark.unit
async def test_request_is_tagged_with_caller_from_bearer_token():
    token = create_access_token("user-42", "a@b.com", "CUSTOMER")

    async with AsyncClient(transport=ASGITransport(app=_app()), base_url="http://test") as ac:
        response = await ac.get(
            "/whoami",
            headers={"Authorization": f"Bearer {token}", "X-Request-ID": "req-1"},
        )

    assert response.json() == {"requestId": "req-1", "userId": "user-42"}
    assert response.headers["X-Request-ID"] == "req-1"


@pytest.mark.asyncio
@pytest.mark.unit
async def test_invalid_token_leaves_caller_unset():
    async with AsyncClient(transport=ASGITransport(app=_app()), base_url="http://test") as ac:
        response = await ac.get("/whoami", headers={"Authorization": "Bearer garbage"})

    assert response.json()["userId"] is None
    assert response.headers["X-Request-ID"] == response.json()["requestId"]


@pytest.mark.asyncio
@pytest.mark.unit
async def test_unhandled_exception_becomes_error_envelope():
    async with AsyncClient(transport=ASGITransport(app=_app()), base_url="http://test") as ac:
        response = await ac.get("/boom", headers={"X-Request-ID": "req-boom"})

    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert body["code"] == "internal_error"
    assert "unexpected" not in response.text
    assert response.headers["X-Request-ID"] == "req-boom"
