"""Middleware tests: request ID, CORS, error envelope."""

from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from smartcharge.config import Settings
from smartcharge.main import create_app
from smartcharge.middleware import setup_middleware


async def test_request_id_generated(client: AsyncClient) -> None:
    response = await client.get("/health")
    assert "x-request-id" in response.headers
    assert len(response.headers["x-request-id"]) == 36  # UUID format


async def test_request_id_preserved(client: AsyncClient) -> None:
    response = await client.get("/health", headers={"X-Request-Id": "test-abc-123"})
    assert response.headers["x-request-id"] == "test-abc-123"


async def test_no_rate_limit_headers_without_redis(client: AsyncClient) -> None:
    """With Redis uninitialized requests pass through unthrottled."""
    for _ in range(3):
        response = await client.get("/api/v1/levels")
        assert response.status_code == 200
    assert "x-ratelimit-limit" not in response.headers


async def test_cors_preflight(client: AsyncClient) -> None:
    response = await client.options(
        "/api/v1/stations",
        headers={
            "Origin": "http://localhost:3000",
            "Access-Control-Request-Method": "GET",
        },
    )
    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "http://localhost:3000"


async def test_cors_unknown_origin(client: AsyncClient) -> None:
    response = await client.get("/health", headers={"Origin": "http://evil.example"})
    assert "access-control-allow-origin" not in response.headers


async def test_404_envelope(client: AsyncClient) -> None:
    response = await client.get("/nonexistent-path")
    assert response.status_code == 404
    assert response.headers["content-type"] == "application/json"
    assert response.json() == {"success": False, "error": {"code": "http_404", "message": "Not Found"}}


async def test_malformed_json_is_invalid_input(client: AsyncClient, operator, auth_headers) -> None:
    response = await client.post(
        "/api/v1/stations",
        content=b"{not json",
        headers={**auth_headers(operator), "Content-Type": "application/json"},
    )
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "invalid_input"


async def test_unhandled_error_envelope(db_engine) -> None:
    app = create_app()

    async def boom() -> None:
        raise RuntimeError("kaboom")

    app.add_api_route("/boom", boom)
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        response = await ac.get("/boom")
    assert response.status_code == 500
    assert response.json() == {
        "success": False,
        "error": {"code": "internal", "message": "Internal server error"},
    }


def _stack(settings: Settings) -> list[str]:
    app = FastAPI()
    setup_middleware(app, settings)
    return [m.cls.__name__ for m in app.user_middleware]


def test_middleware_order() -> None:
    assert _stack(Settings(rate_limit_requests=100)) == [
        "CORSMiddleware",
        "RequestIdMiddleware",
        "RateLimitMiddleware",
    ]


def test_rate_limiting_can_be_disabled() -> None:
    assert "RateLimitMiddleware" not in _stack(Settings(rate_limit_requests=0))
