"""Health endpoint tests."""

from httpx import AsyncClient
from sqlalchemy import delete

from smartcharge.db.models import Badge


async def test_health(client: AsyncClient) -> None:
    """GET /health returns 200 with healthy status."""
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


async def test_readiness_without_redis(client: AsyncClient) -> None:
    """Database and catalog are fine; Redis was never initialized so the service is degraded."""
    response = await client.get("/ready")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "degraded"
    assert data["checks"]["database"] == "ok"
    assert data["checks"]["badgeCatalog"] == "ok"
    assert data["checks"]["redis"].startswith("error:")


async def test_readiness_with_empty_badge_catalog(client: AsyncClient, db_session) -> None:
    """Settlement awards badges, so an unseeded catalog takes the instance out of rotation."""
    await db_session.execute(delete(Badge))
    await db_session.commit()

    response = await client.get("/ready")
    assert response.status_code == 503
    data = response.json()
    assert data["status"] == "unavailable"
    assert data["checks"]["database"] == "ok"
    assert data["checks"]["badgeCatalog"] == "error: 0/6 badges seeded"


async def test_version(client: AsyncClient) -> None:
    response = await client.get("/version")
    assert response.status_code == 200
    assert response.json() == {"service": "smartcharge-api", "version": "0.1.0", "environment": "test"}
