"""Liveness, readiness and version endpoints.

Readiness separates hard dependencies from soft ones: without the database or
a seeded badge catalog settlement cannot run, so the instance reports 503.
Redis only backs rate limiting; losing it degrades the instance but keeps it
in rotation.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from smartcharge.config import get_settings
from smartcharge.database import get_session
from smartcharge.db.models import Badge
from smartcharge.gamification.seed import BADGE_SEED_DATA
from smartcharge.redis_client import check_redis

router = APIRouter()

SERVICE_NAME = "smartcharge-api"


async def _check_catalog(db: AsyncSession) -> str:
    seeded = (await db.execute(select(func.count()).select_from(Badge))).scalar_one()
    if seeded < len(BADGE_SEED_DATA):
        return f"error: {seeded}/{len(BADGE_SEED_DATA)} badges seeded"
    return "ok"


@router.get("/health")
async def health() -> dict[str, str]:
    """The process is up."""
    return {"status": "healthy"}


@router.get("/ready")
async def readiness(db: AsyncSession = Depends(get_session)) -> JSONResponse:
    """200 ``ready`` or ``degraded`` (Redis down); 503 ``unavailable`` otherwise."""
    checks: dict[str, str] = {}
    try:
        checks["database"] = "ok" if (await db.execute(select(1))).scalar() == 1 else "error: no result"
        checks["badgeCatalog"] = await _check_catalog(db)
    except Exception as exc:
        checks.setdefault("database", f"error: {exc}")
        checks.setdefault("badgeCatalog", "error: database unavailable")
    checks["redis"] = await check_redis()

    if checks["database"] != "ok" or checks["badgeCatalog"] != "ok":
        status, code = "unavailable", 503
    elif checks["redis"] != "ok":
        status, code = "degraded", 200
    else:
        status, code = "ready", 200
    return JSONResponse(status_code=code, content={"status": status, "checks": checks})


@router.get("/version")
async def version() -> dict[str, str]:
    settings = get_settings()
    return {
        "service": SERVICE_NAME,
        "version": settings.app_version,
        "environment": settings.environment,
    }
