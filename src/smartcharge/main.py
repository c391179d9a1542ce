"""FastAPI application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from smartcharge.auth.router import router as auth_router
from smartcharge.campaigns.router import router as campaigns_router
from smartcharge.config import get_settings
from smartcharge.database import close_db, create_tables, get_session_factory, init_db
from smartcharge.gamification.router import router as gamification_router
from smartcharge.gamification.seed import seed_badges
from smartcharge.health.router import router as health_router
from smartcharge.middleware import setup_middleware
from smartcharge.redis_client import close_redis, init_redis
from smartcharge.reservations.router import router as reservations_router
from smartcharge.stations.router import router as stations_router
from smartcharge.users.router import router as users_router

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup and shutdown lifecycle."""
    settings = get_settings()
    await init_db(settings.database_url)
    await init_redis(settings.redis_url)

    if settings.auto_create_tables:
        await create_tables()

    # Seed badge definitions (idempotent)
    try:
        async with get_session_factory()() as db:
            await seed_badges(db)
    except Exception:
        logger.warning("badge_seeding_failed", exc_info=True)

    yield

    await close_db()
    await close_redis()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="SmartCharge API",
        description="Backend API for SmartCharge, an EV charging reservation and rewards platform",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    setup_middleware(app, settings)
    app.include_router(health_router, tags=["Health"])
    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(stations_router)
    app.include_router(campaigns_router)
    app.include_router(reservations_router)
    app.include_router(gamification_router)

    return app


app = create_app()
