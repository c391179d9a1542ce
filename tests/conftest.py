"""Shared test fixtures."""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator, Awaitable, Callable
from typing import Any

# Settings are cached on first use; pin them before importing the app
os.environ["SC_JWT_SECRET"] = "test-secret-key-that-is-long-enough-for-hs256"
os.environ["SC_LOG_FORMAT"] = "console"
os.environ["SC_ENVIRONMENT"] = "test"
os.environ.setdefault("SC_DATABASE_URL", "sqlite+aiosqlite:///./smartcharge-test.db")

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession  # noqa: E402

from smartcharge.auth.jwt import create_access_token  # noqa: E402
from smartcharge.auth.password import hash_password  # noqa: E402
from smartcharge.config import get_settings  # noqa: E402
from smartcharge.database import (  # noqa: E402
    close_db,
    create_tables,
    get_engine,
    get_session_factory,
    init_db,
)
from smartcharge.db.models import Campaign, CampaignStatus, Role, Station, User  # noqa: E402
from smartcharge.gamification.seed import seed_badges  # noqa: E402
from smartcharge.main import create_app  # noqa: E402

get_settings.cache_clear()

# Hashing is the slow part of building users; do it once
_PASSWORD = "charge-me-123"
_PASSWORD_HASH = hash_password(_PASSWORD)


@pytest.fixture
def password() -> str:
    return _PASSWORD


@pytest_asyncio.fixture
async def db_engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """Fresh SQLite database file per test, schema created and badges seeded."""
    await init_db(f"sqlite+aiosqlite:///{tmp_path / 'smartcharge.db'}")
    await create_tables()
    async with get_session_factory()() as session:
        await seed_badges(session)
    yield get_engine()
    await close_db()


@pytest_asyncio.fixture
async def db_session(db_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """A direct database session for arranging data and asserting on it."""
    async with get_session_factory()() as session:
        yield session


@pytest_asyncio.fixture
async def client(db_engine: AsyncEngine) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client bound to the app (lifespan not run, Redis left uninitialized)."""
    app = create_app()
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------


@pytest.fixture
def make_user(db_session: AsyncSession) -> Callable[..., Awaitable[User]]:
    counter = {"n": 0}

    async def _make(
        name: str = "Test Driver",
        email: str | None = None,
        role: Role = Role.DRIVER,
        **balances: Any,
    ) -> User:
        counter["n"] += 1
        user = User(
            name=name,
            email=email or f"driver{counter['n']}@example.com",
            password_hash=_PASSWORD_HASH,
            role=role.value,
            **balances,
        )
        db_session.add(user)
        await db_session.commit()
        return user

    return _make


@pytest.fixture
def make_station(db_session: AsyncSession) -> Callable[..., Awaitable[Station]]:
    async def _make(owner: User | None = None, **fields: Any) -> Station:
        defaults: dict[str, Any] = {
            "name": "Kadikoy Hub",
            "price": 8.5,
            "lat": 40.9909,
            "lng": 29.0303,
            "density": 50,
        }
        defaults.update(fields)
        station = Station(owner_id=owner.id if owner else None, **defaults)
        db_session.add(station)
        await db_session.commit()
        return station

    return _make


@pytest.fixture
def make_campaign(db_session: AsyncSession) -> Callable[..., Awaitable[Campaign]]:
    async def _make(
        owner: User | None = None,
        station: Station | None = None,
        badges: list | None = None,
        **fields: Any,
    ) -> Campaign:
        defaults: dict[str, Any] = {
            "title": "Night Saver",
            "description": "",
            "status": CampaignStatus.ACTIVE.value,
            "target": "",
            "discount": "%20",
            "coin_reward": 0,
        }
        defaults.update(fields)
        campaign = Campaign(owner_id=owner.id if owner else None, **defaults)
        campaign.station = station
        campaign.target_badges = list(badges or [])
        db_session.add(campaign)
        await db_session.commit()
        return campaign

    return _make


@pytest_asyncio.fixture
async def driver(make_user) -> User:
    return await make_user(name="Ada Driver", email="ada@example.com")


@pytest_asyncio.fixture
async def operator(make_user) -> User:
    return await make_user(name="Zorlu Ops", email="ops@zorlu.com", role=Role.OPERATOR)


@pytest_asyncio.fixture
async def station(make_station, operator: User) -> Station:
    return await make_station(owner=operator)


def bearer(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id, user.role)}"}


@pytest.fixture
def auth_headers() -> Callable[[User], dict[str, str]]:
    return bearer

