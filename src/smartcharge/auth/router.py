"""Authentication router — all /api/v1/auth/* endpoints."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from smartcharge.auth.jwt import create_access_token
from smartcharge.auth.schemas import (
    LoginRequest,
    RegisterRequest,
    SessionUserResponse,
    TokenResponse,
)
from smartcharge.auth.service import InvalidCredentialsError, authenticate_user, register_user
from smartcharge.config import get_settings
from smartcharge.database import get_session
from smartcharge.db.models import User
from smartcharge.gamification.badge_service import get_user_badges
from smartcharge.gamification.schemas import BadgeResponse
from smartcharge.stations.schemas import StationSummary
from smartcharge.stations.service import list_owned_stations

logger = structlog.get_logger()

router = APIRouter(prefix="/api/v1/auth", tags=["Authentication"])


async def _session_user(db: AsyncSession, user: User) -> SessionUserResponse:
    """User payload with held badges and, for operators, owned stations."""
    badges = await get_user_badges(db, user.id)
    stations = await list_owned_stations(db, user.id)
    return SessionUserResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        role=user.role,
        coins=user.coins,
        co2_saved=user.co2_saved,
        xp=user.xp,
        badges=[BadgeResponse.model_validate(b) for b in badges],
        stations=[StationSummary.model_validate(s) for s in stations],
    )


async def _issue_token(db: AsyncSession, user: User) -> TokenResponse:
    settings = get_settings()
    return TokenResponse(
        access_token=create_access_token(user.id, user.role),
        token_type="bearer",
        expires_in=settings.jwt_access_token_expire_minutes * 60,
        user=await _session_user(db, user),
    )


@router.post("/register", response_model=TokenResponse, status_code=201)
async def register(
    body: RegisterRequest,
    db: AsyncSession = Depends(get_session),
) -> TokenResponse:
    """Create an account. Role defaults from the email domain when omitted."""
    user = await register_user(
        db,
        name=body.name,
        email=body.email,
        password=body.password,
        role=body.role,
    )
    await db.commit()
    return await _issue_token(db, user)


@router.post("/login", response_model=TokenResponse)
async def login(
    body: LoginRequest,
    db: AsyncSession = Depends(get_session),
) -> TokenResponse:
    """Login with email + password."""
    try:
        user = await authenticate_user(db, body.email, body.password)
    except InvalidCredentialsError as e:
        logger.info("login_failed")
        raise HTTPException(status_code=401, detail=str(e)) from e
    await db.commit()
    return await _issue_token(db, user)
