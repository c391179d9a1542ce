"""User router — all /api/v1/users/* endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from smartcharge.auth.dependencies import get_current_user
from smartcharge.auth.schemas import UserResponse
from smartcharge.database import get_session
from smartcharge.db.models import User
from smartcharge.gamification.badge_service import get_user_badges
from smartcharge.gamification.level_thresholds import compute_level
from smartcharge.gamification.schemas import BadgeResponse, LevelResponse
from smartcharge.reservations.schemas import ReservationResponse
from smartcharge.reservations.service import list_user_reservations
from smartcharge.users.schemas import (
    LeaderboardEntry,
    LeaderboardResponse,
    ProfileResponse,
    ProfileUpdateRequest,
)
from smartcharge.users.service import get_leaderboard, update_profile

router = APIRouter(prefix="/api/v1/users", tags=["Users"])


@router.get("/me", response_model=ProfileResponse)
async def get_profile(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> ProfileResponse:
    """Own profile with wallet balances."""
    badges = await get_user_badges(db, user.id)
    reservations = await list_user_reservations(db, user.id)
    return ProfileResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        role=user.role,
        coins=user.coins,
        co2_saved=user.co2_saved,
        xp=user.xp,
        level=LevelResponse(**compute_level(user.xp)),
        badges=[BadgeResponse.model_validate(b) for b in badges],
        reservations=[ReservationResponse.model_validate(r) for r in reservations],
    )


@router.patch("/me", response_model=UserResponse)
async def patch_profile(
    body: ProfileUpdateRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
) -> UserResponse:
    """Update the caller's name or email. A taken email is a 409."""
    user = await update_profile(db, user, name=body.name, email=body.email)
    await db.commit()
    return UserResponse.model_validate(user)


@router.get("/leaderboard", response_model=LeaderboardResponse)
async def leaderboard(
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_session),
) -> LeaderboardResponse:
    users = await get_leaderboard(db, limit)
    return LeaderboardResponse(
        entries=[
            LeaderboardEntry(
                rank=i,
                id=u.id,
                name=u.name,
                xp=u.xp,
                coins=u.coins,
                co2_saved=u.co2_saved,
                level=compute_level(u.xp)["level"],
            )
            for i, u in enumerate(users, start=1)
        ]
    )
