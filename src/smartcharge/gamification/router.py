"""Badge catalog and level table endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from smartcharge.database import get_session
from smartcharge.gamification.badge_service import list_badges
from smartcharge.gamification.level_thresholds import LEVEL_THRESHOLDS
from smartcharge.gamification.schemas import (
    AllBadgesResponse,
    AllLevelsResponse,
    BadgeResponse,
    LevelEntry,
)

router = APIRouter(prefix="/api/v1", tags=["Gamification"])


@router.get("/badges", response_model=AllBadgesResponse)
async def get_badges(db: AsyncSession = Depends(get_session)):
    """Static badge catalog."""
    badges = await list_badges(db)
    return AllBadgesResponse(badges=[BadgeResponse.model_validate(b) for b in badges])


@router.get("/levels", response_model=AllLevelsResponse)
async def get_levels():
    """All level definitions."""
    return AllLevelsResponse(levels=[LevelEntry(**t) for t in LEVEL_THRESHOLDS])
