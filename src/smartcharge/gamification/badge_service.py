"""Badge catalog reads and badge holdings."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from smartcharge.db.models import Badge, UserBadge

logger = logging.getLogger(__name__)


async def list_badges(db: AsyncSession) -> list[Badge]:
    """Full catalog in display order."""
    result = await db.execute(select(Badge).order_by(Badge.sort_order, Badge.id))
    return list(result.scalars())


async def get_badge_by_slug(db: AsyncSession, slug: str) -> Badge | None:
    """Fetch a badge by slug."""
    result = await db.execute(select(Badge).where(Badge.slug == slug))
    return result.scalar_one_or_none()


async def get_badges_by_ids(db: AsyncSession, badge_ids: Iterable[int]) -> list[Badge]:
    """Fetch badges by id; unknown ids are silently absent from the result."""
    ids = set(badge_ids)
    if not ids:
        return []
    result = await db.execute(select(Badge).where(Badge.id.in_(ids)).order_by(Badge.id))
    return list(result.scalars())


async def get_user_badges(db: AsyncSession, user_id: int) -> list[Badge]:
    """Badges held by a user, in catalog order."""
    result = await db.execute(
        select(Badge)
        .join(UserBadge, UserBadge.badge_id == Badge.id)
        .where(UserBadge.user_id == user_id)
        .order_by(Badge.sort_order, Badge.id)
    )
    return list(result.scalars())


async def get_user_badge_ids(db: AsyncSession, user_id: int) -> set[int]:
    """Set of badge ids held by a user."""
    result = await db.execute(select(UserBadge.badge_id).where(UserBadge.user_id == user_id))
    return set(result.scalars())


async def award_badge(db: AsyncSession, user_id: int, badge_slug: str) -> bool:
    """Grant a badge. Returns True if awarded, False if already held or unknown.

    Badges are immutable once granted; the UNIQUE(user_id, badge_id)
    constraint settles races between concurrent awards.
    """
    badge = await get_badge_by_slug(db, badge_slug)
    if badge is None:
        logger.warning("Badge not found: %s", badge_slug)
        return False

    if badge.id in await get_user_badge_ids(db, user_id):
        return False

    db.add(UserBadge(user_id=user_id, badge_id=badge.id))
    try:
        await db.flush()
    except IntegrityError:
        await db.rollback()
        return False

    logger.info("Badge %s awarded to user %d", badge_slug, user_id)
    return True
