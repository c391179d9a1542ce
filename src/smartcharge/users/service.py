"""User profile and leaderboard queries."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from smartcharge.auth.service import get_user_by_email
from smartcharge.db.models import Role, User
from smartcharge.errors import ConflictError

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()


async def get_leaderboard(db: AsyncSession, limit: int = 10) -> list[User]:
    """Drivers ranked by XP, then coins; ties broken by earliest signup."""
    result = await db.execute(
        select(User)
        .where(User.role == Role.DRIVER.value)
        .order_by(User.xp.desc(), User.coins.desc(), User.id)
        .limit(limit)
    )
    return list(result.scalars())


async def update_profile(db: AsyncSession, user: User, name: str | None = None, email: str | None = None) -> User:
    """
    Change the display name and/or login email. The role is kept as assigned.

    Raises:
        ConflictError: the email belongs to another account.
    """
    if email is not None:
        normalized = email.strip().lower()
        holder = await get_user_by_email(db, normalized)
        if holder is not None and holder.id != user.id:
            msg = "Email already registered"
            raise ConflictError(msg)
        user.email = normalized
    if name is not None:
        user.name = name.strip()

    try:
        await db.flush()
    except IntegrityError as e:
        await db.rollback()
        msg = "Email already registered"
        raise ConflictError(msg) from e

    logger.info("profile_updated", user_id=user.id, email_changed=email is not None)
    return user
