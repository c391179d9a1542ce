"""
Authentication business logic.

Handles user creation with role inference and password login.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from smartcharge.auth.password import (
    check_needs_rehash,
    hash_password,
    validate_password_strength,
    verify_password,
)
from smartcharge.auth.roles import infer_role
from smartcharge.config import get_settings
from smartcharge.db.models import User
from smartcharge.errors import ConflictError, NotFoundError

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()


class InvalidCredentialsError(ValueError):
    """Email unknown or password mismatch. Deliberately indistinguishable."""


# ---------------------------------------------------------------------------
# User queries
# ---------------------------------------------------------------------------


async def get_user_by_id(db: AsyncSession, user_id: int) -> User | None:
    """Fetch a user by ID."""
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def require_user(db: AsyncSession, user_id: int) -> User:
    """Fetch a user by ID or raise NotFoundError."""
    user = await get_user_by_id(db, user_id)
    if user is None:
        msg = f"User {user_id} not found"
        raise NotFoundError(msg)
    return user


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    """Fetch a user by email (case-insensitive, trimmed)."""
    result = await db.execute(select(User).where(func.lower(User.email) == email.strip().lower()))
    return result.scalar_one_or_none()


# ---------------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------------


async def register_user(
    db: AsyncSession,
    name: str,
    email: str,
    password: str,
    role: str | None = None,
) -> User:
    """
    Register a new user with zero balances.

    Raises:
        InvalidInputError: weak password or unknown explicit role.
        ConflictError: email already registered.
    """
    validate_password_strength(password)

    normalized = email.strip().lower()
    settings = get_settings()
    assigned = infer_role(normalized, role, operator_domains=settings.operator_domains)

    if await get_user_by_email(db, normalized) is not None:
        msg = "Email already registered"
        raise ConflictError(msg)

    user = User(
        name=name.strip(),
        email=normalized,
        password_hash=hash_password(password),
        role=assigned.value,
        coins=0,
        co2_saved=0.0,
        xp=0,
    )
    db.add(user)
    try:
        await db.flush()
    except IntegrityError as e:
        await db.rollback()
        msg = "Email already registered"
        raise ConflictError(msg) from e

    logger.info("user_created", user_id=user.id, role=user.role)
    return user


# ---------------------------------------------------------------------------
# Login
# ---------------------------------------------------------------------------


async def authenticate_user(db: AsyncSession, email: str, password: str) -> User:
    """
    Authenticate a user with email + password.

    Raises:
        InvalidCredentialsError: If credentials are invalid.
    """
    user = await get_user_by_email(db, email)
    if user is None or not verify_password(password, user.password_hash):
        msg = "Invalid email or password"
        raise InvalidCredentialsError(msg)

    # Transparently upgrade hashes created with older argon2 parameters
    if check_needs_rehash(user.password_hash):
        user.password_hash = hash_password(password)
        await db.flush()

    logger.info("user_login", user_id=user.id)
    return user
