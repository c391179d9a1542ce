"""
JWT access tokens.

Tokens carry the user id (``sub``) and role so the caller context can be built
without a database round trip.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from smartcharge.config import get_settings


def create_access_token(user_id: int, role: str) -> str:
    """
    Create a signed access token.

    Args:
        user_id: The user's database ID.
        role: DRIVER or OPERATOR.

    Returns:
        Encoded JWT string.
    """
    settings = get_settings()
    now = datetime.now(timezone.utc)
    payload: dict[str, Any] = {
        "sub": str(user_id),
        "role": role,
        "iat": now,
        "exp": now + timedelta(minutes=settings.jwt_access_token_expire_minutes),
        "iss": settings.jwt_issuer,
        "type": "access",
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str) -> dict[str, Any]:
    """
    Verify and decode an access token.

    Raises:
        jwt.InvalidTokenError: If the token is invalid, expired, or not an access token.
    """
    settings = get_settings()
    try:
        payload: dict[str, Any] = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            issuer=settings.jwt_issuer,
            options={"require": ["sub", "exp", "iss"]},
        )
    except jwt.ExpiredSignatureError:
        msg = "Token has expired"
        raise jwt.InvalidTokenError(msg) from None

    if payload.get("type") != "access":
        msg = f"Expected access token, got '{payload.get('type')}'"
        raise jwt.InvalidTokenError(msg)

    return payload
