"""FastAPI authentication dependencies.

Handlers never read identity from ambient state: they receive a ``Caller``
(or the loaded ``User``) and pass it explicitly to the services.
"""

from __future__ import annotations

from dataclasses import dataclass

import jwt
from fastapi import Depends, HTTPException, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from smartcharge.auth.jwt import verify_token
from smartcharge.auth.service import get_user_by_id
from smartcharge.database import get_session
from smartcharge.db.models import Role, User

_bearer = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Caller:
    """The authenticated identity making a request."""

    user_id: int
    role: Role

    @property
    def is_operator(self) -> bool:
        return self.role is Role.OPERATOR


async def get_caller(
    credentials: HTTPAuthorizationCredentials | None = Security(_bearer),
) -> Caller:
    """Decode the bearer token into a Caller. Raises 401 on failure."""
    if credentials is None:
        raise HTTPException(status_code=401, detail="Not authenticated", headers={"WWW-Authenticate": "Bearer"})
    try:
        payload = verify_token(credentials.credentials)
        return Caller(user_id=int(payload["sub"]), role=Role(payload.get("role", Role.DRIVER.value)))
    except (jwt.InvalidTokenError, ValueError) as e:
        raise HTTPException(status_code=401, detail=str(e)) from e


async def get_current_user(
    caller: Caller = Depends(get_caller),
    db: AsyncSession = Depends(get_session),
) -> User:
    """Load the caller's User row. Raises 401 if the account no longer exists."""
    user = await get_user_by_id(db, caller.user_id)
    if user is None:
        raise HTTPException(status_code=401, detail="User not found")
    return user


async def require_operator(caller: Caller = Depends(get_caller)) -> Caller:
    """Only operators may manage stations and campaigns."""
    if not caller.is_operator:
        raise HTTPException(status_code=403, detail="Operator role required")
    return caller
