"""Request/response schemas for authentication endpoints."""

from __future__ import annotations

from pydantic import EmailStr, Field, field_validator

from smartcharge.gamification.schemas import BadgeResponse
from smartcharge.schemas import CamelModel
from smartcharge.stations.schemas import StationSummary


def _normalize_email(v: object) -> object:
    return v.strip().lower() if isinstance(v, str) else v


class RegisterRequest(CamelModel):
    """Registration. Role is optional and otherwise inferred from the email domain."""

    name: str = Field(..., min_length=1, max_length=128)
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)
    role: str | None = None

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v: object) -> object:
        """Trim and lowercase before format validation."""
        return _normalize_email(v)


class LoginRequest(CamelModel):
    """Login with email + password."""

    email: str = Field(..., min_length=1, max_length=320)
    password: str = Field(..., min_length=1, max_length=128)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v: object) -> object:
        return _normalize_email(v)


class UserResponse(CamelModel):
    """Public account fields plus reward balances."""

    id: int
    name: str
    email: str
    role: str
    coins: int
    co2_saved: float
    xp: int


class SessionUserResponse(UserResponse):
    """User payload returned on login: balances plus badges and owned stations."""

    badges: list[BadgeResponse] = []
    stations: list[StationSummary] = []


class TokenResponse(CamelModel):
    """Token response returned after successful auth."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: SessionUserResponse
