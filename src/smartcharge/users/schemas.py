"""Request/response schemas for user endpoints."""

from __future__ import annotations

from pydantic import EmailStr, Field, field_validator

from smartcharge.auth.schemas import UserResponse
from smartcharge.gamification.schemas import BadgeResponse, LevelResponse
from smartcharge.reservations.schemas import ReservationResponse
from smartcharge.schemas import CamelModel


class ProfileResponse(UserResponse):
    """Own profile: balances, level progress, badges and recent bookings."""

    level: LevelResponse
    badges: list[BadgeResponse] = []
    reservations: list[ReservationResponse] = []


class LeaderboardEntry(CamelModel):
    rank: int
    id: int
    name: str
    xp: int
    coins: int
    co2_saved: float
    level: int


class LeaderboardResponse(CamelModel):
    entries: list[LeaderboardEntry]


class ProfileUpdateRequest(CamelModel):
    """Partial profile update; omitted fields are left unchanged."""

    name: str | None = Field(None, min_length=1, max_length=128)
    email: EmailStr | None = None

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v: object) -> object:
        return v.strip().lower() if isinstance(v, str) else v
