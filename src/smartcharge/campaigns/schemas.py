"""Request/response schemas for campaign endpoints."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal

from pydantic import Field, field_validator

from smartcharge.gamification.schemas import BadgeResponse
from smartcharge.schemas import CamelModel, DbCount, DbId

CampaignStatusLiteral = Literal["DRAFT", "ACTIVE", "ENDED"]


def _utc(v: datetime | None) -> datetime | None:
    if v is None:
        return None
    return v.replace(tzinfo=timezone.utc) if v.tzinfo is None else v.astimezone(timezone.utc)


class CampaignCreateRequest(CamelModel):
    title: str = Field(..., min_length=1, max_length=128)
    description: str = Field("", max_length=2000)
    status: CampaignStatusLiteral = "DRAFT"
    target: str = Field("", max_length=128)
    discount: str = Field("", max_length=32)
    end_date: datetime | None = None
    station_id: DbId | None = None
    coin_reward: DbCount = 0
    target_badge_ids: list[DbId] = []

    @field_validator("end_date")
    @classmethod
    def end_date_utc(cls, v: datetime | None) -> datetime | None:
        return _utc(v)


class CampaignUpdateRequest(CamelModel):
    """Partial update; only fields present in the body are applied."""

    title: str | None = Field(None, min_length=1, max_length=128)
    description: str | None = Field(None, max_length=2000)
    status: CampaignStatusLiteral | None = None
    target: str | None = Field(None, max_length=128)
    discount: str | None = Field(None, max_length=32)
    end_date: datetime | None = None
    station_id: DbId | None = None
    coin_reward: DbCount | None = None
    target_badge_ids: list[DbId] | None = None

    @field_validator("end_date")
    @classmethod
    def end_date_utc(cls, v: datetime | None) -> datetime | None:
        return _utc(v)


class StationRef(CamelModel):
    id: int
    name: str
    lat: float
    lng: float


class CampaignResponse(CamelModel):
    id: int
    owner_id: int
    station_id: int | None = None
    title: str
    description: str
    status: str
    target: str
    discount: str
    end_date: datetime | None = None
    coin_reward: int
    target_badge_ids: list[int] = []
    station: StationRef | None = None
    created_at: datetime | None = None


class CampaignListResponse(CamelModel):
    campaigns: list[CampaignResponse]


class CampaignOfferResponse(CamelModel):
    """A campaign as shown to a driver, with the badges that qualified them."""

    id: int
    title: str
    description: str
    target: str
    discount: str
    coin_reward: int
    end_date: datetime | None = None
    station: StationRef | None = None
    matched_badges: list[BadgeResponse] = []


class CampaignsForUserResponse(CamelModel):
    campaigns: list[CampaignOfferResponse]
    user_badges: list[BadgeResponse]
