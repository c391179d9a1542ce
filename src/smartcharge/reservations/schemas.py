"""Request/response schemas for reservation endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Any


from smartcharge.schemas import CamelModel, DbCount


class ReservationCreateRequest(CamelModel):
    """Booking request.

    Fields are typed loosely on purpose: the ledger validates them itself so
    a non-boolean ``isGreen`` is rejected rather than coerced.
    """

    user_id: Any = None
    station_id: Any = None
    date: Any = None
    hour: Any = None
    is_green: Any = None


class CompleteRequest(CamelModel):
    """Optional settlement overrides."""

    earned_coins: DbCount | None = None
    earned_xp: DbCount | None = None


class ReservationResponse(CamelModel):
    id: int
    user_id: int
    station_id: int
    date: datetime
    hour: str
    is_green: bool
    earned_coins: int
    status: str
    created_at: datetime | None = None
    completed_at: datetime | None = None


class PendingRewardsResponse(CamelModel):
    coins: int
    co2_saved: float
    campaign_id: int | None = None


class ReservationCreatedResponse(CamelModel):
    success: bool = True
    reservation: ReservationResponse
    pending_rewards: PendingRewardsResponse


class BalancesResponse(CamelModel):
    id: int
    coins: int
    co2_saved: float
    xp: int


class ReservationCompletedResponse(CamelModel):
    success: bool = True
    reservation: ReservationResponse
    user: BalancesResponse
