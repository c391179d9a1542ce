"""Request/response schemas for station endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from smartcharge.schemas import CamelModel


class StationSummary(CamelModel):
    id: int
    name: str
    price: float


class StationResponse(CamelModel):
    id: int
    name: str
    price: float
    lat: float
    lng: float
    address: str | None = None
    density: int
    owner_id: int | None = None


class StationListResponse(CamelModel):
    stations: list[StationResponse]


class OperatorStationResponse(StationResponse):
    """An owned station with its booking counters for the operator dashboard."""

    status: str
    reservation_count: int
    green_reservation_count: int
    revenue: float


class OperatorStatsResponse(CamelModel):
    total_revenue: float
    total_reservations: int
    green_share: float
    avg_load: float


class MyStationsResponse(CamelModel):
    stats: OperatorStatsResponse
    stations: list[OperatorStationResponse]


class StationCreateRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=128)
    price: float = Field(..., gt=0)
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    address: str | None = Field(None, max_length=256)
    density: int = Field(50, ge=0, le=100)


class StationUpdateRequest(CamelModel):
    name: str | None = Field(None, min_length=1, max_length=128)
    price: float | None = Field(None, gt=0)
    address: str | None = Field(None, max_length=256)
    density: int | None = Field(None, ge=0, le=100)


class SlotResponse(CamelModel):
    hour: int
    label: str
    start_time: datetime
    is_green: bool
    coins: int
    load: int
    price: float


class SlotsResponse(CamelModel):
    station_id: int
    base_price: float
    slots: list[SlotResponse]
