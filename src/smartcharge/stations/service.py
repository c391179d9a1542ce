"""Station registry: lookups and operator-side management."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import structlog
from sqlalchemy import case, func, select

from smartcharge.db.models import Reservation, ReservationStatus, Station
from smartcharge.errors import NotFoundError
from smartcharge.stations.slots import density_level

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from smartcharge.auth.dependencies import Caller

logger = structlog.get_logger()


async def list_stations(db: AsyncSession) -> list[Station]:
    result = await db.execute(select(Station).order_by(Station.id))
    return list(result.scalars())


async def list_owned_stations(db: AsyncSession, owner_id: int) -> list[Station]:
    result = await db.execute(select(Station).where(Station.owner_id == owner_id).order_by(Station.id))
    return list(result.scalars())


async def get_station(db: AsyncSession, station_id: int) -> Station | None:
    result = await db.execute(select(Station).where(Station.id == station_id))
    return result.scalar_one_or_none()


async def require_station(db: AsyncSession, station_id: int) -> Station:
    """Fetch a station or raise NotFoundError."""
    station = await get_station(db, station_id)
    if station is None:
        msg = f"Station {station_id} not found"
        raise NotFoundError(msg)
    return station


async def require_owned_station(db: AsyncSession, caller: Caller, station_id: int) -> Station:
    """Fetch a station the caller owns. Other operators' stations look missing."""
    station = await get_station(db, station_id)
    if station is None or station.owner_id != caller.user_id:
        msg = f"Station {station_id} not found"
        raise NotFoundError(msg)
    return station


async def create_station(db: AsyncSession, caller: Caller, fields: dict[str, Any]) -> Station:
    station = Station(owner_id=caller.user_id, **fields)
    db.add(station)
    await db.flush()
    logger.info("station_created", station_id=station.id, owner_id=caller.user_id)
    return station


async def update_station(db: AsyncSession, caller: Caller, station_id: int, changes: dict[str, Any]) -> Station:
    station = await require_owned_station(db, caller, station_id)
    for field, value in changes.items():
        setattr(station, field, value)
    await db.flush()
    logger.info("station_updated", station_id=station.id, fields=sorted(changes))
    return station


# ---------------------------------------------------------------------------
# Operator dashboard
# ---------------------------------------------------------------------------

# Map colour shown for a station's baseline load
_LOAD_STATUS = {"LOW": "GREEN", "MEDIUM": "YELLOW", "HIGH": "RED"}


@dataclass
class StationStats:
    station: Station
    reservation_count: int = 0
    green_reservation_count: int = 0
    completed_count: int = 0

    @property
    def revenue(self) -> float:
        """Each settled reservation bills one slot at the station's base price."""
        return round(self.station.price * self.completed_count, 2)

    @property
    def status(self) -> str:
        return _LOAD_STATUS[density_level(self.station.density)]


@dataclass
class OperatorSummary:
    total_revenue: float
    total_reservations: int
    green_share: float
    avg_load: float


async def owned_station_stats(db: AsyncSession, owner_id: int) -> list[StationStats]:
    """Owned stations with reservation counts, aggregated in one grouped query."""
    stations = await list_owned_stations(db, owner_id)
    counts = (
        select(
            Reservation.station_id,
            func.count(Reservation.id),
            func.coalesce(func.sum(case((Reservation.is_green.is_(True), 1), else_=0)), 0),
            func.coalesce(
                func.sum(case((Reservation.status == ReservationStatus.COMPLETED.value, 1), else_=0)), 0
            ),
        )
        .join(Station, Station.id == Reservation.station_id)
        .where(Station.owner_id == owner_id)
        .group_by(Reservation.station_id)
    )
    result = await db.execute(counts)
    rows = {station_id: (total, green, completed) for station_id, total, green, completed in result}
    return [StationStats(s, *rows.get(s.id, (0, 0, 0))) for s in stations]


def summarize_stations(stats: list[StationStats]) -> OperatorSummary:
    total = sum(s.reservation_count for s in stats)
    green = sum(s.green_reservation_count for s in stats)
    return OperatorSummary(
        total_revenue=round(sum(s.revenue for s in stats), 2),
        total_reservations=total,
        green_share=round(green / total, 4) if total else 0.0,
        avg_load=round(sum(s.station.density for s in stats) / len(stats), 2) if stats else 0.0,
    )
