"""Reservation ledger: validate and persist bookings with a provisional reward."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

import structlog
from sqlalchemy import select

from smartcharge.auth.service import require_user
from smartcharge.campaigns.service import best_campaign_bonus
from smartcharge.db.models import Reservation, ReservationStatus
from smartcharge.errors import InvalidInputError, NotFoundError
from smartcharge.reservations.rewards import base_reward, co2_credit
from smartcharge.schemas import MAX_DB_INT
from smartcharge.stations.service import require_station

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()


@dataclass
class Booking:
    reservation: Reservation
    pending_coins: int
    pending_co2: float
    campaign_id: int | None = None


# ---------------------------------------------------------------------------
# Input parsing
# ---------------------------------------------------------------------------


def parse_id(value: Any, field: str) -> int:
    """Positive 32-bit integer id; numeric strings are accepted."""
    if value is None or value == "":
        msg = f"{field} is required"
        raise InvalidInputError(msg)
    if isinstance(value, bool):
        msg = f"{field} must be an integer"
        raise InvalidInputError(msg)
    try:
        parsed = int(value)
    except (TypeError, ValueError, OverflowError) as e:
        msg = f"{field} must be an integer"
        raise InvalidInputError(msg) from e
    if isinstance(value, float) and value != parsed:
        msg = f"{field} must be an integer"
        raise InvalidInputError(msg)
    if not 1 <= parsed <= MAX_DB_INT:
        msg = f"{field} is out of range"
        raise InvalidInputError(msg)
    return parsed


def parse_slot_date(value: Any) -> datetime:
    """ISO date or date/time. Naive values are taken as UTC."""
    if value is None or value == "":
        msg = "date is required"
        raise InvalidInputError(msg)
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as e:
            msg = f"date is not a valid ISO date: {value!r}"
            raise InvalidInputError(msg) from e
    else:
        msg = "date must be an ISO date string"
        raise InvalidInputError(msg)
    return parsed.replace(tzinfo=timezone.utc) if parsed.tzinfo is None else parsed.astimezone(timezone.utc)


def parse_hour(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        msg = "hour is required"
        raise InvalidInputError(msg)
    return value.strip()


def parse_is_green(value: Any) -> bool:
    if value is None:
        msg = "isGreen is required"
        raise InvalidInputError(msg)
    if not isinstance(value, bool):
        msg = "isGreen must be a boolean"
        raise InvalidInputError(msg)
    return value


# ---------------------------------------------------------------------------
# Ledger
# ---------------------------------------------------------------------------


async def create_reservation(
    db: AsyncSession,
    user_id: Any,
    station_id: Any,
    date: Any,
    hour: Any,
    is_green: Any,
    now: datetime | None = None,
) -> Booking:
    """
    Book a slot. The reservation starts PENDING; balances are not touched.

    earned_coins = base reward (50 green / 10 otherwise) plus the coin reward
    of the newest active campaign applicable to the station. Not idempotent.

    Raises:
        InvalidInputError: missing or malformed field.
        NotFoundError: unknown user or station.
    """
    uid = parse_id(user_id, "userId")
    sid = parse_id(station_id, "stationId")
    slot_date = parse_slot_date(date)
    slot_hour = parse_hour(hour)
    green = parse_is_green(is_green)

    await require_user(db, uid)
    await require_station(db, sid)

    campaign, bonus = await best_campaign_bonus(db, sid, now)
    coins = base_reward(green) + bonus

    reservation = Reservation(
        user_id=uid,
        station_id=sid,
        date=slot_date,
        hour=slot_hour,
        is_green=green,
        earned_coins=coins,
        status=ReservationStatus.PENDING.value,
    )
    db.add(reservation)
    await db.flush()

    logger.info(
        "reservation_created",
        reservation_id=reservation.id,
        user_id=uid,
        station_id=sid,
        is_green=green,
        earned_coins=coins,
        campaign_id=campaign.id if campaign else None,
    )
    return Booking(
        reservation=reservation,
        pending_coins=coins,
        pending_co2=co2_credit(green),
        campaign_id=campaign.id if campaign else None,
    )


async def get_reservation(db: AsyncSession, reservation_id: int, *, fresh: bool = False) -> Reservation | None:
    """Fetch a reservation. ``fresh`` overwrites any stale copy in the session."""
    stmt = select(Reservation).where(Reservation.id == reservation_id)
    if fresh:
        stmt = stmt.execution_options(populate_existing=True)
    return (await db.execute(stmt)).scalar_one_or_none()


async def require_reservation(db: AsyncSession, reservation_id: int, *, fresh: bool = False) -> Reservation:
    reservation = await get_reservation(db, reservation_id, fresh=fresh)
    if reservation is None:
        msg = f"Reservation {reservation_id} not found"
        raise NotFoundError(msg)
    return reservation


async def list_user_reservations(db: AsyncSession, user_id: int, limit: int = 50) -> list[Reservation]:
    """Most recent first."""
    result = await db.execute(
        select(Reservation)
        .where(Reservation.user_id == user_id)
        .order_by(Reservation.created_at.desc(), Reservation.id.desc())
        .limit(limit)
    )
    return list(result.scalars())
