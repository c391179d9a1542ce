"""
Reward settlement.

Completing a reservation flips it PENDING -> COMPLETED and credits the owning
user's coins, CO2 and XP in one transaction. The status flip is a conditional
UPDATE guarded by ``status = 'PENDING'``, so of two concurrent settlements of
the same reservation only one can match the row; the other sees zero rows and
fails with AlreadyCompletedError without touching balances.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

import structlog
from sqlalchemy import update
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from smartcharge.db.models import Reservation, ReservationStatus, User
from smartcharge.errors import (
    AlreadyCompletedError,
    InvalidInputError,
    NotFoundError,
    SettlementConflictError,
)
from smartcharge.gamification.badge_service import award_badge
from smartcharge.reservations.rewards import (
    DEFAULT_SETTLEMENT_COINS,
    DEFAULT_SETTLEMENT_XP,
    co2_credit,
)
from smartcharge.reservations.service import require_reservation
from smartcharge.schemas import MAX_DB_INT

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()

FIRST_CHARGE_BADGE = "first_charge"


@dataclass
class Settlement:
    reservation: Reservation
    user: User
    coins: int
    xp: int
    co2_saved: float


def _check_override(value: Any, field: str) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= MAX_DB_INT:
        msg = f"{field} must be a non-negative 32-bit integer"
        raise InvalidInputError(msg)
    return value


async def _credit_user(db: AsyncSession, user_id: int, coins: int, co2: float, xp: int) -> None:
    """Increment balances in SQL so concurrent credits never lose an update."""
    result = await db.execute(
        update(User)
        .where(User.id == user_id)
        .values(coins=User.coins + coins, co2_saved=User.co2_saved + co2, xp=User.xp + xp)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        msg = f"User {user_id} not found"
        raise NotFoundError(msg)


async def complete_reservation(
    db: AsyncSession,
    reservation_id: int,
    override_coins: int | None = None,
    override_xp: int | None = None,
) -> Settlement:
    """
    Settle a PENDING reservation exactly once.

    Credits ``override_coins`` (default 50) coins, ``override_xp`` (default
    50) XP and 2.5 kg CO2 for green slots (0.5 kg otherwise). The stored
    ``earned_coins`` is overwritten with the credited amount.

    Raises:
        NotFoundError: unknown reservation, or its user no longer exists.
        AlreadyCompletedError: reservation already settled.
        SettlementConflictError: the store refused the write under contention.
    """
    coins = _check_override(override_coins, "earnedCoins")
    xp = _check_override(override_xp, "earnedXp")
    coins = DEFAULT_SETTLEMENT_COINS if coins is None else coins
    xp = DEFAULT_SETTLEMENT_XP if xp is None else xp

    reservation = await require_reservation(db, reservation_id, fresh=True)
    if reservation.status == ReservationStatus.COMPLETED.value:
        msg = f"Reservation {reservation_id} is already completed"
        raise AlreadyCompletedError(msg)

    user_id = reservation.user_id
    co2 = co2_credit(reservation.is_green)

    try:
        result = await db.execute(
            update(Reservation)
            .where(
                Reservation.id == reservation_id,
                Reservation.status == ReservationStatus.PENDING.value,
            )
            .values(
                status=ReservationStatus.COMPLETED.value,
                earned_coins=coins,
                completed_at=datetime.now(timezone.utc),
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            msg = f"Reservation {reservation_id} is already completed"
            raise AlreadyCompletedError(msg)

        await _credit_user(db, user_id, coins, co2, xp)
        await db.commit()
    except OperationalError as e:
        await db.rollback()
        logger.warning("settlement_conflict", reservation_id=reservation_id, error=str(e))
        msg = f"Reservation {reservation_id} is being completed by another request"
        raise SettlementConflictError(msg) from e
    except Exception:
        await db.rollback()
        raise

    logger.info(
        "reservation_completed",
        reservation_id=reservation_id,
        user_id=user_id,
        coins=coins,
        xp=xp,
        co2_saved=co2,
    )

    # Balances are already committed; a failed award must not fail the settlement
    try:
        if await award_badge(db, user_id, FIRST_CHARGE_BADGE):
            await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.warning("badge_award_failed", user_id=user_id, badge=FIRST_CHARGE_BADGE, error=str(e))

    await db.refresh(reservation)
    user = await db.get(User, user_id, populate_existing=True)
    return Settlement(reservation=reservation, user=user, coins=coins, xp=xp, co2_saved=co2)
