"""Reservation router — all /api/v1/reservations/* endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from smartcharge.database import get_session
from smartcharge.reservations.schemas import (
    BalancesResponse,
    CompleteRequest,
    PendingRewardsResponse,
    ReservationCompletedResponse,
    ReservationCreatedResponse,
    ReservationCreateRequest,
    ReservationResponse,
)
from smartcharge.reservations.service import create_reservation
from smartcharge.reservations.settlement import complete_reservation
from smartcharge.schemas import PathId

router = APIRouter(prefix="/api/v1/reservations", tags=["Reservations"])


@router.post("", response_model=ReservationCreatedResponse, status_code=201)
async def post_reservation(
    body: ReservationCreateRequest,
    db: AsyncSession = Depends(get_session),
):
    """Book a charging slot. Rewards stay pending until the session completes."""
    booking = await create_reservation(
        db,
        user_id=body.user_id,
        station_id=body.station_id,
        date=body.date,
        hour=body.hour,
        is_green=body.is_green,
    )
    await db.commit()
    return ReservationCreatedResponse(
        reservation=ReservationResponse.model_validate(booking.reservation),
        pending_rewards=PendingRewardsResponse(
            coins=booking.pending_coins,
            co2_saved=booking.pending_co2,
            campaign_id=booking.campaign_id,
        ),
    )


@router.post("/{reservation_id}/complete", response_model=ReservationCompletedResponse)
async def post_complete(
    reservation_id: PathId,
    body: CompleteRequest | None = Body(None),
    db: AsyncSession = Depends(get_session),
):
    """Settle a reservation and credit the driver. Replays fail with 400."""
    body = body or CompleteRequest()
    settlement = await complete_reservation(
        db,
        reservation_id,
        override_coins=body.earned_coins,
        override_xp=body.earned_xp,
    )
    return ReservationCompletedResponse(
        reservation=ReservationResponse.model_validate(settlement.reservation),
        user=BalancesResponse.model_validate(settlement.user),
    )
