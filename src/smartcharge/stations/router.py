"""Station router — all /api/v1/stations/* endpoints."""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from smartcharge.auth.dependencies import Caller, get_caller, require_operator
from smartcharge.config import get_settings
from smartcharge.database import get_session
from smartcharge.recommendations.schemas import RecommendResponse
from smartcharge.recommendations.scoring import ScoreRequest
from smartcharge.recommendations.service import get_scorer, recommend
from smartcharge.schemas import PathId
from smartcharge.stations.schemas import (
    MyStationsResponse,
    OperatorStationResponse,
    OperatorStatsResponse,
    SlotResponse,
    SlotsResponse,
    StationCreateRequest,
    StationListResponse,
    StationResponse,
    StationUpdateRequest,
)
from smartcharge.stations.service import (
    create_station,
    list_stations,
    owned_station_stats,
    require_station,
    summarize_stations,
    update_station,
)
from smartcharge.stations.slots import generate_slots

router = APIRouter(prefix="/api/v1/stations", tags=["Stations"])


@router.get("", response_model=StationListResponse)
async def get_stations(db: AsyncSession = Depends(get_session)):
    """All stations for the driver map."""
    stations = await list_stations(db)
    return StationListResponse(stations=[StationResponse.model_validate(s) for s in stations])


@router.get("/mine", response_model=MyStationsResponse)
async def get_my_stations(
    caller: Caller = Depends(require_operator),
    db: AsyncSession = Depends(get_session),
):
    """Stations owned by the calling operator, with reservation counts and totals."""
    stats = await owned_station_stats(db, caller.user_id)
    summary = summarize_stations(stats)
    return MyStationsResponse(
        stats=OperatorStatsResponse.model_validate(summary),
        stations=[
            OperatorStationResponse(
                **StationResponse.model_validate(s.station).model_dump(),
                status=s.status,
                reservation_count=s.reservation_count,
                green_reservation_count=s.green_reservation_count,
                revenue=s.revenue,
            )
            for s in stats
        ],
    )


@router.get("/recommend", response_model=RecommendResponse)
async def get_recommendations(
    lat: float | None = Query(None, ge=-90, le=90),
    lng: float | None = Query(None, ge=-180, le=180),
    limit: int | None = Query(None, ge=1, le=50),
    caller: Caller = Depends(get_caller),
    db: AsyncSession = Depends(get_session),
):
    """Scored stations for the caller's position, best first."""
    settings = get_settings()
    scorer = get_scorer(settings)
    request = ScoreRequest(
        user_id=caller.user_id,
        lat=settings.default_lat if lat is None else lat,
        lng=settings.default_lng if lng is None else lng,
        time_slot=datetime.now(timezone.utc),
        limit=limit or settings.recommend_default_limit,
    )
    results = await recommend(db, scorer, request)
    return RecommendResponse(algorithm=scorer.name, results=results)


@router.post("", response_model=StationResponse, status_code=201)
async def post_station(
    body: StationCreateRequest,
    caller: Caller = Depends(require_operator),
    db: AsyncSession = Depends(get_session),
):
    """Register a station owned by the calling operator."""
    station = await create_station(db, caller, body.model_dump())
    await db.commit()
    return StationResponse.model_validate(station)


@router.get("/{station_id}", response_model=StationResponse)
async def get_station_detail(station_id: PathId, db: AsyncSession = Depends(get_session)):
    station = await require_station(db, station_id)
    return StationResponse.model_validate(station)


@router.patch("/{station_id}", response_model=StationResponse)
async def patch_station(
    station_id: PathId,
    body: StationUpdateRequest,
    caller: Caller = Depends(require_operator),
    db: AsyncSession = Depends(get_session),
):
    """Update name, price, address or baseline load of an owned station."""
    changes = {
        k: v for k, v in body.model_dump(exclude_unset=True).items() if v is not None or k == "address"
    }
    station = await update_station(db, caller, station_id, changes)
    await db.commit()
    return StationResponse.model_validate(station)


@router.get("/{station_id}/slots", response_model=SlotsResponse)
async def get_station_slots(station_id: PathId, db: AsyncSession = Depends(get_session)):
    """Bookable hourly slots for the next 24 hours, priced by expected load."""
    station = await require_station(db, station_id)
    slots = generate_slots(datetime.now(timezone.utc), station.price, station.density)
    return SlotsResponse(
        station_id=station.id,
        base_price=station.price,
        slots=[SlotResponse.model_validate(s) for s in slots],
    )
