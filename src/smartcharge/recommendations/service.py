"""Station recommendations behind a swappable scorer."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol

import httpx
import structlog
from pydantic import ValidationError

from smartcharge.config import Settings
from smartcharge.errors import DomainError
from smartcharge.recommendations.schemas import ScoredStation, parse_scorer_payload
from smartcharge.recommendations.scoring import LinearScorer, ScoreRequest, StationFeatures
from smartcharge.stations.service import list_stations

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()


class Scorer(Protocol):
    name: str

    async def score(self, stations: Sequence[StationFeatures], request: ScoreRequest) -> list[ScoredStation]: ...


class RemoteScorer:
    """Delegates scoring to an external HTTP service."""

    def __init__(self, base_url: str, timeout: float = 5.0, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport
        self.name = "remote"

    async def score(self, stations: Sequence[StationFeatures], request: ScoreRequest) -> list[ScoredStation]:
        body = {
            "userId": request.user_id,
            "lat": request.lat,
            "lng": request.lng,
            "timeSlot": request.time_slot.isoformat(),
            "limit": request.limit,
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(f"{self.base_url}/recommend", json=body)
                response.raise_for_status()
                algorithm, results = parse_scorer_payload(response.json())
        except (httpx.HTTPError, ValueError, ValidationError) as e:
            logger.error("recommender_failed", url=self.base_url, error=str(e))
            msg = "Recommendation service unavailable"
            raise DomainError(msg) from e

        if algorithm:
            self.name = algorithm
        return results[: request.limit]


def get_scorer(settings: Settings) -> Scorer:
    if settings.recommender_url:
        return RemoteScorer(settings.recommender_url, timeout=settings.recommender_timeout_seconds)
    return LinearScorer()


async def recommend(db: AsyncSession, scorer: Scorer, request: ScoreRequest) -> list[ScoredStation]:
    """Score all stations for the driver's position and time slot."""
    stations = await list_stations(db)
    features = [
        StationFeatures(station_id=s.id, lat=s.lat, lng=s.lng, price=s.price, load=s.density)
        for s in stations
    ]
    results = await scorer.score(features, request)
    logger.info("recommendations_served", user_id=request.user_id, scorer=scorer.name, count=len(results))
    return results
