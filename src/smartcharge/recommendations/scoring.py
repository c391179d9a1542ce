"""Linear station scorer.

Weighted sum of four normalized components: forecast load, distance from
the driver, green tariff hours, and price.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime

from smartcharge.recommendations.schemas import ScoredStation

WEIGHTS = {"load": 0.4, "distance": 0.2, "green": 0.25, "price": 0.15}

GREEN_HOURS_START = 23
GREEN_HOURS_END = 6
GREEN_HOUR_SCORE = 25.0

MAX_DISTANCE_KM = 20.0
MAX_PRICE = 15.0


@dataclass(frozen=True)
class StationFeatures:
    station_id: int
    lat: float
    lng: float
    price: float
    load: int


@dataclass(frozen=True)
class ScoreRequest:
    user_id: int
    lat: float
    lng: float
    time_slot: datetime
    limit: int = 10


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    r = 6371.0
    p1, p2 = math.radians(lat1), math.radians(lat2)
    dl = math.radians(lon2 - lon1)
    dp = math.radians(lat2 - lat1)
    a = math.sin(dp / 2) ** 2 + math.cos(p1) * math.cos(p2) * math.sin(dl / 2) ** 2
    return 2 * r * math.asin(math.sqrt(a))


def normalize(value: float, lo: float, hi: float) -> float:
    """Scale value into 0..100, clamped. Degenerate ranges score 50."""
    if hi == lo:
        return 50.0
    return min(100.0, max(0.0, (value - lo) / (hi - lo) * 100))


def is_green_hour(hour: int) -> bool:
    return hour >= GREEN_HOURS_START or hour <= GREEN_HOURS_END


def explain(load: int, green_hour: bool, distance_km: float, price: float) -> str:
    if load < 30:
        parts = ["Low load"]
    elif load > 65:
        parts = ["High load"]
    else:
        parts = ["Moderate load"]
    if green_hour:
        parts.append("green tariff")
    if distance_km < 5:
        parts.append("nearby")
    if price < 7:
        parts.append("affordable")
    return " & ".join(parts)


def score_station(station: StationFeatures, request: ScoreRequest) -> ScoredStation:
    hour = request.time_slot.hour
    green_hour = is_green_hour(hour)
    distance = haversine_km(request.lat, request.lng, station.lat, station.lng)

    components = {
        "load": normalize(100 - station.load, 0, 100),
        "distance": normalize(max(0.0, MAX_DISTANCE_KM - distance), 0, MAX_DISTANCE_KM) * 2.5,
        "green": GREEN_HOUR_SCORE if green_hour else 0.0,
        "price": normalize(MAX_PRICE - station.price, 0, MAX_PRICE) * 1.5,
    }
    total = sum(components[name] * weight for name, weight in WEIGHTS.items())

    return ScoredStation(
        station_id=station.station_id,
        score=round(total, 4),
        components={k: round(v, 4) for k, v in components.items()},
        explanation=explain(station.load, green_hour, distance, station.price),
    )


def score_stations(stations: Sequence[StationFeatures], request: ScoreRequest) -> list[ScoredStation]:
    """Score every station, best first, truncated to request.limit."""
    scored = [score_station(s, request) for s in stations]
    scored.sort(key=lambda s: s.score, reverse=True)
    return scored[: max(0, request.limit)]


class LinearScorer:
    """In-process scorer used when no remote recommender is configured."""

    name = "linear_regression"

    async def score(self, stations: Sequence[StationFeatures], request: ScoreRequest) -> list[ScoredStation]:
        return score_stations(stations, request)
