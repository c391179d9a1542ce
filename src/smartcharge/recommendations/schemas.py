"""Canonical scored-station shape and the one place external payloads are mapped onto it.

Scoring services in the wild answer with ``stationId``, ``station_id`` or Go's
``StationID``; everything past ``normalize_scored_station`` only sees
``ScoredStation``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import Field

from smartcharge.schemas import CamelModel


class ScoredStation(CamelModel):
    station_id: int
    score: float
    components: dict[str, float] = Field(default_factory=dict)
    explanation: str = ""


class RecommendResponse(CamelModel):
    algorithm: str
    results: list[ScoredStation]


def _fold(key: str) -> str:
    """stationId, station_id, StationID all fold to "stationid"."""
    return key.replace("_", "").lower()


_CANONICAL = {_fold(name): name for name in ScoredStation.model_fields}


def normalize_scored_station(raw: Mapping[str, Any]) -> ScoredStation:
    """Map one external scored-station object onto the canonical model.

    Raises:
        pydantic.ValidationError: required fields missing or mistyped.
    """
    mapped = {_CANONICAL[_fold(k)]: v for k, v in raw.items() if _fold(k) in _CANONICAL}
    if mapped.get("components") is None:
        mapped.pop("components", None)
    if mapped.get("explanation") is None:
        mapped.pop("explanation", None)
    return ScoredStation.model_validate(mapped)


def parse_scorer_payload(payload: Any) -> tuple[str | None, list[ScoredStation]]:
    """Unwrap a scorer response into (algorithm, results).

    Accepts a bare list, ``{algorithm, results}``, or either of those inside
    the ``{success, data}`` envelope. Key casing is folded like above.
    """
    if isinstance(payload, Mapping):
        folded = {_fold(k): v for k, v in payload.items()}
        if "data" in folded and "success" in folded:
            return parse_scorer_payload(folded["data"])
        algorithm = folded.get("algorithm")
        items = folded.get("results") or []
    elif isinstance(payload, list):
        algorithm, items = None, payload
    else:
        msg = f"Unexpected scorer payload type: {type(payload).__name__}"
        raise ValueError(msg)

    return algorithm, [normalize_scored_station(item) for item in items]
