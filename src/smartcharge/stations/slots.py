"""Rolling 24-hour slot generator with load-based pricing.

Pure: the same ``now``, base price, station load and ``random.Random`` state
always produce the same slots.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from smartcharge.reservations.rewards import base_reward

SLOT_COUNT = 24

LOW_LOAD_PRICE_MULTIPLIER = 0.95
HIGH_LOAD_PRICE_MULTIPLIER = 1.15

# Grid load shape relative to the station's baseline: quiet nights, busy evenings
_HOURLY_LOAD_OFFSET = {
    **{h: -25 for h in (0, 1, 2, 3, 4, 5)},
    6: -15,
    7: 5,
    8: 15,
    9: 10,
    **{h: 0 for h in (10, 11, 12, 13, 14, 15)},
    16: 10,
    **{h: 20 for h in (17, 18, 19, 20)},
    21: 10,
    22: -5,
    23: -20,
}


@dataclass(frozen=True)
class Slot:
    hour: int
    label: str
    start_time: datetime
    is_green: bool
    coins: int
    load: int
    price: float


def density_level(load: int) -> str:
    """LOW below 40, MEDIUM below 70, HIGH otherwise."""
    if load < 40:
        return "LOW"
    if load < 70:
        return "MEDIUM"
    return "HIGH"


def price_multiplier(load: int) -> float:
    if load < 30:
        return LOW_LOAD_PRICE_MULTIPLIER
    if load > 70:
        return HIGH_LOAD_PRICE_MULTIPLIER
    return 1.0


def slot_price(base_price: float, load: int) -> float:
    """Station base price adjusted for load, rounded to cents."""
    return round(base_price * price_multiplier(load), 2)


def generate_slots(
    now: datetime,
    base_price: float,
    station_load: int = 50,
    rng: random.Random | None = None,
) -> list[Slot]:
    """Build hourly slots for the 24 hours starting at the next full hour."""
    if rng is None:
        rng = random.Random(f"{now:%Y%m%d%H}:{station_load}")  # noqa: S311
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    first = now.replace(minute=0, second=0, microsecond=0) + timedelta(hours=1)
    slots: list[Slot] = []
    for offset in range(SLOT_COUNT):
        start = first + timedelta(hours=offset)
        load = station_load + _HOURLY_LOAD_OFFSET[start.hour] + rng.randint(-10, 10)
        load = max(0, min(100, load))
        is_green = density_level(load) == "LOW"
        end = start + timedelta(hours=1)
        slots.append(
            Slot(
                hour=start.hour,
                label=f"{start:%H:%M} - {end:%H:%M}",
                start_time=start,
                is_green=is_green,
                coins=base_reward(is_green),
                load=load,
                price=slot_price(base_price, load),
            )
        )
    return slots
