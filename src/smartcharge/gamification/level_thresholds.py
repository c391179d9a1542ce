"""Driver level thresholds and computation.

Settlement grants 50 XP per session by default, so the first levels come
every handful of charges and then stretch out.
"""

from __future__ import annotations

LEVEL_THRESHOLDS: list[dict] = [
    {"level": 1, "title": "Plugged In", "xp_required": 0, "cumulative": 0},
    {"level": 2, "title": "Spark", "xp_required": 100, "cumulative": 100},
    {"level": 3, "title": "Current Rider", "xp_required": 400, "cumulative": 500},
    {"level": 4, "title": "Kilowatt Cruiser", "xp_required": 500, "cumulative": 1000},
    {"level": 5, "title": "Eco Commuter", "xp_required": 1000, "cumulative": 2000},
    {"level": 6, "title": "Grid Friend", "xp_required": 1500, "cumulative": 3500},
    {"level": 7, "title": "Off-Peak Pro", "xp_required": 2500, "cumulative": 6000},
    {"level": 8, "title": "Green Voltage", "xp_required": 4000, "cumulative": 10000},
    {"level": 9, "title": "Carbon Cutter", "xp_required": 6000, "cumulative": 16000},
    {"level": 10, "title": "Zero Emission Legend", "xp_required": 9000, "cumulative": 25000},
]


def compute_level(total_xp: int) -> dict:
    """Compute level info from total XP."""
    current = LEVEL_THRESHOLDS[0]
    next_level = LEVEL_THRESHOLDS[1]

    for i in range(len(LEVEL_THRESHOLDS) - 1):
        if total_xp >= LEVEL_THRESHOLDS[i]["cumulative"]:
            current = LEVEL_THRESHOLDS[i]
            next_level = LEVEL_THRESHOLDS[i + 1]

    if total_xp >= LEVEL_THRESHOLDS[-1]["cumulative"]:
        current = LEVEL_THRESHOLDS[-1]
        next_level = LEVEL_THRESHOLDS[-1]

    xp_into_level = total_xp - current["cumulative"]
    xp_for_level = next_level["cumulative"] - current["cumulative"]

    # Max level: avoid a zero-width progress bar
    if xp_for_level == 0:
        xp_for_level = 1

    return {
        "level": current["level"],
        "title": current["title"],
        "xp_into_level": xp_into_level,
        "xp_for_level": xp_for_level,
        "next_level": next_level["level"],
        "next_title": next_level["title"],
    }
