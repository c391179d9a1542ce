"""Badge catalog seed data."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from smartcharge.db.models import Badge

logger = logging.getLogger(__name__)

BADGE_SEED_DATA: list[dict] = [
    {
        "slug": "first_charge",
        "name": "First Charge",
        "icon": "zap",
        "description": "Complete your first charging session",
        "sort_order": 1,
    },
    {
        "slug": "eco_warrior",
        "name": "Eco Warrior",
        "icon": "leaf",
        "description": "Charge during ten eco slots",
        "sort_order": 2,
    },
    {
        "slug": "night_owl",
        "name": "Night Owl",
        "icon": "moon",
        "description": "Charge between 23:00 and 06:00 when the grid is quiet",
        "sort_order": 3,
    },
    {
        "slug": "co2_saver",
        "name": "CO2 Saver",
        "icon": "cloud",
        "description": "Save 25 kg of CO2 through green charging",
        "sort_order": 4,
    },
    {
        "slug": "explorer",
        "name": "Explorer",
        "icon": "map-pin",
        "description": "Charge at five different stations",
        "sort_order": 5,
    },
    {
        "slug": "loyal_driver",
        "name": "Loyal Driver",
        "icon": "award",
        "description": "Complete fifty charging sessions",
        "sort_order": 6,
    },
]


async def seed_badges(db: AsyncSession) -> int:
    """Insert missing badges and refresh existing ones by slug. Returns catalog size."""
    existing = {b.slug: b for b in (await db.execute(select(Badge))).scalars()}

    for badge_data in BADGE_SEED_DATA:
        badge = existing.get(badge_data["slug"])
        if badge is None:
            db.add(Badge(**badge_data))
        else:
            for field, value in badge_data.items():
                setattr(badge, field, value)

    await db.commit()
    logger.info("Seeded %d badges", len(BADGE_SEED_DATA))
    return len(BADGE_SEED_DATA)
