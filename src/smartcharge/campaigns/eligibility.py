"""Campaign applicability and visibility rules.

Pure functions over campaign-like objects (``status``, ``end_date``,
``station_id``, ``coin_reward``, ``id``) so they can be tested without a
database. The SQL prefilter in ``campaigns.service`` mirrors
``is_active_and_applicable``.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Protocol

from smartcharge.db.models import CampaignStatus


class CampaignLike(Protocol):
    id: int
    status: str
    end_date: datetime | None
    station_id: int | None
    coin_reward: int


def as_utc(value: datetime) -> datetime:
    """SQLite hands back naive datetimes; they are stored as UTC."""
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value


def is_active(campaign: CampaignLike, now: datetime) -> bool:
    """ACTIVE and not past its end date (no end date never expires)."""
    if campaign.status != CampaignStatus.ACTIVE.value:
        return False
    return campaign.end_date is None or as_utc(campaign.end_date) >= as_utc(now)


def is_active_and_applicable(campaign: CampaignLike, station_id: int, now: datetime) -> bool:
    """Active, and either global or scoped to this station."""
    if not is_active(campaign, now):
        return False
    return campaign.station_id is None or campaign.station_id == station_id


def matched_badges(target_badge_ids: Iterable[int], held_badge_ids: Iterable[int]) -> set[int] | None:
    """Badges that justify showing a campaign, or None if it must be hidden.

    An untargeted campaign matches with an empty set.
    """
    targets = set(target_badge_ids)
    if not targets:
        return set()
    overlap = targets & set(held_badge_ids)
    return overlap or None


def offer_sort_key(campaign: CampaignLike) -> tuple[int, int]:
    """Highest coin reward first, then lowest id."""
    return (-campaign.coin_reward, campaign.id)
