"""Campaign registry and eligibility engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

import structlog
from sqlalchemy import Select, or_, select
from sqlalchemy.orm import joinedload, selectinload

from smartcharge.auth.service import require_user
from smartcharge.campaigns.eligibility import is_active, is_active_and_applicable, matched_badges, offer_sort_key
from smartcharge.db.models import Badge, Campaign, CampaignStatus
from smartcharge.errors import InvalidInputError, NotFoundError
from smartcharge.gamification.badge_service import get_badges_by_ids, get_user_badges
from smartcharge.stations.service import require_owned_station

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from smartcharge.auth.dependencies import Caller

logger = structlog.get_logger()


@dataclass
class CampaignOffer:
    campaign: Campaign
    matched_badges: list[Badge] = field(default_factory=list)


@dataclass
class UserCampaigns:
    offers: list[CampaignOffer]
    user_badges: list[Badge]


def _with_relations(stmt: Select) -> Select:
    return stmt.options(selectinload(Campaign.target_badges), joinedload(Campaign.station))


def active_campaigns_query(now: datetime, station_id: int | None = None) -> Select:
    """ACTIVE, unexpired campaigns; with a station, only global or that station's."""
    stmt = select(Campaign).where(
        Campaign.status == CampaignStatus.ACTIVE.value,
        or_(Campaign.end_date.is_(None), Campaign.end_date >= now),
    )
    if station_id is not None:
        stmt = stmt.where(or_(Campaign.station_id.is_(None), Campaign.station_id == station_id))
    return stmt


# ---------------------------------------------------------------------------
# Booking bonus
# ---------------------------------------------------------------------------


async def best_campaign_bonus(
    db: AsyncSession, station_id: int, now: datetime | None = None
) -> tuple[Campaign | None, int]:
    """The newest active campaign applicable to a station and its coin bonus."""
    now = now or datetime.now(timezone.utc)
    result = await db.execute(
        active_campaigns_query(now, station_id).order_by(Campaign.created_at.desc(), Campaign.id.desc())
    )
    # SQLite compares end dates as text; confirm each candidate in Python
    for campaign in result.scalars():
        if is_active_and_applicable(campaign, station_id, now):
            return campaign, campaign.coin_reward or 0
    return None, 0


# ---------------------------------------------------------------------------
# Eligibility
# ---------------------------------------------------------------------------


async def campaigns_for_user(
    db: AsyncSession,
    user_id: int,
    now: datetime | None = None,
    owner_id: int | None = None,
) -> UserCampaigns:
    """Campaigns visible to a user given the badges they hold.

    Badge-targeted campaigns are shown only when the user holds at least one
    target badge; untargeted campaigns are shown to everyone.
    """
    now = now or datetime.now(timezone.utc)
    await require_user(db, user_id)
    held = await get_user_badges(db, user_id)
    held_by_id = {b.id: b for b in held}

    stmt = active_campaigns_query(now)
    if owner_id is not None:
        stmt = stmt.where(Campaign.owner_id == owner_id)
    candidates = (await db.execute(_with_relations(stmt))).unique().scalars().all()

    offers = []
    for campaign in candidates:
        if not is_active(campaign, now):
            continue
        matched = matched_badges((b.id for b in campaign.target_badges), held_by_id)
        if matched is None:
            continue
        offers.append(CampaignOffer(campaign, [held_by_id[i] for i in sorted(matched)]))

    offers.sort(key=lambda o: offer_sort_key(o.campaign))
    return UserCampaigns(offers=offers, user_badges=held)


# ---------------------------------------------------------------------------
# Operator management
# ---------------------------------------------------------------------------


async def list_owner_campaigns(db: AsyncSession, caller: Caller) -> list[Campaign]:
    stmt = _with_relations(select(Campaign).where(Campaign.owner_id == caller.user_id)).order_by(
        Campaign.created_at.desc(), Campaign.id.desc()
    )
    return list((await db.execute(stmt)).unique().scalars())


async def get_owned_campaign(db: AsyncSession, caller: Caller, campaign_id: int) -> Campaign:
    stmt = _with_relations(select(Campaign).where(Campaign.id == campaign_id))
    campaign = (await db.execute(stmt)).unique().scalar_one_or_none()
    if campaign is None or campaign.owner_id != caller.user_id:
        msg = f"Campaign {campaign_id} not found"
        raise NotFoundError(msg)
    return campaign


async def _resolve_target_badges(db: AsyncSession, badge_ids: list[int]) -> list[Badge]:
    badges = await get_badges_by_ids(db, badge_ids)
    missing = set(badge_ids) - {b.id for b in badges}
    if missing:
        msg = f"Unknown badge ids: {sorted(missing)}"
        raise InvalidInputError(msg)
    return badges


async def create_campaign(db: AsyncSession, caller: Caller, fields: dict[str, Any]) -> Campaign:
    """Create a campaign owned by the caller. A station, if given, must be theirs."""
    fields = dict(fields)
    station_id = fields.pop("station_id", None)
    badge_ids = fields.pop("target_badge_ids", None) or []

    station = await require_owned_station(db, caller, station_id) if station_id is not None else None
    campaign = Campaign(owner_id=caller.user_id, **fields)
    campaign.station = station
    campaign.target_badges = await _resolve_target_badges(db, badge_ids)
    db.add(campaign)
    await db.flush()

    logger.info("campaign_created", campaign_id=campaign.id, owner_id=caller.user_id, status=campaign.status)
    return campaign


async def update_campaign(db: AsyncSession, caller: Caller, campaign_id: int, changes: dict[str, Any]) -> Campaign:
    """Apply a partial update. ``station_id: None`` makes the campaign global."""
    campaign = await get_owned_campaign(db, caller, campaign_id)
    changes = dict(changes)

    if "station_id" in changes:
        station_id = changes.pop("station_id")
        campaign.station = await require_owned_station(db, caller, station_id) if station_id is not None else None
    if "target_badge_ids" in changes:
        campaign.target_badges = await _resolve_target_badges(db, changes.pop("target_badge_ids") or [])
    for name, value in changes.items():
        setattr(campaign, name, value)

    await db.flush()
    logger.info("campaign_updated", campaign_id=campaign.id, status=campaign.status)
    return campaign


async def delete_campaign(db: AsyncSession, caller: Caller, campaign_id: int) -> None:
    campaign = await get_owned_campaign(db, caller, campaign_id)
    await db.delete(campaign)
    await db.flush()
    logger.info("campaign_deleted", campaign_id=campaign_id)
