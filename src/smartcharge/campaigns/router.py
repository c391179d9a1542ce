"""Campaign router — all /api/v1/campaigns/* endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from smartcharge.auth.dependencies import Caller, get_caller, require_operator
from smartcharge.campaigns.schemas import (
    CampaignCreateRequest,
    CampaignListResponse,
    CampaignOfferResponse,
    CampaignResponse,
    CampaignsForUserResponse,
    CampaignUpdateRequest,
    StationRef,
)
from smartcharge.campaigns.service import (
    CampaignOffer,
    campaigns_for_user,
    create_campaign,
    delete_campaign,
    list_owner_campaigns,
    update_campaign,
)
from smartcharge.database import get_session
from smartcharge.db.models import Campaign
from smartcharge.gamification.schemas import BadgeResponse
from smartcharge.schemas import MAX_DB_INT, PathId

router = APIRouter(prefix="/api/v1/campaigns", tags=["Campaigns"])


def _station_ref(campaign: Campaign) -> StationRef | None:
    return StationRef.model_validate(campaign.station) if campaign.station is not None else None


def _campaign_response(campaign: Campaign) -> CampaignResponse:
    return CampaignResponse(
        id=campaign.id,
        owner_id=campaign.owner_id,
        station_id=campaign.station.id if campaign.station is not None else None,
        title=campaign.title,
        description=campaign.description,
        status=campaign.status,
        target=campaign.target,
        discount=campaign.discount,
        end_date=campaign.end_date,
        coin_reward=campaign.coin_reward,
        target_badge_ids=sorted(b.id for b in campaign.target_badges),
        station=_station_ref(campaign),
        created_at=campaign.created_at,
    )


def _offer_response(offer: CampaignOffer) -> CampaignOfferResponse:
    c = offer.campaign
    return CampaignOfferResponse(
        id=c.id,
        title=c.title,
        description=c.description,
        target=c.target,
        discount=c.discount,
        coin_reward=c.coin_reward,
        end_date=c.end_date,
        station=_station_ref(c),
        matched_badges=[BadgeResponse.model_validate(b) for b in offer.matched_badges],
    )


@router.get("/for-user", response_model=CampaignsForUserResponse)
async def get_campaigns_for_user(
    owner_id: int | None = Query(None, alias="ownerId", ge=1, le=MAX_DB_INT),
    caller: Caller = Depends(get_caller),
    db: AsyncSession = Depends(get_session),
):
    """Active campaigns the caller qualifies for, best reward first."""
    result = await campaigns_for_user(db, caller.user_id, owner_id=owner_id)
    return CampaignsForUserResponse(
        campaigns=[_offer_response(o) for o in result.offers],
        user_badges=[BadgeResponse.model_validate(b) for b in result.user_badges],
    )


@router.get("", response_model=CampaignListResponse)
async def get_my_campaigns(
    caller: Caller = Depends(require_operator),
    db: AsyncSession = Depends(get_session),
):
    campaigns = await list_owner_campaigns(db, caller)
    return CampaignListResponse(campaigns=[_campaign_response(c) for c in campaigns])


@router.post("", response_model=CampaignResponse, status_code=201)
async def post_campaign(
    body: CampaignCreateRequest,
    caller: Caller = Depends(require_operator),
    db: AsyncSession = Depends(get_session),
):
    campaign = await create_campaign(db, caller, body.model_dump())
    await db.commit()
    return _campaign_response(campaign)


@router.put("/{campaign_id}", response_model=CampaignResponse)
async def put_campaign(
    campaign_id: PathId,
    body: CampaignUpdateRequest,
    caller: Caller = Depends(require_operator),
    db: AsyncSession = Depends(get_session),
):
    """Partial update of an owned campaign. ``stationId: null`` makes it global."""
    changes = body.model_dump(exclude_unset=True)
    nullable = {"station_id", "end_date"}
    changes = {k: v for k, v in changes.items() if v is not None or k in nullable}
    campaign = await update_campaign(db, caller, campaign_id, changes)
    await db.commit()
    return _campaign_response(campaign)


@router.delete("/{campaign_id}", status_code=204)
async def remove_campaign(
    campaign_id: PathId,
    caller: Caller = Depends(require_operator),
    db: AsyncSession = Depends(get_session),
):
    await delete_campaign(db, caller, campaign_id)
    await db.commit()
    return Response(status_code=204)
