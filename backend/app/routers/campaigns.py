"""
Campaign routes: create campaigns (optionally with an ad set, creatives and
ads in one request) and read campaigns, ad sets and insights from Meta.
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List
import logging

from app.database import get_db
from app.dependencies import (
    get_meta_ads_service,
    get_provisioner,
    to_http_exception,
    to_targeting_spec,
)
from app.models import Campaign
from app.schemas import (
    AdSetResponse,
    CampaignInsightRow,
    CreateCampaignRequest,
    CreateCampaignResponse,
    MetaCampaign,
)
from app.services.meta_ads_service import MetaAdsService
from app.services.provisioning import (
    ProvisioningError,
    ResourceProvisioner,
    TargetingSpec,
    is_placeholder,
    normalize_targeting,
)

router = APIRouter(prefix="/api/campaigns", tags=["campaigns"])
logger = logging.getLogger(__name__)

# Audience used in full mode when the request carries no targeting
DEFAULT_TARGETING = TargetingSpec(countries=["US"], age_min=18, age_max=65)


@router.get("", response_model=List[MetaCampaign])
async def list_campaigns(
    project_id: int = Query(...),
    service: MetaAdsService = Depends(get_meta_ads_service),
):
    """List campaigns in the project's ad account"""
    try:
        return await service.list_campaigns(project_id)
    except ProvisioningError as e:
        raise to_http_exception(e)


@router.get("/adsets", response_model=List[AdSetResponse])
async def list_all_adsets(
    project_id: int = Query(...),
    service: MetaAdsService = Depends(get_meta_ads_service),
):
    """List every ad set in the project's ad account"""
    try:
        return await service.list_adsets(project_id)
    except ProvisioningError as e:
        raise to_http_exception(e)


@router.get("/{campaign_id}/adsets", response_model=List[AdSetResponse])
async def list_campaign_adsets(
    campaign_id: str,
    project_id: int = Query(...),
    service: MetaAdsService = Depends(get_meta_ads_service),
):
    """List the ad sets of one campaign"""
    try:
        return await service.list_adsets(project_id, campaign_id=campaign_id)
    except ProvisioningError as e:
        raise to_http_exception(e)


@router.get("/{campaign_id}/insights", response_model=List[CampaignInsightRow])
async def get_campaign_insights(
    campaign_id: str,
    project_id: int = Query(...),
    date_preset: str = Query("last_7d"),
    service: MetaAdsService = Depends(get_meta_ads_service),
):
    """Daily insights for a campaign, straight from Meta"""
    try:
        return await service.get_campaign_insights(project_id, campaign_id, date_preset)
    except ProvisioningError as e:
        raise to_http_exception(e)


@router.post("", response_model=CreateCampaignResponse)
async def create_campaign(
    payload: CreateCampaignRequest,
    db: Session = Depends(get_db),
    provisioner: ResourceProvisioner = Depends(get_provisioner),
):
    """
    Create a campaign on Meta and cache it locally.

    When ad_set_name is set an ad set is created under the new campaign, and
    for selected_video_ids creatives and ads follow. Anything created on Meta
    stays there if a later step fails.
    """
    full_mode = bool(payload.ad_set_name and payload.ad_set_name.strip())
    if full_mode and payload.daily_budget is None:
        raise HTTPException(status_code=400, detail="daily_budget is required when ad_set_name is set")

    targeting = to_targeting_spec(payload.targeting) or DEFAULT_TARGETING

    try:
        campaign_id = await provisioner.create_campaign(
            payload.project_id,
            name=payload.name,
            objective=payload.objective,
            status=payload.status,
            special_ad_categories=["NONE"],
            spend_cap=payload.spend_cap,
            start_time=payload.start_time,
            stop_time=payload.stop_time,
            buying_type=payload.buying_type,
        )
    except ProvisioningError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.exception("Unexpected error creating campaign")
        raise HTTPException(status_code=500, detail=str(e))

    db.add(Campaign(
        project_id=payload.project_id,
        fb_campaign_id=campaign_id,
        name=payload.name,
        targeting_json=normalize_targeting(targeting) if full_mode else {},
        is_daily_budget=payload.daily_budget is not None,
        budget_amount=payload.daily_budget if payload.daily_budget is not None else (payload.spend_cap or 0),
    ))
    db.commit()

    response = CreateCampaignResponse(campaign_id=campaign_id)
    if not full_mode:
        return response

    try:
        response.ad_set_id = await provisioner.create_ad_set(
            payload.project_id,
            campaign_id=campaign_id,
            name=payload.ad_set_name,
            daily_budget=payload.daily_budget,
            status=payload.status,
            billing_event=payload.billing_event,
            optimization_goal=payload.optimization_goal,
            targeting=targeting,
            start_time=payload.start_time,
            stop_time=payload.stop_time,
            bid_amount=payload.bid_amount,
        )

        if payload.selected_video_ids:
            creative_ids, result = await provisioner.create_ads_for_videos(
                payload.project_id,
                response.ad_set_id,
                payload.selected_video_ids,
                status=payload.status,
                name_prefix=payload.ad_name or payload.name,
            )
            response.creative_ids = creative_ids
            response.ad_ids = result.ad_ids
            response.warning = result.error
            response.is_mock = any(is_placeholder(i) for i in creative_ids + result.ad_ids)
    except ProvisioningError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.exception(f"Unexpected error creating ad set for campaign {campaign_id}")
        raise HTTPException(status_code=500, detail=str(e))

    return response
