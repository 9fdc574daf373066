"""
Ad set routes: create ad sets, attach ads to an existing ad set, and a
diagnostic that tries every ad payload format.
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from typing import Optional
import logging

from app.dependencies import get_provisioner, to_http_exception, to_targeting_spec
from app.schemas import (
    CreateAdSetRequest,
    CreateAdSetResponse,
    CreateAdsForAdSetRequest,
    CreateAdsForAdSetResponse,
    FormatTestResponse,
    FormatTestResult,
)
from app.services.provisioning import ProvisioningError, ResourceProvisioner, is_placeholder

router = APIRouter(prefix="/api/adsets", tags=["adsets"])
logger = logging.getLogger(__name__)


@router.post("", response_model=CreateAdSetResponse)
async def create_adset(
    payload: CreateAdSetRequest,
    provisioner: ResourceProvisioner = Depends(get_provisioner),
):
    """Create an ad set; with selected_video_ids, creatives and ads are created under it too"""
    try:
        ad_set_id = await provisioner.create_ad_set(
            payload.project_id,
            campaign_id=payload.campaign_id,
            name=payload.name,
            daily_budget=payload.daily_budget,
            status=payload.status,
            billing_event=payload.billing_event,
            optimization_goal=payload.optimization_goal,
            targeting=to_targeting_spec(payload.targeting),
            start_time=payload.start_time,
            stop_time=payload.stop_time,
            bid_amount=payload.bid_amount,
            bid_strategy=payload.bid_strategy,
        )
        response = CreateAdSetResponse(id=ad_set_id)

        if payload.selected_video_ids:
            creative_ids, result = await provisioner.create_ads_for_videos(
                payload.project_id,
                ad_set_id,
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
        logger.exception("Unexpected error creating ad set")
        raise HTTPException(status_code=500, detail=str(e))

    return response


@router.post("/{ad_set_id}/ads", response_model=CreateAdsForAdSetResponse)
async def create_ads_for_adset(
    ad_set_id: str,
    payload: CreateAdsForAdSetRequest,
    provisioner: ResourceProvisioner = Depends(get_provisioner),
):
    """
    Create ads in an existing ad set, either from videos (creatives are made
    first) or from existing creatives. is_mock is set when any returned id is
    a placeholder.
    """
    if not payload.name or not payload.name.strip():
        raise HTTPException(status_code=400, detail="Ad name is required")
    if not payload.video_ids and not payload.creative_ids:
        raise HTTPException(status_code=400, detail="Either video_ids or creative_ids must be provided")

    try:
        if payload.video_ids:
            creative_ids, result = await provisioner.create_ads_for_videos(
                payload.project_id,
                ad_set_id,
                payload.video_ids,
                status=payload.status,
                name_prefix=payload.name,
            )
        else:
            creative_ids = payload.creative_ids
            result = await provisioner.create_ads(
                payload.project_id,
                ad_set_id,
                creative_ids,
                status=payload.status,
                name_prefix=payload.name,
            )
    except ProvisioningError as e:
        raise to_http_exception(e)

    return CreateAdsForAdSetResponse(
        ad_ids=result.ad_ids,
        creative_ids=creative_ids,
        is_mock=any(is_placeholder(i) for i in creative_ids + result.ad_ids),
        error=result.error,
    )


@router.get("/test-ad-creation", response_model=FormatTestResponse)
async def test_ad_creation(
    project_id: int = Query(...),
    ad_set_id: str = Query(...),
    creative_id: str = Query(...),
    ad_name: Optional[str] = Query("Test Ad Creation"),
    provisioner: ResourceProvisioner = Depends(get_provisioner),
):
    """
    Try every ad payload format against a real ad set and creative.
    Each successful format creates a (paused) ad.
    """
    try:
        outcomes = await provisioner.test_all_ad_formats(project_id, ad_set_id, creative_id, ad_name)
    except ProvisioningError as e:
        raise to_http_exception(e)

    results = {
        fmt.value: FormatTestResult(success=outcome.success, format=fmt.value, result=outcome.raw)
        for fmt, outcome in outcomes.items()
    }
    return FormatTestResponse(
        message="Ad creation test completed",
        ad_set_id=ad_set_id,
        creative_id=creative_id,
        ad_name=ad_name,
        results=results,
    )
