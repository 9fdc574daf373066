"""
Ad creative and ad routes for callers that drive each step themselves.
"""
from fastapi import APIRouter, Depends
import logging

from app.dependencies import get_provisioner, to_http_exception
from app.schemas import (
    CreateAdCreativesRequest,
    CreateAdCreativesResponse,
    CreateAdsRequest,
    CreateAdsResponse,
)
from app.services.provisioning import ProvisioningError, ResourceProvisioner, is_placeholder

router = APIRouter(tags=["creatives"])
logger = logging.getLogger(__name__)


@router.post("/api/adcreatives", response_model=CreateAdCreativesResponse)
async def create_ad_creatives(
    payload: CreateAdCreativesRequest,
    provisioner: ResourceProvisioner = Depends(get_provisioner),
):
    """One video creative per video id; ids line up with video_ids"""
    try:
        creative_ids = await provisioner.create_ad_creatives(
            payload.project_id, payload.ad_set_id, payload.video_ids
        )
    except ProvisioningError as e:
        raise to_http_exception(e)

    return CreateAdCreativesResponse(
        creative_ids=creative_ids,
        is_mock=any(is_placeholder(i) for i in creative_ids),
    )


@router.post("/api/ads", response_model=CreateAdsResponse)
async def create_ads(
    payload: CreateAdsRequest,
    provisioner: ResourceProvisioner = Depends(get_provisioner),
):
    """One ad per creative id; ids line up with creative_ids"""
    try:
        result = await provisioner.create_ads(
            payload.project_id,
            payload.ad_set_id,
            payload.creative_ids,
            status=payload.status,
            name_prefix=payload.name_prefix,
        )
    except ProvisioningError as e:
        raise to_http_exception(e)

    return CreateAdsResponse(ad_ids=result.ad_ids, is_mock=result.has_placeholders, error=result.error)
