"""
Campaign schemas.
"""
from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from decimal import Decimal

from .ad_set import TargetingRequest


class MetaCampaign(BaseModel):
    """Meta campaign info."""
    id: str = Field(..., description="Campaign ID")
    name: str = Field(..., description="Campaign name")
    status: Optional[str] = Field(None, description="Campaign status (ACTIVE, PAUSED, etc)")
    objective: Optional[str] = Field(None, description="Campaign objective")
    created_time: Optional[str] = Field(None, description="When campaign was created")


class CreateCampaignRequest(BaseModel):
    """
    Request to create a campaign.

    Only the campaign is created unless ad_set_name is set; then an ad set
    follows, and creatives plus ads for selected_video_ids after that.
    """
    project_id: int
    name: str = Field(..., description="Campaign name")
    objective: str = Field("OUTCOME_TRAFFIC", description="Campaign objective")
    status: str = Field("PAUSED", description="Initial campaign status")
    spend_cap: Optional[Decimal] = Field(None, description="Spend cap in major currency units")
    start_time: Optional[datetime] = None
    stop_time: Optional[datetime] = None
    buying_type: str = Field("AUCTION")

    # Full mode
    ad_set_name: Optional[str] = None
    daily_budget: Optional[Decimal] = Field(None, gt=0, description="Ad set daily budget in major currency units")
    billing_event: str = Field("IMPRESSIONS")
    optimization_goal: str = Field("LINK_CLICKS")
    bid_amount: Optional[Decimal] = None
    targeting: Optional[TargetingRequest] = None
    selected_video_ids: List[str] = Field(default_factory=list)
    ad_name: Optional[str] = None


class CreateCampaignResponse(BaseModel):
    campaign_id: str
    ad_set_id: Optional[str] = None
    creative_ids: List[str] = Field(default_factory=list)
    ad_ids: List[str] = Field(default_factory=list)
    is_mock: bool = False
    warning: Optional[str] = None
