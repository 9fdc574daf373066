"""
Ad set and targeting schemas.
"""
from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from decimal import Decimal


class TargetingRequest(BaseModel):
    """Audience targeting. Empty lists are left out of the payload sent to Meta."""
    countries: List[str] = Field(default_factory=list, description="ISO country codes, e.g. ['US']")
    age_min: int = Field(18, ge=13, le=65)
    age_max: int = Field(65, ge=13, le=65)
    genders: List[int] = Field(default_factory=list, description="1=male, 2=female; empty for all")
    publisher_platforms: List[str] = Field(default_factory=list)
    device_platforms: List[str] = Field(default_factory=list)
    facebook_positions: List[str] = Field(default_factory=list)


class CreateAdSetRequest(BaseModel):
    """Request to create an ad set, optionally followed by creatives and ads."""
    project_id: int
    campaign_id: str = Field(..., description="Meta campaign ID")
    name: str = Field(..., description="Ad set name")
    daily_budget: Decimal = Field(..., gt=0, description="Daily budget in major currency units")
    status: str = Field("PAUSED", description="Initial ad set status")
    billing_event: str = Field("IMPRESSIONS")
    optimization_goal: str = Field("LINK_CLICKS")
    bid_amount: Optional[Decimal] = Field(None, description="Bid cap in major currency units")
    bid_strategy: Optional[str] = None
    targeting: Optional[TargetingRequest] = None
    start_time: Optional[datetime] = None
    stop_time: Optional[datetime] = None
    selected_video_ids: List[str] = Field(default_factory=list, description="Videos to turn into creatives and ads")
    ad_name: Optional[str] = Field(None, description="Name prefix for the created ads")


class CreateAdSetResponse(BaseModel):
    id: str
    creative_ids: List[str] = Field(default_factory=list)
    ad_ids: List[str] = Field(default_factory=list)
    is_mock: bool = False
    warning: Optional[str] = None


class AdSetResponse(BaseModel):
    """Meta ad set info. daily_budget is in major currency units."""
    id: str
    name: Optional[str] = None
    status: Optional[str] = None
    campaign_id: Optional[str] = None
    daily_budget: float = 0.0
    start_time: Optional[str] = None
    end_time: Optional[str] = None
