"""
Campaign performance insight schemas.
"""
from pydantic import BaseModel, Field
from typing import Optional, List
import datetime


class CampaignInsightRow(BaseModel):
    """One day of insights as returned by Meta."""
    date: Optional[datetime.date] = None
    impressions: int = 0
    reach: int = 0
    spend: float = 0.0
    cpi: float = Field(0.0, description="Spend per mobile app install, 0 without installs")


class InsightResponse(BaseModel):
    """A stored daily insight row."""
    id: int
    campaign_id: int
    date: datetime.date
    impressions: int
    reach: int
    spend: float
    cpi: float

    class Config:
        from_attributes = True


class InsightSyncResponse(BaseModel):
    campaigns_synced: int
    rows_written: int
    skipped_campaigns: List[str] = Field(default_factory=list)
