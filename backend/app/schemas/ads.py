"""
Ad creative and ad schemas.
"""
from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any


class CreateAdCreativesRequest(BaseModel):
    project_id: int
    ad_set_id: str
    video_ids: List[str] = Field(..., min_length=1)


class CreateAdCreativesResponse(BaseModel):
    creative_ids: List[str]
    is_mock: bool = False


class CreateAdsRequest(BaseModel):
    project_id: int
    ad_set_id: str
    creative_ids: List[str] = Field(..., min_length=1)
    status: str = "PAUSED"
    name_prefix: Optional[str] = None


class CreateAdsResponse(BaseModel):
    """ad_ids may contain mock_* placeholders; error is advisory only."""
    ad_ids: List[str]
    is_mock: bool = False
    error: Optional[str] = None


class CreateAdsForAdSetRequest(BaseModel):
    """Either video_ids (creatives are made first) or existing creative_ids."""
    project_id: int
    name: str = Field(..., description="Ad name prefix")
    video_ids: List[str] = Field(default_factory=list)
    creative_ids: List[str] = Field(default_factory=list)
    status: str = "PAUSED"


class CreateAdsForAdSetResponse(BaseModel):
    ad_ids: List[str]
    creative_ids: List[str] = Field(default_factory=list)
    is_mock: bool = False
    error: Optional[str] = None


class FormatTestResult(BaseModel):
    success: bool
    format: str
    result: Dict[str, Any] = Field(default_factory=dict)


class FormatTestResponse(BaseModel):
    message: str
    ad_set_id: str
    creative_id: str
    ad_name: str
    results: Dict[str, FormatTestResult]
