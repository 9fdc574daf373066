"""
Pydantic schemas organized by domain.
"""

from .project import (
    ProjectCreate,
    ProjectResponse,
)

from .ad_set import (
    TargetingRequest,
    CreateAdSetRequest,
    CreateAdSetResponse,
    AdSetResponse,
)

from .campaign import (
    MetaCampaign,
    CreateCampaignRequest,
    CreateCampaignResponse,
)

from .ads import (
    CreateAdCreativesRequest,
    CreateAdCreativesResponse,
    CreateAdsRequest,
    CreateAdsResponse,
    CreateAdsForAdSetRequest,
    CreateAdsForAdSetResponse,
    FormatTestResult,
    FormatTestResponse,
)

from .video import (
    VideoResponse,
    VideoUploadResult,
    VideoUploadResponse,
)

from .insight import (
    CampaignInsightRow,
    InsightResponse,
    InsightSyncResponse,
)

__all__ = [
    # Project
    "ProjectCreate",
    "ProjectResponse",
    # Ad set
    "TargetingRequest",
    "CreateAdSetRequest",
    "CreateAdSetResponse",
    "AdSetResponse",
    # Campaign
    "MetaCampaign",
    "CreateCampaignRequest",
    "CreateCampaignResponse",
    # Creatives and ads
    "CreateAdCreativesRequest",
    "CreateAdCreativesResponse",
    "CreateAdsRequest",
    "CreateAdsResponse",
    "CreateAdsForAdSetRequest",
    "CreateAdsForAdSetResponse",
    "FormatTestResult",
    "FormatTestResponse",
    # Video
    "VideoResponse",
    "VideoUploadResult",
    "VideoUploadResponse",
    # Insight
    "CampaignInsightRow",
    "InsightResponse",
    "InsightSyncResponse",
]
