"""
Ad account video schemas.
"""
from pydantic import BaseModel, Field
from typing import Optional, List


class VideoResponse(BaseModel):
    id: str
    title: str
    thumbnail_url: Optional[str] = None
    created_time: Optional[str] = None
    source: Optional[str] = None


class VideoUploadResult(BaseModel):
    """Outcome for one uploaded file."""
    file_name: str
    success: bool
    video_id: Optional[str] = None
    thumbnail_url: Optional[str] = None
    error: Optional[str] = None


class VideoUploadResponse(BaseModel):
    items: List[VideoUploadResult] = Field(default_factory=list)
    uploaded: int = 0
    failed: int = 0
