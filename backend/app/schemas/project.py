"""
Project and Facebook credential schemas.
"""
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class ProjectCreate(BaseModel):
    """Create a project together with its Facebook credentials."""
    class Config:
        str_strip_whitespace = True

    name: str = Field(..., min_length=1, description="Project name")
    access_token: str = Field(..., min_length=1, description="Meta access token used for every call")
    ad_account_id: str = Field(..., min_length=1, description="Ad account ID, with or without the act_ prefix")
    page_id: str = Field(..., min_length=1, description="Facebook page the creatives are published from")


class ProjectResponse(BaseModel):
    id: int
    name: str
    created_at: Optional[datetime] = None
    ad_account_id: Optional[str] = None
    page_id: Optional[str] = None
    has_credentials: bool = False
