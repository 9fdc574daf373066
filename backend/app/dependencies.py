"""
Shared router dependencies and helpers for the provisioning endpoints.
"""
import logging
from typing import Optional

from fastapi import Depends, HTTPException
from sqlalchemy.orm import Session

from app.database import get_db
from app.models import Project
from app.schemas import TargetingRequest
from app.services.meta_ads_service import MetaAdsService
from app.services.provisioning import (
    AllCreativesFailedError,
    GraphClient,
    NotFoundError,
    ProvisioningError,
    RemoteRejection,
    ResourceProvisioner,
    TargetingSpec,
    ValidationError,
)

logger = logging.getLogger(__name__)


def get_graph_client() -> GraphClient:
    return GraphClient()


def get_provisioner(
    db: Session = Depends(get_db),
    client: GraphClient = Depends(get_graph_client),
) -> ResourceProvisioner:
    return ResourceProvisioner(db, client=client)


def get_meta_ads_service(
    db: Session = Depends(get_db),
    client: GraphClient = Depends(get_graph_client),
) -> MetaAdsService:
    return MetaAdsService(db, client=client)


def get_project_or_404(project_id: int, db: Session) -> Project:
    project = db.query(Project).filter(Project.id == project_id).first()
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


def to_http_exception(error: ProvisioningError) -> HTTPException:
    """Map a provisioning failure onto the HTTP status the API reports it with."""
    if isinstance(error, NotFoundError):
        return HTTPException(status_code=404, detail=error.message)
    if isinstance(error, (ValidationError, RemoteRejection, AllCreativesFailedError)):
        return HTTPException(status_code=400, detail=error.message)
    return HTTPException(status_code=500, detail=error.message)


def to_targeting_spec(targeting: Optional[TargetingRequest]) -> Optional[TargetingSpec]:
    if targeting is None:
        return None
    return TargetingSpec(**targeting.model_dump())
