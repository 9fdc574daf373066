"""
Project management routes. A project carries the Facebook credentials every
provisioning call runs with.
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List
import logging

from app.database import get_db
from app.dependencies import get_project_or_404
from app.models import Project, FacebookAccount
from app.schemas import ProjectCreate, ProjectResponse

router = APIRouter(prefix="/api/projects", tags=["projects"])
logger = logging.getLogger(__name__)


def _project_response(project: Project) -> ProjectResponse:
    account = project.facebook_account
    return ProjectResponse(
        id=project.id,
        name=project.name,
        created_at=project.created_at,
        ad_account_id=account.ad_account_id if account else None,
        page_id=account.page_id if account else None,
        has_credentials=account is not None,
    )


@router.get("", response_model=List[ProjectResponse])
def list_projects(db: Session = Depends(get_db)):
    """List all projects"""
    projects = db.query(Project).order_by(Project.id).all()
    return [_project_response(p) for p in projects]


@router.post("", response_model=ProjectResponse, status_code=201)
def create_project(payload: ProjectCreate, db: Session = Depends(get_db)):
    """Create a project and its Facebook account in one transaction"""
    try:
        project = Project(name=payload.name.strip())
        db.add(project)
        db.flush()

        db.add(FacebookAccount(
            project_id=project.id,
            access_token=payload.access_token,
            ad_account_id=payload.ad_account_id.strip(),
            page_id=payload.page_id.strip(),
        ))
        db.commit()
        db.refresh(project)
    except Exception as e:
        db.rollback()
        logger.error(f"Error creating project: {e}")
        raise HTTPException(status_code=500, detail=f"Error creating project: {str(e)}")

    logger.info(f"Created project {project.id} ({project.name})")
    return _project_response(project)


@router.get("/{project_id}", response_model=ProjectResponse)
def get_project(project_id: int, db: Session = Depends(get_db)):
    """Get a single project"""
    return _project_response(get_project_or_404(project_id, db))
