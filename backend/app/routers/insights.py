"""
Stored campaign insights for a project and the sync job that fills them.
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List
import logging

from app.database import get_db
from app.dependencies import get_graph_client, get_project_or_404
from app.models import Campaign, Insight
from app.schemas import InsightResponse, InsightSyncResponse
from app.services.insights_sync import sync_project_insights
from app.services.provisioning import GraphClient

router = APIRouter(prefix="/api/projects/{project_id}/insights", tags=["insights"])
logger = logging.getLogger(__name__)


@router.get("", response_model=List[InsightResponse])
def list_insights(project_id: int, db: Session = Depends(get_db)):
    """All stored insight rows for the project's cached campaigns"""
    get_project_or_404(project_id, db)
    return (
        db.query(Insight)
        .join(Campaign, Insight.campaign_id == Campaign.id)
        .filter(Campaign.project_id == project_id)
        .order_by(Insight.date, Insight.campaign_id)
        .all()
    )


@router.post("/sync", response_model=InsightSyncResponse)
async def sync_insights(
    project_id: int,
    date_preset: str = Query("last_7d"),
    db: Session = Depends(get_db),
    client: GraphClient = Depends(get_graph_client),
):
    """Pull insights from Meta for every cached campaign and upsert them by (campaign, date)"""
    get_project_or_404(project_id, db)
    summary = await sync_project_insights(db, project_id, date_preset=date_preset, client=client)
    return InsightSyncResponse(
        campaigns_synced=summary.campaigns_synced,
        rows_written=summary.rows_written,
        skipped_campaigns=summary.skipped_campaigns,
    )
