"""
Insight ingestion: pull daily campaign insights from Meta into the local
insights table.
"""
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from app.models import Campaign, Insight
from app.services.meta_ads_service import MetaAdsService
from app.services.provisioning import GraphClient, ProvisioningError

logger = logging.getLogger(__name__)


@dataclass
class SyncSummary:
    campaigns_synced: int = 0
    rows_written: int = 0
    skipped_campaigns: List[str] = field(default_factory=list)


def _upsert_insight(db: Session, campaign: Campaign, row: Dict[str, Any]) -> None:
    """Create/update the (campaign, date) row."""
    existing = (
        db.query(Insight)
        .filter(Insight.campaign_id == campaign.id, Insight.date == row["date"])
        .first()
    )
    insight = existing or Insight(campaign_id=campaign.id, date=row["date"])
    insight.impressions = int(row.get("impressions") or 0)
    insight.reach = int(row.get("reach") or 0)
    insight.spend = Decimal(str(row.get("spend") or 0))
    insight.cpi = Decimal(str(row.get("cpi") or 0))
    db.add(insight)


async def sync_project_insights(
    db: Session,
    project_id: int,
    date_preset: str = "last_7d",
    client: Optional[GraphClient] = None,
) -> SyncSummary:
    """
    Fetch insights for every cached campaign of a project and upsert them.

    A campaign whose fetch fails is logged and skipped; the others still sync.
    """
    service = MetaAdsService(db, client=client)
    summary = SyncSummary()

    campaigns = db.query(Campaign).filter(Campaign.project_id == project_id).all()
    for campaign in campaigns:
        try:
            rows = await service.get_campaign_insights(project_id, campaign.fb_campaign_id, date_preset)
        except ProvisioningError as e:
            logger.warning(f"Skipping insights for campaign {campaign.fb_campaign_id}: {e.message}")
            summary.skipped_campaigns.append(campaign.fb_campaign_id)
            continue

        for row in rows:
            if row.get("date") is None:
                continue
            _upsert_insight(db, campaign, row)
            summary.rows_written += 1
        db.commit()
        summary.campaigns_synced += 1

    logger.info(
        f"Insights sync for project {project_id}: {summary.campaigns_synced} campaigns, "
        f"{summary.rows_written} rows, {len(summary.skipped_campaigns)} skipped"
    )
    return summary
