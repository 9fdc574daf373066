"""
Meta/Facebook Marketing API service.
Read side of the dashboard: campaigns, ad sets, insights, and the ad account's
video library (including uploads).
"""
import logging
from datetime import date, datetime
from typing import Optional, List, Dict, Any

from sqlalchemy.orm import Session

from app.services.provisioning import (
    CredentialResolver,
    GraphClient,
    RemoteRejection,
    thumbnail_from_video,
)

logger = logging.getLogger(__name__)

INSIGHT_FIELDS = "date_start,impressions,reach,spend,actions"
INSTALL_ACTION_TYPE = "mobile_app_install"


class MetaAdsService:
    """Service for reading from the Meta Marketing API on behalf of a project."""

    def __init__(self, db: Session, client: Optional[GraphClient] = None):
        self.db = db
        self.credentials = CredentialResolver(db)
        self.client = client or GraphClient()

    # ==================== Campaign Methods ====================

    async def list_campaigns(self, project_id: int) -> List[Dict[str, Any]]:
        """
        List campaigns for the project's ad account.

        Returns:
            List of campaign dicts (id, name, status, objective, created_time)
        """
        creds = self.credentials.resolve(project_id)
        data = await self.client.get(
            f"/{creds.ad_account_id}/campaigns",
            creds.access_token,
            {"fields": "id,name,status,objective,created_time", "limit": 100},
        )
        return data.get("data", [])

    # ==================== AdSet Methods ====================

    async def list_adsets(self, project_id: int, campaign_id: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        List ad sets for the ad account, optionally restricted to one campaign.

        Returns:
            List of ad set dicts
        """
        creds = self.credentials.resolve(project_id)
        params: Dict[str, Any] = {
            "fields": "id,name,status,daily_budget,campaign_id,start_time,end_time",
            "limit": 100,
        }
        if campaign_id:
            params["filtering"] = (
                f'[{{"field":"campaign.id","operator":"EQUAL","value":"{campaign_id}"}}]'
            )
        data = await self.client.get(f"/{creds.ad_account_id}/adsets", creds.access_token, params)
        return [self._adset_row(item) for item in data.get("data", [])]

    @staticmethod
    def _adset_row(item: Dict[str, Any]) -> Dict[str, Any]:
        # Meta returns budgets in minor units
        return {
            "id": item.get("id"),
            "name": item.get("name"),
            "status": item.get("status"),
            "campaign_id": item.get("campaign_id"),
            "daily_budget": MetaAdsService._safe_float(item.get("daily_budget")) / 100,
            "start_time": item.get("start_time"),
            "end_time": item.get("end_time"),
        }

    # ==================== Insights ====================

    async def get_campaign_insights(
        self,
        project_id: int,
        campaign_id: str,
        date_preset: str = "last_7d",
    ) -> List[Dict[str, Any]]:
        """
        Daily insight rows for a campaign.

        CPI is spend divided by the mobile_app_install action count, or 0 when
        the campaign recorded no installs.
        """
        creds = self.credentials.resolve(project_id)
        data = await self.client.get(
            f"/{campaign_id}/insights",
            creds.access_token,
            {"fields": INSIGHT_FIELDS, "date_preset": date_preset, "time_increment": 1},
        )
        return [self._insight_row(item) for item in data.get("data", [])]

    @staticmethod
    def _insight_row(item: Dict[str, Any]) -> Dict[str, Any]:
        spend = MetaAdsService._safe_float(item.get("spend"))
        installs = MetaAdsService._extract_action_value(item.get("actions"), {INSTALL_ACTION_TYPE})
        return {
            "date": MetaAdsService._parse_meta_date(item.get("date_start")),
            "impressions": MetaAdsService._safe_int(item.get("impressions")),
            "reach": MetaAdsService._safe_int(item.get("reach")),
            "spend": spend,
            "cpi": spend / installs if installs > 0 else 0.0,
        }

    # ==================== Video Methods ====================

    async def list_ad_videos(self, project_id: int) -> List[Dict[str, Any]]:
        """
        List videos in the ad account's video library.

        Returns:
            List of dicts with id, title, thumbnail_url, created_time, source
        """
        creds = self.credentials.resolve(project_id)
        data = await self.client.get(
            f"/{creds.ad_account_id}/advideos",
            creds.access_token,
            {"fields": "id,title,thumbnails,picture,created_time,source", "limit": 100},
        )
        return [
            {
                "id": item.get("id"),
                "title": item.get("title") or "Untitled Video",
                "thumbnail_url": thumbnail_from_video(item),
                "created_time": item.get("created_time"),
                "source": item.get("source"),
            }
            for item in data.get("data", [])
        ]

    async def upload_video(
        self,
        project_id: int,
        file_name: str,
        content: bytes,
        content_type: str = "video/mp4",
        title: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Upload a video file to the ad account.

        Returns:
            Dict with video_id and thumbnail_url (None if Meta has not generated one yet)
        """
        creds = self.credentials.resolve(project_id)
        result = await self.client.post_multipart(
            f"/{creds.ad_account_id}/advideos",
            creds.access_token,
            {"title": title or file_name},
            {"source": (file_name, content, content_type)},
        )
        video_id = result.get("id")
        if not video_id:
            raise RemoteRejection(f"Meta video upload: no video_id in response: {result}", payload=result)

        thumbnail_url = None
        try:
            thumb_data = await self.client.get(f"/{video_id}", creds.access_token, {"fields": "picture,thumbnails"})
            thumbnail_url = thumbnail_from_video(thumb_data)
            logger.info(f"Video {video_id} thumbnail: {thumbnail_url}")
        except RemoteRejection as e:
            logger.warning(f"Failed to fetch video thumbnail: {e.message}")

        return {"video_id": str(video_id), "thumbnail_url": thumbnail_url}

    # ==================== Helpers ====================

    @staticmethod
    def _safe_float(value: Any, default: float = 0.0) -> float:
        try:
            if value is None:
                return default
            return float(value)
        except (TypeError, ValueError):
            return default

    @staticmethod
    def _safe_int(value: Any, default: int = 0) -> int:
        try:
            if value is None:
                return default
            return int(float(value))
        except (TypeError, ValueError):
            return default

    @staticmethod
    def _parse_meta_date(value: Any) -> Optional[date]:
        if not value or not isinstance(value, str):
            return None
        try:
            return datetime.strptime(value[:10], "%Y-%m-%d").date()
        except ValueError:
            return None

    @staticmethod
    def _extract_action_value(
        items: Any,
        action_types: set[str],
    ) -> float:
        if not isinstance(items, list):
            return 0.0
        for action in items:
            if not isinstance(action, dict):
                continue
            action_type = (action.get("action_type") or "").strip().lower()
            if action_type in action_types:
                return MetaAdsService._safe_float(action.get("value"), 0.0)
        return 0.0
