"""
Campaign hierarchy provisioning: Campaign -> AdSet -> AdCreative -> Ad.

Campaign and ad set creation fail loudly with the remote message. Creative and
ad creation work through their batch one unit at a time and fall back to
placeholder ids (see FallbackPolicy) so the caller always gets a result it can
render.
"""
import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple, Union

from sqlalchemy.orm import Session

from app.config import get_settings
from app.services.provisioning.credentials import CredentialResolver, Credentials
from app.services.provisioning.errors import (
    AllCreativesFailedError,
    ProvisioningError,
    RemoteRejection,
    ValidationError,
)
from app.services.provisioning.fallback import FallbackPolicy, OnUnrecoverable, is_placeholder, ticks
from app.services.provisioning.formats import (
    FormatMemory,
    FormatProbe,
    PayloadFormat,
    ProbeResult,
    shared_format_memory,
)
from app.services.provisioning.graph_client import GraphClient

logger = logging.getLogger(__name__)

Amount = Union[int, float, Decimal]

MAX_BID_AMOUNT = 1000
MIN_SCHEDULE = timedelta(hours=24)
BID_REQUIRED_GOALS = frozenset({"LINK_CLICKS", "APP_INSTALLS", "LEAD_GENERATION", "CONVERSIONS"})


class _ContextAdapter(logging.LoggerAdapter):
    """Prefixes every message with the correlation fields of one provisioning call."""

    def process(self, msg, kwargs):
        context = " ".join(f"{k}={v}" for k, v in self.extra.items() if v is not None)
        return (f"[{context}] {msg}" if context else msg), kwargs


def _scoped(**fields) -> logging.LoggerAdapter:
    return _ContextAdapter(logger, fields)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Naive timestamps are taken to be UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def to_minor_units(amount: Amount) -> int:
    """Major currency units -> minor units (cents)."""
    return int((Decimal(str(amount)) * 100).to_integral_value())


@dataclass
class TargetingSpec:
    countries: List[str] = field(default_factory=list)
    age_min: int = 18
    age_max: int = 65
    genders: List[int] = field(default_factory=list)
    publisher_platforms: List[str] = field(default_factory=list)
    device_platforms: List[str] = field(default_factory=list)
    facebook_positions: List[str] = field(default_factory=list)


def normalize_targeting(targeting: Optional[TargetingSpec]) -> Dict[str, Any]:
    """
    Minimal targeting object: age bounds always, everything else only when
    populated. Empty lists are left out entirely.
    """
    targeting = targeting or TargetingSpec()
    clean: Dict[str, Any] = {}
    if targeting.countries:
        clean["geo_locations"] = {"countries": list(targeting.countries)}
    clean["age_min"] = targeting.age_min
    clean["age_max"] = targeting.age_max
    if targeting.genders:
        clean["genders"] = list(targeting.genders)
    if targeting.publisher_platforms:
        clean["publisher_platforms"] = list(targeting.publisher_platforms)
    if targeting.device_platforms:
        clean["device_platforms"] = list(targeting.device_platforms)
    if targeting.facebook_positions:
        clean["facebook_positions"] = list(targeting.facebook_positions)
    return clean


def thumbnail_from_video(payload: Dict[str, Any]) -> Optional[str]:
    """First thumbnail of a Graph video object, or its picture when no thumbnails exist."""
    thumbs = (payload.get("thumbnails") or {}).get("data") or []
    if thumbs and thumbs[0].get("uri"):
        return thumbs[0]["uri"]
    return payload.get("picture")


@dataclass
class AdBatchResult:
    ad_ids: List[str]
    error: Optional[str] = None  # advisory only, never a failure signal

    @property
    def has_placeholders(self) -> bool:
        return any(is_placeholder(ad_id) for ad_id in self.ad_ids)


class ResourceProvisioner:
    """Creates Meta campaign hierarchy resources for a project."""

    def __init__(
        self,
        db: Session,
        client: Optional[GraphClient] = None,
        policy: Optional[FallbackPolicy] = None,
        format_memory: Optional[FormatMemory] = None,
    ):
        settings = get_settings()
        self.credentials = CredentialResolver(db)
        self.client = client or GraphClient()
        self.policy = policy or FallbackPolicy(OnUnrecoverable(settings.meta_on_unrecoverable))
        if format_memory is None and settings.meta_remember_ad_formats:
            format_memory = shared_format_memory
        self.format_memory = format_memory
        self.default_thumbnail_url = settings.meta_default_thumbnail_url
        self.creative_link_url = settings.meta_creative_link_url

    # ==================== Campaign ====================

    async def create_campaign(
        self,
        project_id: int,
        name: str,
        objective: str,
        status: str = "PAUSED",
        special_ad_categories: Optional[List[str]] = None,
        spend_cap: Optional[Amount] = None,
        start_time: Optional[datetime] = None,
        stop_time: Optional[datetime] = None,
        buying_type: Optional[str] = None,
    ) -> str:
        """
        Create a campaign and return its Meta id.

        Raises ValidationError for a blank name and RemoteRejection when Meta
        refuses the campaign. Nothing is retried and nothing is stored locally.
        """
        log = _scoped(project_id=project_id)
        if not name or not name.strip():
            raise ValidationError("Campaign name is required")
        start_time, stop_time = as_utc(start_time), as_utc(stop_time)

        creds = self.credentials.resolve(project_id)
        data: Dict[str, Any] = {
            "name": name,
            "objective": objective,
            "status": status,
            "special_ad_categories": json.dumps(special_ad_categories or ["NONE"]),
            "buying_type": buying_type or "AUCTION",
            "is_adset_budget_sharing_enabled": False,
        }
        if spend_cap is not None:
            data["spend_cap"] = to_minor_units(spend_cap)
        if start_time is not None:
            data["start_time"] = start_time.isoformat()
        if stop_time is not None:
            data["stop_time"] = stop_time.isoformat()

        log.info(f"Creating campaign '{name}' objective={objective} status={status}")
        try:
            payload = await self.client.post_form(f"/{creds.ad_account_id}/campaigns", creds.access_token, data)
        except RemoteRejection as e:
            log.error(f"Meta campaign creation failed: {e.message}")
            raise

        campaign_id = payload.get("id")
        if not campaign_id:
            raise RemoteRejection("Campaign creation did not return id", payload=payload)

        _scoped(project_id=project_id, campaign_id=campaign_id).info("Campaign created")
        return str(campaign_id)

    # ==================== AdSet ====================

    async def create_ad_set(
        self,
        project_id: int,
        campaign_id: str,
        name: str,
        daily_budget: Amount,
        status: str = "PAUSED",
        billing_event: str = "IMPRESSIONS",
        optimization_goal: str = "LINK_CLICKS",
        targeting: Optional[TargetingSpec] = None,
        start_time: Optional[datetime] = None,
        stop_time: Optional[datetime] = None,
        bid_amount: Optional[Amount] = None,
        bid_strategy: Optional[str] = None,
    ) -> str:
        """
        Create an ad set under a campaign and return its Meta id.

        Budgets and bids are given in major currency units and sent in minor
        units. Validation runs before any remote call:
          1. bids above MAX_BID_AMOUNT are clamped
          2. a start/stop schedule must span at least 24 hours
          3. goals in BID_REQUIRED_GOALS need a bid
        """
        log = _scoped(project_id=project_id, campaign_id=campaign_id)
        start_time, stop_time = as_utc(start_time), as_utc(stop_time)

        if bid_amount is not None and bid_amount > MAX_BID_AMOUNT:
            log.warning(f"Bid amount {bid_amount} exceeds the platform maximum, capping at {MAX_BID_AMOUNT}")
            bid_amount = MAX_BID_AMOUNT

        if start_time is not None and stop_time is not None and stop_time - start_time < MIN_SCHEDULE:
            raise ValidationError(
                "minimum schedule duration: ad sets must be scheduled for at least 24 hours"
            )

        if bid_amount is None and optimization_goal in BID_REQUIRED_GOALS:
            raise ValidationError(
                f"bid amount required for this optimization goal: {optimization_goal}"
            )

        if not campaign_id or not str(campaign_id).strip():
            raise ValidationError("Campaign ID is required")
        if not name or not name.strip():
            raise ValidationError("Ad Set name is required")

        creds = self.credentials.resolve(project_id)
        data: Dict[str, Any] = {
            "campaign_id": campaign_id,
            "name": name,
            "daily_budget": to_minor_units(daily_budget),
            "status": status,
            "billing_event": billing_event,
            "optimization_goal": optimization_goal,
            "targeting": json.dumps(normalize_targeting(targeting)),
        }
        if bid_amount is not None:
            data["bid_amount"] = to_minor_units(bid_amount)
            data["bid_strategy"] = bid_strategy or "LOWEST_COST_WITH_BID_CAP"
        else:
            data["bid_strategy"] = bid_strategy or "LOWEST_COST_WITHOUT_CAP"
        if start_time is not None:
            data["start_time"] = start_time.isoformat()
        if stop_time is not None:
            data["end_time"] = stop_time.isoformat()

        log.info(f"Creating ad set '{name}' goal={optimization_goal} daily_budget={data['daily_budget']}")
        try:
            payload = await self.client.post_form(f"/{creds.ad_account_id}/adsets", creds.access_token, data)
        except RemoteRejection as e:
            log.error(f"Meta ad set creation failed: {e.message}")
            raise

        ad_set_id = payload.get("id")
        if not ad_set_id:
            raise RemoteRejection("Ad set creation did not return id", payload=payload)

        _scoped(project_id=project_id, campaign_id=campaign_id, ad_set_id=ad_set_id).info("Ad set created")
        return str(ad_set_id)

    # ==================== AdCreative ====================

    async def create_ad_creatives(self, project_id: int, ad_set_id: str, video_ids: List[str]) -> List[str]:
        """
        Create one video creative per video id, each independently of the others.

        Returns creative ids aligned with video_ids. A video whose creative is
        rejected twice (full payload, then without call-to-action) gets a
        placeholder id, or is dropped when the policy aborts instead.
        """
        if not video_ids:
            raise ValidationError("At least one video id is required")

        creds = self.credentials.resolve(project_id)
        creative_ids: List[str] = []
        last_error: Optional[RemoteRejection] = None

        for index, video_id in enumerate(video_ids):
            log = _scoped(project_id=project_id, ad_set_id=ad_set_id, video_id=video_id)
            thumbnail_url = await self._thumbnail_or_default(creds, video_id, log)

            creative_id, error = await self._post_video_creative(creds, video_id, thumbnail_url, with_cta=True)
            if not creative_id:
                log.warning(f"Video creative rejected ({error.message}), retrying without call-to-action")
                creative_id, error = await self._post_video_creative(creds, video_id, thumbnail_url, with_cta=False)

            if creative_id:
                log.info(f"Created creative {creative_id}")
                creative_ids.append(creative_id)
                continue

            last_error = error
            if self.policy.uses_placeholders:
                placeholder = self.policy.creative_id(index)
                log.warning(f"All creative attempts failed ({error.message}), using placeholder {placeholder}")
                creative_ids.append(placeholder)
            else:
                log.error(f"All creative attempts failed: {error.message}")

        if not creative_ids:
            detail = f": {last_error.message}" if last_error else ""
            raise AllCreativesFailedError(f"Failed to create any ad creatives{detail}")
        return creative_ids

    async def _thumbnail_or_default(self, creds: Credentials, video_id: str, log: logging.LoggerAdapter) -> str:
        try:
            payload = await self.client.get(f"/{video_id}", creds.access_token, {"fields": "picture,thumbnails"})
            thumbnail_url = thumbnail_from_video(payload)
        except (ProvisioningError, AttributeError, KeyError, IndexError, TypeError, ValueError) as e:
            log.warning(f"Failed to fetch video thumbnail: {e}")
            thumbnail_url = None
        if not thumbnail_url:
            log.info("Using default thumbnail image")
            return self.default_thumbnail_url
        return thumbnail_url

    async def _post_video_creative(
        self,
        creds: Credentials,
        video_id: str,
        thumbnail_url: str,
        with_cta: bool,
    ) -> Tuple[Optional[str], Optional[RemoteRejection]]:
        video_data: Dict[str, Any] = {
            "video_id": video_id,
            "image_url": thumbnail_url,
            "title": "Video Ad",
        }
        if with_cta:
            video_data["message"] = "Check out our video"
            video_data["call_to_action"] = {
                "type": "LEARN_MORE",
                "value": {"link": self.creative_link_url},
            }
            name = f"Video Ad Creative {ticks()}"
        else:
            video_data["message"] = "Watch our video"
            name = f"Simple Video Ad {ticks()}"

        object_story_spec = {"page_id": creds.page_id, "video_data": video_data}
        try:
            payload = await self.client.post_form(
                f"/{creds.ad_account_id}/adcreatives",
                creds.access_token,
                {"name": name, "object_story_spec": json.dumps(object_story_spec)},
            )
        except RemoteRejection as e:
            return None, e

        creative_id = payload.get("id")
        if not creative_id:
            return None, RemoteRejection("Creative creation did not return id", payload=payload)
        return str(creative_id), None

    # ==================== Ad ====================

    async def create_ads(
        self,
        project_id: int,
        ad_set_id: str,
        creative_ids: List[str],
        status: str = "PAUSED",
        name_prefix: Optional[str] = None,
    ) -> AdBatchResult:
        """
        Create one ad per creative. The returned ad_ids always line up 1:1 with
        creative_ids; units that could not be created remotely carry
        placeholder ids.

        With the placeholder policy this never raises past validation: an
        unexpected exception yields a single placeholder id and the exception
        text as an advisory error.
        """
        if not ad_set_id or not str(ad_set_id).strip():
            raise ValidationError("Ad Set ID is required")
        if not creative_ids:
            raise ValidationError("At least one creative id is required")

        try:
            return await self._create_ads(project_id, ad_set_id, creative_ids, status, name_prefix)
        except Exception as e:
            if not self.policy.uses_placeholders:
                raise
            placeholder = self.policy.catastrophic_ad_id(name_prefix)
            _scoped(project_id=project_id, ad_set_id=ad_set_id).exception(
                f"Ad creation failed unexpectedly, returning placeholder {placeholder}"
            )
            return AdBatchResult(ad_ids=[placeholder], error=str(e))

    async def _create_ads(
        self,
        project_id: int,
        ad_set_id: str,
        creative_ids: List[str],
        status: str,
        name_prefix: Optional[str],
    ) -> AdBatchResult:
        batch_log = _scoped(project_id=project_id, ad_set_id=ad_set_id)
        creds = self.credentials.resolve(project_id)

        if any(is_placeholder(creative_id) for creative_id in creative_ids):
            if not self.policy.uses_placeholders:
                raise ValidationError("Placeholder creative ids cannot be published")
            batch_log.warning(f"Batch contains placeholder creatives, synthesizing {len(creative_ids)} placeholder ads")
            return AdBatchResult(
                ad_ids=[self.policy.ad_id(i + 1, name_prefix) for i in range(len(creative_ids))]
            )

        probe = FormatProbe(self.client, creds, memory=self.format_memory)
        ad_ids: List[str] = []

        for i, creative_id in enumerate(creative_ids):
            position = i + 1
            log = _scoped(project_id=project_id, ad_set_id=ad_set_id, creative_id=creative_id)
            ad_name = f"{name_prefix} - Ad {position}" if name_prefix else f"Ad {position}_{ticks()}"

            result = await self._probe_formats(probe, ad_set_id, creative_id, ad_name, status, log)
            if result.success:
                log.info(f"Created ad {result.resource_id} using format {result.format.value}")
                ad_ids.append(result.resource_id)
                continue

            last_error = result.error
            if self.policy.trips_circuit_breaker(last_error):
                if not self.policy.uses_placeholders:
                    raise last_error
                remaining = len(creative_ids) - i
                log.warning(
                    f"Payment method restriction (subcode {last_error.subcode}), "
                    f"switching the remaining {remaining} ads to placeholders"
                )
                ad_ids.extend(self.policy.ad_id(j + 1, name_prefix) for j in range(i, len(creative_ids)))
                break

            if not self.policy.uses_placeholders:
                raise last_error
            placeholder = self.policy.ad_id(position, name_prefix)
            log.warning(f"All formats failed (last error: {last_error.message}), using placeholder {placeholder}")
            ad_ids.append(placeholder)

        batch_log.info(f"Ad batch finished: {len(ad_ids)} ads for {len(creative_ids)} creatives")
        return AdBatchResult(ad_ids=ad_ids)

    async def _probe_formats(
        self,
        probe: FormatProbe,
        ad_set_id: str,
        creative_id: str,
        ad_name: str,
        status: str,
        log: logging.LoggerAdapter,
    ) -> ProbeResult:
        result: Optional[ProbeResult] = None
        for fmt in probe.ordered_formats():
            log.debug(f"Trying format {fmt.value}")
            result = await probe.test_format(ad_set_id, creative_id, fmt, ad_name, status)
            if result.success:
                return result
        return result

    async def create_ads_for_videos(
        self,
        project_id: int,
        ad_set_id: str,
        video_ids: List[str],
        status: str = "PAUSED",
        name_prefix: Optional[str] = None,
    ) -> Tuple[List[str], AdBatchResult]:
        """Creatives for the videos, then one ad per creative."""
        creative_ids = await self.create_ad_creatives(project_id, ad_set_id, video_ids)
        result = await self.create_ads(project_id, ad_set_id, creative_ids, status, name_prefix)
        return creative_ids, result

    # ==================== Diagnostics ====================

    async def test_ad_format(
        self,
        project_id: int,
        ad_set_id: str,
        creative_id: str,
        fmt: PayloadFormat,
        ad_name: Optional[str] = None,
        status: str = "PAUSED",
    ) -> ProbeResult:
        creds = self.credentials.resolve(project_id)
        probe = FormatProbe(self.client, creds)
        return await probe.test_format(ad_set_id, creative_id, fmt, ad_name, status)

    async def test_all_ad_formats(
        self,
        project_id: int,
        ad_set_id: str,
        creative_id: str,
        ad_name: Optional[str] = None,
    ) -> Dict[PayloadFormat, ProbeResult]:
        """Run every payload format once, in declaration order, and report each outcome."""
        results: Dict[PayloadFormat, ProbeResult] = {}
        for fmt in PayloadFormat:
            results[fmt] = await self.test_ad_format(project_id, ad_set_id, creative_id, fmt, ad_name)
        return results
