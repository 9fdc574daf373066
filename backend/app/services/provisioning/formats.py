"""
Ad-creation payload formats and the probe that tries them.

The /{act}/ads endpoint has accepted the creative reference in several shapes
over time, so ad creation walks an ordered list of encodings until one is
accepted.
"""
import enum
import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Literal, Optional

import httpx

from app.services.provisioning.credentials import Credentials
from app.services.provisioning.errors import RemoteRejection
from app.services.provisioning.graph_client import GraphClient

logger = logging.getLogger(__name__)


class PayloadFormat(str, enum.Enum):
    DIRECT_FIELD = "DirectField"       # form: creative_id=<id>
    OBJECT_FIELD = "ObjectField"       # json: {"creative": {"creative_id": "<id>"}}
    CREATIVE_FIELD = "CreativeField"   # json: {"creative": "<id>"}
    FACEBOOK_DOC = "FacebookDoc"       # form: creative='{"creative_id": "<id>"}'


# Order used by ad creation
PROBE_ORDER: List[PayloadFormat] = [
    PayloadFormat.OBJECT_FIELD,
    PayloadFormat.DIRECT_FIELD,
    PayloadFormat.CREATIVE_FIELD,
    PayloadFormat.FACEBOOK_DOC,
]


@dataclass(frozen=True)
class EncodedPayload:
    encoding: Literal["form", "json"]
    body: Dict[str, Any]


def _direct_field(ad_set_id: str, creative_id: str, name: str, status: str) -> EncodedPayload:
    return EncodedPayload("form", {
        "name": name,
        "adset_id": ad_set_id,
        "creative_id": creative_id,
        "status": status,
    })


def _object_field(ad_set_id: str, creative_id: str, name: str, status: str) -> EncodedPayload:
    return EncodedPayload("json", {
        "name": name,
        "adset_id": ad_set_id,
        "creative": {"creative_id": creative_id},
        "status": status,
    })


def _creative_field(ad_set_id: str, creative_id: str, name: str, status: str) -> EncodedPayload:
    return EncodedPayload("json", {
        "name": name,
        "adset_id": ad_set_id,
        "creative": creative_id,
        "status": status,
    })


def _facebook_doc(ad_set_id: str, creative_id: str, name: str, status: str) -> EncodedPayload:
    return EncodedPayload("form", {
        "name": name,
        "adset_id": ad_set_id,
        "creative": json.dumps({"creative_id": creative_id}),
        "status": status,
    })


SERIALIZERS: Dict[PayloadFormat, Callable[[str, str, str, str], EncodedPayload]] = {
    PayloadFormat.DIRECT_FIELD: _direct_field,
    PayloadFormat.OBJECT_FIELD: _object_field,
    PayloadFormat.CREATIVE_FIELD: _creative_field,
    PayloadFormat.FACEBOOK_DOC: _facebook_doc,
}


def encode(fmt: PayloadFormat, ad_set_id: str, creative_id: str, name: str, status: str = "PAUSED") -> EncodedPayload:
    return SERIALIZERS[PayloadFormat(fmt)](ad_set_id, creative_id, name, status)


@dataclass
class ProbeResult:
    success: bool
    raw: Dict[str, Any]
    format: PayloadFormat
    error: Optional[RemoteRejection] = None

    @property
    def resource_id(self) -> Optional[str]:
        if not self.success:
            return None
        value = self.raw.get("id")
        return str(value) if value else None


class FormatMemory:
    """Last payload format each ad account accepted. One entry per ad account."""

    def __init__(self):
        self._formats: Dict[str, PayloadFormat] = {}

    def recall(self, ad_account_id: str) -> Optional[PayloadFormat]:
        return self._formats.get(ad_account_id)

    def remember(self, ad_account_id: str, fmt: PayloadFormat) -> None:
        self._formats[ad_account_id] = fmt

    def clear(self) -> None:
        self._formats.clear()

    def __len__(self) -> int:
        return len(self._formats)


# Process-wide memory used when META_REMEMBER_AD_FORMATS is on
shared_format_memory = FormatMemory()


class FormatProbe:
    """
    Posts one ad with one specific payload format. Never raises for remote
    failures; the outcome is reported in the ProbeResult.

    Given a FormatMemory, the last format that worked for the ad account is
    tried first and every success is recorded.
    """

    def __init__(self, client: GraphClient, credentials: Credentials, memory: Optional[FormatMemory] = None):
        self.client = client
        self.credentials = credentials
        self.memory = memory

    def ordered_formats(self) -> List[PayloadFormat]:
        order = list(PROBE_ORDER)
        if self.memory is not None:
            remembered = self.memory.recall(self.credentials.ad_account_id)
            if remembered in order:
                order.remove(remembered)
                order.insert(0, remembered)
        return order

    async def test_format(
        self,
        ad_set_id: str,
        creative_id: str,
        fmt: PayloadFormat,
        ad_name: Optional[str] = None,
        status: str = "PAUSED",
    ) -> ProbeResult:
        fmt = PayloadFormat(fmt)
        name = ad_name or f"Test Ad {creative_id}"
        payload = encode(fmt, ad_set_id, creative_id, name, status)
        path = f"/{self.credentials.ad_account_id}/ads"

        try:
            if payload.encoding == "json":
                raw = await self.client.post_json(path, self.credentials.access_token, payload.body)
            else:
                raw = await self.client.post_form(path, self.credentials.access_token, payload.body)
        except RemoteRejection as e:
            logger.info(f"Format {fmt.value} rejected for creative {creative_id}: {e.message}")
            return ProbeResult(success=False, raw=e.payload, format=fmt, error=e)
        except (httpx.HTTPError, ValueError) as e:
            rejection = RemoteRejection(str(e))
            logger.warning(f"Format {fmt.value} errored for creative {creative_id}: {e}")
            return ProbeResult(success=False, raw=rejection.payload, format=fmt, error=rejection)

        if not raw.get("id"):
            rejection = RemoteRejection("Ad creation did not return id", payload={"error": {"message": "Ad creation did not return id"}, "response": raw})
            logger.warning(f"Format {fmt.value} accepted for creative {creative_id} but returned no id")
            return ProbeResult(success=False, raw=raw, format=fmt, error=rejection)

        result = ProbeResult(success=True, raw=raw, format=fmt)
        if self.memory is not None:
            self.memory.remember(self.credentials.ad_account_id, fmt)
        return result
