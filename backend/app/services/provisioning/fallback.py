"""
Fallback rules shared by the creative and ad batches.

Placeholder ids stand in for remote resources that could not be created. They
always start with "mock_" so operators (and the pipeline itself) can tell them
apart from real Graph ids, which are numeric strings.
"""
import enum
import time
from typing import Optional

from app.utils import slugify_prefix
from app.services.provisioning.errors import RemoteRejection

PLACEHOLDER_PREFIX = "mock_"

# "Ad account has no valid payment method"
PAYMENT_METHOD_SUBCODE = 1359188


class OnUnrecoverable(str, enum.Enum):
    PLACEHOLDER = "placeholder"
    ABORT = "abort"


def is_placeholder(resource_id: Optional[str]) -> bool:
    return bool(resource_id) and str(resource_id).startswith(PLACEHOLDER_PREFIX)


def ticks() -> int:
    # 100ns resolution, distinct across consecutive calls in practice
    return time.time_ns() // 100


class FallbackPolicy:
    """
    Decides what happens when remote work for one unit (or a whole batch)
    cannot be completed, and mints the placeholder ids.
    """

    def __init__(self, on_unrecoverable: OnUnrecoverable = OnUnrecoverable.PLACEHOLDER):
        self.on_unrecoverable = OnUnrecoverable(on_unrecoverable)

    @property
    def uses_placeholders(self) -> bool:
        return self.on_unrecoverable is OnUnrecoverable.PLACEHOLDER

    @staticmethod
    def trips_circuit_breaker(error: Optional[RemoteRejection]) -> bool:
        return error is not None and error.subcode == PAYMENT_METHOD_SUBCODE

    # ---- placeholder ids ----

    @staticmethod
    def creative_id(index: int) -> str:
        return f"{PLACEHOLDER_PREFIX}creative_{ticks()}_{index}"

    @staticmethod
    def ad_id(position: int, name_prefix: Optional[str] = None) -> str:
        """position is 1-based, matching the ad's place in its batch."""
        return f"{_ad_prefix(name_prefix)}_v{position}_{ticks()}"

    @staticmethod
    def catastrophic_ad_id(name_prefix: Optional[str] = None) -> str:
        slug = slugify_prefix(name_prefix or "")
        prefix = f"{PLACEHOLDER_PREFIX}{slug}" if slug else f"{PLACEHOLDER_PREFIX}ad_error"
        return f"{prefix}_{ticks()}"


def _ad_prefix(name_prefix: Optional[str]) -> str:
    slug = slugify_prefix(name_prefix or "")
    if not slug:
        return f"{PLACEHOLDER_PREFIX}ad"
    return f"{PLACEHOLDER_PREFIX}{slug}"
