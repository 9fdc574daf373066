"""
Small shared helpers.
"""
import re
from typing import Optional
from urllib.parse import urlparse


def extract_origin(url: str | None) -> Optional[str]:
    """Return the origin (scheme + host [+ port]) from a URL-like string."""
    if not url:
        return None
    parsed = urlparse(url.strip())
    if parsed.scheme and parsed.netloc:
        return f"{parsed.scheme}://{parsed.netloc}"
    return None


def normalize_act(ad_account_id: str) -> str:
    """
    Ensures the ad account id is exactly "act_<digits>" (no double prefix).
    """
    s = (ad_account_id or "").strip()
    if not s:
        raise ValueError("Empty ad_account_id")

    while s.startswith("act_act_"):
        s = s.replace("act_act_", "act_", 1)

    if not s.startswith("act_"):
        s = "act_" + s

    return s


def slugify_prefix(value: str) -> str:
    """Collapse a free-form name into something safe to embed in an id."""
    slug = re.sub(r"[^A-Za-z0-9]+", "_", value or "").strip("_")
    return slug.lower()
