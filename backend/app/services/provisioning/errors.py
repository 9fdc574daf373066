"""
Error taxonomy for the provisioning pipeline.

Routers map these onto HTTP responses; nothing here knows about FastAPI.
"""
from typing import Any, Dict, Optional


class ProvisioningError(Exception):
    """Base class for every failure raised by the provisioning pipeline."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ProvisioningError):
    """Input rejected before any remote call was made."""


class NotFoundError(ProvisioningError):
    """A local record the pipeline depends on does not exist."""


class AllCreativesFailedError(ProvisioningError):
    """Not a single creative could be produced for a batch of videos."""


class RemoteRejection(ProvisioningError):
    """
    The Graph API answered with an error envelope:
    {"error": {"message", "type", "code", "error_subcode"}}.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        code: Optional[int] = None,
        subcode: Optional[int] = None,
        error_type: Optional[str] = None,
        payload: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.code = code
        self.subcode = subcode
        self.error_type = error_type
        self.payload = payload if payload is not None else {"error": {"message": message}}

    @classmethod
    def from_envelope(cls, payload: Dict[str, Any], status_code: Optional[int] = None) -> "RemoteRejection":
        error_obj = payload.get("error") or {}
        if not isinstance(error_obj, dict):
            error_obj = {"message": str(error_obj)}
        message = error_obj.get("error_user_msg") or error_obj.get("message") or "Unknown error"
        return cls(
            message,
            status_code=status_code,
            code=_as_int(error_obj.get("code")),
            subcode=_as_int(error_obj.get("error_subcode")),
            error_type=error_obj.get("type"),
            payload=payload,
        )


def _as_int(value: Any) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
