"""
Meta campaign hierarchy provisioning: credentials, Graph transport, payload
format probing, and placeholder fallbacks.
"""
from app.services.provisioning.credentials import CredentialResolver, Credentials
from app.services.provisioning.errors import (
    AllCreativesFailedError,
    NotFoundError,
    ProvisioningError,
    RemoteRejection,
    ValidationError,
)
from app.services.provisioning.fallback import (
    PAYMENT_METHOD_SUBCODE,
    PLACEHOLDER_PREFIX,
    FallbackPolicy,
    OnUnrecoverable,
    is_placeholder,
)
from app.services.provisioning.formats import PROBE_ORDER, FormatMemory, FormatProbe, PayloadFormat, ProbeResult
from app.services.provisioning.graph_client import GraphClient
from app.services.provisioning.provisioner import (
    AdBatchResult,
    ResourceProvisioner,
    TargetingSpec,
    normalize_targeting,
    thumbnail_from_video,
    to_minor_units,
)

__all__ = [
    "AdBatchResult",
    "AllCreativesFailedError",
    "CredentialResolver",
    "Credentials",
    "FallbackPolicy",
    "FormatMemory",
    "FormatProbe",
    "GraphClient",
    "NotFoundError",
    "OnUnrecoverable",
    "PAYMENT_METHOD_SUBCODE",
    "PLACEHOLDER_PREFIX",
    "PROBE_ORDER",
    "PayloadFormat",
    "ProbeResult",
    "ProvisioningError",
    "RemoteRejection",
    "ResourceProvisioner",
    "TargetingSpec",
    "ValidationError",
    "is_placeholder",
    "normalize_targeting",
    "thumbnail_from_video",
    "to_minor_units",
]
