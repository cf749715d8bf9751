"""Backend blueprint, data models and core utilities.

Every DNS provider inherits from :class:`DNSBackendBlueprint`.  Import it
to type-hint your own code or to create custom providers.
"""

from .backend import DNSBackendBlueprint
from .models import (
    Binding,
    ChangeResult,
    ChangeSet,
    ChangeStatus,
    Expectation,
    RecordKey,
    RecordSet,
    ZoneRef,
)
from .supported_providers import existing_cloud_providers


__all__ = [
    "DNSBackendBlueprint",
    "Binding",
    "ChangeResult",
    "ChangeSet",
    "ChangeStatus",
    "Expectation",
    "RecordKey",
    "RecordSet",
    "ZoneRef",
    "existing_cloud_providers",
]
