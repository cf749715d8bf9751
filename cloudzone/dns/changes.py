"""Change submission: serialize a change set and send it as one batch."""

from __future__ import annotations

from typing import Any

from cloudzone.base.backend import DNSBackendBlueprint
from cloudzone.base.logger import CloudzoneLogger, quiet_logger
from cloudzone.base.models import ChangeSet, RecordSet, ZoneRef, absolute_name

DEFAULT_COMMENT = "Change made by cloudzone"


def _directive(zone: ZoneRef, record: RecordSet) -> dict[str, Any]:
    if record.values:
        action, ttl, values = "UPSERT", record.ttl, record.values
    else:
        if record.old_values is None:
            raise ValueError(f"Delete of {record.key} has no prior values")
        action = "DELETE"
        ttl = record.old_ttl if record.old_ttl is not None else record.ttl
        values = record.old_values
    return {
        "action": action,
        "name": absolute_name(record.name, zone.name),
        "type": record.type.upper(),
        "ttl": ttl,
        "values": sorted(values),
    }


def to_change_batch(
    zone: ZoneRef, change_set: ChangeSet, comment: str = DEFAULT_COMMENT
) -> dict[str, Any]:
    """Build the backend change batch; deletes come after upserts."""
    return {
        "comment": comment,
        "changes": [_directive(zone, r) for r in change_set.upserts]
        + [_directive(zone, r) for r in change_set.deletes],
    }


def submit_changes(
    backend: DNSBackendBlueprint,
    zone: ZoneRef,
    change_set: ChangeSet,
    comment: str = DEFAULT_COMMENT,
    logger: CloudzoneLogger | None = None,
) -> str | None:
    """Submit *change_set* to *zone* as one atomic batch.

    Returns:
        The backend's change ID, or ``None`` when there was nothing to
        change (no backend call is made).

    Raises:
        BackendError: On submission failure; never retried.
    """
    logger = logger or quiet_logger()
    if not change_set:
        logger.info("No changes to make", provider=backend.provider, zone=zone.name, operation="submit_changes")
        return None

    batch = to_change_batch(zone, change_set, comment)
    change_id = backend.submit_change_batch(zone.id, batch)
    logger.info(
        f"Submitted {len(batch['changes'])} change(s) as {change_id}",
        provider=backend.provider,
        zone=zone.name,
        operation="submit_changes",
    )
    return change_id
