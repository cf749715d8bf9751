"""High-level DNS operations behind the ``cloudzone dns`` commands.

Each function wires the engine components together for one command and
returns plain JSON-ready structures.
"""

from __future__ import annotations

import time
from typing import Any, Sequence

from cloudzone.base.backend import DNSBackendBlueprint
from cloudzone.base.config import WaitConfig
from cloudzone.base.logger import CloudzoneLogger, quiet_logger
from cloudzone.base.models import ChangeResult, RecordSet, absolute_name
from cloudzone.base.polling import Clock, Sleep
from cloudzone.dns.bindings import parse_bindings, parse_expectations
from cloudzone.dns.changes import DEFAULT_COMMENT, submit_changes
from cloudzone.dns.live import parse_queries, query_live
from cloudzone.dns.reconcile import reconcile, validate_bindings
from cloudzone.dns.records import DEFAULT_MAX_ITEMS, get_records
from cloudzone.dns.waiter import wait_for_changes, wait_for_expectations
from cloudzone.dns.zones import resolve_zone


def record_to_dict(record: RecordSet, domain: str, zone_id: str | None) -> dict[str, Any]:
    return {
        "domain": domain,
        "fullName": absolute_name(record.name, domain),
        "name": record.name,
        "type": record.type,
        "ttl": record.ttl,
        "values": record.sorted_values(),
        "zoneId": zone_id,
    }


def change_to_dict(result: ChangeResult) -> dict[str, Any]:
    domain = result.zone.name
    return {
        "changeId": result.change_id,
        "domain": domain,
        "zoneId": result.zone.id,
        "oldRecords": [record_to_dict(r, domain, result.zone.id) for r in result.old_records],
        "newRecords": [record_to_dict(r, domain, result.zone.id) for r in result.new_records],
    }


def zone_info(
    backend: DNSBackendBlueprint, name_or_id: str, logger: CloudzoneLogger | None = None
) -> dict[str, Any]:
    zone = resolve_zone(backend, name_or_id, logger)
    return {"id": zone.id, "name": zone.name}


def get_record(
    backend: DNSBackendBlueprint,
    domain: str,
    name: str | None,
    types: Sequence[str],
    value: str | None = None,
    not_found_ok: bool = False,
    max_items: int = DEFAULT_MAX_ITEMS,
    logger: CloudzoneLogger | None = None,
) -> list[dict[str, Any]]:
    """Authoritative records of *types* at *name* in the zone hosting *domain*."""
    zone = resolve_zone(backend, domain, logger)
    records = get_records(backend, zone, name, types, value, not_found_ok, max_items, logger)
    return [record_to_dict(r, zone.name, zone.id) for r in records]


def query(
    backend: DNSBackendBlueprint,
    domain: str,
    tokens: Sequence[str],
    default_name: str | None = None,
    not_found_ok: bool = False,
    logger: CloudzoneLogger | None = None,
) -> list[dict[str, Any]]:
    """Live records for ``[name:]type`` *tokens* under *domain*.

    The zone is not looked up, so ``zoneId`` is always ``None``.
    """
    requests = parse_queries(tokens, domain, default_name)
    found = query_live(backend, requests, not_found_ok, logger)
    return [record_to_dict(rs, dom, None) for dom, rs in found]


def change(
    backend: DNSBackendBlueprint,
    domain: str,
    tokens: Sequence[str],
    default_name: str | None = None,
    ttl: int | None = None,
    merge: bool = False,
    allow_mixed: bool = False,
    comment: str = DEFAULT_COMMENT,
    max_items: int = DEFAULT_MAX_ITEMS,
    logger: CloudzoneLogger | None = None,
) -> ChangeResult:
    """Parse bindings, reconcile them and submit the result.

    In merge mode the current records for every key the bindings name are
    fetched first (missing ones are fine) and reported as the old records.

    Returns:
        The change result; ``change_id`` is ``None`` when there was
        nothing to change.
    """
    logger = logger or quiet_logger()
    zone = resolve_zone(backend, domain, logger)
    bindings = parse_bindings(tokens, zone.name, default_name)
    validate_bindings(bindings, ttl, merge, allow_mixed)

    existing: list[RecordSet] = []
    if merge:
        by_name: dict[str, set[str]] = {}
        for b in bindings:
            by_name.setdefault(b.key.name, set()).add(b.key.type)
        for name, types in sorted(by_name.items()):
            existing.extend(
                get_records(backend, zone, name, sorted(types), None, True, max_items, logger)
            )

    change_set = reconcile(bindings, ttl, existing, merge, allow_mixed)
    change_id = submit_changes(backend, zone, change_set, comment, logger)

    touched = {r.key for r in change_set.records}
    return ChangeResult(
        change_id=change_id,
        zone=zone,
        old_records=[r for r in existing if r.key in touched],
        new_records=list(change_set.records),
    )


def wait_for_sync(
    backend: DNSBackendBlueprint,
    change_ids: Sequence[str | None],
    domain: str | None = None,
    config: WaitConfig | None = None,
    logger: CloudzoneLogger | None = None,
    clock: Clock = time.monotonic,
    sleep: Sleep = time.sleep,
) -> None:
    """Wait for backend changes to sync; *domain* is needed by zone-scoped backends."""
    zone_id = resolve_zone(backend, domain, logger).id if domain else None
    wait_for_changes(backend, change_ids, zone_id, config, logger, clock, sleep)


def wait_for_live(
    backend: DNSBackendBlueprint,
    domain: str,
    tokens: Sequence[str],
    default_name: str | None = None,
    config: WaitConfig | None = None,
    logger: CloudzoneLogger | None = None,
    clock: Clock = time.monotonic,
    sleep: Sleep = time.sleep,
) -> None:
    """Wait until public DNS satisfies every expectation token."""
    expectations = parse_expectations(tokens, domain, default_name)
    wait_for_expectations(backend, expectations, config, logger, clock, sleep)


__all__ = [
    "record_to_dict",
    "change_to_dict",
    "zone_info",
    "get_record",
    "query",
    "change",
    "wait_for_sync",
    "wait_for_live",
]
