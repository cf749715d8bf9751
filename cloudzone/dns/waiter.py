"""Convergence waiters.

Two instances of the same bounded polling loop: one watches the
backend's change status until it reports in-sync, the other watches
public DNS until every stated expectation holds.
"""

from __future__ import annotations

import time
from typing import Iterable, Sequence

from cloudzone.base.backend import DNSBackendBlueprint
from cloudzone.base.config import WaitConfig
from cloudzone.base.exceptions import WaitTimeoutError
from cloudzone.base.logger import CloudzoneLogger, quiet_logger
from cloudzone.base.models import ChangeStatus, Expectation, LiveRequest, RecordKey, RecordSet
from cloudzone.base.polling import Clock, Deadline, Sleep, delay_schedule, poll
from cloudzone.dns.live import query_live


def _reports_progress(attempt: int) -> bool:
    """First wait, then every fifth poll after the tenth."""
    return attempt == 0 or (attempt > 10 and attempt % 5 == 0)


def wait_for_change(
    backend: DNSBackendBlueprint,
    change_id: str,
    zone_id: str | None = None,
    config: WaitConfig | None = None,
    logger: CloudzoneLogger | None = None,
    clock: Clock = time.monotonic,
    sleep: Sleep = time.sleep,
) -> ChangeStatus:
    """Poll a change until the backend reports it in sync.

    Progress is reported on the first wait and every fifth poll after
    the tenth.

    Raises:
        WaitTimeoutError: The deadline passed first; carries the last status.
    """
    config = config or WaitConfig()
    logger = logger or quiet_logger()
    deadline = Deadline(config.timeout, clock)

    def on_wait(attempt: int, status: ChangeStatus) -> None:
        if _reports_progress(attempt):
            message = "Waiting for sync." if attempt == 0 else "Still waiting."
            logger.progress(f"{change_id}: {message}", provider=backend.provider, operation="wait_for_change")

    ok, status, attempts = poll(
        probe=lambda _: backend.get_change_status(change_id, zone_id),
        done=lambda s: s.state == "insync",
        deadline=deadline,
        delay=delay_schedule(config.initial_interval, config.initial_attempts, config.interval),
        sleep=sleep,
        on_wait=on_wait,
    )
    if not ok:
        raise WaitTimeoutError(
            f"Change {change_id} did not sync within {config.timeout:g}s "
            f"({attempts} polls); last status: {status.state}",
            pending=[f"{change_id}: {status.state}"],
            change_id=change_id,
        )
    logger.progress(f"{change_id}: Synced.", provider=backend.provider, operation="wait_for_change")
    return status


def wait_for_changes(
    backend: DNSBackendBlueprint,
    change_ids: Iterable[str | None],
    zone_id: str | None = None,
    config: WaitConfig | None = None,
    logger: CloudzoneLogger | None = None,
    clock: Clock = time.monotonic,
    sleep: Sleep = time.sleep,
) -> list[ChangeStatus]:
    """Wait for each change in turn.  ``None`` IDs (nothing submitted) are skipped."""
    return [
        wait_for_change(backend, cid, zone_id, config, logger, clock, sleep)
        for cid in change_ids
        if cid is not None
    ]


def _describe(expectation: Expectation, seen: RecordSet | None) -> str:
    values = ", ".join(seen.sorted_values()) if seen is not None else "nothing"
    return f"{expectation.state} {expectation}@{expectation.domain} (last saw: {values})"


def wait_for_expectations(
    backend: DNSBackendBlueprint,
    expectations: Sequence[Expectation],
    config: WaitConfig | None = None,
    logger: CloudzoneLogger | None = None,
    clock: Clock = time.monotonic,
    sleep: Sleep = time.sleep,
) -> None:
    """Poll live DNS until every expectation has held at least once.

    Each expectation leaves the pending set the first time it is
    satisfied and is not rechecked.  Progress is reported on the same
    schedule as :func:`wait_for_change`.

    Raises:
        WaitTimeoutError: The deadline passed with expectations still
            pending; each one is listed with the values last seen.
    """
    config = config or WaitConfig()
    logger = logger or quiet_logger()
    deadline = Deadline(config.timeout, clock)
    pending = list(dict.fromkeys(expectations))
    last_seen: dict[tuple[str, RecordKey], RecordSet] = {}

    def probe(_: int) -> int:
        requests = list(dict.fromkeys(LiveRequest(e.key.name, e.domain, e.key.type) for e in pending))
        found = query_live(backend, requests, not_found_ok=True, logger=logger)
        last_seen.clear()
        last_seen.update({(domain, rs.key): rs for domain, rs in found})
        pending[:] = [e for e in pending if not e.is_met(last_seen.get((e.domain, e.key)))]
        return len(pending)

    def on_wait(attempt: int, remaining: int) -> None:
        if not _reports_progress(attempt):
            return
        logger.progress(
            f"Waiting for {remaining} expectation(s) to hold.",
            provider=backend.provider,
            operation="wait_for_expectations",
        )

    ok, _, attempts = poll(
        probe=probe,
        done=lambda remaining: remaining == 0,
        deadline=deadline,
        delay=delay_schedule(config.live_interval, 0, config.live_interval),
        sleep=sleep,
        on_wait=on_wait,
    )
    if not ok:
        unmet = [_describe(e, last_seen.get((e.domain, e.key))) for e in pending]
        raise WaitTimeoutError(
            f"{len(unmet)} expectation(s) unmet after {config.timeout:g}s ({attempts} polls):\n  "
            + "\n  ".join(unmet),
            pending=unmet,
        )
    logger.progress("All expectations hold.", provider=backend.provider, operation="wait_for_expectations")
