"""Shared fixtures: an in-memory DNS backend and a fake clock."""

from __future__ import annotations

from typing import Any, Iterable, Sequence

import pytest

from cloudzone.base.backend import DNSBackendBlueprint
from cloudzone.base.models import (
    ChangeStatus,
    ListRecordsResult,
    LiveRequest,
    RawAnswer,
    RecordKey,
    RecordSet,
    ZoneRef,
    absolute_name,
)


def rs(name: str, rtype: str, ttl: int, *values: str) -> RecordSet:
    return RecordSet(key=RecordKey(name, rtype), ttl=ttl, values=frozenset(values))


class FakeBackend(DNSBackendBlueprint):
    """Blueprint implementation backed by plain Python structures."""

    provider = "fake"
    zone_id_prefix = "/hostedzone/"

    def __init__(
        self,
        zones: Sequence[ZoneRef] = (),
        records: dict[str, list[RecordSet]] | None = None,
    ) -> None:
        self.zones = list(zones)
        self.records = records or {}
        self.truncated = False
        self.list_calls: list[tuple[str, str, str | None, int | None]] = []
        self.batches: list[tuple[str, dict[str, Any]]] = []
        self.statuses: list[str] = []
        self.status_calls = 0
        # One list of answers per recursive_query call; the last repeats.
        self.answer_rounds: list[list[RawAnswer]] = []
        self.query_calls: list[list[LiveRequest]] = []

    def find_zones(self, name: str | None = None, zone_id: str | None = None) -> list[ZoneRef]:
        if zone_id is not None:
            return [z for z in self.zones if z.id == zone_id]
        return [z for z in self.zones if z.name == name]

    def list_records(
        self,
        zone: ZoneRef,
        start_name: str,
        start_type: str | None = None,
        max_items: int | None = None,
    ) -> ListRecordsResult:
        self.list_calls.append((zone.id, start_name, start_type, max_items))
        found = [
            r for r in self.records.get(zone.id, [])
            if absolute_name(r.name, zone.name) == start_name
        ]
        return ListRecordsResult(records=found, truncated=self.truncated)

    def submit_change_batch(self, zone_id: str, batch: dict[str, Any]) -> str:
        self.batches.append((zone_id, batch))
        return f"C{len(self.batches)}"

    def get_change_status(self, change_id: str, zone_id: str | None = None) -> ChangeStatus:
        index = min(self.status_calls, len(self.statuses) - 1)
        self.status_calls += 1
        return ChangeStatus(id=change_id, state=self.statuses[index])  # type: ignore[arg-type]

    def recursive_query(self, requests: Sequence[LiveRequest]) -> list[RawAnswer]:
        self.query_calls.append(list(requests))
        if not self.answer_rounds:
            return []
        index = min(len(self.query_calls) - 1, len(self.answer_rounds) - 1)
        return list(self.answer_rounds[index])


class FakeClock:
    """Monotonic clock advanced only by its own sleep."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


def answers(*items: Iterable[Any]) -> list[RawAnswer]:
    return [RawAnswer(*item) for item in items]


EXAMPLE = ZoneRef(id="Z1", name="example.com")


@pytest.fixture
def zone() -> ZoneRef:
    return EXAMPLE


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend(zones=[EXAMPLE], records={"Z1": []})


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
