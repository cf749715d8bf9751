"""Core data models shared by the DNS engine and the provider backends."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

APEX = "."

BindingAction = Literal["add", "delete"]
ChangeState = Literal["pending", "insync"]
ExpectedState = Literal["present", "absent"]


def absolute_name(name: str, domain: str) -> str:
    """Return the fully qualified, dot-terminated form of a relative name."""
    domain = domain.rstrip(".")
    if name == APEX:
        return f"{domain}."
    return f"{name}.{domain}."


def relative_name(fqdn: str, domain: str) -> str | None:
    """Return *fqdn* relative to *domain*, or ``None`` if outside it."""
    fqdn = fqdn.rstrip(".").lower()
    domain = domain.rstrip(".").lower()
    if fqdn == domain:
        return APEX
    suffix = f".{domain}"
    if fqdn.endswith(suffix):
        return fqdn[: -len(suffix)]
    return None


@dataclass(frozen=True)
class ZoneRef:
    """Canonical zone reference; ``name`` has no trailing dot."""

    id: str
    name: str


@dataclass(frozen=True, order=True)
class RecordKey:
    """Zone-relative record name (``"."`` for the apex) plus lowercase type."""

    name: str
    type: str

    def __str__(self) -> str:
        return f"{self.name}:{self.type}"


@dataclass(frozen=True)
class RecordSet:
    """A typed record with its value set.

    An empty ``values`` means the record is to be deleted, in which case
    ``old_values`` and ``old_ttl`` hold the exact image the backend needs
    to accept the delete.
    """

    key: RecordKey
    ttl: int
    values: frozenset[str] = frozenset()
    old_values: frozenset[str] | None = None
    old_ttl: int | None = None

    def __post_init__(self) -> None:
        if self.values and self.old_values is not None:
            raise ValueError(f"Record {self.key} has values and old values")

    @property
    def name(self) -> str:
        return self.key.name

    @property
    def type(self) -> str:
        return self.key.type

    @property
    def is_delete(self) -> bool:
        return not self.values

    def sorted_values(self) -> list[str]:
        return sorted(self.values)


@dataclass(frozen=True)
class Binding:
    """One add or delete intent.  ``value`` is ``None`` for a whole-record delete."""

    action: BindingAction
    key: RecordKey
    value: str | None = None

    def __str__(self) -> str:
        prefix = "!" if self.action == "delete" else ""
        suffix = "" if self.value is None else f"={self.value}"
        return f"{prefix}{self.key}{suffix}"


@dataclass(frozen=True)
class ChangeSet:
    """The reconciled result, partitioned by directive."""

    upserts: tuple[RecordSet, ...] = ()
    deletes: tuple[RecordSet, ...] = ()

    def __bool__(self) -> bool:
        return bool(self.upserts or self.deletes)

    @property
    def records(self) -> tuple[RecordSet, ...]:
        return self.upserts + self.deletes


@dataclass(frozen=True)
class ChangeStatus:
    id: str
    state: ChangeState


@dataclass(frozen=True)
class LiveRequest:
    """One name/type pair to resolve through public DNS."""

    name: str
    domain: str
    type: str

    @property
    def key(self) -> RecordKey:
        return RecordKey(self.name, self.type)

    @property
    def fqdn(self) -> str:
        return absolute_name(self.name, self.domain)


@dataclass(frozen=True)
class RawAnswer:
    """One answer record as returned by a recursive resolver."""

    name: str
    ttl: int
    type: str
    value: str


@dataclass(frozen=True)
class Expectation:
    """A state the live view of a record should reach."""

    key: RecordKey
    domain: str
    state: ExpectedState
    value: str | None = None

    def __str__(self) -> str:
        prefix = "!" if self.state == "absent" else ""
        suffix = "" if self.value is None else f"={self.value}"
        return f"{prefix}{self.key}{suffix}"

    def is_met(self, record: RecordSet | None) -> bool:
        """Whether the live *record* (``None`` if unresolved) satisfies this."""
        values = record.values if record is not None else frozenset()
        if self.value is None:
            found = bool(values)
        else:
            found = self.value in values
        return found if self.state == "present" else not found


@dataclass(frozen=True)
class ListRecordsResult:
    records: list[RecordSet] = field(default_factory=list)
    truncated: bool = False


@dataclass(frozen=True)
class ChangeResult:
    """Outcome of a change operation; ``change_id`` is ``None`` when nothing changed."""

    change_id: str | None
    zone: ZoneRef
    old_records: list[RecordSet] = field(default_factory=list)
    new_records: list[RecordSet] = field(default_factory=list)


__all__ = [
    "APEX",
    "absolute_name",
    "relative_name",
    "ZoneRef",
    "RecordKey",
    "RecordSet",
    "Binding",
    "ChangeSet",
    "ChangeStatus",
    "LiveRequest",
    "RawAnswer",
    "Expectation",
    "ListRecordsResult",
    "ChangeResult",
]
