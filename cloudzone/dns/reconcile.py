"""Record reconciliation: bindings plus existing state to a minimal change set.

The pipeline is group, merge, delete, cull, partition.  Deletions are
always applied after every addition and merge, whatever order the
bindings were given in, and are computed against the existing
(pre-merge) records.  A deletion that empties a record keeps the prior
values and TTL, since backends only delete an exact record image.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Iterable, Sequence

from cloudzone.base.exceptions import ParseError
from cloudzone.base.models import Binding, ChangeSet, RecordKey, RecordSet


class _All:
    """Delete-everything marker for whole-record deletions."""

    def __repr__(self) -> str:
        return "ALL"


ALL = _All()


def group_bindings(adds: Iterable[Binding], ttl: int) -> list[RecordSet]:
    """Collapse add bindings into one record per key with deduplicated values."""
    grouped: dict[RecordKey, set[str]] = defaultdict(set)
    for binding in adds:
        if binding.value is None:
            raise ParseError(f"Add binding needs a value: {binding}")
        grouped[binding.key].add(binding.value)
    return [
        RecordSet(key=key, ttl=ttl, values=frozenset(values))
        for key, values in sorted(grouped.items())
    ]


def merge_records(new: Iterable[RecordSet], existing: Iterable[RecordSet]) -> list[RecordSet]:
    """Union each new record's values with the existing record of the same key.

    The new record's TTL wins.  Keys only present in *existing* are not
    part of the result.
    """
    current = {r.key: r for r in existing}
    merged: list[RecordSet] = []
    for record in new:
        old = current.get(record.key)
        if old is not None:
            record = RecordSet(key=record.key, ttl=record.ttl, values=record.values | old.values)
        merged.append(record)
    return merged


def apply_deletes(
    records: Iterable[RecordSet],
    deletes: Iterable[Binding],
    existing: Iterable[RecordSet],
) -> list[RecordSet]:
    """Apply delete bindings against *existing*, replacing same-key entries of *records*.

    A delete whose key has no existing record contributes nothing.
    """
    current = {r.key: r for r in existing}
    removals: dict[RecordKey, set[str] | _All] = {}
    for binding in deletes:
        if binding.value is None or removals.get(binding.key) is ALL:
            removals[binding.key] = ALL
        else:
            pending = removals.get(binding.key)
            removals[binding.key] = (pending or set()) | {binding.value}  # type: ignore[operator]

    result = {r.key: r for r in records}
    for key, removed in removals.items():
        old = current.get(key)
        if old is None:
            continue
        remaining = frozenset() if removed is ALL else old.values - removed  # type: ignore[operator]
        if remaining:
            result[key] = RecordSet(key=key, ttl=old.ttl, values=remaining)
        else:
            result[key] = RecordSet(
                key=key, ttl=old.ttl, values=frozenset(), old_values=old.values, old_ttl=old.ttl
            )
    return [result[key] for key in sorted(result)]


def cull(records: Iterable[RecordSet]) -> list[RecordSet]:
    """Drop deletions of nothing: empty values with no prior image."""
    return [r for r in records if r.values or r.old_values]


def partition(records: Iterable[RecordSet]) -> ChangeSet:
    ordered = sorted(records, key=lambda r: r.key)
    return ChangeSet(
        upserts=tuple(r for r in ordered if r.values),
        deletes=tuple(r for r in ordered if not r.values),
    )


def validate_bindings(
    bindings: Sequence[Binding],
    ttl: int | None,
    merge: bool,
    allow_mixed: bool = False,
) -> None:
    """Check the combination of bindings and options before reconciling.

    Raises:
        ParseError: On deletions without merge mode, adds without a
            positive TTL, or (unless *allow_mixed*) a key that is both
            added to and deleted from.
    """
    adds = {b.key for b in bindings if b.action == "add"}
    deletes = {b.key for b in bindings if b.action == "delete"}
    problems: list[str] = []
    if deletes and not merge:
        problems.append("Deletions require merge mode")
    if adds and (ttl is None or ttl <= 0):
        problems.append("Adding records requires a positive TTL")
    mixed = sorted(adds & deletes)
    if mixed and not allow_mixed:
        problems.append(
            "Both added and deleted in one change: " + ", ".join(str(k) for k in mixed)
        )
    if problems:
        raise ParseError("Invalid change:", problems)


def reconcile(
    bindings: Sequence[Binding],
    ttl: int | None = None,
    existing: Sequence[RecordSet] = (),
    merge: bool = False,
    allow_mixed: bool = False,
) -> ChangeSet:
    """Turn bindings (and, in merge mode, existing records) into a change set.

    Args:
        bindings: Parsed add and delete bindings, in any order.
        ttl: TTL for added records; required when there are adds.
        existing: Current records for the keys the bindings name.  Only
            consulted in merge mode.
        merge: Union adds with existing values and allow deletions.
        allow_mixed: Accept adds and deletes on the same key, in which
            case the deletion result replaces the add.

    Returns:
        Upserts (non-empty values) and deletes (empty values with the
        prior image), both sorted by key.
    """
    validate_bindings(bindings, ttl, merge, allow_mixed)
    adds = [b for b in bindings if b.action == "add"]
    deletes = [b for b in bindings if b.action == "delete"]

    records = group_bindings(adds, ttl or 0)
    if merge:
        records = merge_records(records, existing)
    if deletes:
        records = apply_deletes(records, deletes, existing)
    return partition(cull(records))
