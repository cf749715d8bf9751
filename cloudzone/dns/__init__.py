"""DNS record reconciliation and convergence engine."""

from .bindings import parse_bindings, parse_expectations
from .changes import submit_changes, to_change_batch
from .live import parse_queries, query_live
from .reconcile import reconcile
from .records import canonical_name, get_records
from .waiter import wait_for_change, wait_for_changes, wait_for_expectations
from .zones import apex_domain, resolve_zone

__all__ = [
    "apex_domain",
    "canonical_name",
    "get_records",
    "parse_bindings",
    "parse_expectations",
    "parse_queries",
    "query_live",
    "reconcile",
    "resolve_zone",
    "submit_changes",
    "to_change_batch",
    "wait_for_change",
    "wait_for_changes",
    "wait_for_expectations",
]
