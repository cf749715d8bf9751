"""Authoritative record query: read records straight from the backend."""

from __future__ import annotations

from typing import Sequence

import dns.rdatatype

from cloudzone.base.backend import DNSBackendBlueprint
from cloudzone.base.exceptions import ParseError, RecordNotFoundError, TruncatedResponseError
from cloudzone.base.logger import CloudzoneLogger, quiet_logger
from cloudzone.base.models import APEX, RecordKey, RecordSet, ZoneRef, absolute_name

# Route 53's largest page.
DEFAULT_MAX_ITEMS = 300

_APEX_ALIASES = ("", "@", APEX)


def canonical_name(domain: str, name: str | None) -> str:
    """Canonicalize a zone-relative record name.

    The apex (``None``, ``""``, ``"@"``, ``"."``, or the domain itself)
    becomes ``"."``; trailing dots are stripped; case is folded.

    Raises:
        ParseError: If *name* repeats the zone's own domain as a suffix.
    """
    domain = domain.rstrip(".").lower()
    if name is None:
        return APEX
    name = name.strip().lower()
    if name in _APEX_ALIASES:
        return APEX
    name = name.rstrip(".")
    if name == domain:
        return APEX
    if name.endswith(f".{domain}"):
        raise ParseError(
            f"Record name '{name}' should not include the zone domain '{domain}'"
        )
    return name


def canonical_type(rtype: str) -> str:
    """Lowercase *rtype*, which must be a record type dnspython knows.

    Raises:
        ParseError: For an empty or unknown type.
    """
    rtype = rtype.strip().lower()
    if not rtype or not rtype.isalnum():
        raise ParseError(f"Invalid record type: {rtype!r}")
    try:
        dns.rdatatype.from_text(rtype)
    except (dns.rdatatype.UnknownRdatatype, ValueError) as e:
        raise ParseError(f"Unknown record type: {rtype!r}") from e
    return rtype


def get_records(
    backend: DNSBackendBlueprint,
    zone: ZoneRef,
    name: str | None,
    types: Sequence[str],
    value: str | None = None,
    not_found_ok: bool = False,
    max_items: int = DEFAULT_MAX_ITEMS,
    logger: CloudzoneLogger | None = None,
) -> list[RecordSet]:
    """Fetch the records named *name* of each of *types* from the backend.

    Only one listing page is read.  Route 53 seeds the page at *name*
    (and at the type when exactly one is requested) and marks it truncated
    whenever more than *max_items* record sets follow in the zone, even if
    the wanted records are on the page; that is an error, not a partial
    result.  Merge-mode changes in large zones can hit this.

    Args:
        backend: DNS backend.
        zone: Zone holding the records.
        name: Zone-relative name; apex forms are accepted.
        types: Record types to fetch.
        value: If given, only records whose value set contains it.
        not_found_ok: Return what was found instead of failing when
            fewer records than types were found.
        max_items: Page size for the single listing call.
        logger: Progress/diagnostic logger.

    Returns:
        Matching records sorted by key.

    Raises:
        TruncatedResponseError: The backend paginated the listing.
        RecordNotFoundError: Fewer records than *types* were found and
            *not_found_ok* is false.
    """
    logger = logger or quiet_logger()
    rname = canonical_name(zone.name, name)
    wanted = sorted({RecordKey(rname, canonical_type(t)) for t in types})
    if not wanted:
        raise ParseError("No record types requested")

    start_type = wanted[0].type if len(wanted) == 1 else None
    start_name = absolute_name(rname, zone.name)
    logger.debug(
        f"Listing records from {start_name} {start_type or ''}".rstrip(),
        provider=backend.provider,
        zone=zone.name,
        operation="get_records",
    )
    result = backend.list_records(zone, start_name, start_type, max_items)
    if result.truncated:
        raise TruncatedResponseError(
            f"Record listing for {start_name} in zone {zone.id} was truncated "
            f"(more than {max_items} records); pagination is not supported"
        )

    keys = set(wanted)
    found = sorted(
        (r for r in result.records if r.key in keys and (value is None or value in r.values)),
        key=lambda r: r.key,
    )

    if len(found) < len(wanted) and not not_found_ok:
        missing = ", ".join(str(k) for k in wanted if k not in {r.key for r in found})
        raise RecordNotFoundError(
            f"Records not found in {zone.name}: {missing} "
            f"(found {len(found)}, expected {len(wanted)})",
            found=len(found),
            expected=len(wanted),
        )
    return found
