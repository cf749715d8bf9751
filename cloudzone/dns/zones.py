"""Zone resolution: domain name or zone ID to a canonical :class:`ZoneRef`."""

from __future__ import annotations

from cloudzone.base.backend import DNSBackendBlueprint
from cloudzone.base.exceptions import AmbiguousZoneError, ParseError, ZoneNotFoundError
from cloudzone.base.logger import CloudzoneLogger, quiet_logger
from cloudzone.base.models import ZoneRef


def apex_domain(name: str) -> str:
    """Return the rightmost two labels of *name* (``a.b.example.com`` -> ``example.com``)."""
    labels = [label for label in name.rstrip(".").lower().split(".") if label]
    if len(labels) < 2:
        raise ParseError(f"Not a domain name: {name!r}")
    return ".".join(labels[-2:])


def resolve_zone(
    backend: DNSBackendBlueprint,
    name_or_id: str,
    logger: CloudzoneLogger | None = None,
) -> ZoneRef:
    """Map a domain or a zone ID to the zone that hosts it.

    Input containing a dot is a domain; any subdomain labels beyond the
    apex are ignored.  Anything else is an opaque zone ID, with or without
    the provider's namespace prefix.

    Raises:
        ZoneNotFoundError: No zone matched.
        AmbiguousZoneError: More than one zone matched.
    """
    logger = logger or quiet_logger()
    name_or_id = name_or_id.strip()
    if not name_or_id:
        raise ParseError("Missing zone name or ID")

    if "." in name_or_id:
        apex = apex_domain(name_or_id)
        logger.debug(f"Looking up zone by name: {apex}", provider=backend.provider, operation="resolve_zone")
        zones = backend.find_zones(name=apex)
        what = f"name '{apex}'"
    else:
        zone_id = name_or_id
        prefix = backend.zone_id_prefix
        if prefix and zone_id.startswith(prefix):
            zone_id = zone_id[len(prefix):]
        logger.debug(f"Looking up zone by ID: {zone_id}", provider=backend.provider, operation="resolve_zone")
        zones = backend.find_zones(zone_id=zone_id)
        what = f"ID '{zone_id}'"

    if not zones:
        raise ZoneNotFoundError(f"No zone found with {what}")
    if len(zones) > 1:
        listing = ", ".join(f"{z.id} ({z.name})" for z in zones)
        raise AmbiguousZoneError(f"Ambiguous zone {what}: {listing}", candidates=zones)
    return zones[0]
