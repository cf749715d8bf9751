"""GCP Cloud DNS implementation of the DNS backend blueprint."""

from __future__ import annotations

from typing import Any

from google.api_core import exceptions as gcp_exceptions
from google.cloud import dns as cloud_dns  # type: ignore[attr-defined]

from cloudzone.base.backend import DNSBackendBlueprint
from cloudzone.base.config import GCPConfig
from cloudzone.base.exceptions import BackendError, NotFoundError, ZoneNotFoundError
from cloudzone.base.models import (
    ChangeStatus,
    ListRecordsResult,
    RecordKey,
    RecordSet,
    ZoneRef,
    relative_name,
)
from cloudzone.base.resolver import PublicResolver

_STATUS_MAP = {
    "pending": "pending",
    "done": "insync",
}


class CloudDNSBackend(DNSBackendBlueprint):
    """GCP Cloud DNS backend.

    Cloud DNS has neither start-name seeding nor an UPSERT action, so
    listing scans the zone for the start name, and an upsert is sent as a
    delete of the current record set plus an add, in the same change.

    Attributes:
        client: Cloud DNS client.
        project_id: GCP project ID.
        resolver: Public resolver for the live query path.
    """

    provider = "gcp"
    zone_id_prefix = "managedZones/"

    def __init__(self, config: GCPConfig) -> None:
        """Initialize the Cloud DNS client.

        Args:
            config: GCP configuration object containing project ID and credentials.
                   Expected attributes:
                   - project_id: GCP project ID
                   - credentials: Optional GCP credentials object
                   - resolver: Live query settings
        """
        assert config.project_id is not None  # guaranteed by GCPConfig validator
        self.project_id: str = config.project_id
        self.client = cloud_dns.Client(project=self.project_id, credentials=config.credentials)
        self.resolver = PublicResolver(config.resolver)

    # --- Zones ---

    def find_zones(self, name: str | None = None, zone_id: str | None = None) -> list[ZoneRef]:
        """Find managed zones by exact DNS name or by zone name.

        Raises:
            BackendError: On Cloud DNS API failure.
        """
        if zone_id is not None:
            zone = self.client.zone(zone_id)
            try:
                zone.reload()
            except gcp_exceptions.NotFound:
                return []
            except gcp_exceptions.GoogleAPIError as e:
                raise BackendError(f"Failed to look up zone '{zone_id}': {e}") from e
            return [ZoneRef(id=zone.name, name=zone.dns_name.rstrip("."))]

        if name is None:
            raise ValueError("find_zones needs a name or a zone_id")
        wanted = name.rstrip(".").lower()
        try:
            return [
                ZoneRef(id=z.name, name=z.dns_name.rstrip("."))
                for z in self.client.list_zones()
                if z.dns_name.rstrip(".").lower() == wanted
            ]
        except gcp_exceptions.GoogleAPIError as e:
            raise BackendError(f"Failed to look up zone '{wanted}': {e}") from e

    # --- Records ---

    def _scan(self, zone_id: str) -> list[Any]:
        try:
            return list(self.client.zone(zone_id).list_resource_record_sets())
        except gcp_exceptions.NotFound as e:
            raise ZoneNotFoundError(f"Zone '{zone_id}' not found") from e
        except gcp_exceptions.GoogleAPIError as e:
            raise BackendError(f"Failed to list records in '{zone_id}': {e}") from e

    def list_records(
        self,
        zone: ZoneRef,
        start_name: str,
        start_type: str | None = None,
        max_items: int | None = None,
    ) -> ListRecordsResult:
        """List the record sets at *start_name*.

        The result is truncated when more than *max_items* record sets
        exist at that name.

        Raises:
            ZoneNotFoundError: If the managed zone does not exist.
            BackendError: On any other Cloud DNS API failure.
        """
        wanted = start_name.lower()
        records: list[RecordSet] = []
        for r in self._scan(zone.id):
            if r.name.lower() != wanted:
                continue
            name = relative_name(r.name, zone.name)
            if name is None:
                continue
            records.append(
                RecordSet(
                    key=RecordKey(name, r.record_type.lower()),
                    ttl=r.ttl,
                    values=frozenset(r.rrdatas),
                )
            )
        records.sort(key=lambda rs: rs.key)
        if start_type is not None:
            records = [rs for rs in records if rs.type >= start_type]
        truncated = max_items is not None and len(records) > max_items
        if truncated:
            records = records[:max_items]
        return ListRecordsResult(records=records, truncated=truncated)

    def submit_change_batch(self, zone_id: str, batch: dict[str, Any]) -> str:
        """Create one Cloud DNS change holding every addition and deletion.

        Returns:
            Change ID.

        Raises:
            ZoneNotFoundError: If the managed zone does not exist.
            BackendError: On any other Cloud DNS API failure.
        """
        zone = self.client.zone(zone_id)
        changes = zone.changes()
        if batch.get("comment"):
            changes.description = batch["comment"]

        current: dict[tuple[str, str], Any] = {}
        if any(c["action"] == "UPSERT" for c in batch["changes"]):
            current = {(r.name.lower(), r.record_type): r for r in self._scan(zone_id)}

        for change in batch["changes"]:
            record = zone.resource_record_set(
                change["name"], change["type"], change["ttl"], list(change["values"])
            )
            if change["action"] == "UPSERT":
                existing = current.get((change["name"].lower(), change["type"]))
                if existing is not None:
                    changes.delete_record_set(existing)
                changes.add_record_set(record)
            else:
                changes.delete_record_set(record)

        try:
            changes.create()
        except gcp_exceptions.NotFound as e:
            raise ZoneNotFoundError(f"Zone '{zone_id}' not found") from e
        except gcp_exceptions.GoogleAPIError as e:
            raise BackendError(f"Failed to change records in '{zone_id}': {e}") from e
        return changes.name  # type: ignore[no-any-return]

    def get_change_status(self, change_id: str, zone_id: str | None = None) -> ChangeStatus:
        """Return the status of a Cloud DNS change.

        Raises:
            BackendError: If *zone_id* is missing (Cloud DNS scopes changes
                to a zone) or on Cloud DNS API failure.
            NotFoundError: If the change does not exist.
        """
        if zone_id is None:
            raise BackendError("Cloud DNS change status requires a zone")
        changes = self.client.zone(zone_id).changes()
        changes.name = change_id
        try:
            changes.reload()
        except gcp_exceptions.NotFound as e:
            raise NotFoundError(f"Change '{change_id}' not found in '{zone_id}'") from e
        except gcp_exceptions.GoogleAPIError as e:
            raise BackendError(f"Failed to get status of change '{change_id}': {e}") from e
        return ChangeStatus(id=change_id, state=_STATUS_MAP.get(changes.status, "pending"))  # type: ignore[arg-type]
