"""DNS backend blueprint."""

from abc import ABC, abstractmethod
from typing import Any, Sequence

from cloudzone.base.models import ChangeStatus, ListRecordsResult, LiveRequest, RawAnswer, ZoneRef
from cloudzone.base.resolver import PublicResolver


class DNSBackendBlueprint(ABC):
    """Abstract interface the DNS engine drives.

    Maps to AWS Route 53 and GCP Cloud DNS.  Every provider call is a
    single blocking round trip; failures surface as
    :class:`~cloudzone.base.exceptions.BackendError` (or a more specific
    :class:`~cloudzone.base.exceptions.DNSError`) and are never retried.
    """

    #: Registry key of the provider.
    provider: str = ""

    #: Identifier namespace prefix tolerated on zone IDs (e.g. ``/hostedzone/``).
    zone_id_prefix: str = ""

    resolver: PublicResolver

    # --- Zones ---

    @abstractmethod
    def find_zones(self, name: str | None = None, zone_id: str | None = None) -> list[ZoneRef]:
        """Return every zone exactly matching *name* or *zone_id*.

        Args:
            name: Apex domain without trailing dot.
            zone_id: Bare zone identifier (namespace prefix already stripped).

        Returns:
            Matching zones; empty when none match.
        """

    # --- Records ---

    @abstractmethod
    def list_records(
        self,
        zone: ZoneRef,
        start_name: str,
        start_type: str | None = None,
        max_items: int | None = None,
    ) -> ListRecordsResult:
        """List one page of records starting at *start_name* / *start_type*.

        Args:
            zone: Zone being listed.
            start_name: Fully qualified name to start at (``www.example.com.``).
            start_type: Lowercase record type to start at, if any.
            max_items: Page size.

        Returns:
            Records with names relative to *zone* (``"."`` for the apex)
            and lowercase types, plus the backend's truncation flag.
        """

    @abstractmethod
    def submit_change_batch(self, zone_id: str, batch: dict[str, Any]) -> str:
        """Submit one atomic change batch.

        Args:
            zone_id: Zone identifier.
            batch: ``{"comment": str, "changes": [{"action", "name", "type",
                "ttl", "values"}]}`` with ``action`` ``UPSERT`` or ``DELETE``,
                names fully qualified and types uppercase.

        Returns:
            Opaque change identifier.
        """

    @abstractmethod
    def get_change_status(self, change_id: str, zone_id: str | None = None) -> ChangeStatus:
        """Return the propagation state of a submitted change."""

    # --- Live path ---

    def recursive_query(self, requests: Sequence[LiveRequest]) -> list[RawAnswer]:
        """Resolve *requests* through public DNS, independent of the provider API."""
        return self.resolver.query(requests)
