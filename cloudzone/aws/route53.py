"""AWS Route 53 implementation of the DNS backend blueprint."""

from __future__ import annotations

import re
from typing import Any, NoReturn

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from cloudzone.base.backend import DNSBackendBlueprint
from cloudzone.base.config import AWSConfig
from cloudzone.base.exceptions import (
    BackendError,
    DNSError,
    NotFoundError,
    ZoneNotFoundError,
)
from cloudzone.base.models import (
    ChangeStatus,
    ListRecordsResult,
    RecordKey,
    RecordSet,
    ZoneRef,
    relative_name,
)
from cloudzone.base.resolver import PublicResolver

_ERROR_MAP: dict[str, type[DNSError]] = {
    "NoSuchHostedZone": ZoneNotFoundError,
    "NoSuchChange": NotFoundError,
}

_STATUS_MAP = {
    "PENDING": "pending",
    "INSYNC": "insync",
}

_OCTAL_ESCAPE = re.compile(r"\\(\d{3})")


def _handle(e: Exception, msg: str) -> NoReturn:
    if isinstance(e, ClientError):
        error = e.response.get("Error", {})
        exc = _ERROR_MAP.get(error.get("Code", ""))
        raise (exc or BackendError)(f"{msg}: {error.get('Message', e)}") from e
    raise BackendError(f"{msg}: {e}") from e


def _unescape(name: str) -> str:
    """Decode Route 53's ``\\ddd`` octal escapes (``\\052`` is ``*``)."""
    return _OCTAL_ESCAPE.sub(lambda m: chr(int(m.group(1), 8)), name)


class Route53Backend(DNSBackendBlueprint):
    """AWS Route 53 DNS backend.

    Attributes:
        client: boto3 Route 53 client.
        resolver: Public resolver for the live query path.
    """

    provider = "aws"
    zone_id_prefix = "/hostedzone/"

    def __init__(self, config: AWSConfig) -> None:
        """Initialize the Route 53 client.

        Args:
            config: AWS configuration object containing credentials and region.
                   Expected attributes:
                   - aws_access_key_id: AWS access key ID
                   - aws_secret_access_key: AWS secret access key
                   - aws_session_token: Optional session token
                   - region_name: AWS region name (Route 53 itself is global)
                   - resolver: Live query settings
        """
        self.client = boto3.client(
            "route53",
            aws_access_key_id=config.aws_access_key_id,
            aws_secret_access_key=config.aws_secret_access_key,
            aws_session_token=config.aws_session_token,
            region_name=config.region_name or "us-east-1",
        )
        self.resolver = PublicResolver(config.resolver)

    # --- Zones ---

    def find_zones(self, name: str | None = None, zone_id: str | None = None) -> list[ZoneRef]:
        """Find hosted zones by exact apex name or by ID.

        Raises:
            BackendError: On Route 53 API failure.
        """
        if zone_id is not None:
            try:
                resp = self.client.get_hosted_zone(Id=zone_id)
            except ClientError as e:
                if e.response.get("Error", {}).get("Code") in ("NoSuchHostedZone", "InvalidInput"):
                    return []
                _handle(e, f"Failed to look up zone '{zone_id}'")
            except BotoCoreError as e:
                _handle(e, f"Failed to look up zone '{zone_id}'")
            zone = resp["HostedZone"]
            return [ZoneRef(id=zone["Id"].split("/")[-1], name=zone["Name"].rstrip("."))]

        if name is None:
            raise ValueError("find_zones needs a name or a zone_id")
        wanted = name.rstrip(".").lower()
        try:
            resp = self.client.list_hosted_zones_by_name(DNSName=wanted, MaxItems="100")
        except (ClientError, BotoCoreError) as e:
            _handle(e, f"Failed to look up zone '{wanted}'")
        return [
            ZoneRef(id=z["Id"].split("/")[-1], name=z["Name"].rstrip("."))
            for z in resp.get("HostedZones", [])
            if z["Name"].rstrip(".").lower() == wanted
        ]

    # --- Records ---

    def list_records(
        self,
        zone: ZoneRef,
        start_name: str,
        start_type: str | None = None,
        max_items: int | None = None,
    ) -> ListRecordsResult:
        """List one page of Route 53 record sets.

        Alias records carry no values and are skipped.

        Raises:
            ZoneNotFoundError: If the hosted zone does not exist.
            BackendError: On any other Route 53 API failure.
        """
        params: dict[str, Any] = {
            "HostedZoneId": zone.id,
            "StartRecordName": start_name,
        }
        if start_type is not None:
            params["StartRecordType"] = start_type.upper()
        if max_items is not None:
            params["MaxItems"] = str(max_items)
        try:
            resp = self.client.list_resource_record_sets(**params)
        except (ClientError, BotoCoreError) as e:
            _handle(e, f"Failed to list records in zone '{zone.id}'")

        records: list[RecordSet] = []
        for r in resp.get("ResourceRecordSets", []):
            if "ResourceRecords" not in r:
                continue
            name = relative_name(_unescape(r["Name"]), zone.name)
            if name is None:
                continue
            records.append(
                RecordSet(
                    key=RecordKey(name, r["Type"].lower()),
                    ttl=r.get("TTL", 0),
                    values=frozenset(rr["Value"] for rr in r["ResourceRecords"]),
                )
            )
        return ListRecordsResult(records=records, truncated=bool(resp.get("IsTruncated")))

    def submit_change_batch(self, zone_id: str, batch: dict[str, Any]) -> str:
        """Apply a Route 53 change batch (UPSERT / DELETE).

        Returns:
            Change ID (without ``/change/`` prefix).

        Raises:
            ZoneNotFoundError: If the hosted zone does not exist.
            BackendError: On any other Route 53 API failure.
        """
        change_batch: dict[str, Any] = {
            "Changes": [
                {
                    "Action": change["action"],
                    "ResourceRecordSet": {
                        "Name": change["name"],
                        "Type": change["type"],
                        "TTL": change["ttl"],
                        "ResourceRecords": [{"Value": v} for v in change["values"]],
                    },
                }
                for change in batch["changes"]
            ]
        }
        if batch.get("comment"):
            change_batch["Comment"] = batch["comment"]
        try:
            resp = self.client.change_resource_record_sets(
                HostedZoneId=zone_id, ChangeBatch=change_batch
            )
        except (ClientError, BotoCoreError) as e:
            _handle(e, f"Failed to change records in zone '{zone_id}'")
        return resp["ChangeInfo"]["Id"].split("/")[-1]  # type: ignore[no-any-return]

    def get_change_status(self, change_id: str, zone_id: str | None = None) -> ChangeStatus:
        """Return the status of a Route 53 change.

        Raises:
            NotFoundError: If Route 53 has no such change.
            BackendError: On any other Route 53 API failure.
        """
        try:
            resp = self.client.get_change(Id=change_id)
        except (ClientError, BotoCoreError) as e:
            _handle(e, f"Failed to get status of change '{change_id}'")
        status = resp["ChangeInfo"]["Status"]
        return ChangeStatus(id=change_id, state=_STATUS_MAP.get(status, "pending"))  # type: ignore[arg-type]
