"""Tests for the AWS Route 53 backend."""

from unittest.mock import patch, MagicMock
import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from cloudzone.aws.route53 import Route53Backend
from cloudzone.base.config import AWSConfig
from cloudzone.base.exceptions import BackendError, NotFoundError, ZoneNotFoundError
from cloudzone.base.models import RecordKey, ZoneRef


def _client_error(code: str, msg: str = "error") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": msg}}, "op")


ZONE = ZoneRef("Z1", "example.com")


@pytest.fixture
def svc():
    with patch("cloudzone.aws.route53.boto3") as mock_boto:
        mock_client = MagicMock()
        mock_boto.client.return_value = mock_client
        instance = Route53Backend(AWSConfig(
            aws_access_key_id="key",
            aws_secret_access_key="secret",
            region_name="us-east-1",
        ))
        yield instance, mock_client


# --- find_zones ---

class TestFindZones:
    def test_by_name_exact_match_only(self, svc):
        inst, client = svc
        client.list_hosted_zones_by_name.return_value = {
            "HostedZones": [
                {"Id": "/hostedzone/Z1", "Name": "example.com."},
                {"Id": "/hostedzone/Z9", "Name": "example.com.au."},
            ]
        }
        assert inst.find_zones(name="example.com") == [ZoneRef("Z1", "example.com")]
        client.list_hosted_zones_by_name.assert_called_once_with(
            DNSName="example.com", MaxItems="100"
        )

    def test_by_name_private_and_public(self, svc):
        inst, client = svc
        client.list_hosted_zones_by_name.return_value = {
            "HostedZones": [
                {"Id": "/hostedzone/Z1", "Name": "example.com."},
                {"Id": "/hostedzone/Z2", "Name": "example.com."},
            ]
        }
        assert len(inst.find_zones(name="example.com")) == 2

    def test_by_id(self, svc):
        inst, client = svc
        client.get_hosted_zone.return_value = {
            "HostedZone": {"Id": "/hostedzone/Z1", "Name": "example.com."}
        }
        assert inst.find_zones(zone_id="Z1") == [ZoneRef("Z1", "example.com")]

    def test_by_id_missing(self, svc):
        inst, client = svc
        client.get_hosted_zone.side_effect = _client_error("NoSuchHostedZone")
        assert inst.find_zones(zone_id="Z-missing") == []

    def test_requires_name_or_id(self, svc):
        inst, client = svc
        with pytest.raises(ValueError):
            inst.find_zones()
        client.list_hosted_zones_by_name.assert_not_called()

    def test_access_denied(self, svc):
        inst, client = svc
        client.list_hosted_zones_by_name.side_effect = _client_error("AccessDenied", "nope")
        with pytest.raises(BackendError, match="nope"):
            inst.find_zones(name="example.com")


# --- list_records ---

class TestListRecords:
    def test_success(self, svc):
        inst, client = svc
        client.list_resource_record_sets.return_value = {
            "ResourceRecordSets": [
                {
                    "Name": "www.example.com.",
                    "Type": "A",
                    "TTL": 300,
                    "ResourceRecords": [{"Value": "1.2.3.4"}, {"Value": "5.6.7.8"}],
                },
                {
                    "Name": "\\052.example.com.",
                    "Type": "CNAME",
                    "TTL": 60,
                    "ResourceRecords": [{"Value": "www.example.com."}],
                },
                {
                    "Name": "alias.example.com.",
                    "Type": "A",
                    "AliasTarget": {"DNSName": "lb.amazonaws.com."},
                },
            ],
            "IsTruncated": False,
        }
        result = inst.list_records(ZONE, "www.example.com.", "a", 300)
        client.list_resource_record_sets.assert_called_once_with(
            HostedZoneId="Z1",
            StartRecordName="www.example.com.",
            StartRecordType="A",
            MaxItems="300",
        )
        assert [r.key for r in result.records] == [RecordKey("www", "a"), RecordKey("*", "cname")]
        assert result.records[0].values == {"1.2.3.4", "5.6.7.8"}
        assert result.truncated is False

    def test_truncated_flag(self, svc):
        inst, client = svc
        client.list_resource_record_sets.return_value = {
            "ResourceRecordSets": [],
            "IsTruncated": True,
        }
        assert inst.list_records(ZONE, "example.com.").truncated is True

    def test_not_found(self, svc):
        inst, client = svc
        client.list_resource_record_sets.side_effect = _client_error("NoSuchHostedZone")
        with pytest.raises(ZoneNotFoundError):
            inst.list_records(ZONE, "www.example.com.")


# --- submit_change_batch ---

class TestSubmitChangeBatch:
    def test_success(self, svc):
        inst, client = svc
        client.change_resource_record_sets.return_value = {
            "ChangeInfo": {"Id": "/change/C123", "Status": "PENDING"}
        }
        change_id = inst.submit_change_batch("Z1", {
            "comment": "hi",
            "changes": [
                {"action": "UPSERT", "name": "www.example.com.", "type": "A", "ttl": 300,
                 "values": ["1.2.3.4"]},
                {"action": "DELETE", "name": "old.example.com.", "type": "TXT", "ttl": 60,
                 "values": ['"x"']},
            ],
        })
        assert change_id == "C123"
        args = client.change_resource_record_sets.call_args[1]
        assert args["HostedZoneId"] == "Z1"
        assert args["ChangeBatch"]["Comment"] == "hi"
        changes = args["ChangeBatch"]["Changes"]
        assert [c["Action"] for c in changes] == ["UPSERT", "DELETE"]
        assert changes[1]["ResourceRecordSet"] == {
            "Name": "old.example.com.",
            "Type": "TXT",
            "TTL": 60,
            "ResourceRecords": [{"Value": '"x"'}],
        }

    def test_invalid_batch(self, svc):
        inst, client = svc
        client.change_resource_record_sets.side_effect = _client_error(
            "InvalidChangeBatch", "values do not match"
        )
        with pytest.raises(BackendError, match="values do not match"):
            inst.submit_change_batch("Z1", {"changes": []})

    def test_network_failure(self, svc):
        inst, client = svc
        client.change_resource_record_sets.side_effect = EndpointConnectionError(
            endpoint_url="https://route53.amazonaws.com"
        )
        with pytest.raises(BackendError):
            inst.submit_change_batch("Z1", {"changes": []})
        client.change_resource_record_sets.assert_called_once()


# --- get_change_status ---

class TestGetChangeStatus:
    @pytest.mark.parametrize("raw,state", [("PENDING", "pending"), ("INSYNC", "insync")])
    def test_states(self, svc, raw, state):
        inst, client = svc
        client.get_change.return_value = {"ChangeInfo": {"Id": "/change/C1", "Status": raw}}
        assert inst.get_change_status("C1").state == state
        client.get_change.assert_called_once_with(Id="C1")

    def test_no_such_change(self, svc):
        inst, client = svc
        client.get_change.side_effect = _client_error("NoSuchChange")
        with pytest.raises(NotFoundError):
            inst.get_change_status("C404")
