from unittest.mock import patch, MagicMock
import pytest

from cloudzone.factory import backend_factory, BACKEND_REGISTRY
from cloudzone.base import DNSBackendBlueprint
from cloudzone.base.exceptions import ConfigError
from cloudzone.aws.route53 import Route53Backend
from cloudzone.gcp.cloud_dns import CloudDNSBackend


class TestBackendFactory:
    @patch("cloudzone.aws.route53.boto3")
    def test_aws(self, mock_boto):
        mock_boto.client.return_value = MagicMock()
        result = backend_factory("aws", {
            "aws_access_key_id": "k",
            "aws_secret_access_key": "s",
            "region_name": "us-east-1",
        })
        assert isinstance(result, Route53Backend)
        assert isinstance(result, DNSBackendBlueprint)
        mock_boto.client.assert_called_once()
        assert mock_boto.client.call_args[0] == ("route53",)

    @patch("cloudzone.gcp.cloud_dns.cloud_dns.Client")
    def test_gcp(self, mock_client):
        result = backend_factory("gcp", {"project_id": "my-project"})
        assert isinstance(result, CloudDNSBackend)
        assert result.project_id == "my-project"

    def test_unsupported_provider(self):
        with pytest.raises(ConfigError, match="Unsupported cloud provider"):
            backend_factory("azure", {})  # type: ignore[call-overload]

    def test_invalid_config(self):
        with pytest.raises(ConfigError):
            backend_factory("aws", {"not_a_field": 1})

    def test_registry_is_static(self):
        assert BACKEND_REGISTRY == {"aws": Route53Backend, "gcp": CloudDNSBackend}
