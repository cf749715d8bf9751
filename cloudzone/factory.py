"""DNS backend factory.

Provides :func:`backend_factory`, the single entry-point for creating a
DNS backend.  The provider class is picked from a static registry keyed
by provider name, once, and its config is validated with the provider's
Pydantic model.
"""

from typing import overload, Literal, Any

from cloudzone.base import DNSBackendBlueprint, existing_cloud_providers
from cloudzone.base.config import validate_config
from cloudzone.base.exceptions import ConfigError
from cloudzone.aws.route53 import Route53Backend
from cloudzone.gcp.cloud_dns import CloudDNSBackend


# Registry: cloud_provider -> backend class
BACKEND_REGISTRY: dict[str, type[DNSBackendBlueprint]] = {
    "aws": Route53Backend,
    "gcp": CloudDNSBackend,
}


@overload
def backend_factory(cloud_provider: Literal["aws"], config: dict) -> Route53Backend: ...


@overload
def backend_factory(cloud_provider: Literal["gcp"], config: dict) -> CloudDNSBackend: ...


def backend_factory(cloud_provider: existing_cloud_providers, config: dict) -> Any:
    """
    Create the DNS backend for a cloud provider.
    Args:
        cloud_provider: The cloud provider (e.g. 'aws', 'gcp').
        config: Configuration dictionary to initialize the backend.
    Returns:
        An instance of the provider's backend class.
    Raises:
        ConfigError: If the cloud provider is not supported or the config is invalid.
    """
    backend_class = BACKEND_REGISTRY.get(cloud_provider)
    if backend_class is None:
        raise ConfigError(f"Unsupported cloud provider: {cloud_provider}")

    configObj = validate_config(cloud_provider, config)
    return backend_class(configObj)  # type: ignore[call-arg]
