"""Cloudzone: DNS record reconciliation and convergence for cloud providers.

Entry point for the library. Import :func:`backend_factory` to create a
provider backend, then drive it with the :mod:`cloudzone.dns` engine::

    from cloudzone import backend_factory
    from cloudzone.dns.commands import change

    backend = backend_factory("aws", {})
    result = change(backend, "example.com", ["www:a=192.0.2.10"], ttl=300)
"""

from .base import DNSBackendBlueprint
from .factory import backend_factory

__all__ = [
    "DNSBackendBlueprint",
    "backend_factory",
]
