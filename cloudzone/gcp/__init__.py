"""GCP provider implementation."""

from .cloud_dns import CloudDNSBackend

__all__ = ["CloudDNSBackend"]
