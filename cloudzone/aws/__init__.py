"""AWS provider implementation."""

from .route53 import Route53Backend

__all__ = ["Route53Backend"]
