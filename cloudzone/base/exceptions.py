"""
Cloudzone exception hierarchy.

Every failure the DNS engine reports inherits from :class:`DNSError`,
itself a :class:`CloudzoneError`.  The CLI maps any of them to a non-zero
exit status; library callers can catch the precise kind.
"""

from __future__ import annotations

from typing import Any, Sequence


# ── Base ──────────────────────────────────────────────────────────────
class CloudzoneError(Exception):
    """Root exception for all Cloudzone errors."""


class ConfigError(CloudzoneError):
    """Invalid or incomplete configuration."""


# ── DNS ───────────────────────────────────────────────────────────────
class DNSError(CloudzoneError):
    """Base exception for DNS operations."""


class ParseError(DNSError):
    """Malformed binding, query or expectation token.

    Attributes:
        problems: One message per offending token, in input order.
    """

    def __init__(self, message: str, problems: Sequence[str] = ()) -> None:
        self.problems = list(problems)
        if self.problems:
            message = "\n  ".join([message, *self.problems])
        super().__init__(message)


class NotFoundError(DNSError):
    """A zone or record that was asked for does not exist."""


class ZoneNotFoundError(NotFoundError):
    """DNS zone not found."""


class RecordNotFoundError(NotFoundError):
    """DNS record not found.

    Attributes:
        found: Number of records found.
        expected: Number of records asked for.
    """

    def __init__(self, message: str, found: int = 0, expected: int = 0) -> None:
        self.found = found
        self.expected = expected
        super().__init__(message)


class AmbiguousZoneError(DNSError):
    """More than one zone matched.

    Attributes:
        candidates: Every matching zone.
    """

    def __init__(self, message: str, candidates: Sequence[Any] = ()) -> None:
        self.candidates = list(candidates)
        super().__init__(message)


class TruncatedResponseError(DNSError):
    """The backend paginated a record listing, which is not supported."""


class BackendError(DNSError):
    """Network, authorization or API failure reported by the backend."""


class WaitTimeoutError(DNSError):
    """A convergence or expectation wait hit its deadline.

    Attributes:
        pending: Description of each item still unresolved, with its
            last known status.
        change_id: The change being waited on, if any.
    """

    def __init__(
        self,
        message: str,
        pending: Sequence[str] = (),
        change_id: str | None = None,
    ) -> None:
        self.pending = list(pending)
        self.change_id = change_id
        super().__init__(message)


__all__ = [
    "CloudzoneError",
    "ConfigError",
    "DNSError",
    "ParseError",
    "NotFoundError",
    "ZoneNotFoundError",
    "RecordNotFoundError",
    "AmbiguousZoneError",
    "TruncatedResponseError",
    "BackendError",
    "WaitTimeoutError",
]
