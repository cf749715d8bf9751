"""Public recursive resolution via dnspython.

Used by every backend for the live query path, which deliberately
bypasses the provider API to see what the rest of the internet sees.
"""

from __future__ import annotations

from typing import Sequence

import dns.exception
import dns.rdatatype
import dns.resolver

from cloudzone.base.config import ResolverConfig
from cloudzone.base.exceptions import BackendError
from cloudzone.base.models import LiveRequest, RawAnswer


class PublicResolver:
    """Batch recursive lookups returning flat answer records.

    Answers come from the full response, so CNAME chains followed by the
    resolver show up as extra records; callers filter what they asked for.
    The underlying resolver is built on first use.
    """

    def __init__(self, config: ResolverConfig | None = None) -> None:
        self.config = config or ResolverConfig()
        self._resolver: dns.resolver.Resolver | None = None

    @property
    def resolver(self) -> dns.resolver.Resolver:
        if self._resolver is None:
            try:
                resolver = dns.resolver.Resolver(configure=not self.config.nameservers)
            except dns.resolver.NoResolverConfiguration as e:
                raise BackendError(f"No system resolver configuration: {e}") from e
            if self.config.nameservers:
                resolver.nameservers = list(self.config.nameservers)
            resolver.lifetime = self.config.lifetime
            self._resolver = resolver
        return self._resolver

    def query(self, requests: Sequence[LiveRequest]) -> list[RawAnswer]:
        """Resolve every request; names with no data contribute nothing.

        Raises:
            BackendError: If resolution fails for a reason other than a
                missing name or missing data (timeout, no nameservers, ...).
        """
        answers: list[RawAnswer] = []
        for req in requests:
            rtype = req.type.upper()
            try:
                resp = self.resolver.resolve(req.fqdn, rtype, raise_on_no_answer=False)
            except dns.resolver.NXDOMAIN:
                continue
            except dns.rdatatype.UnknownRdatatype as e:
                raise BackendError(f"Live query for {req.fqdn}: unknown record type {rtype}") from e
            except (dns.resolver.NoNameservers, dns.exception.Timeout) as e:
                raise BackendError(f"Live query for {req.fqdn} {rtype} failed: {e}") from e
            if resp.response is None:
                continue
            for rrset in resp.response.answer:
                owner = rrset.name.to_text()
                kind = dns.rdatatype.to_text(rrset.rdtype).lower()
                for rdata in rrset:
                    answers.append(RawAnswer(name=owner, ttl=rrset.ttl, type=kind, value=rdata.to_text()))
        return answers
