"""Live record query: what public DNS currently answers, independent of the backend."""

from __future__ import annotations

import re
from collections import defaultdict
from typing import Iterable, Sequence

from cloudzone.base.backend import DNSBackendBlueprint
from cloudzone.base.exceptions import ParseError, RecordNotFoundError
from cloudzone.base.logger import CloudzoneLogger, quiet_logger
from cloudzone.base.models import LiveRequest, RawAnswer, RecordKey, RecordSet, relative_name
from cloudzone.dns.records import canonical_name, canonical_type

# [name:]type
_QUERY_TOKEN = re.compile(r"^(?:(?P<name>[^:=!\s]+):)?(?P<type>[A-Za-z0-9]+)$")


def parse_queries(
    tokens: Iterable[str], domain: str, default_name: str | None = None
) -> list[LiveRequest]:
    """Parse ``[name:]type`` tokens into live requests against *domain*.

    Every malformed token is reported in one :class:`ParseError`.
    """
    domain = domain.rstrip(".").lower()
    requests: list[LiveRequest] = []
    problems: list[str] = []
    for token in tokens:
        m = _QUERY_TOKEN.match(token.strip())
        if m is None:
            problems.append(f"Invalid query: {token!r}")
            continue
        name = m.group("name")
        if name is None:
            if default_name is None:
                problems.append(f"Query needs a name: {token!r}")
                continue
            name = default_name
        try:
            requests.append(
                LiveRequest(canonical_name(domain, name), domain, canonical_type(m.group("type")))
            )
        except ParseError as e:
            problems.append(f"{e}: {token!r}")
    if problems:
        raise ParseError("Could not parse queries:", problems)
    return requests


def filter_answers(
    requests: Sequence[LiveRequest], answers: Iterable[RawAnswer]
) -> list[tuple[str, RecordSet]]:
    """Reduce raw resolver answers to the requested ``(domain, name, type)`` triples.

    Answers for anything not asked (CNAME hops, other types) are dropped;
    the rest are grouped per key with values unioned and the lowest TTL kept.

    Returns:
        ``(domain, record)`` pairs sorted by domain then key.
    """
    wanted = {(r.domain, r.key) for r in requests}
    domains = sorted({r.domain for r in requests}, key=len, reverse=True)
    values: dict[tuple[str, RecordKey], set[str]] = defaultdict(set)
    ttls: dict[tuple[str, RecordKey], int] = {}

    for answer in answers:
        for domain in domains:
            name = relative_name(answer.name, domain)
            if name is None:
                continue
            slot = (domain, RecordKey(name, answer.type.lower()))
            if slot in wanted:
                values[slot].add(answer.value)
                ttls[slot] = min(ttls.get(slot, answer.ttl), answer.ttl)

    return [
        (domain, RecordSet(key=key, ttl=ttls[(domain, key)], values=frozenset(vals)))
        for (domain, key), vals in sorted(values.items())
    ]


def query_live(
    backend: DNSBackendBlueprint,
    requests: Sequence[LiveRequest],
    not_found_ok: bool = False,
    logger: CloudzoneLogger | None = None,
) -> list[tuple[str, RecordSet]]:
    """Resolve *requests* in one batch through public DNS.

    Raises:
        RecordNotFoundError: Fewer distinct records resolved than were
            requested and *not_found_ok* is false.
    """
    logger = logger or quiet_logger()
    distinct = list(dict.fromkeys(requests))
    logger.debug(
        f"Live query for {len(distinct)} record(s)",
        provider=backend.provider,
        operation="query_live",
    )
    answers = backend.recursive_query(distinct)
    found = filter_answers(distinct, answers)

    if len(found) != len(distinct) and not not_found_ok:
        got = {(domain, rs.key) for domain, rs in found}
        missing = ", ".join(
            f"{r.key}@{r.domain}" for r in distinct if (r.domain, r.key) not in got
        )
        raise RecordNotFoundError(
            f"Live records not found: {missing} (found {len(found)}, expected {len(distinct)})",
            found=len(found),
            expected=len(distinct),
        )
    return found
