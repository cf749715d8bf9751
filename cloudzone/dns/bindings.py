"""Parser for record bindings and live expectations.

Bindings::

    [name:]type=value     add a value
    ![name:]type=value    delete a value
    ![name:]type          delete the whole record

Expectations use the same shape, read as "present" / "absent"::

    [name:]type           some value is live
    [name:]type=value     this value is live
    ![name:]type          nothing is live
    ![name:]type=value    this value is not live
"""

from __future__ import annotations

import re
from typing import Iterable, NamedTuple

from cloudzone.base.exceptions import ParseError
from cloudzone.base.models import Binding, Expectation, RecordKey
from cloudzone.dns.records import canonical_name, canonical_type

_TOKEN = re.compile(
    r"^(?P<bang>!)?"
    r"(?:(?P<name>[^:=!\s]+):)?"
    r"(?P<type>[A-Za-z0-9]+)"
    r"(?:=(?P<value>.+))?$"
)


class _Token(NamedTuple):
    negated: bool
    key: RecordKey
    value: str | None


def _parse_token(token: str, domain: str, default_name: str | None) -> _Token:
    m = _TOKEN.match(token.strip())
    if m is None:
        raise ParseError(f"Invalid syntax: {token!r}")
    name = m.group("name")
    if name is None:
        if default_name is None:
            raise ParseError(f"No name given and no default name: {token!r}")
        name = default_name
    try:
        key = RecordKey(canonical_name(domain, name), canonical_type(m.group("type")))
    except ParseError as e:
        raise ParseError(f"{e}: {token!r}") from e
    return _Token(m.group("bang") is not None, key, m.group("value"))


def parse_bindings(
    tokens: Iterable[str], domain: str, default_name: str | None = None
) -> list[Binding]:
    """Parse binding tokens in input order.

    Args:
        tokens: Raw binding tokens.
        domain: Zone domain, used to canonicalize names.
        default_name: Name applied to tokens that omit one.

    Raises:
        ParseError: Listing every malformed token.
    """
    bindings: list[Binding] = []
    problems: list[str] = []
    for token in tokens:
        try:
            negated, key, value = _parse_token(token, domain, default_name)
        except ParseError as e:
            problems.append(str(e))
            continue
        if negated:
            bindings.append(Binding("delete", key, value))
        elif value is None:
            problems.append(f"Add binding needs a value: {token!r}")
        else:
            bindings.append(Binding("add", key, value))
    if problems:
        raise ParseError("Could not parse bindings:", problems)
    return bindings


def parse_expectations(
    tokens: Iterable[str], domain: str, default_name: str | None = None
) -> list[Expectation]:
    """Parse expectation tokens against *domain*.

    Raises:
        ParseError: Listing every malformed token.
    """
    domain = domain.rstrip(".").lower()
    expectations: list[Expectation] = []
    problems: list[str] = []
    for token in tokens:
        try:
            negated, key, value = _parse_token(token, domain, default_name)
        except ParseError as e:
            problems.append(str(e))
            continue
        expectations.append(
            Expectation(key, domain, "absent" if negated else "present", value)
        )
    if problems:
        raise ParseError("Could not parse expectations:", problems)
    return expectations
