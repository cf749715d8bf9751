"""Tests for zone resolution and the authoritative record query."""

import pytest

from cloudzone.base.exceptions import (
    AmbiguousZoneError,
    ParseError,
    RecordNotFoundError,
    TruncatedResponseError,
    ZoneNotFoundError,
)
from cloudzone.base.models import RecordKey, ZoneRef
from cloudzone.dns.records import canonical_name, get_records
from cloudzone.dns.zones import apex_domain, resolve_zone

from conftest import FakeBackend, rs


# --- zones ---

class TestApexDomain:
    def test_keeps_two_rightmost_labels(self):
        assert apex_domain("a.b.WWW.Example.com.") == "example.com"

    def test_rejects_single_label(self):
        with pytest.raises(ParseError):
            apex_domain("localhost.")


class TestResolveZone:
    def test_by_domain_ignores_subdomains(self, backend):
        assert resolve_zone(backend, "deep.www.example.com") == ZoneRef("Z1", "example.com")

    def test_by_id_with_and_without_prefix(self, backend):
        assert resolve_zone(backend, "Z1").name == "example.com"
        assert resolve_zone(backend, "/hostedzone/Z1").id == "Z1"

    def test_not_found(self, backend):
        with pytest.raises(ZoneNotFoundError):
            resolve_zone(backend, "example.org")
        with pytest.raises(ZoneNotFoundError):
            resolve_zone(backend, "Z404")

    def test_ambiguous_lists_candidates(self):
        backend = FakeBackend(zones=[ZoneRef("Z1", "example.com"), ZoneRef("Z2", "example.com")])
        with pytest.raises(AmbiguousZoneError) as exc:
            resolve_zone(backend, "example.com")
        assert len(exc.value.candidates) == 2
        assert "Z1" in str(exc.value) and "Z2" in str(exc.value)


# --- records ---

class TestCanonicalName:
    @pytest.mark.parametrize("name", [None, "", "@", ".", "example.com", "EXAMPLE.COM."])
    def test_apex(self, name):
        assert canonical_name("example.com", name) == "."

    def test_strips_trailing_dot_and_folds_case(self):
        assert canonical_name("example.com.", "WWW.") == "www"

    def test_rejects_redundant_suffix(self):
        with pytest.raises(ParseError):
            canonical_name("example.com", "www.example.com")


class TestGetRecords:
    def test_single_type_seeds_start_type(self, backend, zone):
        backend.records["Z1"] = [rs("www", "a", 300, "1.2.3.4"), rs("www", "txt", 300, '"x"')]
        found = get_records(backend, zone, "www", ["A"])
        assert found == [rs("www", "a", 300, "1.2.3.4")]
        assert backend.list_calls == [("Z1", "www.example.com.", "a", 300)]

    def test_several_types_one_call(self, backend, zone):
        backend.records["Z1"] = [rs("www", "a", 300, "1.2.3.4"), rs("www", "txt", 300, '"x"')]
        found = get_records(backend, zone, "www", ["txt", "a"])
        assert [r.key for r in found] == [RecordKey("www", "a"), RecordKey("www", "txt")]
        assert len(backend.list_calls) == 1
        assert backend.list_calls[0][2] is None

    def test_apex(self, backend, zone):
        backend.records["Z1"] = [rs(".", "mx", 300, "10 mail.example.com.")]
        assert get_records(backend, zone, "@", ["mx"])[0].name == "."
        assert backend.list_calls[0][1] == "example.com."

    def test_value_filter(self, backend, zone):
        backend.records["Z1"] = [rs("www", "a", 300, "1.2.3.4", "5.6.7.8")]
        assert get_records(backend, zone, "www", ["a"], value="5.6.7.8")
        assert get_records(backend, zone, "www", ["a"], value="9.9.9.9", not_found_ok=True) == []

    def test_not_found_reports_counts(self, backend, zone):
        backend.records["Z1"] = [rs("www", "a", 300, "1.2.3.4")]
        with pytest.raises(RecordNotFoundError) as exc:
            get_records(backend, zone, "www", ["a", "aaaa"])
        assert (exc.value.found, exc.value.expected) == (1, 2)
        assert "found 1, expected 2" in str(exc.value)

    def test_not_found_ok(self, backend, zone):
        assert get_records(backend, zone, "nope", ["a"], not_found_ok=True) == []

    def test_truncated_is_fatal(self, backend, zone):
        backend.truncated = True
        with pytest.raises(TruncatedResponseError):
            get_records(backend, zone, "www", ["a"], not_found_ok=True)
