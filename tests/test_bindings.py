"""Tests for the binding and expectation parsers."""

import pytest

from cloudzone.base.exceptions import ParseError
from cloudzone.base.models import Binding, Expectation, RecordKey
from cloudzone.dns.bindings import parse_bindings, parse_expectations


class TestParseBindings:
    def test_add_with_name(self):
        assert parse_bindings(["www:A=1.2.3.4"], "example.com") == [
            Binding("add", RecordKey("www", "a"), "1.2.3.4")
        ]

    def test_default_name(self):
        assert parse_bindings(["a=1.2.3.4"], "example.com", default_name="api") == [
            Binding("add", RecordKey("api", "a"), "1.2.3.4")
        ]

    def test_apex_forms(self):
        bindings = parse_bindings(["@:a=1", ".:a=2", "example.com:a=3"], "example.com")
        assert {b.key for b in bindings} == {RecordKey(".", "a")}

    def test_delete_value_and_whole_record(self):
        assert parse_bindings(["!www:a=1.2.3.4", "!www:txt"], "example.com") == [
            Binding("delete", RecordKey("www", "a"), "1.2.3.4"),
            Binding("delete", RecordKey("www", "txt"), None),
        ]

    def test_value_may_contain_separators(self):
        (b,) = parse_bindings(['txt="v=spf1 include:_spf.example.net ~all"'], "example.com", ".")
        assert b.key == RecordKey(".", "txt")
        assert b.value == '"v=spf1 include:_spf.example.net ~all"'

    def test_wildcard_name(self):
        (b,) = parse_bindings(["*.dev:cname=dev.example.net."], "example.com")
        assert b.key == RecordKey("*.dev", "cname")

    def test_missing_name_without_default(self):
        with pytest.raises(ParseError, match="default name"):
            parse_bindings(["a=1.2.3.4"], "example.com")

    def test_add_without_value(self):
        with pytest.raises(ParseError, match="needs a value"):
            parse_bindings(["www:a"], "example.com")

    def test_unknown_type(self):
        with pytest.raises(ParseError, match="Unknown record type"):
            parse_bindings(["www:foo=1.2.3.4"], "example.com")

    def test_redundant_zone_suffix(self):
        with pytest.raises(ParseError, match="should not include"):
            parse_bindings(["www.example.com:a=1.2.3.4"], "example.com")

    def test_all_errors_collected(self):
        with pytest.raises(ParseError) as exc:
            parse_bindings(
                ["www:a=1.2.3.4", "bogus token", "a=1", "www:a", "!!x:a"], "example.com"
            )
        assert len(exc.value.problems) == 4
        assert "'bogus token'" in str(exc.value)
        assert "'!!x:a'" in str(exc.value)


class TestParseExpectations:
    def test_forms(self):
        assert parse_expectations(
            ["www:a", "www:a=1.2.3.4", "!old:cname", "!www:a=9.9.9.9"], "Example.com."
        ) == [
            Expectation(RecordKey("www", "a"), "example.com", "present"),
            Expectation(RecordKey("www", "a"), "example.com", "present", "1.2.3.4"),
            Expectation(RecordKey("old", "cname"), "example.com", "absent"),
            Expectation(RecordKey("www", "a"), "example.com", "absent", "9.9.9.9"),
        ]

    def test_errors_collected(self):
        with pytest.raises(ParseError) as exc:
            parse_expectations(["a", "=x"], "example.com")
        assert len(exc.value.problems) == 2
