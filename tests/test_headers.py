"""
Tests for headers.py
Logic testing: Decision/Branch, Boundary Value
"""
import pytest

from integration_client.headers import Header, HeaderSet


class TestHeader:
    """Tests for Header pair."""

    # Path: parse preformatted line
    def test_parse_line(self):
        header = Header.parse("X-Token:  abc ")
        assert header == Header("X-Token", "abc")

    # Boundary: value containing a colon is kept whole
    def test_parse_value_with_colon(self):
        header = Header.parse("Referer: https://example.com:8443/x")
        assert header.value == "https://example.com:8443/x"

    # Error Path: missing separator
    def test_parse_without_colon(self):
        with pytest.raises(ValueError):
            Header.parse("NoSeparator")

    # Decision: name matched case-insensitively
    def test_matches_name_case_insensitive(self):
        assert Header("Content-Type", "text/plain").matches("content-type")

    # Decision: value compared after trimming
    def test_matches_value_trimmed(self):
        header = Header("Accept", "application/json")
        assert header.matches("ACCEPT", "  application/json ")
        assert not header.matches("Accept", "text/html")

    def test_str(self):
        assert str(Header("Accept", "*/*")) == "Accept: */*"


class TestHeaderSet:
    """Tests for HeaderSet ordered collection."""

    # Path: construct from mixed inputs keeps order
    def test_init_mixed_inputs(self):
        headers = HeaderSet(["A: 1", ("B", "2"), Header("C", "3")])
        assert list(headers) == [("A", "1"), ("B", "2"), ("C", "3")]

    # Path: construct from dict
    def test_init_from_dict(self):
        headers = HeaderSet({"A": "1", "B": "2"})
        assert headers.as_strings() == ["A: 1", "B: 2"]

    # Decision: duplicates are allowed
    def test_add_allows_duplicates(self):
        headers = HeaderSet().add("X", "1").add("x", "2")
        assert headers.get_all("X") == ["1", "2"]
        assert len(headers) == 2

    # Decision: name with colon ignores explicit value
    def test_add_preformatted_line(self):
        headers = HeaderSet().add("X-Token: abc", "ignored")
        assert list(headers) == [("X-Token", "abc")]

    # Boundary: None value becomes empty string
    def test_add_none_value(self):
        headers = HeaderSet().add("X-Empty")
        assert headers.get("X-Empty") == ""

    # Path: remove by name removes every match
    def test_remove_all_by_name(self):
        headers = HeaderSet(["Accept: a", "X: 1", "accept: b"])
        headers.remove("ACCEPT")
        assert headers.as_strings() == ["X: 1"]

    # Decision: remove with value only removes matching value
    def test_remove_with_value(self):
        headers = HeaderSet(["Accept: application/json", "Accept: text/html"])
        headers.remove("accept", "application/json")
        assert headers.as_strings() == ["Accept: text/html"]

    # Path: remove then add leaves exactly one entry
    def test_remove_then_add_single_entry(self):
        headers = HeaderSet(["X: old", "x: older"])
        headers.remove("X").add("X", "v")
        assert headers.get_all("x") == ["v"]

    # Decision: has / get on missing name
    def test_missing_name(self):
        headers = HeaderSet()
        assert headers.has("X") is False
        assert headers.get("X") is None
        assert not headers

    # State: copy is independent
    def test_copy_is_independent(self):
        original = HeaderSet(["A: 1"])
        copied = original.copy()
        copied.add("B", "2")
        assert len(original) == 1
        assert copied != original

    def test_extend(self):
        headers = HeaderSet(["A: 1"]).extend([("B", "2"), "C: 3"])
        assert headers.as_pairs() == (("A", "1"), ("B", "2"), ("C", "3"))
