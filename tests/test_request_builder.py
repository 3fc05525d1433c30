"""
Tests for request_builder.py
Logic testing: Decision/Branch, Boundary Value, Equivalence partitioning
"""
import json

import pytest

from integration_client.auth.auth_handler import BasicAuth, BearerAuth
from integration_client.core.request_builder import (
    build_body,
    build_headers,
    build_query_string,
    build_url,
    flatten_params,
    form_encode,
    join_endpoint,
)
from integration_client.errors import InvalidConfiguration, UnsupportedOperation
from integration_client.headers import HeaderSet
from integration_client.types import FileAttachment, RequestSpec


class TestJoinEndpoint:
    """Tests for join_endpoint."""

    # Boundary: exactly one slash between base and endpoint
    @pytest.mark.parametrize(
        "base_url,endpoint",
        [
            ("https://api.example.com/v1", "users"),
            ("https://api.example.com/v1", "/users"),
            ("https://api.example.com/v1/", "//users"),
        ],
    )
    def test_single_slash(self, base_url, endpoint):
        assert join_endpoint(base_url, endpoint) == "https://api.example.com/v1/users"

    # Decision: no base URL accepts an absolute endpoint
    def test_absolute_endpoint_without_base(self):
        assert join_endpoint(None, "https://other.example.com/x") == "https://other.example.com/x"

    # Error Path: no base URL and a relative endpoint
    def test_relative_endpoint_without_base(self):
        with pytest.raises(InvalidConfiguration, match="base URL is not set"):
            join_endpoint(None, "/users")


class TestFlattenParams:
    """Tests for flatten_params."""

    def test_empty(self):
        assert flatten_params(None) == ()
        assert flatten_params({}) == ()

    # Path: sequence values are comma-joined, order kept
    def test_sequences_joined(self):
        params = flatten_params({"ids": [1, 2, 3], "flags": (True, False), "q": "x"})
        assert params == (("ids", "1,2,3"), ("flags", "1,0"), ("q", "x"))

    # Path: mapping values use bracket notation
    def test_mapping_bracket_notation(self):
        params = flatten_params({"filter": {"status": "open", "tags": ["a", "b"]}, "page": 1})
        assert params == (
            ("filter[status]", "open"),
            ("filter[tags][0]", "a"),
            ("filter[tags][1]", "b"),
            ("page", 1),
        )

    # Boundary: None inside a sequence renders empty
    def test_none_in_sequence(self):
        assert flatten_params({"ids": [1, None, 3]}) == (("ids", "1,,3"),)

    # Decision: scalars untouched
    def test_scalars_untouched(self):
        assert flatten_params({"page": 2, "active": True}) == (("page", 2), ("active", True))


class TestBuildQueryString:
    """Tests for build_query_string."""

    # Path: booleans as 1/0, None dropped, spaces as '+'
    def test_encoding_rules(self):
        params = [("a", True), ("b", False), ("c", None), ("d", "x y"), ("e", 1.5)]
        assert build_query_string(params) == "a=1&b=0&d=x+y&e=1.5"

    def test_reserved_characters(self):
        assert build_query_string([("ids", "1,2"), ("q", "a&b=c")]) == "ids=1%2C2&q=a%26b%3Dc"


class TestBuildUrl:
    """Tests for build_url."""

    # Decision: GET and DELETE carry params in the query string
    @pytest.mark.parametrize("method", ["GET", "DELETE"])
    def test_query_methods(self, method):
        spec = RequestSpec(method, "https://api.example.com/search", params=(("q", "x"), ("page", 2)))
        assert build_url(spec) == "https://api.example.com/search?q=x&page=2"

    # Decision: body methods ignore params
    @pytest.mark.parametrize("method", ["POST", "PUT", "PATCH"])
    def test_body_methods_ignore_params(self, method):
        spec = RequestSpec(method, "https://api.example.com/items", params=(("q", "x"),))
        assert build_url(spec) == "https://api.example.com/items"

    # Boundary: endpoint already has a query string
    def test_existing_query(self):
        spec = RequestSpec("GET", "https://api.example.com/s?lang=en", params=(("q", "x"),))
        assert build_url(spec) == "https://api.example.com/s?lang=en&q=x"

    # Path: mapping params reach the URL in bracket notation
    def test_mapping_params(self):
        spec = RequestSpec("GET", "https://api.example.com/s", params=flatten_params({"filter": {"status": "open"}}))
        assert build_url(spec) == "https://api.example.com/s?filter%5Bstatus%5D=open"

    # Boundary: every param None leaves no dangling '?'
    def test_all_none_params(self):
        spec = RequestSpec("GET", "https://api.example.com/s", params=(("q", None),))
        assert build_url(spec) == "https://api.example.com/s"


class TestBuildHeaders:
    """Tests for build_headers."""

    # Path: defaults, then one-shot headers, then auth
    def test_order(self):
        defaults = HeaderSet(["Accept: text/plain"])
        headers = build_headers(defaults, [("X-Once", "1")], BearerAuth("abc"))
        assert headers.as_pairs() == (
            ("Accept", "text/plain"),
            ("X-Once", "1"),
            ("Authorization", "Bearer abc"),
        )

    # State: defaults are not mutated
    def test_defaults_untouched(self):
        defaults = HeaderSet(["Accept: text/plain"])
        build_headers(defaults, [("X-Once", "1")], BearerAuth("abc"))
        assert defaults.as_strings() == ["Accept: text/plain"]

    # Decision: basic auth contributes no header
    def test_basic_auth_no_header(self):
        headers = build_headers(HeaderSet(), (), BasicAuth("u", "p"))
        assert not headers.has("Authorization")

    # Decision: duplicates are not collapsed
    def test_duplicates_kept(self):
        headers = build_headers(HeaderSet(["X: 1"]), [("X", "2")])
        assert headers.get_all("X") == ["1", "2"]


class TestFormEncode:
    """Tests for form_encode."""

    # Path: nested values use bracket notation
    def test_nested(self):
        data = {"a": 1, "b": [1, 2], "c": {"d": True}, "e": None}
        assert form_encode(data) == "a=1&b%5B0%5D=1&b%5B1%5D=2&c%5Bd%5D=1"

    def test_empty(self):
        assert form_encode({}) == ""


class TestBuildBody:
    """Tests for build_body."""

    # Decision: methods without a body
    @pytest.mark.parametrize("method", ["GET", "DELETE"])
    def test_no_body_methods(self, method):
        spec = RequestSpec(method, "https://api.example.com/x", data={"a": 1})
        assert build_body(spec, HeaderSet(), use_json=True) == (None, None, None)

    # Boundary: empty body sends nothing
    def test_empty_data(self):
        spec = RequestSpec("POST", "https://api.example.com/x", data={})
        headers = HeaderSet()
        assert build_body(spec, headers, use_json=True) == (None, None, None)
        assert len(headers) == 0

    # Path: JSON mode serializes and adds Content-Type once
    def test_json_mode(self):
        spec = RequestSpec("POST", "https://api.example.com/x", data={"name": "x"})
        headers = HeaderSet()
        content, form_fields, files = build_body(spec, headers, use_json=True)
        assert json.loads(content) == {"name": "x"}
        assert form_fields is None and files is None
        build_body(spec, headers, use_json=True)
        assert headers.get_all("Content-Type") == ["application/json"]

    # Decision: existing content-type header is respected in any case
    def test_json_mode_existing_content_type(self):
        spec = RequestSpec("PUT", "https://api.example.com/x", data={"a": 1})
        headers = HeaderSet(["content-type: application/vnd.api+json"])
        build_body(spec, headers, use_json=True)
        assert headers.as_strings() == ["content-type: application/vnd.api+json"]

    # Path: JSON mode raw string passes through
    def test_json_mode_raw_string(self):
        spec = RequestSpec("POST", "https://api.example.com/x", data='{"raw": true}')
        content, _, _ = build_body(spec, HeaderSet(), use_json=True)
        assert content == '{"raw": true}'

    # Error Path: value that JSON cannot encode
    def test_json_mode_unserializable(self):
        spec = RequestSpec("POST", "https://api.example.com/x", data={"when": object()})
        with pytest.raises(UnsupportedOperation, match="not JSON serializable"):
            build_body(spec, HeaderSet(), use_json=True)

    # Path: form mode
    def test_form_mode(self):
        spec = RequestSpec("POST", "https://api.example.com/x", data={"a": "1 2", "ok": True})
        headers = HeaderSet()
        content, _, _ = build_body(spec, headers, use_json=False)
        assert content == "a=1+2&ok=1"
        assert headers.get("Content-Type") == "application/x-www-form-urlencoded"

    # Decision: raw string in form mode is sent as-is without a content type
    def test_form_mode_raw_string(self):
        spec = RequestSpec("PATCH", "https://api.example.com/x", data="a=b")
        headers = HeaderSet()
        assert build_body(spec, headers, use_json=False) == ("a=b", None, None)
        assert len(headers) == 0

    # Path: multipart when files are attached
    def test_multipart(self):
        attachment = FileAttachment("/tmp/report.csv")
        spec = RequestSpec("POST", "https://api.example.com/x", data={"name": "x", "doc": attachment})
        headers = HeaderSet()
        content, form_fields, files = build_body(spec, headers, use_json=False)
        assert content is None
        assert form_fields == [("name", "x")]
        assert files == {"doc": attachment}
        assert not headers.has("Content-Type")
