"""Tests for the schema_parser module."""

import pytest

from discoclient.errors import DiscoveryError
from discogen.schema_parser import (
    get_request_type,
    get_response_type,
    parse_parameters,
    resolve_schema_type,
)

# Minimal service body with schemas for $ref resolution
_BODY: dict = {
    "schemas": {
        "Activity": {
            "id": "Activity",
            "type": "object",
            "properties": {"title": {"type": "string"}},
        },
        "Tags": {
            "id": "Tags",
            "type": "array",
            "items": {"type": "string"},
        },
        "Node": {
            "id": "Node",
            "type": "object",
            "properties": {"children": {"type": "array", "items": {"$ref": "Node"}}},
        },
    }
}


class TestResolveSchemaType:
    """Discovery schema -> Python type string."""

    def test_string(self):
        assert resolve_schema_type(_BODY, {"type": "string"}) == "str"

    def test_integer(self):
        assert resolve_schema_type(_BODY, {"type": "integer"}) == "int"

    def test_number(self):
        assert resolve_schema_type(_BODY, {"type": "number"}) == "float"

    def test_boolean(self):
        assert resolve_schema_type(_BODY, {"type": "boolean"}) == "bool"

    def test_any(self):
        assert resolve_schema_type(_BODY, {"type": "any"}) == "Any"

    def test_array_of_strings(self):
        assert resolve_schema_type(_BODY, {"type": "array", "items": {"type": "string"}}) == "list[str]"

    def test_array_of_refs(self):
        schema = {"type": "array", "items": {"$ref": "Activity"}}
        assert resolve_schema_type(_BODY, schema) == "list[dict]"

    def test_ref(self):
        assert resolve_schema_type(_BODY, {"$ref": "Activity"}) == "dict"

    def test_ref_to_array(self):
        assert resolve_schema_type(_BODY, {"$ref": "Tags"}) == "list[str]"

    def test_recursive_ref(self):
        """Self-referencing schemas must not recurse forever."""
        assert resolve_schema_type(_BODY, {"$ref": "Node"}) == "dict"

    def test_unknown_ref(self):
        with pytest.raises(DiscoveryError):
            resolve_schema_type(_BODY, {"$ref": "Missing"})

    def test_empty_schema(self):
        assert resolve_schema_type(_BODY, {}) == "Any"


class TestParseParameters:
    """Parameter extraction from methods."""

    def test_path_params(self):
        method = {
            "parameters": {
                "userId": {"type": "string", "required": True, "location": "path"},
            },
        }
        params = parse_parameters(_BODY, method)
        assert len(params) == 1
        assert params[0]["name"] == "userId"
        assert params[0]["arg"] == "user_id"
        assert params[0]["location"] == "path"
        assert params[0]["required"] is True

    def test_legacy_parameter_type(self):
        method = {"parameters": {"scope": {"parameterType": "path", "required": True}}}
        assert parse_parameters(_BODY, method)[0]["location"] == "path"

    def test_query_default_location(self):
        params = parse_parameters(_BODY, {"parameters": {"hl": {"type": "string"}}})
        assert params[0]["location"] == "query"
        assert params[0]["required"] is False

    def test_parameter_order_first(self):
        method = {
            "parameters": {
                "hl": {"type": "string"},
                "scope": {"type": "string", "required": True, "location": "path"},
                "userId": {"type": "string", "required": True, "location": "path"},
            },
            "parameterOrder": ["userId", "scope"],
        }
        names = [p["name"] for p in parse_parameters(_BODY, method)]
        assert names == ["userId", "scope", "hl"]

    def test_required_before_optional(self):
        """Required parameters always precede optional ones in the signature."""
        method = {
            "parameters": {
                "a": {"type": "string"},
                "b": {"type": "string", "required": True},
                "c": {"type": "string"},
            },
            "parameterOrder": ["a", "b"],
        }
        params = parse_parameters(_BODY, method)
        assert [p["name"] for p in params] == ["b", "a", "c"]

    def test_repeated_is_list(self):
        params = parse_parameters(_BODY, {"parameters": {"labels": {"type": "string", "repeated": True}}})
        assert params[0]["type"] == "list[str]"
        assert params[0]["repeated"] is True

    def test_enum_values_in_description(self):
        method = {
            "parameters": {
                "scope": {"type": "string", "description": "The scope.", "enum": ["@self", "@consumption"]},
            },
        }
        description = parse_parameters(_BODY, method)[0]["description"]
        assert description == "The scope (values: @self, @consumption)"

    def test_enum_without_description(self):
        method = {"parameters": {"alt": {"type": "string", "enum": ["json", "atom"]}}}
        assert parse_parameters(_BODY, method)[0]["description"] == "Values: json, atom"

    def test_html_stripped(self):
        method = {"parameters": {"q": {"type": "string", "description": "<b>Search</b>\n  query"}}}
        assert parse_parameters(_BODY, method)[0]["description"] == "Search query"

    def test_pattern_kept(self):
        method = {"parameters": {"id": {"type": "string", "pattern": "^\\d+$"}}}
        assert parse_parameters(_BODY, method)[0]["pattern"] == "^\\d+$"

    def test_no_parameters(self):
        assert parse_parameters(_BODY, {}) == []


class TestRequestResponseTypes:
    def test_request_ref(self):
        assert get_request_type(_BODY, {"request": {"$ref": "Activity"}}) == "Activity"

    def test_request_inline(self):
        assert get_request_type(_BODY, {"request": {"type": "object"}}) == "dict"

    def test_no_request(self):
        assert get_request_type(_BODY, {}) is None

    def test_response_ref(self):
        assert get_response_type(_BODY, {"response": {"$ref": "Activity"}}) == "Activity"

    def test_response_inline(self):
        assert get_response_type(_BODY, {"response": {"type": "array", "items": {"type": "string"}}}) == "list[str]"

    def test_no_response(self):
        assert get_response_type(_BODY, {}) == "none"
