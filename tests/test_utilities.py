"""Tests for query string helpers and path templates."""

import pytest

from discoclient.uritemplate import PathTemplate
from discoclient.utilities import dict_to_query_string, query_string_to_dict, stringify


class TestQueryString:
    def test_parse(self):
        assert query_string_to_dict("a=1&b=two") == {"a": "1", "b": "two"}

    def test_leading_question_mark(self):
        assert query_string_to_dict("?a=1") == {"a": "1"}

    def test_empty(self):
        assert query_string_to_dict("") == {}

    def test_decodes(self):
        assert query_string_to_dict("q=a%20b%26c") == {"q": "a b&c"}

    def test_build_encodes(self):
        assert dict_to_query_string({"q": "a&b"}) == "q=a%26b"

    @pytest.mark.parametrize("mapping", [
        {"a": "1", "b": "2"},
        {"q": "hello world", "hl": "en-GB"},
        {"path": "a/b?c=d", "empty": ""},
        {"unicode": "héllo"},
    ])
    def test_round_trip(self, mapping):
        assert query_string_to_dict(dict_to_query_string(mapping)) == mapping


class TestStringify:
    def test_bool(self):
        assert stringify(True) == "true"
        assert stringify(False) == "false"

    def test_list(self):
        assert stringify(["a", 1, True]) == "a,1,true"

    def test_number(self):
        assert stringify(10) == "10"


class TestPathTemplate:
    def test_variables(self):
        assert PathTemplate("activities/{userId}/@self/{postId}").variables == ["userId", "postId"]

    def test_expand(self):
        assert PathTemplate("/items/{id}").expand({"id": "42"}) == "/items/42"

    def test_expand_escapes(self):
        assert PathTemplate("/items/{id}").expand({"id": "a/b c"}) == "/items/a%2Fb%20c"

    def test_reserved_expansion(self):
        assert PathTemplate("files/{+path}").expand({"path": "a/b c"}) == "files/a/b%20c"
        assert PathTemplate("files/{+path}").variables == ["path"]

    def test_literal_only(self):
        template = PathTemplate("activities/@self")
        assert template.variables == []
        assert template.expand({}) == "activities/@self"

    def test_missing(self):
        template = PathTemplate("{a}/{b}/{c}")
        assert template.missing({"b": "x"}) == ["a", "c"]

    def test_expand_missing_raises(self):
        with pytest.raises(KeyError):
            PathTemplate("/items/{id}").expand({})

    def test_adjacent_placeholders(self):
        assert PathTemplate("{a}{b}").expand({"a": "1", "b": "2"}) == "12"
