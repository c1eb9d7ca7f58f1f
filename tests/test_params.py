from __future__ import annotations

from hostedsearch.params import encode_component, encode_params, index_path


def test_encode_component_matches_uri_component_rules():
    assert encode_component("a b/c?d=é") == "a%20b%2Fc%3Fd%3D%C3%A9"
    assert encode_component("-_.!~*'()") == "-_.!~*'()"


def test_encode_params_skips_none_and_serializes_lists():
    assert encode_params({"page": 1, "facets": ["a", "b"], "skip": None}) == "page=1&facets=%5B%22a%22%2C%22b%22%5D"
    assert encode_params(None) == ""
    assert encode_params({"distinct": False}, prefix="query=x") == "query=x&distinct=false"


def test_index_path():
    assert index_path("my index") == "/1/indexes/my%20index"
    assert index_path("cities", "task", 42) == "/1/indexes/cities/task/42"
