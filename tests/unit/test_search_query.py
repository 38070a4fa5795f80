"""Unit tests for query term parsing."""

import pytest

from symbols_mcp_server.search.query import parse_terms


pytestmark = pytest.mark.unit


@pytest.mark.parametrize("query", ["", "   ", ",,", " , , "])
def test_blank_queries_have_no_terms(query):
    assert parse_terms(query) == []


def test_none_has_no_terms():
    assert parse_terms(None) == []


def test_splits_on_commas_and_whitespace():
    assert parse_terms("create, user\tstats  auth") == ["create", "user", "stats", "auth"]


def test_terms_are_lowercased():
    assert parse_terms("CreateUser") == ["createuser"]


def test_duplicates_are_kept_in_order():
    assert parse_terms("user user") == ["user", "user"]
