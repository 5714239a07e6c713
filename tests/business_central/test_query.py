"""Tests for OData query building and continuation tokens."""

import pytest

from business_central.query import (
    SKIP_TOKEN_PARAM,
    ODataQuery,
    encode_query,
    extract_skip_token,
    normalize_params,
)


class TestODataQuery:

    def test_empty_query(self):
        assert ODataQuery().to_params() == []
        assert ODataQuery().to_query() == ""

    def test_all_options_in_order(self):
        query = ODataQuery(
            filter="status eq 'Open'",
            select=["id", "number"],
            expand=["salesOrderLines"],
            orderby="orderDate desc",
            top=10,
            skip=20,
            extra={"company": "CRONUS"},
        )
        assert query.to_params() == [
            ("$filter", "status eq 'Open'"),
            ("$select", "id,number"),
            ("$expand", "salesOrderLines"),
            ("$orderby", "orderDate desc"),
            ("$top", "10"),
            ("$skip", "20"),
            ("company", "CRONUS"),
        ]

    def test_top_zero_is_kept(self):
        assert ODataQuery(top=0).to_params() == [("$top", "0")]

    def test_to_query_keeps_odata_characters_readable(self):
        query = ODataQuery(filter="number eq 'S-ORD101001'", top=1)
        assert query.to_query() == "$filter=number%20eq%20'S-ORD101001'&$top=1"


class TestNormalizeParams:

    def test_none(self):
        assert normalize_params(None) == []

    def test_mapping(self):
        assert normalize_params({"$top": 5}) == [("$top", "5")]

    def test_pairs(self):
        assert normalize_params([("$top", "5"), ("$skip", "1")]) == [("$top", "5"), ("$skip", "1")]

    def test_query_string_with_question_mark(self):
        assert normalize_params("?$top=5&$filter=a%20eq%201") == [("$top", "5"), ("$filter", "a eq 1")]

    def test_odata_query(self):
        assert normalize_params(ODataQuery(top=3)) == [("$top", "3")]


class TestEncodeQuery:

    def test_encodes_spaces_and_ampersands(self):
        assert encode_query([("$filter", "a eq 'x&y'")]) == "$filter=a%20eq%20'x%26y'"


class TestExtractSkipToken:

    @pytest.mark.parametrize(
        "link",
        [
            "https://api/companies(1)/salesOrders?$skiptoken=abc",
            "https://api/companies(1)/salesOrders?$skipToken=abc",
            "https://api/companies(1)/salesOrders?skipToken=abc",
            "https://api/companies(1)/salesOrders?$filter=x&%24skiptoken=abc",
        ],
    )
    def test_reads_token_regardless_of_spelling(self, link):
        assert extract_skip_token(link) == "abc"

    def test_decodes_token(self):
        assert extract_skip_token("https://api/x?$skiptoken=%7B%22id%22%3A1%7D") == '{"id":1}'

    @pytest.mark.parametrize("link", [None, "", "https://api/x", "https://api/x?$top=5"])
    def test_missing_token_is_empty(self, link):
        assert extract_skip_token(link) == ""

    def test_token_param_name(self):
        assert SKIP_TOKEN_PARAM == "$skipToken"
