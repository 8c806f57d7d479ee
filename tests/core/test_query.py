"""Query Interpreter: tests for filtering, counting, paging and sorting.

Tests cover:
    - parse_query separates reserved keys from filters
    - filtering is conjunctive and compares string forms
    - total is the filtered count, independent of the page
    - pagination windows and out-of-range pages
    - page-then-sort ordering and stable sort
"""

from mockapi.core.domain_types import SortOrder
from mockapi.core.query import (
    QueryOptions,
    apply_query,
    compare_values,
    filter_records,
    paginate,
    parse_query,
    sort_records,
)

USERS = [
    {"id": 1, "name": "Alice", "role": "admin", "age": 30, "active": True},
    {"id": 2, "name": "Bob", "role": "user", "age": 25, "active": False},
    {"id": 3, "name": "Carol", "role": "user", "age": 35, "active": True},
]


# ─── parse_query ─────────────────────────────────────────────────

def test_parse_query_defaults():
    options = parse_query({})
    assert options == QueryOptions()
    assert options.order is SortOrder.ASC


def test_parse_query_splits_reserved_keys_from_filters():
    options = parse_query({
        "name": "Alice", "_page": "2", "_limit": "5",
        "_sort": "age", "_order": "desc",
    })
    assert options.filters == {"name": "Alice"}
    assert options.page == 2
    assert options.limit == 5
    assert options.sort == "age"
    assert options.order is SortOrder.DESC


def test_parse_query_unknown_order_is_ascending():
    assert parse_query({"_order": "DESCENDING"}).order is SortOrder.ASC


def test_parse_query_invalid_page_and_limit_fall_back():
    options = parse_query({"_page": "abc", "_limit": "0"})
    assert options.page is None
    assert options.limit is None


def test_parse_query_negative_page_falls_back():
    assert parse_query({"_page": "-3"}).page is None



def test_parse_query_reads_leading_digits():
    options = parse_query({"_page": "1.5", "_limit": "2abc"})
    assert options.page == 1
    assert options.limit == 2


# ─── filter ──────────────────────────────────────────────────────

def test_filter_compares_string_forms():
    assert [r["id"] for r in filter_records(USERS, {"id": "2"})] == [2]


def test_filter_is_conjunctive():
    result = filter_records(USERS, {"role": "user", "age": "35"})
    assert [r["name"] for r in result] == ["Carol"]


def test_filter_matches_booleans_as_lowercase():
    result = filter_records(USERS, {"active": "true"})
    assert [r["id"] for r in result] == [1, 3]


def test_filter_unknown_field_filters_everything():
    assert filter_records(USERS, {"nickname": "Al"}) == []


def test_filter_without_filters_keeps_everything():
    assert filter_records(USERS, {}) == USERS


# ─── paginate ────────────────────────────────────────────────────

def test_paginate_second_page_of_one():
    assert paginate(USERS, 2, 1) == [USERS[1]]


def test_paginate_out_of_range_is_empty():
    assert paginate(USERS, 5, 1) == []


def test_paginate_defaults_return_everything():
    assert paginate(USERS, None, None) == USERS


def test_paginate_partial_last_page():
    assert paginate(USERS, 2, 2) == [USERS[2]]


# ─── sort ────────────────────────────────────────────────────────

def test_sort_numeric_ascending_and_descending():
    assert [r["age"] for r in sort_records(USERS, "age", SortOrder.ASC)] == [25, 30, 35]
    assert [r["age"] for r in sort_records(USERS, "age", SortOrder.DESC)] == [35, 30, 25]


def test_sort_is_stable_for_ties():
    result = sort_records(USERS, "role", SortOrder.ASC)
    assert [r["name"] for r in result] == ["Alice", "Bob", "Carol"]


def test_sort_descending_keeps_tie_order():
    result = sort_records(USERS, "role", SortOrder.DESC)
    assert [r["name"] for r in result] == ["Bob", "Carol", "Alice"]


def test_sort_does_not_mutate_input():
    records = list(USERS)
    sort_records(records, "age", SortOrder.DESC)
    assert records == USERS


def test_compare_values_numeric_vs_lexicographic():
    assert compare_values(9, 10) == -1
    assert compare_values("9", "10") == 1
    assert compare_values(2, 2.0) == 0


def test_sort_puts_missing_values_last():
    records = [{"n": 3}, {}, {"n": 1}, {"n": None}, {"n": 2}]
    result = sort_records(records, "n", SortOrder.ASC)
    assert [r.get("n") for r in result] == [1, 2, 3, None, None]
    assert result[3] is records[1]


def test_sort_descending_still_puts_missing_values_last():
    records = [{"n": 3}, {}, {"n": 1}]
    result = sort_records(records, "n", SortOrder.DESC)
    assert [r.get("n") for r in result] == [3, 1, None]


# ─── apply_query ─────────────────────────────────────────────────

def test_apply_query_total_is_count_before_paging():
    result = apply_query(USERS, parse_query({"_page": "5", "_limit": "1"}))
    assert result.items == []
    assert result.total == 3


def test_apply_query_total_counts_filtered_records():
    result = apply_query(USERS, parse_query({"role": "user", "_limit": "1"}))
    assert [r["name"] for r in result.items] == ["Bob"]
    assert result.total == 2


def test_apply_query_pages_before_sorting():
    """Page boundaries come from the unsorted collection."""
    result = apply_query(USERS, parse_query({
        "_page": "1", "_limit": "2", "_sort": "age", "_order": "desc",
    }))
    assert [r["name"] for r in result.items] == ["Alice", "Bob"]


def test_apply_query_sorts_whole_collection_without_limit():
    result = apply_query(USERS, parse_query({"_sort": "age"}))
    assert [r["age"] for r in result.items] == [25, 30, 35]
