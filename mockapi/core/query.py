"""Query Interpreter: filter, count, paginate and sort a resource listing.

Invariants:
    - Order is fixed: filter → count → paginate → sort
    - total is the filtered length, captured BEFORE pagination
    - Sorting applies to the page window only (page boundaries come from
      the unsorted filtered collection)
    - Sort is stable: ties keep their relative input order
    - Out-of-range pages yield [], never an error
    - apply_query is PURE: the input collection is never reordered or mutated

Design Decisions:
    - Page-then-sort kept as the listing contract; clients that need globally
      sorted pages must request a single page (no _limit)
    - _page/_limit read their leading digits ("2abc" → 2, "1.5" → 1); values
      with no leading digits, zero or negative fall back to their defaults
    - Records missing the sort field (or holding null) go after all others
      in both directions, keeping their relative order
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from functools import cmp_to_key

from mockapi.core.domain_types import (
    RESERVED_QUERY_KEYS, Collection, Record, SortOrder,
)
from mockapi.core.records import is_number, stringify

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


@dataclass(frozen=True)
class QueryOptions:
    """Parsed listing controls."""
    filters: dict[str, str] = field(default_factory=dict)
    page: int | None = None
    limit: int | None = None
    sort: str | None = None
    order: SortOrder = SortOrder.ASC


@dataclass(frozen=True)
class QueryResult:
    items: Collection
    total: int


def parse_query(params: Mapping[str, str]) -> QueryOptions:
    """Split raw query parameters into filters and listing controls."""
    filters = {
        key: value for key, value in params.items()
        if key not in RESERVED_QUERY_KEYS
    }
    order = (
        SortOrder.DESC if params.get("_order") == SortOrder.DESC.value
        else SortOrder.ASC
    )
    return QueryOptions(
        filters=filters,
        page=_positive_int(params.get("_page")),
        limit=_positive_int(params.get("_limit")),
        sort=params.get("_sort") or None,
        order=order,
    )


def apply_query(records: Collection, options: QueryOptions) -> QueryResult:
    """Run the listing pipeline over a collection."""
    items = filter_records(records, options.filters)
    total = len(items)
    window = paginate(items, options.page, options.limit)
    if options.sort:
        window = sort_records(window, options.sort, options.order)
    return QueryResult(items=window, total=total)


def filter_records(records: Collection, filters: Mapping[str, str]) -> Collection:
    """Keep records whose fields equal every filter value (string compare)."""
    return [
        record for record in records
        if all(_field_matches(record, key, value) for key, value in filters.items())
    ]


def paginate(
    records: Collection, page: int | None, limit: int | None,
) -> Collection:
    page = page or 1
    limit = limit or len(records)
    start = (page - 1) * limit
    return records[start:start + limit]


def sort_records(records: Collection, key: str, order: SortOrder) -> Collection:
    """Stable sort on one field; DESC reverses the comparison, not the ties.

    Missing or null values sort last regardless of order.
    """
    direction = -1 if order is SortOrder.DESC else 1

    def compare(a: Record, b: Record) -> int:
        left, right = a.get(key), b.get(key)
        if left is None or right is None:
            return (left is None) - (right is None)
        return direction * compare_values(left, right)

    return sorted(records, key=cmp_to_key(compare))


def compare_values(a: object, b: object) -> int:
    """Native ordering: numeric when both are numbers, string form otherwise."""
    if is_number(a) and is_number(b):
        left, right = a, b
    else:
        left, right = stringify(a), stringify(b)
    if left < right:
        return -1
    if left > right:
        return 1
    return 0


def _field_matches(record: Record, key: str, value: str) -> bool:
    if key not in record:
        return False
    return stringify(record[key]) == value


def _positive_int(raw: str | None) -> int | None:
    if raw is None:
        return None
    match = _LEADING_INT.match(raw)
    if match is None:
        return None
    number = int(match.group(1))
    return number if number > 0 else None
