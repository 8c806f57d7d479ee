"""Domain Types: aliases and enums shared by the store, query and router layers.

Invariants:
    - A Record is an open JSON object; only `id` has meaning to the engine
    - A Collection keeps insertion order (default list order, pagination basis)
    - Every supported operation is an Operation member; no raw string matching
"""

from enum import Enum
from typing import Any, NewType


# ─── Data Types ──────────────────────────────────────────────────

Record = dict[str, Any]
Collection = list[Record]
StoreData = dict[str, Collection]

ResourceName = NewType("ResourceName", str)


# ─── Enums ───────────────────────────────────────────────────────

class Operation(str, Enum):
    """The six operations generated for every resource."""
    LIST = "list"
    GET = "get"
    CREATE = "create"
    REPLACE = "replace"
    UPDATE = "update"
    DELETE = "delete"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


# ─── Constants ───────────────────────────────────────────────────

ID_FIELD = "id"

# Query keys that control the listing instead of filtering it
RESERVED_QUERY_KEYS = frozenset({"_page", "_limit", "_sort", "_order"})

MUTATING_OPERATIONS = frozenset({
    Operation.CREATE, Operation.REPLACE, Operation.UPDATE, Operation.DELETE,
})

BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})
