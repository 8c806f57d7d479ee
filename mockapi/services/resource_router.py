"""Resource Router: dynamic route table and the six CRUD handlers.

Invariants:
    - The route table is DATA: six entries per resource, rebuilt from the
      store's current resource names at startup and after every reload
    - First match in table order wins
    - Handlers read the store at invocation time, never from a snapshot
    - Read-only is checked before the record lookup (403 wins over 404)
    - A persist failure never changes the response; it is logged only

Design Decisions:
    - Explicit operation → handler dict, one place to see every mapping
    - Handlers are synchronous: once invoked, mutate + persist completes
      before any other request runs on the event loop
"""

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from mockapi.core.domain_types import (
    MUTATING_OPERATIONS, Operation, Record, ResourceName,
)
from mockapi.core.errors import NotFoundError, PersistError, ReadOnlyViolationError
from mockapi.core.query import apply_query, parse_query
from mockapi.core.records import (
    build_created, build_replacement, find_index, merge_update, next_id,
)
from mockapi.infrastructure.document_store import DocumentStore

logger = logging.getLogger(__name__)

TOTAL_COUNT_HEADER = "X-Total-Count"

# (method, operation, is_item_route), in generation order
_ROUTE_TEMPLATES = (
    ("GET", Operation.LIST, False),
    ("GET", Operation.GET, True),
    ("POST", Operation.CREATE, False),
    ("PUT", Operation.REPLACE, True),
    ("PATCH", Operation.UPDATE, True),
    ("DELETE", Operation.DELETE, True),
)


@dataclass(frozen=True)
class Route:
    method: str
    pattern: re.Pattern
    resource: ResourceName
    operation: Operation


@dataclass(frozen=True)
class RouteMatch:
    route: Route
    record_id: str | None = None


@dataclass
class HandlerResult:
    """Status, JSON body and extra headers produced by a handler."""
    status_code: int
    body: Any
    headers: dict[str, str] = field(default_factory=dict)


def build_routes(resources: list[str]) -> list[Route]:
    """Six routes per resource, resource order preserved."""
    routes: list[Route] = []
    for name in resources:
        collection = re.compile(f"^/{re.escape(name)}$")
        item = re.compile(f"^/{re.escape(name)}/([^/]+)$")
        for method, operation, is_item in _ROUTE_TEMPLATES:
            routes.append(Route(
                method=method,
                pattern=item if is_item else collection,
                resource=ResourceName(name),
                operation=operation,
            ))
    return routes


class ResourceRouter:
    """Routes method + path to a handler over a DocumentStore."""

    def __init__(self, store: DocumentStore, readonly: bool = False):
        self.store = store
        self.readonly = readonly
        self.routes: list[Route] = []
        self._handlers = {
            Operation.LIST: self.list_records,
            Operation.GET: self.get_record,
            Operation.CREATE: self.create_record,
            Operation.REPLACE: self.replace_record,
            Operation.UPDATE: self.update_record,
            Operation.DELETE: self.delete_record,
        }
        self.rebuild()

    def rebuild(self) -> None:
        """Regenerate the route table from the store's resource names."""
        self.routes = build_routes(self.store.resources())
        logger.debug(f"Route table rebuilt: {len(self.routes)} routes")

    def resources(self) -> list[str]:
        seen: dict[str, None] = {}
        for route in self.routes:
            seen.setdefault(route.resource, None)
        return list(seen)

    def match(self, method: str, path: str) -> RouteMatch | None:
        for route in self.routes:
            if route.method != method:
                continue
            m = route.pattern.match(path)
            if m is None:
                continue
            return RouteMatch(route=route, record_id=m.group(1) if m.groups() else None)
        return None

    def dispatch(
        self,
        match: RouteMatch,
        query: Mapping[str, str] | None = None,
        body: Record | None = None,
    ) -> HandlerResult:
        """Invoke the handler for a match. Raises MockApiError subclasses."""
        route = match.route
        if self.readonly and route.operation in MUTATING_OPERATIONS:
            raise ReadOnlyViolationError(route.method)
        handler = self._handlers[route.operation]
        if route.operation is Operation.LIST:
            return handler(route.resource, query or {})
        if route.operation is Operation.CREATE:
            return handler(route.resource, body or {})
        if route.operation in (Operation.REPLACE, Operation.UPDATE):
            return handler(route.resource, match.record_id, body or {})
        return handler(route.resource, match.record_id)

    # ─── Handlers ────────────────────────────────────────────────

    def list_records(
        self, resource: str, query: Mapping[str, str],
    ) -> HandlerResult:
        result = apply_query(self.store.get(resource), parse_query(query))
        return HandlerResult(
            200, result.items, {TOTAL_COUNT_HEADER: str(result.total)},
        )

    def get_record(self, resource: str, record_id: str) -> HandlerResult:
        records = self.store.get(resource)
        return HandlerResult(200, records[self._index_or_404(resource, record_id)])

    def create_record(self, resource: str, body: Record) -> HandlerResult:
        records = self.store.get(resource)
        record = build_created(body, next_id(records))
        records.append(record)
        self.store.set(resource, records)
        self._persist(resource)
        return HandlerResult(201, record)

    def replace_record(
        self, resource: str, record_id: str, body: Record,
    ) -> HandlerResult:
        records = self.store.get(resource)
        index = self._index_or_404(resource, record_id)
        record = build_replacement(records[index], body)
        records[index] = record
        self._persist(resource)
        return HandlerResult(200, record)

    def update_record(
        self, resource: str, record_id: str, body: Record,
    ) -> HandlerResult:
        records = self.store.get(resource)
        index = self._index_or_404(resource, record_id)
        record = merge_update(records[index], body)
        records[index] = record
        self._persist(resource)
        return HandlerResult(200, record)

    def delete_record(self, resource: str, record_id: str) -> HandlerResult:
        records = self.store.get(resource)
        del records[self._index_or_404(resource, record_id)]
        self._persist(resource)
        return HandlerResult(200, {})

    # ─── Helpers ─────────────────────────────────────────────────

    def _index_or_404(self, resource: str, record_id: str) -> int:
        index = find_index(self.store.get(resource), record_id)
        if index == -1:
            raise NotFoundError(resource, record_id)
        return index

    def _persist(self, resource: str) -> None:
        try:
            self.store.persist()
        except PersistError as e:
            logger.error(
                e.message,
                extra={"error_code": e.code, "resource": resource},
            )
