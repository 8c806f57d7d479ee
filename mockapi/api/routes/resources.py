"""Resource Pipeline: the single catch-all endpoint in front of the ResourceRouter.

Invariants:
    - Path and query are parsed once per request
    - For POST/PUT/PATCH the body is parsed BEFORE the handler runs; a
      malformed body aborts with 400 and nothing is mutated
    - The configured delay is awaited after body parsing, before the handler,
      without blocking other requests
    - Unmatched method/path → 404 {"error": "Not found"}

Design Decisions:
    - One FastAPI route for every path: the real route table is data owned
      by ResourceRouter and regenerated on reload, so FastAPI's own router
      never goes stale
    - Store and router come from app.state via dependencies (overridable in tests)
"""

import asyncio
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from mockapi.config import Settings
from mockapi.core.domain_types import BODY_METHODS, Record
from mockapi.core.errors import MalformedBodyError, NotFoundError
from mockapi.core.records import parse_json
from mockapi.services.resource_router import ResourceRouter

logger = logging.getLogger(__name__)
router = APIRouter(tags=["resources"])

ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"]


def get_resource_router(request: Request) -> ResourceRouter:
    """FastAPI dependency for the app's ResourceRouter."""
    return request.app.state.resource_router


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


async def read_json_body(request: Request) -> Record:
    """Parse the request body as a JSON object. Empty body → {}."""
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        body = parse_json(raw)
    except ValueError as e:
        raise MalformedBodyError(str(e))
    if not isinstance(body, dict):
        raise MalformedBodyError(f"expected an object, got {type(body).__name__}")
    return body


@router.api_route("/{path:path}", methods=ALL_METHODS)
async def handle_resource_request(
    request: Request,
    resources: ResourceRouter = Depends(get_resource_router),
    settings: Settings = Depends(get_app_settings),
):
    """Match, parse, delay, dispatch."""
    method = request.method
    path = request.url.path
    match = resources.match(method, path)
    if match is None:
        raise NotFoundError()

    body = await read_json_body(request) if method in BODY_METHODS else None

    if settings.delay > 0:
        await asyncio.sleep(settings.delay / 1000)

    result = resources.dispatch(match, dict(request.query_params), body)
    logger.debug(
        f"{method} {path} → {result.status_code}",
        extra={
            "method": method, "path": path,
            "resource": match.route.resource, "status_code": result.status_code,
        },
    )
    return JSONResponse(
        status_code=result.status_code, content=result.body,
        headers=result.headers,
    )
