"""Cross-Origin Support: permissive CORS headers for browser clients.

Invariants:
    - Enabled: every response carries the four headers below, and OPTIONS
      is answered 204 with an empty body before any routing
    - Disabled: nothing is attached and OPTIONS is routed like any method
    - The catch-all 500 is rendered outside this middleware, so the error
      handler attaches the same headers itself
"""

from fastapi import FastAPI, Request, Response

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, PATCH, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
    "Access-Control-Expose-Headers": "X-Total-Count",
}


def register_cors(app: FastAPI) -> None:
    """Install the CORS middleware on the app."""

    @app.middleware("http")
    async def cors_middleware(request: Request, call_next):
        if request.method == "OPTIONS":
            response = Response(status_code=204)
        else:
            response = await call_next(request)
        response.headers.update(CORS_HEADERS)
        return response


def cors_headers(request: Request) -> dict[str, str]:
    """CORS headers for responses built outside the middleware."""
    settings = getattr(request.app.state, "settings", None)
    return dict(CORS_HEADERS) if settings is not None and settings.cors else {}
