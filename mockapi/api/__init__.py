"""API Layer: FastAPI pipeline route, CORS and error handlers.

Invariants:
    - Registered explicitly by main.create_app (no auto-discovery)
    - All responses are JSON
"""
