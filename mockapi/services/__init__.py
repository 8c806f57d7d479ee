"""Service Layer: request handling over the document store.

Invariants:
    - Services raise core errors; the API layer maps them to responses
"""
