"""Route Modules: one file per concern.

Invariants:
    - Routes never contain business logic (delegate to services)
"""
