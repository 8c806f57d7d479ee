"""mockapi: a REST API served from a JSON file.

Invariants:
    - Package root has no import side effects beyond the version string
"""

__version__ = "1.0.0"
