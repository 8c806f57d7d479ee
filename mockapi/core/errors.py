"""Error Hierarchy: typed, categorized exceptions for every mockapi failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Request errors (400-level) reach the caller as {"error": message}
    - Data file errors are fatal at startup and non-fatal on reload
    - PersistError is never surfaced to the caller (logged by the router)

Design Decisions:
    - Single hierarchy with MockApiError base: one FastAPI handler maps all of them
    - Flat {"error": message} envelope, the wire format mock clients expect
"""

from enum import Enum


class ErrorSeverity(str, Enum):
    """Error severity for observability."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    POLICY = "policy"
    RESOURCE_NOT_FOUND = "resource_not_found"
    STORAGE = "storage"
    INTERNAL = "internal"


class MockApiError(Exception):
    """Base exception for all mockapi errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to the REST error envelope."""
        return {"error": self.message}


# ─── Request Errors (400-level) ─────────────────────────────────

class MalformedBodyError(MockApiError):
    """Mutation payload is not a JSON object."""
    def __init__(self, detail: str | None = None):
        super().__init__(
            "Invalid JSON", "MALFORMED_BODY", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, 400,
        )
        self.detail = detail


class ReadOnlyViolationError(MockApiError):
    """Mutating verb received while the server is read-only."""
    def __init__(self, method: str):
        super().__init__(
            "Server is in read-only mode", "READ_ONLY", ErrorCategory.POLICY,
            ErrorSeverity.WARNING, 403,
        )
        self.method = method


class NotFoundError(MockApiError):
    """No route or no record matches the request."""
    def __init__(self, resource: str | None = None, record_id: str | None = None):
        super().__init__(
            "Not found", "NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.INFO, 404,
        )
        self.resource = resource
        self.record_id = record_id


# ─── Storage Errors (500-level) ─────────────────────────────────

class DataFileError(MockApiError):
    """Backing file is missing or does not hold a resource mapping."""
    def __init__(self, message: str, path: str):
        super().__init__(
            message, "DATA_FILE_ERROR", ErrorCategory.STORAGE,
            ErrorSeverity.CRITICAL, 500,
        )
        self.path = path


class PersistError(MockApiError):
    """Writing the backing file failed after an in-memory mutation."""
    def __init__(self, message: str, path: str):
        super().__init__(
            f"Failed to write {path}: {message}", "PERSIST_ERROR",
            ErrorCategory.STORAGE, ErrorSeverity.ERROR, 500,
        )
        self.path = path
