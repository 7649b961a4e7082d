"""Error Hierarchy — typed, categorized exceptions for all Cattery failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) carry an ErrorKind; infrastructure errors (500-level) do not
    - to_response() produces the REST error envelope
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with CatteryError base: FastAPI global handler catches all
    - PersistenceError lives here (not in infrastructure/) so engines can classify
      persistence signals without importing the gateway
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    DATABASE = "database"
    INTERNAL = "internal"


class ErrorKind(str, Enum):
    """Domain error kinds — independent of persistence-layer error codes."""
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    BAD_REQUEST = "bad_request"


class PersistenceCode(str, Enum):
    """Signals the gateway extracts from driver errors."""
    UNIQUE_VIOLATION = "unique_violation"
    FOREIGN_KEY_VIOLATION = "foreign_key_violation"
    RECORD_NOT_FOUND = "record_not_found"
    INTEGRITY_VIOLATION = "integrity_violation"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    operation: str | None = None
    cat_id: int | None = None
    user_id: int | None = None
    debug_info: dict[str, Any] | None = None


class CatteryError(Exception):
    """Base exception for all Cattery errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "operation": self.context.operation,
                    "cat_id": self.context.cat_id,
                    "user_id": self.context.user_id,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class DomainError(CatteryError):
    """A violated precondition the caller can act on."""
    kind: ErrorKind


class ResourceNotFoundError(DomainError):
    """Referenced entity is absent (or filtered out by soft delete)."""
    kind = ErrorKind.NOT_FOUND

    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )


class ConflictError(DomainError):
    """State precondition violated — already adopted, has dependents, duplicate."""
    kind = ErrorKind.CONFLICT

    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )


class OperationFailedError(DomainError):
    """Operation could not be completed; details are logged, not returned."""
    kind = ErrorKind.BAD_REQUEST

    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "OPERATION_FAILED", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 400,
        )


_DOMAIN_ERRORS: dict[ErrorKind, type[DomainError]] = {
    ErrorKind.NOT_FOUND: ResourceNotFoundError,
    ErrorKind.CONFLICT: ConflictError,
    ErrorKind.BAD_REQUEST: OperationFailedError,
}


def domain_error_for(
    kind: ErrorKind, message: str, context: ErrorContext | None = None,
) -> DomainError:
    """Build the DomainError subclass that renders the given kind."""
    return _DOMAIN_ERRORS[kind](message, context)


class InputValidationError(CatteryError):
    """Request payload failed schema validation."""
    def __init__(self, details: list[dict], context: ErrorContext | None = None):
        super().__init__(
            "Invalid request data", "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.details = details

    def to_response(self) -> dict:
        response = super().to_response()
        response["error"]["details"] = self.details
        return response


# ─── Infrastructure Errors (500-level) ──────────────────────────

class PersistenceError(CatteryError):
    """Classified signal from the persistence gateway (constraint, missing row)."""
    def __init__(
        self,
        persistence_code: PersistenceCode,
        detail: str,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Persistence error ({persistence_code.value})",
            "PERSISTENCE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.persistence_code = persistence_code
        self.detail = detail


class DatabaseError(CatteryError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
