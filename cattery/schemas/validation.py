"""Payload Validation — typed success/failure result with field-level messages.

Invariants:
    - validate_payload never raises for bad input; it returns a ValidationResult
    - Exactly one of ValidationResult.value / ValidationResult.errors is populated
    - FieldError.field uses the JSON (camelCase) path, e.g. "catId"

Design Decisions:
    - Pydantic does the checking; this module only reshapes ValidationError into
      plain data so routes decide how to render it
"""

from dataclasses import asdict, dataclass
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ValidationError

from cattery.core.errors import InputValidationError

M = TypeVar("M", bound=BaseModel)


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str
    type: str


@dataclass(frozen=True)
class ValidationResult(Generic[M]):
    value: M | None = None
    errors: tuple[FieldError, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.errors


def validate_payload(schema: type[M], payload: Any) -> ValidationResult[M]:
    """Validate a raw JSON payload against a request schema."""
    try:
        return ValidationResult(value=schema.model_validate(payload))
    except ValidationError as exc:
        return ValidationResult(errors=tuple(
            FieldError(
                field=".".join(str(loc) for loc in e["loc"]) or "body",
                message=e["msg"],
                type=e["type"],
            )
            for e in exc.errors()
        ))


def require_valid(schema: type[M], payload: Any) -> M:
    """Route helper: the validated model, or InputValidationError."""
    result = validate_payload(schema, payload)
    if not result.ok:
        raise InputValidationError([asdict(e) for e in result.errors])
    return result.value
