"""Outcome — tagged result returned by every lifecycle engine operation.

Invariants:
    - An Outcome is exactly one of Success(value) or Failure(kind, message, context)
    - Failure.kind is an ErrorKind; persistence codes never leak into it
    - unwrap() is the only bridge back to exceptions (used by the transport layer)

Design Decisions:
    - Frozen dataclasses over a pydantic model: values are domain records,
      not JSON payloads
    - context is a plain dict so engines can attach entity ids and counts
      without a schema per operation
"""

from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar, Union

from cattery.core.errors import DomainError, ErrorContext, ErrorKind, domain_error_for

T = TypeVar("T")

_CONTEXT_FIELDS = ("operation", "cat_id", "user_id")


@dataclass(frozen=True)
class Success(Generic[T]):
    """Operation completed; value holds the payload."""
    value: T

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Failure:
    """Operation refused; nothing was written."""
    kind: ErrorKind
    message: str
    context: dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return False

    @classmethod
    def from_error(cls, exc: DomainError, **context: Any) -> "Failure":
        """Capture a DomainError raised inside a transaction."""
        merged = {
            "operation": exc.context.operation,
            "cat_id": exc.context.cat_id,
            "user_id": exc.context.user_id,
            **(exc.context.debug_info or {}),
        }
        merged.update(context)
        return cls(
            exc.kind, exc.message,
            {k: v for k, v in merged.items() if v is not None},
        )

    def to_error(self) -> DomainError:
        ctx = ErrorContext(
            operation=self.context.get("operation"),
            cat_id=self.context.get("cat_id"),
            user_id=self.context.get("user_id"),
            debug_info={
                k: v for k, v in self.context.items() if k not in _CONTEXT_FIELDS
            } or None,
        )
        return domain_error_for(self.kind, self.message, ctx)

    def unwrap(self):
        raise self.to_error()


Outcome = Union[Success[T], Failure]
