"""Transactional Engine — runs one unit of work and folds its errors into an Outcome.

Invariants:
    - The work callable runs inside exactly one gateway transaction
    - DomainError raised by the work → transaction rolled back → Failure
    - PersistenceError → looked up in the operation's ErrorRule table → Failure,
      or logged with operation + entity ids and re-raised unchanged
    - DatabaseError and anything else propagates untouched

Design Decisions:
    - Work is an inner async function per operation: keeps each rule sequence
      readable top-to-bottom while the error plumbing lives in one place
"""

import logging
from typing import Any, Awaitable, Callable, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from cattery.core.error_classification import ErrorRule, classify
from cattery.core.errors import DomainError, PersistenceError
from cattery.core.outcome import Failure, Outcome, Success
from cattery.infrastructure.persistence import PersistenceGateway

logger = logging.getLogger(__name__)

T = TypeVar("T")

_LOGGED_IDS = ("cat_id", "user_id")


class TransactionalEngine:
    """Base for lifecycle engines — holds the gateway handle."""

    def __init__(self, gateway: PersistenceGateway):
        self._gateway = gateway

    async def _execute(
        self,
        operation: str,
        work: Callable[[AsyncSession], Awaitable[T]],
        rules: tuple[ErrorRule, ...] = (),
        **context: Any,
    ) -> Outcome[T]:
        try:
            async with self._gateway.transaction() as db:
                value = await work(db)
        except DomainError as exc:
            return Failure.from_error(exc, operation=operation, **context)
        except PersistenceError as exc:
            failure = classify(exc, rules, operation=operation, **context)
            if failure is None:
                logger.error(
                    f"Unclassified persistence error in {operation}: {exc.detail}",
                    extra={
                        "operation": operation,
                        "error_code": exc.persistence_code.value,
                        **{k: context[k] for k in _LOGGED_IDS if k in context},
                    },
                )
                raise
            return failure
        return Success(value)
