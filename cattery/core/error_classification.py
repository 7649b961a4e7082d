"""Error Classification — maps persistence signals to domain failures per operation.

Invariants:
    - classify() is PURE: returns a Failure or None, never raises, never logs
    - None means "unclassified": the caller logs and re-raises the original error
    - First matching rule wins; rule order in each table is significant

Design Decisions:
    - Tables are data, not code: each engine operation declares its own tuple of
      ErrorRule so the same PersistenceCode can mean different things (a foreign-key
      violation is "owner not found" on insert but "user not found" on adopt)
    - target narrows a rule to one constraint by substring match on the driver
      message; SQLite and PostgreSQL both name the column or constraint there
"""

from dataclasses import dataclass
from typing import Any

from cattery.core.errors import ErrorKind, PersistenceCode, PersistenceError
from cattery.core.outcome import Failure


@dataclass(frozen=True)
class ErrorRule:
    """One row of an operation's mapping table."""
    code: PersistenceCode
    kind: ErrorKind
    message: str
    target: str | None = None

    def matches(self, error: PersistenceError) -> bool:
        if error.persistence_code is not self.code:
            return False
        if self.target is None:
            return True
        return self.target.lower() in error.detail.lower()


def classify(
    error: PersistenceError, rules: tuple[ErrorRule, ...], **context: Any,
) -> Failure | None:
    """Resolve a persistence error against a mapping table.

    Message templates are formatted with ``context`` (e.g. ``{cat_id}``).
    """
    for rule in rules:
        if rule.matches(error):
            return Failure(
                rule.kind,
                rule.message.format(**context),
                {
                    "persistence_code": error.persistence_code.value,
                    **{k: v for k, v in context.items() if v is not None},
                },
            )
    return None


# ─── Mapping tables ─────────────────────────────────────────────

ADOPT_CAT_RULES = (
    ErrorRule(
        PersistenceCode.FOREIGN_KEY_VIOLATION, ErrorKind.NOT_FOUND,
        "User {user_id} does not exist",
    ),
    ErrorRule(
        PersistenceCode.RECORD_NOT_FOUND, ErrorKind.NOT_FOUND,
        "Cat {cat_id} does not exist",
    ),
)

DELETE_CAT_RULES = (
    ErrorRule(
        PersistenceCode.RECORD_NOT_FOUND, ErrorKind.NOT_FOUND,
        "Cat {cat_id} does not exist",
    ),
)

RESTORE_CAT_RULES = DELETE_CAT_RULES

INSERT_CAT_RULES = (
    ErrorRule(
        PersistenceCode.FOREIGN_KEY_VIOLATION, ErrorKind.NOT_FOUND,
        "Owner {owner_id} does not exist",
    ),
    ErrorRule(
        PersistenceCode.UNIQUE_VIOLATION, ErrorKind.CONFLICT,
        "Cat name already exists",
    ),
    ErrorRule(
        PersistenceCode.RECORD_NOT_FOUND, ErrorKind.NOT_FOUND,
        "Record does not exist",
    ),
)

CREATE_USER_RULES = (
    ErrorRule(
        PersistenceCode.UNIQUE_VIOLATION, ErrorKind.CONFLICT,
        "Email {email} is already in use", target="email",
    ),
    ErrorRule(
        PersistenceCode.UNIQUE_VIOLATION, ErrorKind.CONFLICT,
        "Data conflict, check the input",
    ),
    ErrorRule(
        PersistenceCode.RECORD_NOT_FOUND, ErrorKind.NOT_FOUND,
        "User does not exist",
    ),
)

REMOVE_USER_RULES = (
    ErrorRule(
        PersistenceCode.FOREIGN_KEY_VIOLATION, ErrorKind.CONFLICT,
        "Cannot delete user, foreign key constraint",
    ),
    ErrorRule(
        PersistenceCode.RECORD_NOT_FOUND, ErrorKind.NOT_FOUND,
        "User {user_id} does not exist",
    ),
)
