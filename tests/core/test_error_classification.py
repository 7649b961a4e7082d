"""Error Classification — per-operation mapping of persistence signals."""

from cattery.core.error_classification import (
    ADOPT_CAT_RULES, CREATE_USER_RULES, DELETE_CAT_RULES, INSERT_CAT_RULES,
    REMOVE_USER_RULES, ErrorRule, classify,
)
from cattery.core.errors import ErrorKind, PersistenceCode, PersistenceError


def _error(code: PersistenceCode, detail: str = "") -> PersistenceError:
    return PersistenceError(code, detail)


def test_foreign_key_means_user_missing_on_adopt():
    failure = classify(
        _error(PersistenceCode.FOREIGN_KEY_VIOLATION), ADOPT_CAT_RULES,
        cat_id=10, user_id=7,
    )
    assert failure.kind is ErrorKind.NOT_FOUND
    assert failure.message == "User 7 does not exist"


def test_foreign_key_means_owner_missing_on_insert():
    failure = classify(
        _error(PersistenceCode.FOREIGN_KEY_VIOLATION), INSERT_CAT_RULES,
        owner_id=99,
    )
    assert failure.kind is ErrorKind.NOT_FOUND
    assert failure.message == "Owner 99 does not exist"


def test_foreign_key_means_conflict_on_remove():
    failure = classify(
        _error(PersistenceCode.FOREIGN_KEY_VIOLATION), REMOVE_USER_RULES,
        user_id=1,
    )
    assert failure.kind is ErrorKind.CONFLICT


def test_unique_violation_on_cat_insert_is_conflict():
    failure = classify(_error(PersistenceCode.UNIQUE_VIOLATION), INSERT_CAT_RULES)
    assert failure.kind is ErrorKind.CONFLICT


def test_email_target_picks_specific_message():
    failure = classify(
        _error(
            PersistenceCode.UNIQUE_VIOLATION,
            "UNIQUE constraint failed: users.email",
        ),
        CREATE_USER_RULES,
        email="a@example.com",
    )
    assert failure.kind is ErrorKind.CONFLICT
    assert failure.message == "Email a@example.com is already in use"


def test_other_unique_violation_falls_back_to_generic_conflict():
    failure = classify(
        _error(PersistenceCode.UNIQUE_VIOLATION, "uq_users_name"),
        CREATE_USER_RULES,
        email="a@example.com",
    )
    assert failure.message == "Data conflict, check the input"


def test_unmatched_code_is_unclassified():
    assert classify(
        _error(PersistenceCode.INTEGRITY_VIOLATION), DELETE_CAT_RULES, cat_id=1,
    ) is None


def test_failure_context_records_persistence_code_and_ids():
    failure = classify(
        _error(PersistenceCode.RECORD_NOT_FOUND), DELETE_CAT_RULES,
        cat_id=4, operation="delete_cat",
    )
    assert failure.context == {
        "persistence_code": "record_not_found",
        "cat_id": 4,
        "operation": "delete_cat",
    }


def test_first_matching_rule_wins():
    rules = (
        ErrorRule(PersistenceCode.UNIQUE_VIOLATION, ErrorKind.CONFLICT, "first"),
        ErrorRule(PersistenceCode.UNIQUE_VIOLATION, ErrorKind.NOT_FOUND, "second"),
    )
    assert classify(_error(PersistenceCode.UNIQUE_VIOLATION), rules).message == "first"


def test_target_match_is_case_insensitive():
    rule = ErrorRule(
        PersistenceCode.UNIQUE_VIOLATION, ErrorKind.CONFLICT, "x", target="EMAIL",
    )
    assert rule.matches(_error(PersistenceCode.UNIQUE_VIOLATION, "uq_users_email"))
