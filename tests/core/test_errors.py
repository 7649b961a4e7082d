"""Error Hierarchy — envelope shape and domain error kinds."""

from cattery.core.errors import (
    ConflictError, DatabaseError, ErrorContext, ErrorKind, InputValidationError,
    PersistenceCode, PersistenceError, ResourceNotFoundError, domain_error_for,
)


def test_to_response_envelope_shape():
    exc = ResourceNotFoundError(
        "Cat with ID 5 does not exist", ErrorContext(operation="get_cat_detail", cat_id=5),
    )
    body = exc.to_response()["error"]
    assert body["code"] == "RESOURCE_NOT_FOUND"
    assert body["message"] == "Cat with ID 5 does not exist"
    assert body["category"] == "resource_not_found"
    assert body["severity"] == "error"
    assert body["context"] == {
        "operation": "get_cat_detail", "cat_id": 5, "user_id": None,
    }
    assert "timestamp" in body


def test_domain_errors_carry_kind():
    assert ResourceNotFoundError("x").kind is ErrorKind.NOT_FOUND
    assert ConflictError("x").kind is ErrorKind.CONFLICT


def test_domain_error_for_builds_subclass():
    error = domain_error_for(ErrorKind.CONFLICT, "dup")
    assert isinstance(error, ConflictError)
    assert error.http_status == 409


def test_input_validation_error_includes_details():
    exc = InputValidationError([{"field": "catId", "message": "bad", "type": "x"}])
    body = exc.to_response()["error"]
    assert exc.http_status == 400
    assert body["details"][0]["field"] == "catId"


def test_infrastructure_errors_are_5xx():
    assert PersistenceError(PersistenceCode.UNIQUE_VIOLATION, "d").http_status == 500
    assert DatabaseError("down", "execute").http_status == 503
