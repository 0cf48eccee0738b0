import pytest

from fleetman.domain.base.result import DomainError, DomainErrorCode, Err, Ok, err, ok
from fleetman.domain.core.exceptions import UnwrapError


def test_ok_exposes_value():
    result = ok(42)

    assert isinstance(result, Ok)
    assert result.is_ok() is True
    assert result.is_err() is False
    assert result.unwrap() == 42


def test_err_exposes_error():
    error = DomainError.not_found("Machine with ID abc not found")
    result = err(error)

    assert isinstance(result, Err)
    assert result.is_err() is True
    assert result.unwrap_err() is error


def test_unwrap_on_err_raises():
    result = err(DomainError.internal("Failed to do something"))

    with pytest.raises(UnwrapError) as exc_info:
        result.unwrap()
    assert exc_info.value.error.code == DomainErrorCode.INTERNAL_ERROR


def test_unwrap_err_on_ok_raises():
    with pytest.raises(UnwrapError):
        ok().unwrap_err()


def test_domain_error_code_compares_with_plain_string():
    error = DomainError.create(DomainErrorCode.ACCESS_DENIED, "Nope")

    assert error.code == "ACCESS_DENIED"
    assert error.code == DomainErrorCode.ACCESS_DENIED


def test_domain_error_passes_through_unknown_codes():
    error = DomainError.create("DB_TIMEOUT", "Database timed out")

    assert error.code == "DB_TIMEOUT"
    assert str(error) == "DB_TIMEOUT: Database timed out"


def test_domain_error_equality_ignores_details():
    first = DomainError.validation("Brand is required", {"field": "brand"})
    second = DomainError.validation("Brand is required")

    assert first == second
    assert first.to_dict() == {
        "code": "VALIDATION_ERROR",
        "message": "Brand is required",
        "details": {"field": "brand"},
    }
