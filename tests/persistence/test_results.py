# ABOUTME: Tests for StoreResult, StoreFailure, and the error-kind exception mapping
# ABOUTME: Also covers how unit-of-work exceptions are classified into error kinds

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from lorekeeper.persistence.results import (
    CacheLoadError,
    ConflictError,
    ErrorKind,
    InvariantViolationError,
    NotFoundError,
    SerializationError,
    StoreError,
    StoreFailure,
    StoreResult,
)
from lorekeeper.persistence.store import expect_single_row, failure_from_exception


def test_success_result():
    result = StoreResult.success("Hello")

    assert result.ok
    assert result.kind is None
    assert result.unwrap() == "Hello"


def test_failure_result_carries_kind_and_message():
    result: StoreResult[str] = StoreResult.failure(ErrorKind.NOT_FOUND, "missing", detail="line 7")

    assert not result.ok
    assert result.kind is ErrorKind.NOT_FOUND
    assert result.error == StoreFailure(ErrorKind.NOT_FOUND, "missing", "line 7")


@pytest.mark.parametrize(
    ("kind", "exception"),
    [
        (ErrorKind.NOT_FOUND, NotFoundError),
        (ErrorKind.CONFLICT, ConflictError),
        (ErrorKind.INVARIANT_VIOLATION, InvariantViolationError),
        (ErrorKind.SERIALIZATION_ERROR, SerializationError),
        (ErrorKind.STORE_ERROR, StoreError),
        (ErrorKind.CACHE_LOAD_ERROR, CacheLoadError),
    ],
)
def test_unwrap_raises_matching_exception(kind, exception):
    result: StoreResult[None] = StoreResult.failure(kind, "boom")

    with pytest.raises(exception, match="boom") as exc_info:
        result.unwrap()

    assert exc_info.value.kind is kind


def test_error_kind_renders_as_its_value():
    assert str(ErrorKind.CACHE_LOAD_ERROR) == "cache_load_error"


def test_failure_from_exception_keeps_domain_kinds():
    failure = failure_from_exception(InvariantViolationError("two rows"))

    assert failure is not None
    assert failure.kind is ErrorKind.INVARIANT_VIOLATION
    assert failure.message == "two rows"


def test_failure_from_exception_maps_integrity_errors_to_conflict():
    error = IntegrityError("INSERT ...", {}, Exception("UNIQUE constraint failed"))

    failure = failure_from_exception(error)

    assert failure is not None
    assert failure.kind is ErrorKind.CONFLICT
    assert "UNIQUE constraint failed" in (failure.detail or "")


@pytest.mark.parametrize("error", [OperationalError("SELECT 1", {}, Exception("disk I/O error")), OSError("gone")])
def test_failure_from_exception_maps_driver_errors_to_store_error(error):
    failure = failure_from_exception(error)

    assert failure is not None
    assert failure.kind is ErrorKind.STORE_ERROR


def test_failure_from_exception_ignores_programming_errors():
    assert failure_from_exception(TypeError("bug")) is None


def test_expect_single_row():
    expect_single_row(1, "dialogue line", 1, "update")

    with pytest.raises(NotFoundError):
        expect_single_row(0, "dialogue line", 1, "update")
    with pytest.raises(InvariantViolationError, match="2 rows"):
        expect_single_row(2, "dialogue group", "intro", "delete")
