# ABOUTME: Result type and error-kind taxonomy returned by every store operation
# ABOUTME: Failures travel as values; unwrap() converts them to the matching exception

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ErrorKind(str, Enum):
    """Categories of store failures."""

    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INVARIANT_VIOLATION = "invariant_violation"
    SERIALIZATION_ERROR = "serialization_error"
    STORE_ERROR = "store_error"
    CACHE_LOAD_ERROR = "cache_load_error"

    def __str__(self) -> str:
        return self.value


class LorekeeperError(Exception):
    """Root exception for failures raised from an unwrapped result."""

    kind: ErrorKind = ErrorKind.STORE_ERROR


class NotFoundError(LorekeeperError):
    """Raised when a key is missing from the cache or the store."""

    kind = ErrorKind.NOT_FOUND


class ConflictError(LorekeeperError):
    """Raised when a write collides with an existing row."""

    kind = ErrorKind.CONFLICT


class InvariantViolationError(LorekeeperError):
    """Raised when a keyed write touched more than one row."""

    kind = ErrorKind.INVARIANT_VIOLATION


class SerializationError(LorekeeperError):
    """Raised when an Elements payload cannot be encoded or decoded."""

    kind = ErrorKind.SERIALIZATION_ERROR


class StoreError(LorekeeperError):
    """Raised on driver or transport failures."""

    kind = ErrorKind.STORE_ERROR


class CacheLoadError(LorekeeperError):
    """Raised when a full cache reload finds inconsistent rows."""

    kind = ErrorKind.CACHE_LOAD_ERROR


_EXCEPTIONS: dict[ErrorKind, type[LorekeeperError]] = {
    ErrorKind.NOT_FOUND: NotFoundError,
    ErrorKind.CONFLICT: ConflictError,
    ErrorKind.INVARIANT_VIOLATION: InvariantViolationError,
    ErrorKind.SERIALIZATION_ERROR: SerializationError,
    ErrorKind.STORE_ERROR: StoreError,
    ErrorKind.CACHE_LOAD_ERROR: CacheLoadError,
}


@dataclass(frozen=True, slots=True)
class StoreFailure:
    """What went wrong, as data."""

    kind: ErrorKind
    message: str
    detail: str | None = None

    def to_exception(self) -> LorekeeperError:
        return _EXCEPTIONS[self.kind](self.message)


@dataclass(frozen=True, slots=True)
class StoreResult[T]:
    """Outcome of a store operation: a value on success, a failure otherwise."""

    value: T | None = None
    error: StoreFailure | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> ErrorKind | None:
        return self.error.kind if self.error else None

    def unwrap(self) -> T:
        """Return the value, raising the matching LorekeeperError on failure."""
        if self.error is not None:
            raise self.error.to_exception()
        return self.value  # type: ignore[return-value]

    @classmethod
    def success(cls, value: T | None = None) -> StoreResult[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str, detail: str | None = None) -> StoreResult[T]:
        return cls(error=StoreFailure(kind=kind, message=message, detail=detail))

    @classmethod
    def from_failure(cls, failure: StoreFailure) -> StoreResult[T]:
        return cls(error=failure)
