# ABOUTME: Shared machinery for cache-backed table stores
# ABOUTME: Transactional writes, affected-row checks, and the two cache reload strategies

from __future__ import annotations

from collections.abc import Awaitable, Callable, Hashable
from typing import Any

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel.ext.asyncio.session import AsyncSession

from lorekeeper.config import CacheReloadStrategy
from lorekeeper.persistence.cache import ConcurrentCache
from lorekeeper.persistence.connection import ConnectionSource
from lorekeeper.persistence.results import (
    CacheLoadError,
    ErrorKind,
    InvariantViolationError,
    LorekeeperError,
    NotFoundError,
    StoreFailure,
    StoreResult,
)
from lorekeeper.utils.logging import get_logger


def failure_from_exception(error: BaseException) -> StoreFailure | None:
    """Classify an exception raised by a unit of work.

    Returns None for exceptions that are not store failures (programming errors),
    which callers re-raise.
    """
    if isinstance(error, LorekeeperError):
        return StoreFailure(kind=error.kind, message=str(error), detail=_cause(error))
    if isinstance(error, IntegrityError):
        return StoreFailure(kind=ErrorKind.CONFLICT, message="Write rejected by a store constraint", detail=str(error.orig))
    if isinstance(error, (SQLAlchemyError, OSError)):
        return StoreFailure(kind=ErrorKind.STORE_ERROR, message=f"Store operation failed: {error}", detail=type(error).__name__)
    return None


def _cause(error: BaseException) -> str | None:
    return str(error.__cause__) if error.__cause__ is not None else None


def expect_single_row(rowcount: int, entity: str, key: Any, action: str) -> None:
    """Enforce that a keyed write touched exactly one row.

    Raises:
        NotFoundError: No row matched the key
        InvariantViolationError: More than one row matched the key
    """
    if rowcount == 0:
        raise NotFoundError(f"Could not {action} the {entity} '{key}': it doesn't exist")
    if rowcount > 1:
        raise InvariantViolationError(f"Refusing to {action} the {entity} '{key}': {rowcount} rows share that key")


class CachedTableStore[K: Hashable, V]:
    """Base for a store that mirrors one table in a ``ConcurrentCache``.

    Subclasses provide ``_scan`` which reads every row as ``(key, value)`` pairs.
    """

    entity = "row"

    def __init__(
        self,
        connections: ConnectionSource,
        cache: ConcurrentCache[K, V],
        *,
        reload_strategy: CacheReloadStrategy = "swap",
    ):
        self.connections = connections
        self.cache = cache
        self.reload_strategy = reload_strategy
        self.logger = get_logger(type(self).__module__).bind(entity=self.entity, cache=cache.name)

    async def _scan(self, session: AsyncSession) -> list[tuple[K, V]]:
        raise NotImplementedError

    # --- Cache reload ----------------------------------------------------------------
    async def initialize_cache(self) -> StoreResult[int]:
        """Reload the cache from a full table scan.

        Returns the number of rows scanned. A key seen twice fails the reload with
        ``CACHE_LOAD_ERROR``.
        """
        if self.reload_strategy == "clear":
            return await self._reload_in_place()
        return await self._reload_and_swap()

    async def _reload_and_swap(self) -> StoreResult[int]:
        generation = self.cache.next_generation()
        entries: dict[K, V] = {}
        try:
            async with self.connections.session() as session:
                for key, value in await self._scan(session):
                    if key in entries:
                        raise CacheLoadError(f"Duplicate {self.entity} key '{key}' found while loading the cache")
                    entries[key] = value
        except Exception as e:
            return self._reload_failed(e)

        if self.cache.publish(entries, generation):
            self.logger.info("Cache reloaded", entries=len(entries), generation=generation)
        else:
            self.logger.debug("Discarded stale cache reload", generation=generation)
        return StoreResult.success(len(entries))

    async def _reload_in_place(self) -> StoreResult[int]:
        # Readers can observe a partially loaded cache until this finishes
        self.cache.clear()
        seen: set[K] = set()
        try:
            async with self.connections.session() as session:
                for key, value in await self._scan(session):
                    # Duplicates are judged against this scan only
                    if key in seen:
                        raise CacheLoadError(f"There was an error while attempting to load {self.entity} '{key}' into the cache")
                    seen.add(key)
                    self.cache.put(key, value)
        except Exception as e:
            return self._reload_failed(e)

        self.logger.info("Cache reloaded in place", entries=len(seen))
        return StoreResult.success(len(seen))

    def _reload_failed(self, error: Exception) -> StoreResult[int]:
        failure = failure_from_exception(error)
        if failure is None:
            raise error
        self.logger.error("Cache reload failed", error=failure.message, error_kind=str(failure.kind))
        return StoreResult.from_failure(failure)

    # --- Units of work ---------------------------------------------------------------
    async def _read[T](self, body: Callable[[AsyncSession], Awaitable[T]]) -> StoreResult[T]:
        try:
            async with self.connections.session() as session:
                return StoreResult.success(await body(session))
        except Exception as e:
            failure = failure_from_exception(e)
            if failure is None:
                raise
            return StoreResult.from_failure(failure)

    async def _write[T](
        self,
        body: Callable[[AsyncSession], Awaitable[T]],
        *,
        refresh_cache: bool,
    ) -> StoreResult[T]:
        """Run ``body`` in its own transaction, then optionally reload the cache.

        The body raising rolls the transaction back; the failure comes back with
        its original kind. A failed reload after a successful commit is returned
        as the reload's failure.
        """
        try:
            async with self.connections.transaction() as session:
                value = await body(session)
        except Exception as e:
            failure = failure_from_exception(e)
            if failure is None:
                raise
            return StoreResult.from_failure(failure)

        if refresh_cache:
            reloaded = await self.initialize_cache()
            if not reloaded.ok:
                return StoreResult.from_failure(reloaded.error)  # type: ignore[arg-type]
        return StoreResult.success(value)

    def _cached(self, key: K, missing_message: str) -> StoreResult[V]:
        hit, value = self.cache.get(key)
        if not hit:
            return StoreResult.failure(ErrorKind.NOT_FOUND, missing_message)
        return StoreResult.success(value)

    @property
    def cache_size(self) -> int:
        return len(self.cache)
