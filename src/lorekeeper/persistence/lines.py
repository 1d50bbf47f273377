# ABOUTME: Dialogue line store: cached lookups plus transactional CRUD on DialogueLines
# ABOUTME: Lines are keyed by a store-assigned integer ID

from __future__ import annotations

from sqlalchemy import delete, update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from lorekeeper.config import CacheReloadStrategy, Config
from lorekeeper.core.models import DialogueLine
from lorekeeper.persistence.cache import ConcurrentCache
from lorekeeper.persistence.connection import ConnectionSource
from lorekeeper.persistence.models import DialogueLineRow
from lorekeeper.persistence.results import NotFoundError, StoreResult
from lorekeeper.persistence.store import CachedTableStore, expect_single_row
from lorekeeper.utils.logging import with_async_operation_context


def _missing(line_id: int) -> str:
    return f"No dialogue line exists for the line ID '{line_id}'!"


class DialogueLineStore(CachedTableStore[int, str]):
    """Dialogue lines with an in-memory ``ID -> Text`` cache.

    Writes never touch the cache directly. Pass ``refresh_cache=True`` to reload
    it after the transaction commits; otherwise the cache stays as it was until
    the next ``initialize_cache``.
    """

    entity = "dialogue line"

    def __init__(self, connections: ConnectionSource, *, reload_strategy: CacheReloadStrategy = "swap"):
        super().__init__(connections, ConcurrentCache("dialogue_lines"), reload_strategy=reload_strategy)

    @classmethod
    def from_config(cls, connections: ConnectionSource, config: Config) -> DialogueLineStore:
        return cls(connections, reload_strategy=config.cache_reload_strategy)

    async def _scan(self, session: AsyncSession) -> list[tuple[int, str]]:
        result = await session.exec(select(DialogueLineRow).order_by(DialogueLineRow.id))
        return [(row.id, row.text or "") for row in result.all()]  # type: ignore[misc]

    @with_async_operation_context("fetch_line")
    async def fetch_line(self, line_id: int, use_cache: bool = True) -> StoreResult[str]:
        """Return the text of a line, from the cache or straight from the store."""
        if use_cache:
            return self._cached(line_id, _missing(line_id))

        async def load(session: AsyncSession) -> str:
            result = await session.exec(select(DialogueLineRow).where(DialogueLineRow.id == line_id))
            row = result.first()
            if row is None:
                raise NotFoundError(_missing(line_id))
            return row.text or ""

        return await self._read(load)

    @with_async_operation_context("insert_line")
    async def insert_line(self, text: str, refresh_cache: bool = False) -> StoreResult[int]:
        """Insert a new line and return its store-assigned ID."""

        async def insert(session: AsyncSession) -> int:
            row = DialogueLineRow(text=text)
            session.add(row)
            await session.flush()
            return row.id  # type: ignore[return-value]

        result = await self._write(insert, refresh_cache=refresh_cache)
        if result.ok:
            self.logger.info("Inserted dialogue line", line_id=result.value, refreshed=refresh_cache)
        return result

    @with_async_operation_context("update_line")
    async def update_line(self, text: str, line_id: int, refresh_cache: bool = False) -> StoreResult[None]:
        """Replace the text of exactly one existing line."""

        async def apply(session: AsyncSession) -> None:
            result = await session.exec(
                update(DialogueLineRow).where(DialogueLineRow.id == line_id).values(text=text)  # type: ignore[arg-type]
            )
            expect_single_row(result.rowcount, self.entity, line_id, "update")

        return await self._write(apply, refresh_cache=refresh_cache)

    @with_async_operation_context("delete_line")
    async def delete_line(self, line_id: int, refresh_cache: bool = False) -> StoreResult[None]:
        """Delete exactly one existing line."""

        async def apply(session: AsyncSession) -> None:
            result = await session.exec(delete(DialogueLineRow).where(DialogueLineRow.id == line_id))  # type: ignore[arg-type]
            expect_single_row(result.rowcount, self.entity, line_id, "delete")

        return await self._write(apply, refresh_cache=refresh_cache)

    @with_async_operation_context("fetch_dialogue_line")
    async def fetch(self, line_id: int, use_cache: bool = True) -> StoreResult[DialogueLine]:
        """Like ``fetch_line`` but returns a ``DialogueLine`` snapshot."""
        text = await self.fetch_line(line_id, use_cache)
        if not text.ok:
            return StoreResult.from_failure(text.error)  # type: ignore[arg-type]
        return StoreResult.success(DialogueLine(id=line_id, text=text.value))

    def cached_lines(self) -> list[DialogueLine]:
        """Snapshot of every cached line, ordered by ID."""
        return [DialogueLine(id=line_id, text=text) for line_id, text in sorted(self.cache.snapshot().items())]
