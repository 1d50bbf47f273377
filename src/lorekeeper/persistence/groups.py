# ABOUTME: Dialogue group store: cached lookups plus transactional CRUD on DialogueGroups
# ABOUTME: Group elements are persisted through the sequence codec as one text column

from __future__ import annotations

from sqlalchemy import delete, update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from lorekeeper.config import CacheReloadStrategy, Config
from lorekeeper.core.models import DialogueGroup
from lorekeeper.persistence.cache import ConcurrentCache
from lorekeeper.persistence.codec import deserialize_elements, serialize_elements
from lorekeeper.persistence.connection import ConnectionSource
from lorekeeper.persistence.models import DialogueGroupRow
from lorekeeper.persistence.results import NotFoundError, StoreResult
from lorekeeper.persistence.store import CachedTableStore, expect_single_row
from lorekeeper.utils.logging import with_async_operation_context


def _missing(group_id: str) -> str:
    return f"No dialogue group exists for the group ID '{group_id}'!"


def _to_group(row: DialogueGroupRow) -> DialogueGroup:
    return DialogueGroup(id=row.id or "", elements=tuple(deserialize_elements(row.elements)))


class DialogueGroupStore(CachedTableStore[str, DialogueGroup]):
    """Dialogue groups with an in-memory ``ID -> DialogueGroup`` cache.

    Group IDs are chosen by the caller and the table does not require them to
    be unique. Check ``exists`` before ``insert``; inserting an ID twice leaves
    two rows behind, after which cache reloads fail and keyed updates or
    deletes report an invariant violation until one row is removed.
    """

    entity = "dialogue group"

    def __init__(self, connections: ConnectionSource, *, reload_strategy: CacheReloadStrategy = "swap"):
        super().__init__(connections, ConcurrentCache("dialogue_groups"), reload_strategy=reload_strategy)

    @classmethod
    def from_config(cls, connections: ConnectionSource, config: Config) -> DialogueGroupStore:
        return cls(connections, reload_strategy=config.cache_reload_strategy)

    async def _scan(self, session: AsyncSession) -> list[tuple[str, DialogueGroup]]:
        result = await session.exec(select(DialogueGroupRow).order_by(DialogueGroupRow.row_id))
        groups = [_to_group(row) for row in result.all()]
        return [(group.id, group) for group in groups]

    # --- Lookups ---------------------------------------------------------------------
    def fetch_group_from_cache(self, group_id: str) -> StoreResult[DialogueGroup]:
        """Fetch a dialogue group from the cache."""
        return self._cached(group_id, _missing(group_id))

    @with_async_operation_context("fetch_group_from_store")
    async def fetch_group_from_store(self, group_id: str) -> StoreResult[DialogueGroup]:
        """Load a dialogue group straight from the store, decoding its elements."""

        async def load(session: AsyncSession) -> DialogueGroup:
            result = await session.exec(
                select(DialogueGroupRow).where(DialogueGroupRow.id == group_id).order_by(DialogueGroupRow.row_id)
            )
            row = result.first()
            if row is None:
                raise NotFoundError(_missing(group_id))
            return _to_group(row)

        return await self._read(load)

    async def exists(self, group_id: str, use_cache: bool = True) -> StoreResult[bool]:
        """Whether a group with this ID exists. This is the pre-check callers run before ``insert``."""
        if use_cache:
            return StoreResult.success(group_id in self.cache)

        async def lookup(session: AsyncSession) -> bool:
            result = await session.exec(select(DialogueGroupRow.row_id).where(DialogueGroupRow.id == group_id))
            return result.first() is not None

        return await self._read(lookup)

    def cached_group_ids(self) -> list[str]:
        return sorted(self.cache.keys())

    # --- Writes ----------------------------------------------------------------------
    @with_async_operation_context("insert_group")
    async def insert(self, group: DialogueGroup, refresh_cache: bool = False) -> StoreResult[None]:
        """Insert a group row. The ID is not checked for uniqueness."""

        async def apply(session: AsyncSession) -> None:
            session.add(DialogueGroupRow(id=group.id, elements=serialize_elements(group.elements)))
            await session.flush()

        result = await self._write(apply, refresh_cache=refresh_cache)
        if result.ok:
            self.logger.info("Inserted dialogue group", group_id=group.id, elements=len(group), refreshed=refresh_cache)
        return result

    @with_async_operation_context("update_group")
    async def update(self, group: DialogueGroup, refresh_cache: bool = False) -> StoreResult[None]:
        """Overwrite the stored elements of the group with this snapshot's elements."""

        async def apply(session: AsyncSession) -> None:
            payload = serialize_elements(group.elements)
            result = await session.exec(
                update(DialogueGroupRow).where(DialogueGroupRow.id == group.id).values(elements=payload)  # type: ignore[arg-type]
            )
            expect_single_row(result.rowcount, self.entity, group.id, "update")

        return await self._write(apply, refresh_cache=refresh_cache)

    @with_async_operation_context("delete_group")
    async def delete(self, group: DialogueGroup | str, refresh_cache: bool = False) -> StoreResult[None]:
        """Delete the group with this snapshot's ID (or the given ID)."""
        group_id = group.id if isinstance(group, DialogueGroup) else group

        async def apply(session: AsyncSession) -> None:
            result = await session.exec(delete(DialogueGroupRow).where(DialogueGroupRow.id == group_id))  # type: ignore[arg-type]
            expect_single_row(result.rowcount, self.entity, group_id, "delete")

        return await self._write(apply, refresh_cache=refresh_cache)
