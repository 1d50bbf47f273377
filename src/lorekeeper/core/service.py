# ABOUTME: High-level authoring workflows over the dialogue line and group stores
# ABOUTME: Group creation with an existence pre-check, deletion, and element editing

from __future__ import annotations

from dataclasses import dataclass

from lorekeeper.config import Config
from lorekeeper.core.models import DialogueGroup
from lorekeeper.persistence import ConnectionSource, DialogueGroupStore, DialogueLineStore, ErrorKind, StoreResult
from lorekeeper.persistence.store import failure_from_exception
from lorekeeper.utils.logging import get_logger


@dataclass(slots=True)
class CacheCounts:
    """Entries loaded by ``DialogueAuthoringService.open``."""

    lines: int
    groups: int


class DialogueAuthoringService:
    """What the authoring tool does with the stores.

    Every write here refreshes the affected cache so the tool always lists what
    was just saved. The existence check in ``try_add_group`` assumes a single
    writer per database.
    """

    def __init__(self, lines: DialogueLineStore, groups: DialogueGroupStore):
        self.lines = lines
        self.groups = groups
        self.logger = get_logger(__name__)

    @classmethod
    def from_config(cls, config: Config) -> DialogueAuthoringService:
        connections = ConnectionSource.from_config(config)
        return cls(
            DialogueLineStore.from_config(connections, config),
            DialogueGroupStore.from_config(connections, config),
        )

    @property
    def connections(self) -> ConnectionSource:
        return self.lines.connections

    async def open(self) -> StoreResult[CacheCounts]:
        """Create the tables if needed and load both caches."""
        try:
            await self.connections.create_tables()
        except Exception as e:
            failure = failure_from_exception(e)
            if failure is None:
                raise
            return StoreResult.from_failure(failure)

        lines = await self.lines.initialize_cache()
        if not lines.ok:
            return StoreResult.from_failure(lines.error)  # type: ignore[arg-type]
        groups = await self.groups.initialize_cache()
        if not groups.ok:
            return StoreResult.from_failure(groups.error)  # type: ignore[arg-type]

        counts = CacheCounts(lines=lines.value or 0, groups=groups.value or 0)
        self.logger.info("Authoring caches loaded", lines=counts.lines, groups=counts.groups)
        return StoreResult.success(counts)

    async def close(self) -> None:
        await self.connections.close()

    async def try_add_group(self, group_id: str) -> bool:
        """Add an empty group unless the ID is blank or already taken."""
        if not group_id or not group_id.strip():
            return False

        existing = await self.groups.exists(group_id)
        if not existing.ok or existing.value:
            self.logger.info("Refusing to add dialogue group", group_id=group_id, exists=existing.value)
            return False

        result = await self.groups.insert(DialogueGroup(id=group_id), refresh_cache=True)
        return result.ok

    async def try_delete_group(self, group_id: str) -> bool:
        if not group_id or not group_id.strip():
            return False
        result = await self.groups.delete(group_id, refresh_cache=True)
        return result.ok

    async def append_element(self, group_id: str, text: str) -> StoreResult[DialogueGroup]:
        """Append ``text`` to the end of a cached group and save it."""
        current = self.groups.fetch_group_from_cache(group_id)
        if not current.ok:
            return current
        return await self._save(current.value.append_element(text))  # type: ignore[union-attr]

    async def remove_element(self, group_id: str, index: int) -> StoreResult[DialogueGroup]:
        """Remove the element at ``index`` from a cached group and save it."""
        current = self.groups.fetch_group_from_cache(group_id)
        if not current.ok:
            return current
        try:
            edited = current.value.remove_element(index)  # type: ignore[union-attr]
        except IndexError as e:
            return StoreResult.failure(ErrorKind.NOT_FOUND, str(e))
        return await self._save(edited)

    async def _save(self, group: DialogueGroup) -> StoreResult[DialogueGroup]:
        result = await self.groups.update(group, refresh_cache=True)
        if not result.ok:
            return StoreResult.from_failure(result.error)  # type: ignore[arg-type]
        return StoreResult.success(group)
