# ABOUTME: Tests for the dialogue authoring workflows
# ABOUTME: Group creation pre-checks, element editing, and opening a configured database

from __future__ import annotations

import pytest
import pytest_asyncio

from lorekeeper.config import load_config
from lorekeeper.core.service import DialogueAuthoringService
from lorekeeper.persistence import ConnectionSource, DialogueGroupStore, DialogueLineStore, ErrorKind


@pytest_asyncio.fixture
async def service(connections: ConnectionSource) -> DialogueAuthoringService:
    authoring = DialogueAuthoringService(DialogueLineStore(connections), DialogueGroupStore(connections))
    assert (await authoring.open()).ok
    return authoring


@pytest.mark.asyncio
async def test_open_creates_tables_and_reports_counts(tmp_path):
    config = load_config(database_location=str(tmp_path / "db" / "dialogue.db"))
    authoring = DialogueAuthoringService.from_config(config)
    try:
        opened = await authoring.open()
        await authoring.lines.insert_line("Hello", refresh_cache=True)
        reopened = await authoring.open()
    finally:
        await authoring.close()

    assert opened.value.lines == 0 and opened.value.groups == 0
    assert reopened.value.lines == 1


@pytest.mark.asyncio
async def test_open_reports_store_errors(tmp_path):
    blocker = tmp_path / "not_a_directory"
    blocker.write_text("")
    authoring = DialogueAuthoringService.from_config(load_config(database_location=str(blocker / "dialogue.db")))
    try:
        opened = await authoring.open()
    finally:
        await authoring.close()

    assert opened.kind is ErrorKind.STORE_ERROR


@pytest.mark.asyncio
async def test_try_add_group(service: DialogueAuthoringService):
    assert await service.try_add_group("intro") is True
    assert service.groups.fetch_group_from_cache("intro").value.elements == ()


@pytest.mark.asyncio
@pytest.mark.parametrize("group_id", ["", "   "])
async def test_try_add_group_rejects_blank_ids(service: DialogueAuthoringService, group_id: str):
    assert await service.try_add_group(group_id) is False
    assert service.groups.cache_size == 0


@pytest.mark.asyncio
async def test_try_add_group_rejects_existing_ids(service: DialogueAuthoringService):
    await service.try_add_group("intro")

    assert await service.try_add_group("intro") is False
    assert (await service.groups.initialize_cache()).value == 1


@pytest.mark.asyncio
async def test_try_delete_group(service: DialogueAuthoringService):
    await service.try_add_group("intro")

    assert await service.try_delete_group("intro") is True
    assert await service.try_delete_group("intro") is False
    assert await service.try_delete_group("") is False
    assert "intro" not in service.groups.cache


@pytest.mark.asyncio
async def test_append_and_remove_elements(service: DialogueAuthoringService):
    await service.try_add_group("intro")

    await service.append_element("intro", "Hi")
    appended = await service.append_element("intro", "Welcome")
    assert appended.value.elements == ("Hi", "Welcome")

    removed = await service.remove_element("intro", 0)
    assert removed.value.elements == ("Welcome",)
    from_store = await service.groups.fetch_group_from_store("intro")
    assert from_store.value.elements == ("Welcome",)


@pytest.mark.asyncio
async def test_editing_missing_group_is_not_found(service: DialogueAuthoringService):
    assert (await service.append_element("ghost", "boo")).kind is ErrorKind.NOT_FOUND
    assert (await service.remove_element("ghost", 0)).kind is ErrorKind.NOT_FOUND


@pytest.mark.asyncio
async def test_remove_element_out_of_range_is_not_found(service: DialogueAuthoringService):
    await service.try_add_group("intro")

    result = await service.remove_element("intro", 5)

    assert result.kind is ErrorKind.NOT_FOUND
    assert "out of range" in result.error.message
