# ABOUTME: Shared fixtures for store and service tests
# ABOUTME: Each test gets its own in-memory dialogue database with the tables created

from __future__ import annotations

import pytest_asyncio

from lorekeeper.persistence import ConnectionSource, DialogueGroupStore, DialogueLineStore


@pytest_asyncio.fixture
async def connections() -> ConnectionSource:
    """Provide an in-memory connection source with the dialogue tables created."""
    source = ConnectionSource(":memory:")
    await source.create_tables()
    yield source
    await source.close()


@pytest_asyncio.fixture
async def line_store(connections: ConnectionSource) -> DialogueLineStore:
    store = DialogueLineStore(connections)
    await store.initialize_cache()
    return store


@pytest_asyncio.fixture
async def group_store(connections: ConnectionSource) -> DialogueGroupStore:
    store = DialogueGroupStore(connections)
    await store.initialize_cache()
    return store
