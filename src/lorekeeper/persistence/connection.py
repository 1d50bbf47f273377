# ABOUTME: Connection source for the dialogue database using SQLAlchemy async components
# ABOUTME: Hands out one session per unit of work and owns schema creation

from __future__ import annotations

import asyncio
from collections.abc import AsyncGenerator
from contextlib import AbstractAsyncContextManager, asynccontextmanager, nullcontext
from pathlib import Path
from typing import Any

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from lorekeeper.config import Config
from lorekeeper.persistence.models import GROUPS_TABLE, DialogueGroupRow, DialogueLineRow
from lorekeeper.utils.logging import get_logger

MEMORY_LOCATION = ":memory:"

_TABLES = [DialogueLineRow.__table__, DialogueGroupRow.__table__]  # type: ignore[attr-defined]


def build_database_url(location: str) -> str:
    """Turn a store location into an async SQLAlchemy URL.

    Accepts a full URL (returned unchanged), ``:memory:``, or a filesystem path.
    """
    if "://" in location:
        return location
    if location == MEMORY_LOCATION:
        return "sqlite+aiosqlite:///:memory:"
    return f"sqlite+aiosqlite:///{Path(location).expanduser()}"


def _is_memory_database(database_url: str) -> bool:
    url = make_url(database_url)
    return url.get_backend_name() == "sqlite" and url.database in (None, "", MEMORY_LOCATION)


def _engine_options(database_url: str) -> dict[str, Any]:
    if _is_memory_database(database_url):
        # One shared connection, otherwise every unit of work sees its own empty database
        return {"poolclass": StaticPool, "connect_args": {"check_same_thread": False}}
    return {}


class ConnectionSource:
    """Yields sessions against one dialogue database.

    Each ``transaction()`` or ``session()`` block is a single unit of work on its
    own session. Nothing is shared between blocks beyond the engine's pool.
    An in-memory database has only one connection, so its units of work run
    one at a time and never share a transaction.
    """

    def __init__(self, location: str, *, echo: bool = False, enforce_unique_group_ids: bool = False):
        """Initialize the connection source.

        Args:
            location: SQLite file path, ``:memory:``, or an async SQLAlchemy URL
            echo: Log every SQL statement through the engine logger
            enforce_unique_group_ids: Add a unique index on the group ID column in ``create_tables``
        """
        self.location = location
        self.database_url = build_database_url(location)
        self.enforce_unique_group_ids = enforce_unique_group_ids
        self.logger = get_logger(__name__)
        self.engine = create_async_engine(self.database_url, echo=echo, **_engine_options(self.database_url))
        self._unit_lock = asyncio.Lock() if _is_memory_database(self.database_url) else None
        self.async_session = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,  # Snapshots are built after commit
        )

    @classmethod
    def from_config(cls, config: Config) -> ConnectionSource:
        return cls(
            config.database_location,
            echo=config.echo_sql,
            enforce_unique_group_ids=config.enforce_unique_group_ids,
        )

    def _database_path(self) -> Path | None:
        url = make_url(self.database_url)
        if url.get_backend_name() != "sqlite" or _is_memory_database(self.database_url):
            return None
        return Path(url.database)

    def _exclusive(self) -> AbstractAsyncContextManager[Any]:
        return self._unit_lock if self._unit_lock is not None else nullcontext()

    async def create_tables(self) -> None:
        """Create the dialogue tables if they don't exist."""
        path = self._database_path()
        if path is not None:
            path.parent.mkdir(parents=True, exist_ok=True)

        async with self.engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all, tables=_TABLES)
            if self.enforce_unique_group_ids:
                await conn.execute(
                    text(f'CREATE UNIQUE INDEX IF NOT EXISTS "ux_{GROUPS_TABLE}_ID" ON "{GROUPS_TABLE}" ("ID")')
                )

        self.logger.info(
            "Dialogue tables ready",
            location=self.location,
            unique_group_ids=self.enforce_unique_group_ids,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Yield a session for a read-only unit of work."""
        async with self._exclusive(), self.async_session() as session:
            yield session

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[AsyncSession, None]:
        """Yield a session whose work is committed on exit.

        Any exception raised in the block rolls the transaction back and is
        re-raised unchanged.

        Usage:
            async with connections.transaction() as session:
                session.add(row)
        """
        async with self._exclusive(), self.async_session() as session:
            try:
                yield session
                await session.commit()
            except Exception as e:
                await session.rollback()
                self.logger.debug("Transaction rolled back", error=str(e), error_type=type(e).__name__)
                raise

    async def ping(self) -> None:
        """Open a connection and run a trivial statement."""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def close(self) -> None:
        """Close the database connection."""
        await self.engine.dispose()
