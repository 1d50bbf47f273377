# ABOUTME: SQLModel table definitions for dialogue lines and dialogue groups
# ABOUTME: Column names match the authoring database layout (ID, Text, Elements)

from __future__ import annotations

from sqlalchemy import Integer, Text
from sqlmodel import Column, Field, SQLModel

LINES_TABLE = "DialogueLines"
GROUPS_TABLE = "DialogueGroups"


class DialogueLineRow(SQLModel, table=True):
    """A persisted dialogue line. The store assigns the ID."""

    __tablename__ = LINES_TABLE  # type: ignore[assignment]
    __table_args__ = {"sqlite_autoincrement": True}

    id: int | None = Field(
        default=None,
        sa_column=Column("ID", Integer, primary_key=True, autoincrement=True),
        description="Store-assigned line identifier",
    )
    text: str | None = Field(default=None, sa_column=Column("Text", Text), description="Line text")


class DialogueGroupRow(SQLModel, table=True):
    """A persisted dialogue group.

    ``ID`` is caller-assigned and deliberately not unique; ``RowID`` exists only
    because the ORM needs a primary key and is never exposed outside this package.
    """

    __tablename__ = GROUPS_TABLE  # type: ignore[assignment]
    __table_args__ = {"sqlite_autoincrement": True}

    row_id: int | None = Field(
        default=None,
        sa_column=Column("RowID", Integer, primary_key=True, autoincrement=True),
    )
    id: str | None = Field(default=None, sa_column=Column("ID", Text, index=True), description="Group identifier")
    elements: str | None = Field(
        default=None,
        sa_column=Column("Elements", Text),
        description="Codec-serialized ordered list of element strings",
    )
