# ABOUTME: Database operations and data persistence layer
# ABOUTME: Cached dialogue line and group stores over an async SQLite database

"""
Persistence Layer: Keep the in-memory caches coherent with the database

This layer handles:
- SQLModel tables for dialogue lines and dialogue groups
- Transactional create/update/delete with rollback on failure
- Thread-safe caches reloaded from full table scans
- Result values carrying an error kind instead of raised exceptions

Data Flow: core/ authoring workflows → Stores → SQLite
"""

from lorekeeper.core.models import DialogueGroup, DialogueLine

from .cache import ConcurrentCache
from .codec import deserialize_elements, serialize_elements
from .connection import ConnectionSource, build_database_url
from .diagnostics import test_connection
from .groups import DialogueGroupStore
from .lines import DialogueLineStore
from .models import DialogueGroupRow, DialogueLineRow
from .results import (
    CacheLoadError,
    ConflictError,
    ErrorKind,
    InvariantViolationError,
    LorekeeperError,
    NotFoundError,
    SerializationError,
    StoreError,
    StoreFailure,
    StoreResult,
)

__all__ = [
    "CacheLoadError",
    "ConcurrentCache",
    "ConflictError",
    "ConnectionSource",
    "DialogueGroup",
    "DialogueGroupRow",
    "DialogueGroupStore",
    "DialogueLine",
    "DialogueLineRow",
    "DialogueLineStore",
    "ErrorKind",
    "InvariantViolationError",
    "LorekeeperError",
    "NotFoundError",
    "SerializationError",
    "StoreError",
    "StoreFailure",
    "StoreResult",
    "build_database_url",
    "deserialize_elements",
    "serialize_elements",
    "test_connection",
]
