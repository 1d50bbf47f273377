# ABOUTME: Lorekeeper - authoring data layer for game dialogue lines and groups
# ABOUTME: Exposes the store objects, snapshot models, and result types

from lorekeeper.persistence import (
    ConnectionSource,
    DialogueGroup,
    DialogueGroupStore,
    DialogueLine,
    DialogueLineStore,
    ErrorKind,
    StoreFailure,
    StoreResult,
    test_connection,
)

__version__ = "0.1.0"

__all__ = [
    "ConnectionSource",
    "DialogueGroup",
    "DialogueGroupStore",
    "DialogueLine",
    "DialogueLineStore",
    "ErrorKind",
    "StoreFailure",
    "StoreResult",
    "test_connection",
]
