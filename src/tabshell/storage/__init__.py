"""Durable key-value storage for tabshell session state.

Public API:
    KeyValueStorage -- Abstract base class
    JsonFileStorage -- Single JSON file on disk
    MemoryStorage -- Process-local dict
"""

from tabshell.storage.base import (
    ACTIVE_SESSION_KEY,
    SESSIONS_KEY,
    KeyValueStorage,
    StorageError,
)
from tabshell.storage.file_backend import JsonFileStorage
from tabshell.storage.memory_backend import MemoryStorage

__all__ = [
    "ACTIVE_SESSION_KEY",
    "SESSIONS_KEY",
    "JsonFileStorage",
    "KeyValueStorage",
    "MemoryStorage",
    "StorageError",
    "create_storage",
]


def create_storage(settings) -> KeyValueStorage:
    """Build the storage selected by ``settings.storage.backend``."""
    if settings.storage.backend == "memory":
        return MemoryStorage()
    return JsonFileStorage(settings.storage.path)
