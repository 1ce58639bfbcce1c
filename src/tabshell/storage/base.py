"""Abstract base class for durable key-value storage.

The session manager keeps its whole persisted state under two string
keys, so any store that can get and set strings will do.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

SESSIONS_KEY = "terminal-sessions"
ACTIVE_SESSION_KEY = "active-terminal-tab"


class KeyValueStorage(ABC):
    """String-to-string durable storage."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the stored value, or None when the key is absent.

        Raises:
            StorageError: If the underlying store cannot be read.
        """
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value.

        Raises:
            StorageError: If the value cannot be written.
        """
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove ``key``. Missing keys are ignored."""
        ...


class StorageError(Exception):
    """Raised when durable storage cannot be read or written."""

    def __init__(self, message: str, backend: str = "") -> None:
        super().__init__(message)
        self.backend = backend
