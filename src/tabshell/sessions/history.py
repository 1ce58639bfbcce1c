"""Recall list of previously submitted commands.

Lives for one process only; unlike session scrollback it is never
persisted.
"""

from __future__ import annotations

DEFAULT_HISTORY_LIMIT = 50
NO_SELECTION = -1


class HistoryNavigator:
    """Most-recent-first, deduplicated command list with a recall cursor.

    The navigator owns only the list and the cursor index. Whatever input
    buffer the front end keeps is left alone; callers load the returned
    command into it themselves.
    """

    def __init__(self, limit: int = DEFAULT_HISTORY_LIMIT) -> None:
        if limit <= 0:
            raise ValueError("limit must be positive")
        self._limit = limit
        self._entries: list[str] = []
        self._index = NO_SELECTION

    @property
    def entries(self) -> list[str]:
        return list(self._entries)

    @property
    def index(self) -> int:
        return self._index

    @property
    def limit(self) -> int:
        return self._limit

    def __len__(self) -> int:
        return len(self._entries)

    def push(self, command: str) -> None:
        """Move-to-front insert, capped at ``limit``. Resets the cursor."""
        self._entries = [command] + [c for c in self._entries if c != command]
        del self._entries[self._limit:]
        self._index = NO_SELECTION

    def previous(self) -> str | None:
        """Step to the next older command, stopping at the oldest.

        Returns None (and leaves the cursor alone) when the list is empty.
        """
        if not self._entries:
            return None
        self._index = min(self._index + 1, len(self._entries) - 1)
        return self._entries[self._index]

    def next(self) -> str | None:
        """Step back toward the newest command.

        Returns the newer command, "" when the cursor arrives back at no
        selection, and None when nothing is selected.
        """
        if self._index > 0:
            self._index -= 1
            return self._entries[self._index]
        if self._index == 0:
            self._index = NO_SELECTION
            return ""
        return None

    def reset(self) -> None:
        """Forget the selection; the typed input stays with the caller."""
        self._index = NO_SELECTION
