"""Ordered collection of sessions and their scrollback.

Has no notion of the active session or of persistence; the session
manager drives it.
"""

from __future__ import annotations

import logging
from typing import Iterator

from tabshell.domain.models import Entry, Session

logger = logging.getLogger(__name__)


class SessionStore:
    """Insertion-ordered mapping of session id to Session."""

    def __init__(self, sessions: list[Session] | None = None) -> None:
        self._sessions: list[Session] = []
        for session in sessions or []:
            self.add(session)

    def __len__(self) -> int:
        return len(self._sessions)

    def __iter__(self) -> Iterator[Session]:
        return iter(list(self._sessions))

    def __contains__(self, session_id: object) -> bool:
        return any(s.id == session_id for s in self._sessions)

    @property
    def ids(self) -> list[str]:
        return [s.id for s in self._sessions]

    def first(self) -> Session | None:
        return self._sessions[0] if self._sessions else None

    def get(self, session_id: str) -> Session | None:
        for session in self._sessions:
            if session.id == session_id:
                return session
        return None

    def add(self, session: Session) -> Session:
        """Append ``session`` to the end of the collection.

        Raises:
            ValueError: If a session with the same id already exists.
        """
        if session.id in self:
            raise ValueError(f"Session id {session.id!r} already exists")
        self._sessions.append(session)
        return session

    def create(self, session_id: str, name: str) -> Session:
        return self.add(Session(id=session_id, name=name))

    def append(self, session_id: str, entry: Entry) -> bool:
        """Append ``entry`` to a session's history. False if the id is unknown."""
        session = self.get(session_id)
        if session is None:
            logger.debug("Dropping %s entry for unknown session %s", entry.kind.value, session_id)
            return False
        session.history.append(entry)
        return True

    def clear(self, session_id: str) -> bool:
        session = self.get(session_id)
        if session is None:
            return False
        session.history = []
        return True

    def delete(self, session_id: str) -> bool:
        """Remove a session. Refuses to remove the last one."""
        if len(self._sessions) <= 1:
            return False
        before = len(self._sessions)
        self._sessions = [s for s in self._sessions if s.id != session_id]
        return len(self._sessions) < before

    def resolve_active(self, session_id: str | None) -> str:
        """Return ``session_id`` if present, else the first id, else ""."""
        if session_id and session_id in self:
            return session_id
        first = self.first()
        return first.id if first else ""

    def snapshot(self) -> list[Session]:
        """Deep copy of the collection, safe to serialize or hand out."""
        return [s.model_copy(deep=True) for s in self._sessions]
