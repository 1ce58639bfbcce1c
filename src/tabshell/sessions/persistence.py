"""JSON codec for the persisted session collection."""

from __future__ import annotations

from pydantic import TypeAdapter, ValidationError

from tabshell.domain.models import Session

_SESSIONS_ADAPTER = TypeAdapter(list[Session])


def dump_sessions(sessions: list[Session]) -> str:
    """Serialize sessions in collection order; entries keep their ``type`` key."""
    return _SESSIONS_ADAPTER.dump_json(sessions, by_alias=True).decode("utf-8")


def load_sessions(raw: str) -> list[Session]:
    """Parse a persisted collection.

    Raises:
        PersistedStateError: If ``raw`` is not a valid session list or
                             contains duplicate ids.
    """
    try:
        sessions = _SESSIONS_ADAPTER.validate_json(raw)
    except ValidationError as e:
        raise PersistedStateError(f"Invalid session data: {e.error_count()} error(s)") from e

    seen: set[str] = set()
    for session in sessions:
        if session.id in seen:
            raise PersistedStateError(f"Duplicate session id {session.id!r}")
        seen.add(session.id)
    return sessions


class PersistedStateError(Exception):
    """Raised when persisted session state cannot be decoded."""
