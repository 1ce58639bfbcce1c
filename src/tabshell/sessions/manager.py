"""The session manager that orchestrates tabs, commands and persistence.

Ties together the session store, the command history, the command
executor and durable storage. Every user action goes through one of the
manager's methods; front ends never mutate sessions directly.
"""

from __future__ import annotations

import logging
import time
from typing import Callable

from tabshell.domain.models import (
    CANCEL_MARKER,
    CLEAR_COMMAND,
    Entry,
    Session,
)
from tabshell.executor.base import (
    CancellationToken,
    CommandCancelled,
    CommandExecutor,
    ExecutorError,
)
from tabshell.sessions.history import HistoryNavigator
from tabshell.sessions.persistence import PersistedStateError, dump_sessions, load_sessions
from tabshell.sessions.store import SessionStore
from tabshell.storage.base import (
    ACTIVE_SESSION_KEY,
    SESSIONS_KEY,
    KeyValueStorage,
    StorageError,
)

logger = logging.getLogger(__name__)

DEFAULT_SESSION_ID = "1"
FAILURE_PREFIX = "Failed to execute command: "


def session_name(position: int) -> str:
    return f"Terminal {position}"


class SessionManager:
    """Owns the application state and its single mutation path.

    State: the session collection, the active-session pointer, the
    pending input line, the command history, and at most one in-flight
    cancellation token. The token doubles as the busy flag: it is set in
    the same synchronous step that appends the command entry, and cleared
    together with the busy state, so there is no window in which a second
    submission can slip in.

    Results are routed to the session that issued the command, not to
    whichever session is active when the response arrives.
    """

    def __init__(
        self,
        executor: CommandExecutor,
        storage: KeyValueStorage,
        history: HistoryNavigator | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._executor = executor
        self._storage = storage
        self._history = history or HistoryNavigator()
        self._clock = clock
        self._store = SessionStore()
        self._active_id = ""
        self._pending_input = ""
        self._token: CancellationToken | None = None
        self._inflight_session_id: str | None = None
        self._last_id = 0

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def sessions(self) -> list[Session]:
        return self._store.snapshot()

    @property
    def session_ids(self) -> list[str]:
        return self._store.ids

    @property
    def active_session_id(self) -> str:
        return self._active_id

    @property
    def active_session(self) -> Session | None:
        session = self._store.get(self._active_id)
        return session.model_copy(deep=True) if session else None

    def get_session(self, session_id: str) -> Session | None:
        session = self._store.get(session_id)
        return session.model_copy(deep=True) if session else None

    @property
    def is_busy(self) -> bool:
        return self._token is not None

    @property
    def inflight_session_id(self) -> str | None:
        return self._inflight_session_id

    @property
    def pending_input(self) -> str:
        return self._pending_input

    @property
    def history(self) -> HistoryNavigator:
        return self._history

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> SessionManager:
        await self._executor.connect()
        self.restore()
        return self

    async def __aexit__(self, exc_type: type | None, exc_val: Exception | None, exc_tb: object) -> None:
        if self.is_busy:
            self.cancel()
        await self._executor.disconnect()

    def restore(self) -> None:
        """Rebuild sessions and the active pointer from durable storage.

        Falls back to a single default session when nothing usable is
        stored.
        """
        sessions = self._load_sessions()
        if sessions:
            stored_active = self._read(ACTIVE_SESSION_KEY)
            self._store = SessionStore(sessions)
            self._active_id = self._store.resolve_active(stored_active)
            if self._active_id != stored_active:
                logger.info(
                    "Stored active session %r not found, activating %r",
                    stored_active, self._active_id,
                )
                self._persist_active()
            logger.info("Restored %d session(s)", len(self._store))
            return

        self._store = SessionStore()
        self._store.create(DEFAULT_SESSION_ID, session_name(1))
        self._active_id = DEFAULT_SESSION_ID
        self._persist()
        logger.info("Started with a fresh default session")

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def submit(self, text: str) -> None:
        """Run ``text`` in the active session.

        Empty input, no active session, and submissions while another
        command is running are ignored. ``clear`` is handled locally.
        """
        stripped = text.strip()
        if not stripped or not self._active_id:
            return
        if self.is_busy:
            logger.info("Ignoring %r: a command is already running", stripped[:80])
            return
        if stripped == CLEAR_COMMAND:
            self.clear_active()
            self._pending_input = ""
            return

        session_id = self._active_id
        token = CancellationToken()
        self._history.push(text)
        self._store.append(session_id, Entry.command(text))
        self._pending_input = ""
        self._token = token
        self._inflight_session_id = session_id
        self._persist_sessions()

        try:
            try:
                result = await self._executor.run(text, token)
            except CommandCancelled:
                logger.info("Command cancelled: %s", text[:80])
                return
            except ExecutorError as e:
                logger.warning("Command failed: %s", e)
                entries = [Entry.error(f"{FAILURE_PREFIX}{e}")]
            except Exception as e:
                logger.exception("Unexpected executor failure")
                entries = [Entry.error(f"{FAILURE_PREFIX}{e}")]
            else:
                entries = result.to_entries()

            if token.is_cancelled:
                logger.debug("Discarding late result of cancelled command")
                return
            delivered = [e for e in entries if self._store.append(session_id, e)]
            if delivered:
                self._persist_sessions()
            elif entries:
                logger.info("Session %s closed before its command finished", session_id)
        finally:
            self._release(token)

    def cancel(self) -> bool:
        """Abort the in-flight command without waiting for it.

        Appends ``^C`` to the session that issued the command and returns
        to idle immediately. Returns False when nothing was running.
        """
        token = self._token
        if token is None:
            return False
        session_id = self._inflight_session_id
        token.cancel()
        self._release(token)
        self._pending_input = ""
        if session_id is not None and self._store.append(session_id, Entry.error(CANCEL_MARKER)):
            self._persist_sessions()
        return True

    def interrupt(self) -> None:
        """Ctrl+C: cancel when busy, otherwise abandon the typed line."""
        if self.is_busy:
            self.cancel()
            return
        if not self._active_id:
            return
        self._store.append(self._active_id, Entry.command(f"{self._pending_input}{CANCEL_MARKER}"))
        self._pending_input = ""
        self._history.reset()
        self._persist_sessions()

    def _release(self, token: CancellationToken) -> None:
        # A call finishing after cancel() must not clear a newer submission
        if self._token is token:
            self._token = None
            self._inflight_session_id = None

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    def create_session(self) -> Session:
        session = self._store.create(self._next_id(), session_name(len(self._store) + 1))
        self._active_id = session.id
        self._persist()
        logger.info("Created session %s (%s)", session.id, session.name)
        return session.model_copy(deep=True)

    def close_session(self, session_id: str) -> bool:
        """Remove a session. Refuses to close the last one."""
        if not self._store.delete(session_id):
            return False
        if session_id == self._active_id:
            self._active_id = self._store.resolve_active(None)
        self._persist()
        logger.info("Closed session %s", session_id)
        return True

    def switch_session(self, session_id: str) -> bool:
        """Make ``session_id`` active. An in-flight command keeps running."""
        if session_id not in self._store:
            return False
        if session_id != self._active_id:
            self._active_id = session_id
            self._persist_active()
        return True

    def clear_active(self) -> None:
        if self._store.clear(self._active_id):
            self._persist_sessions()

    def _next_id(self) -> str:
        candidate = max(int(self._clock() * 1000), self._last_id + 1)
        while str(candidate) in self._store:
            candidate += 1
        self._last_id = candidate
        return str(candidate)

    # ------------------------------------------------------------------
    # Input line
    # ------------------------------------------------------------------

    def update_input(self, text: str) -> None:
        """Record what the user typed; any edit ends history recall."""
        self._pending_input = text
        self._history.reset()

    def recall_previous(self) -> str:
        command = self._history.previous()
        if command is not None:
            self._pending_input = command
        return self._pending_input

    def recall_next(self) -> str:
        command = self._history.next()
        if command is not None:
            self._pending_input = command
        return self._pending_input

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _load_sessions(self) -> list[Session]:
        raw = self._read(SESSIONS_KEY)
        if raw is None:
            return []
        try:
            return load_sessions(raw)
        except PersistedStateError as e:
            logger.warning("Ignoring unreadable session state: %s", e)
            return []

    def _read(self, key: str) -> str | None:
        try:
            return self._storage.get(key)
        except StorageError as e:
            logger.warning("Failed to read %s: %s", key, e)
            return None

    def _persist(self) -> None:
        self._persist_sessions()
        self._persist_active()

    def _persist_sessions(self) -> None:
        if len(self._store):
            self._write(SESSIONS_KEY, dump_sessions(list(self._store)))

    def _persist_active(self) -> None:
        if self._active_id:
            self._write(ACTIVE_SESSION_KEY, self._active_id)

    def _write(self, key: str, value: str) -> None:
        try:
            self._storage.set(key, value)
        except StorageError as e:
            logger.warning("Failed to persist %s: %s", key, e)
