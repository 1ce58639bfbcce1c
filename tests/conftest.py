"""Shared test fixtures for the tabshell test suite.

Provides common fixtures used across unit tests: sample sessions,
in-memory storage, and an executor whose calls stay in flight until the
test decides how they end.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable

import pytest

from tabshell.domain.models import Entry, ExecutionResult, Session
from tabshell.executor.base import (
    CancellationToken,
    CommandExecutor,
    race_cancellation,
)
from tabshell.sessions.manager import SessionManager
from tabshell.storage.memory_backend import MemoryStorage


# ---------------------------------------------------------------------------
# Executor Fixtures
# ---------------------------------------------------------------------------


class ControlledExecutor(CommandExecutor):
    """Executor whose calls block until the test resolves or fails them.

    With ``honor_cancellation=False`` it behaves like a backend that
    cannot abort: the call only returns once the test resolves it, even
    after the token fired.
    """

    backend_name = "controlled"

    def __init__(self, honor_cancellation: bool = True) -> None:
        self.honor_cancellation = honor_cancellation
        self.calls: list[str] = []
        self.connected = False
        self._pending: list[asyncio.Future[ExecutionResult]] = []

    async def connect(self) -> None:
        self.connected = True

    async def disconnect(self) -> None:
        self.connected = False

    async def run(self, command: str, token: CancellationToken) -> ExecutionResult:
        future: asyncio.Future[ExecutionResult] = asyncio.get_running_loop().create_future()
        self.calls.append(command)
        self._pending.append(future)
        if self.honor_cancellation:
            return await race_cancellation(future, token, backend=self.backend_name)
        return await future

    def resolve(self, result: ExecutionResult, index: int = -1) -> None:
        future = self._pending[index]
        if not future.done():
            future.set_result(result)

    def fail(self, exc: Exception, index: int = -1) -> None:
        future = self._pending[index]
        if not future.done():
            future.set_exception(exc)


@pytest.fixture
def controlled_executor() -> ControlledExecutor:
    return ControlledExecutor()


@pytest.fixture
def stubborn_executor() -> ControlledExecutor:
    """A ControlledExecutor that ignores cancellation."""
    return ControlledExecutor(honor_cancellation=False)


@pytest.fixture
def settle() -> Callable[[], Awaitable[None]]:
    """Let pending tasks run up to their next real suspension point."""

    async def _settle() -> None:
        for _ in range(10):
            await asyncio.sleep(0)

    return _settle


# ---------------------------------------------------------------------------
# Session Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_sessions() -> list[Session]:
    """Two sessions with a little scrollback each."""
    return [
        Session(
            id="1",
            name="Terminal 1",
            history=[
                Entry.command("ls"),
                Entry.output("file1.txt  file2.txt\n"),
            ],
        ),
        Session(
            id="1735689600000",
            name="Terminal 2",
            history=[
                Entry.command("cat nonexistent"),
                Entry.error("cat: nonexistent: No such file or directory\n"),
                Entry.command("ls --color=always"),
                Entry.output("\x1b[34mdir\x1b[0m\n"),
            ],
        ),
    ]


@pytest.fixture
def memory_storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def manager(controlled_executor: ControlledExecutor, memory_storage: MemoryStorage) -> SessionManager:
    """A restored SessionManager with the default session active."""
    m = SessionManager(executor=controlled_executor, storage=memory_storage)
    m.restore()
    return m
