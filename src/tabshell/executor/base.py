"""Abstract base class for command execution backends.

All executors conform to this interface, enabling the session manager
to run commands against the HTTP execution service or an in-process
shell runner without changing any other code.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Awaitable

from tabshell.domain.models import ExecutionResult

logger = logging.getLogger(__name__)


class CancellationToken:
    """Cancellable handle for exactly one in-flight command.

    The owner calls ``cancel()``; the executor awaits ``wait()`` alongside
    its request and abandons the request when the token fires first.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    async def wait(self) -> None:
        await self._event.wait()


class CommandExecutor(ABC):
    """Abstract interface for running one shell command to completion.

    Executors are stateless per call: they never queue, retry, or track
    more than the request they were handed. Enforcing a single in-flight
    command is the caller's job.

    Example usage::

        async with HttpCommandExecutor(base_url="http://localhost:3000") as ex:
            token = CancellationToken()
            result = await ex.run("ls -la", token)
    """

    backend_name = "base"

    @abstractmethod
    async def connect(self) -> None:
        """Acquire whatever the backend needs (HTTP client, runner).

        Raises:
            ExecutorError: If the backend cannot be prepared.
        """
        ...

    @abstractmethod
    async def disconnect(self) -> None:
        """Release backend resources. Safe to call multiple times."""
        ...

    @abstractmethod
    async def run(self, command: str, token: CancellationToken) -> ExecutionResult:
        """Execute ``command`` and return the service's result.

        Args:
            command: The literal command line to run.
            token: Cancellation handle. If it fires before the command
                   completes, the request is abandoned.

        Returns:
            The normalized ExecutionResult. A service-reported failure is
            a successful call whose result has ``error`` set.

        Raises:
            CommandCancelled: The token fired before a result arrived.
            ExecutorError: Transport failure, non-2xx status, or a
                           malformed response.
        """
        ...

    async def __aenter__(self) -> CommandExecutor:
        await self.connect()
        return self

    async def __aexit__(self, exc_type: type | None, exc_val: Exception | None, exc_tb: object) -> None:
        await self.disconnect()


async def race_cancellation(
    aw: Awaitable[ExecutionResult], token: CancellationToken, backend: str = ""
) -> ExecutionResult:
    """Await ``aw`` unless ``token`` fires first.

    The losing side is cancelled and awaited so no task is left running.

    Raises:
        CommandCancelled: If the token fired before ``aw`` finished.
    """
    if token.is_cancelled:
        if asyncio.iscoroutine(aw):
            aw.close()
        raise CommandCancelled(backend=backend)

    work = asyncio.ensure_future(aw)
    watcher = asyncio.ensure_future(token.wait())
    try:
        await asyncio.wait({work, watcher}, return_when=asyncio.FIRST_COMPLETED)
    except asyncio.CancelledError:
        work.cancel()
        raise
    finally:
        watcher.cancel()

    if token.is_cancelled:
        if not work.done():
            work.cancel()
        try:
            await work
        except (asyncio.CancelledError, Exception):
            # A late result or error from the abandoned request is dropped
            pass
        logger.debug("Abandoned in-flight command (%s)", backend or "executor")
        raise CommandCancelled(backend=backend)
    return work.result()


class ExecutorError(Exception):
    """Raised when a command could not be executed or its result read."""

    def __init__(self, message: str, backend: str = "") -> None:
        super().__init__(message)
        self.backend = backend


class CommandCancelled(Exception):
    """Raised when the caller cancelled the command before it completed."""

    def __init__(self, message: str = "Command cancelled", backend: str = "") -> None:
        super().__init__(message)
        self.backend = backend
