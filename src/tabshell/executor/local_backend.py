"""In-process command executor backend.

Runs commands directly through a ShellRunner instead of going over HTTP.
Useful when the console and the shell live on the same machine.
"""

from __future__ import annotations

import logging

from tabshell.domain.models import ExecutionResult
from tabshell.endpoint.runner import ShellRunner
from tabshell.executor.base import (
    CancellationToken,
    CommandExecutor,
    ExecutorError,
    race_cancellation,
)

logger = logging.getLogger(__name__)


class LocalCommandExecutor(CommandExecutor):
    """Runs commands in local subprocesses.

    Cancelling the token cancels the runner's await, which kills the
    child process.
    """

    backend_name = "local"

    def __init__(
        self,
        shell_command: str = "zsh",
        timeout: float | None = None,
        runner: ShellRunner | None = None,
    ) -> None:
        self._runner = runner or ShellRunner(shell_command=shell_command, timeout=timeout)
        self._connected = False

    async def connect(self) -> None:
        self._connected = True
        logger.info("Running commands locally with %s", self._runner.shell_command)

    async def disconnect(self) -> None:
        if self._connected:
            await self._runner.cancel_all()
            self._connected = False

    async def run(self, command: str, token: CancellationToken) -> ExecutionResult:
        if not self._connected:
            raise ExecutorError("Local executor is not connected", backend="local")
        return await race_cancellation(self._runner.run(command), token, backend="local")
