"""One-shot shell command runner for the execution service.

Each command runs in a fresh ``<shell> -c <command>`` subprocess; no
state is carried between commands.
"""

from __future__ import annotations

import asyncio
import logging

from tabshell.domain.models import ExecutionResult

logger = logging.getLogger(__name__)

TIMEOUT_EXIT_CODE = 124


class ShellRunner:
    """Runs shell command lines as subprocesses and captures their output.

    Processes are tracked while they run so that ``cancel_all()`` can
    terminate them, and a caller that stops awaiting ``run()`` (client
    disconnect, cancelled task) takes its process down with it.
    """

    def __init__(self, shell_command: str = "zsh", timeout: float | None = None) -> None:
        self._shell_command = shell_command
        self._timeout = timeout
        self._running: set[asyncio.subprocess.Process] = set()

    @property
    def shell_command(self) -> str:
        return self._shell_command

    @property
    def running_count(self) -> int:
        return len(self._running)

    async def run(self, command: str) -> ExecutionResult:
        """Run ``command`` to completion.

        Returns:
            stdout/stderr/exitCode when the command exits with 0,
            otherwise ``error`` (stderr, or a generic message when stderr
            is empty) with the exit code.
        """
        try:
            proc = await asyncio.create_subprocess_exec(
                self._shell_command, "-c", command,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            logger.error("Failed to start %s: %s", self._shell_command, e)
            return ExecutionResult(error=str(e), exit_code=1)

        self._running.add(proc)
        logger.debug("Started pid=%d: %s", proc.pid, command[:80])
        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=self._timeout)
        except asyncio.TimeoutError:
            await self._kill(proc)
            logger.warning("Command timed out after %ss: %s", self._timeout, command[:80])
            return ExecutionResult(
                error=f"Command timed out after {self._timeout:g}s",
                exit_code=TIMEOUT_EXIT_CODE,
            )
        except asyncio.CancelledError:
            await self._kill(proc)
            raise
        finally:
            self._running.discard(proc)

        out = stdout.decode("utf-8", errors="replace")
        err = stderr.decode("utf-8", errors="replace")
        code = proc.returncode

        if code != 0:
            logger.info("Command exited with %s: %s", code, command[:80])
            return ExecutionResult(
                error=err or f"Command failed with exit code {code}",
                exit_code=code,
            )
        return ExecutionResult(stdout=out, stderr=err, exit_code=code)

    async def cancel_all(self) -> int:
        """Kill every running command. Returns how many were signalled."""
        procs = list(self._running)
        for proc in procs:
            await self._kill(proc)
        if procs:
            logger.info("Cancelled %d running command(s)", len(procs))
        return len(procs)

    @staticmethod
    async def _kill(proc: asyncio.subprocess.Process) -> None:
        if proc.returncode is not None:
            return
        try:
            proc.kill()
        except ProcessLookupError:
            return
        await proc.wait()
