"""Tests for the ShellRunner, using the system /bin/sh."""

from __future__ import annotations

import asyncio

import pytest

from tabshell.endpoint.runner import TIMEOUT_EXIT_CODE, ShellRunner


@pytest.fixture
def runner() -> ShellRunner:
    return ShellRunner(shell_command="/bin/sh")


class TestShellRunner:
    @pytest.mark.asyncio
    async def test_success_returns_streams(self, runner: ShellRunner) -> None:
        result = await runner.run("echo out; echo warn 1>&2")
        assert result.stdout == "out\n"
        assert result.stderr == "warn\n"
        assert result.exit_code == 0
        assert result.error is None

    @pytest.mark.asyncio
    async def test_failure_reports_stderr_as_error(self, runner: ShellRunner) -> None:
        result = await runner.run("echo nope 1>&2; exit 3")
        assert result.error == "nope\n"
        assert result.exit_code == 3
        assert result.stdout is None

    @pytest.mark.asyncio
    async def test_failure_without_stderr_gets_generic_message(self, runner: ShellRunner) -> None:
        result = await runner.run("exit 2")
        assert result.error == "Command failed with exit code 2"
        assert result.exit_code == 2

    @pytest.mark.asyncio
    async def test_ansi_codes_pass_through(self, runner: ShellRunner) -> None:
        result = await runner.run(r"printf '\033[31mred\033[0m'")
        assert result.stdout == "\x1b[31mred\x1b[0m"

    @pytest.mark.asyncio
    async def test_missing_shell(self) -> None:
        result = await ShellRunner(shell_command="/nonexistent/shell").run("ls")
        assert result.error
        assert result.exit_code == 1

    @pytest.mark.asyncio
    async def test_timeout_kills_command(self) -> None:
        runner = ShellRunner(shell_command="/bin/sh", timeout=0.2)
        result = await runner.run("sleep 5")
        assert result.exit_code == TIMEOUT_EXIT_CODE
        assert result.error == "Command timed out after 0.2s"
        assert runner.running_count == 0

    @pytest.mark.asyncio
    async def test_cancel_all_kills_running(self, runner: ShellRunner) -> None:
        task = asyncio.create_task(runner.run("sleep 5"))
        for _ in range(50):
            if runner.running_count:
                break
            await asyncio.sleep(0.02)
        assert runner.running_count == 1

        assert await runner.cancel_all() == 1
        result = await asyncio.wait_for(task, timeout=2.0)
        assert result.error is not None
        assert runner.running_count == 0

    @pytest.mark.asyncio
    async def test_cancelling_caller_kills_process(self, runner: ShellRunner) -> None:
        task = asyncio.create_task(runner.run("sleep 5"))
        for _ in range(50):
            if runner.running_count:
                break
            await asyncio.sleep(0.02)
        proc = next(iter(runner._running))

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert proc.returncode is not None
        assert runner.running_count == 0

    @pytest.mark.asyncio
    async def test_cancel_all_when_idle(self, runner: ShellRunner) -> None:
        assert await runner.cancel_all() == 0
