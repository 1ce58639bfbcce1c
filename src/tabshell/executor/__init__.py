"""Command execution module for tabshell.

Runs one command at a time against pluggable backends: the HTTP
execution service, or an in-process shell runner.

Public API:
    CommandExecutor -- Abstract base class
    CancellationToken -- Handle for aborting one in-flight command
    HttpCommandExecutor -- HTTP backend for the execution service
    LocalCommandExecutor -- In-process subprocess backend
"""

from tabshell.executor.base import (
    CancellationToken,
    CommandCancelled,
    CommandExecutor,
    ExecutorError,
)

__all__ = [
    "CancellationToken",
    "CommandCancelled",
    "CommandExecutor",
    "ExecutorError",
    "HttpCommandExecutor",
    "LocalCommandExecutor",
    "create_executor",
]


def __getattr__(name: str) -> type:
    """Lazy import for concrete implementations that require external deps."""
    if name == "HttpCommandExecutor":
        from tabshell.executor.http_backend import HttpCommandExecutor
        return HttpCommandExecutor
    if name == "LocalCommandExecutor":
        from tabshell.executor.local_backend import LocalCommandExecutor
        return LocalCommandExecutor
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def create_executor(settings) -> CommandExecutor:
    """Build the executor selected by ``settings.executor.backend``."""
    if settings.executor.backend == "local":
        from tabshell.executor.local_backend import LocalCommandExecutor
        return LocalCommandExecutor(
            shell_command=settings.endpoint.shell_command,
            timeout=settings.endpoint.command_timeout,
        )
    from tabshell.executor.http_backend import HttpCommandExecutor
    return HttpCommandExecutor(
        base_url=settings.executor.base_url,
        execute_path=settings.executor.execute_path,
        timeout=settings.executor.timeout,
    )
