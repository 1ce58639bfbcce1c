"""HTTP command executor backend.

Sends each command as a single JSON POST to the execution service.
"""

from __future__ import annotations

import logging

import httpx
from pydantic import ValidationError

from tabshell.domain.models import ExecutionResult
from tabshell.executor.base import (
    CancellationToken,
    CommandExecutor,
    ExecutorError,
    race_cancellation,
)

logger = logging.getLogger(__name__)


class HttpCommandExecutor(CommandExecutor):
    """Runs commands through the HTTP execution service."""

    backend_name = "http"

    def __init__(
        self,
        base_url: str = "http://localhost:3000",
        execute_path: str = "/api/execute",
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._execute_path = execute_path
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def connect(self) -> None:
        """Create the HTTP client."""
        if self._client is not None:
            return
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            transport=self._transport,
        )
        logger.info("Using execution service at %s", self._base_url)

    async def disconnect(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            logger.info("Disconnected from execution service")

    async def ping(self) -> bool:
        """Whether the service answers its health check."""
        if self._client is None:
            raise ExecutorError("Not connected to execution service", backend="http")
        try:
            resp = await self._client.get("/health")
            resp.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning("Health check against %s failed: %s", self._base_url, e)
            return False
        return True

    async def run(self, command: str, token: CancellationToken) -> ExecutionResult:
        """POST the command and wait for its result, or for cancellation."""
        if self._client is None:
            raise ExecutorError("Not connected to execution service", backend="http")
        logger.debug("Executing: %s", command[:80])
        return await race_cancellation(self._execute(command), token, backend="http")

    async def _execute(self, command: str) -> ExecutionResult:
        try:
            resp = await self._client.post(self._execute_path, json={"command": command})
        except httpx.HTTPError as e:
            raise ExecutorError(str(e) or type(e).__name__, backend="http") from e

        if not resp.is_success:
            raise ExecutorError(
                f"HTTP {resp.status_code}: {resp.reason_phrase}", backend="http"
            )

        try:
            return ExecutionResult.model_validate(resp.json())
        except (ValueError, ValidationError) as e:
            raise ExecutorError(f"Malformed response: {e}", backend="http") from e
