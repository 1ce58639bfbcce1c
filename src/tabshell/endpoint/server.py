"""FastAPI HTTP server for the command execution service.

Receives one command per request, runs it through a ShellRunner, and
returns its captured output.

    GET  /health        -> {"status": "ok", "running": 0}
    POST /api/execute   <- {"command": "ls -la"}
                        -> {"stdout": "...", "stderr": "", "exitCode": 0}
                           or {"error": "...", "exitCode": 2}
    POST /api/cancel    -> {"message": "^C", "cancelled": true, "terminated": 1}
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from tabshell.domain.models import CANCEL_MARKER, ExecuteRequest
from tabshell.endpoint.runner import ShellRunner

logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    status: str = "ok"
    running: int = 0


class CancelResponse(BaseModel):
    message: str = CANCEL_MARKER
    cancelled: bool = True
    terminated: int = 0


def create_app(
    runner: ShellRunner | None = None,
    shell_command: str = "zsh",
    command_timeout: float | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        runner: Optional pre-configured ShellRunner (for testing).
        shell_command: Shell used as ``<shell> -c <command>``.
        command_timeout: Seconds before a command is killed (None: never).
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("Execution service started (shell=%s)", app.state.runner.shell_command)
        yield
        terminated = await app.state.runner.cancel_all()
        logger.info("Execution service stopped (%d command(s) killed)", terminated)

    app = FastAPI(
        title="tabshell execution service",
        description="Runs shell commands on behalf of tabshell sessions",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.runner = runner or ShellRunner(shell_command=shell_command, timeout=command_timeout)

    @app.exception_handler(RequestValidationError)
    async def invalid_request(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.debug("Rejected request to %s: %s", request.url.path, exc)
        return JSONResponse({"error": "Invalid JSON"}, status_code=400)

    @app.get("/health")
    async def health_check() -> HealthResponse:
        return HealthResponse(status="ok", running=app.state.runner.running_count)

    @app.post("/api/execute")
    async def execute(request: ExecuteRequest) -> JSONResponse:
        r: ShellRunner = app.state.runner
        result = await r.run(request.command)
        return JSONResponse(result.model_dump(by_alias=True, exclude_none=True))

    @app.post("/api/cancel")
    async def cancel() -> CancelResponse:
        r: ShellRunner = app.state.runner
        return CancelResponse(terminated=await r.cancel_all())

    return app


def main() -> None:
    """Entry point for running the execution service standalone."""
    from tabshell.config.settings import load_settings

    ep = load_settings().endpoint
    app = create_app(shell_command=ep.shell_command, command_timeout=ep.command_timeout)
    uvicorn.run(app, host=ep.host, port=ep.port)


if __name__ == "__main__":
    main()
