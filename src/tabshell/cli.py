"""Command-line interface for tabshell.

Provides the main entry point for the interactive console, the
execution service, one-shot command runs, and session inspection.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="tabshell",
        description="Tabbed shell sessions over a command-execution service",
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=None,
        help="Path to YAML configuration file (default: config/tabshell.yaml)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    console_parser = subparsers.add_parser("console", help="Start the interactive console")
    console_parser.add_argument(
        "--ephemeral", action="store_true",
        help="Keep sessions in memory only (nothing is read or written)",
    )

    subparsers.add_parser("serve", help="Start the HTTP command execution service")

    exec_parser = subparsers.add_parser(
        "exec", help="Run one command in a persisted session and print the result",
    )
    exec_parser.add_argument("line", help="Command line to run")
    exec_parser.add_argument(
        "--session", type=str, default=None,
        help="Session id to run in (default: the active session)",
    )

    subparsers.add_parser("sessions", help="List persisted sessions")

    return parser.parse_args(argv)


async def _run_console(settings, ephemeral: bool) -> None:
    """Restore sessions and hand the terminal to the console."""
    from tabshell.console.app import ConsoleApp
    from tabshell.executor import create_executor
    from tabshell.sessions.history import HistoryNavigator
    from tabshell.sessions.manager import SessionManager
    from tabshell.storage import MemoryStorage, create_storage

    storage = MemoryStorage() if ephemeral else create_storage(settings)
    manager = SessionManager(
        executor=create_executor(settings),
        storage=storage,
        history=HistoryNavigator(limit=settings.history.limit),
    )
    async with manager:
        await ConsoleApp(manager).run()


async def _run_once(settings, line: str, session_id: str | None) -> int:
    """Submit one command through the session manager and print its entries."""
    from rich.console import Console

    from tabshell.executor import create_executor
    from tabshell.render.ansi import render_entry
    from tabshell.sessions.manager import SessionManager
    from tabshell.storage import create_storage

    console = Console(highlight=False)
    manager = SessionManager(executor=create_executor(settings), storage=create_storage(settings))
    async with manager:
        previous = manager.active_session_id
        if session_id is not None and not manager.switch_session(session_id):
            console.print(f"[red]Unknown session: {session_id}[/]")
            return 1
        target = manager.active_session_id
        before = len(manager.get_session(target).history)
        try:
            await manager.submit(line)
        finally:
            # The console keeps opening on the tab that was active before
            manager.switch_session(previous)
        session = manager.get_session(target)
        for entry in session.history[before:]:
            console.print(render_entry(entry))
    return 0


def _list_sessions(settings) -> None:
    """Print the persisted sessions without modifying them."""
    from rich.console import Console
    from rich.table import Table

    from tabshell.sessions.persistence import PersistedStateError, load_sessions
    from tabshell.storage import ACTIVE_SESSION_KEY, SESSIONS_KEY, StorageError, create_storage

    console = Console()
    storage = create_storage(settings)
    try:
        raw = storage.get(SESSIONS_KEY)
        active = storage.get(ACTIVE_SESSION_KEY)
    except StorageError as e:
        console.print(f"[red]{e}[/]")
        return
    if raw is None:
        console.print("No saved sessions.")
        return
    try:
        sessions = load_sessions(raw)
    except PersistedStateError as e:
        console.print(f"[red]Saved sessions are unreadable: {e}[/]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Active")
    table.add_column("Id")
    table.add_column("Name")
    table.add_column("Entries", justify="right")
    for session in sessions:
        table.add_row(
            "*" if session.id == active else "",
            session.id,
            session.name,
            str(len(session.history)),
        )
    console.print(table)


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the tabshell CLI."""
    args = parse_args(argv)

    if args.command is None:
        parse_args(["--help"])
        return

    from tabshell.config.settings import load_settings
    from tabshell.utils.logging import setup_logging

    settings = load_settings(args.config)

    if args.verbose:
        settings.logging.level = "DEBUG"

    setup_logging(settings.logging, quiet_stderr=args.command in ("console", "exec"))

    if args.command == "console":
        logger.info("Starting console")
        asyncio.run(_run_console(settings, ephemeral=args.ephemeral))

    elif args.command == "serve":
        logger.info("Starting execution service")
        from tabshell.endpoint.server import create_app
        import uvicorn
        ep = settings.endpoint
        app = create_app(
            shell_command=ep.shell_command,
            command_timeout=ep.command_timeout,
        )
        uvicorn.run(
            app,
            host=ep.host,
            port=ep.port,
        )

    elif args.command == "exec":
        raise SystemExit(asyncio.run(_run_once(settings, args.line, args.session)))

    elif args.command == "sessions":
        _list_sessions(settings)


if __name__ == "__main__":
    main()
