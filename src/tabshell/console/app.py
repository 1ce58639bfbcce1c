"""Interactive console front end.

A prompt_toolkit input line drives the SessionManager; scrollback is
printed with rich. The console is a thin shell around the manager: it
only translates keys and slash commands into manager calls and prints
whatever entries those calls produced.
"""

from __future__ import annotations

import asyncio
import logging
import signal

from prompt_toolkit import PromptSession
from prompt_toolkit.buffer import Buffer
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.styles import Style as PTStyle
from rich.console import Console
from rich.table import Table

from tabshell.clipboard import Clipboard
from tabshell.domain.models import CLEAR_COMMAND, EntryKind
from tabshell.render.ansi import render_entry
from tabshell.sessions.manager import SessionManager

logger = logging.getLogger(__name__)

PROMPT = "$ "
SLASH_COMMANDS = frozenset(
    {"/new", "/close", "/tab", "/tabs", "/clear", "/copy", "/quit", "/exit", "/help"}
)
HELP_TEXT = (
    "/new  /close [n]  /tab <n>  /tabs  /clear  /copy  /help  /quit\n"
    "Up/Down recall history, Ctrl+L clears, Ctrl+V pastes, Ctrl+C cancels"
)

# Results handed back by key bindings that need the prompt to close first
_INTERRUPT = "\x00interrupt"
_CLEAR = "\x00clear"


def is_slash_command(line: str) -> bool:
    """Whether ``line`` is a console command rather than a shell command.

    Only the known command words count, so paths like ``/bin/ls`` still
    reach the shell.
    """
    words = line.split(maxsplit=1)
    return bool(words) and words[0] in SLASH_COMMANDS


class ConsoleApp:
    """Tabbed shell console bound to a SessionManager."""

    def __init__(
        self,
        manager: SessionManager,
        console: Console | None = None,
        clipboard: Clipboard | None = None,
    ) -> None:
        self._manager = manager
        self._console = console or Console(highlight=False)
        self._clipboard = clipboard or Clipboard()
        self._shown: dict[str, int] = {}
        self._recalling = False

    async def run(self) -> None:
        """Read and dispatch input lines until /quit or Ctrl+D."""
        self._show_session(full=True)
        prompt_session = self._create_prompt_session()
        prompt_session.default_buffer.on_text_changed += self._on_text_changed

        while True:
            try:
                line = await prompt_session.prompt_async(
                    PROMPT, default=self._manager.pending_input
                )
            except EOFError:
                break

            if line == _INTERRUPT:
                self._manager.interrupt()
                self._show_session()
            elif line == _CLEAR:
                self._clear()
            elif is_slash_command(line):
                if not self.handle_slash_command(line.strip()):
                    break
            else:
                await self.execute(line)

    async def execute(self, line: str) -> None:
        """Submit ``line`` and wait for it, routing SIGINT to cancel()."""
        session_id = self._manager.active_session_id
        if not line.strip():
            return
        if line.strip() == CLEAR_COMMAND:
            await self._manager.submit(line)
            self._console.clear()
            self._shown[session_id] = 0
            return

        loop = asyncio.get_running_loop()
        try:
            loop.add_signal_handler(signal.SIGINT, self._manager.cancel)
            handler_installed = True
        except (NotImplementedError, RuntimeError):
            # No signal handlers off the main thread or on Windows
            handler_installed = False

        try:
            with self._console.status("Executing command...", spinner="dots"):
                await self._manager.submit(line)
        finally:
            if handler_installed:
                loop.remove_signal_handler(signal.SIGINT)

        if session_id == self._manager.active_session_id:
            self._show_session()

    def handle_slash_command(self, line: str) -> bool:
        """Run a console command. Returns False when the console should exit."""
        name, _, arg = line.partition(" ")
        arg = arg.strip()
        m = self._manager

        if name in ("/quit", "/exit"):
            return False
        if name == "/new":
            m.create_session()
            self._show_session(full=True)
        elif name == "/close":
            target = self._session_at(arg) if arg else m.active_session_id
            if target is None:
                self._console.print(f"[red]No tab {arg}[/]")
            elif not m.close_session(target):
                self._console.print("[dim]Cannot close the last session[/]")
            else:
                self._shown.pop(target, None)
                self._show_session(full=True)
        elif name == "/tab":
            target = self._session_at(arg)
            if target is None or not m.switch_session(target):
                self._console.print(f"[red]No tab {arg}[/]")
            else:
                self._show_session(full=True)
        elif name == "/tabs":
            self._print_tabs()
        elif name == "/clear":
            self._clear()
        elif name == "/copy":
            self._copy_last_output()
        else:
            self._console.print(HELP_TEXT, style="dim")
        return True

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _show_session(self, full: bool = False) -> None:
        session = self._manager.active_session
        if session is None:
            return
        if full:
            self._console.rule(session.name, style="dim")
            start = 0
        else:
            start = min(self._shown.get(session.id, 0), len(session.history))
        for entry in session.history[start:]:
            self._console.print(render_entry(entry))
        self._shown[session.id] = len(session.history)

    def _clear(self) -> None:
        self._manager.clear_active()
        self._console.clear()
        self._shown[self._manager.active_session_id] = 0

    def _print_tabs(self) -> None:
        table = Table(show_header=True, header_style="bold")
        table.add_column("#", justify="right")
        table.add_column("Name")
        table.add_column("Entries", justify="right")
        for i, session in enumerate(self._manager.sessions, start=1):
            marker = "*" if session.id == self._manager.active_session_id else ""
            table.add_row(f"{marker}{i}", session.name, str(len(session.history)))
        self._console.print(table)

    def _copy_last_output(self) -> None:
        session = self._manager.active_session
        for entry in reversed(session.history if session else []):
            if entry.kind is not EntryKind.COMMAND:
                if self._clipboard.write_text(entry.content):
                    self._console.print("[dim]Copied to clipboard[/]")
                return
        self._console.print("[dim]Nothing to copy[/]")

    def _session_at(self, position: str) -> str | None:
        ids = self._manager.session_ids
        try:
            index = int(position) - 1
        except ValueError:
            return None
        return ids[index] if 0 <= index < len(ids) else None

    def _toolbar(self) -> str:
        names = []
        for session in self._manager.sessions:
            if session.id == self._manager.active_session_id:
                names.append(f"[{session.name}]")
            else:
                names.append(f" {session.name} ")
        return " ".join(names)

    # ------------------------------------------------------------------
    # Input line
    # ------------------------------------------------------------------

    def _on_text_changed(self, buffer: Buffer) -> None:
        if not self._recalling:
            self._manager.update_input(buffer.text)

    def _load_recalled(self, buffer: Buffer, text: str) -> None:
        self._recalling = True
        try:
            buffer.text = text
            buffer.cursor_position = len(text)
        finally:
            self._recalling = False

    def _create_prompt_session(self) -> PromptSession:
        kb = KeyBindings()
        app = self

        @kb.add("up")
        def _(event):
            """Recall the previous command."""
            app._load_recalled(event.current_buffer, app._manager.recall_previous())

        @kb.add("down")
        def _(event):
            """Recall the next command."""
            app._load_recalled(event.current_buffer, app._manager.recall_next())

        @kb.add("c-c")
        def _(event):
            """Abandon the typed line."""
            event.app.exit(result=_INTERRUPT)

        @kb.add("c-l")
        def _(event):
            """Clear the active tab."""
            event.app.exit(result=_CLEAR)

        @kb.add("c-v")
        def _(event):
            """Paste clipboard text at the cursor."""
            text = app._clipboard.read_text()
            if text:
                event.current_buffer.insert_text(text)

        style = PTStyle.from_dict({
            "prompt": "ansiyellow",
            "bottom-toolbar": "noreverse ansigray",
        })

        return PromptSession(
            key_bindings=kb,
            style=style,
            bottom_toolbar=self._toolbar,
        )
