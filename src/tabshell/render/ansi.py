"""ANSI-to-rich rendering of scrollback entries.

Entries are stored raw; escape codes are only decoded here, at display
time.
"""

from __future__ import annotations

from rich.text import Text

from tabshell.domain.models import Entry, EntryKind

COMMAND_STYLE = "yellow"
ERROR_STYLE = "red"
OUTPUT_STYLE = "green"


def render_ansi(raw: str, style: str = "") -> Text:
    """Decode colour/style escape sequences into a rich Text.

    Codes rich does not understand (cursor movement and the like) are
    dropped rather than printed.
    """
    text = Text.from_ansi(raw, style=style)
    text.rstrip()
    return text


def render_entry(entry: Entry) -> Text:
    """Style one scrollback entry for the console."""
    if entry.kind is EntryKind.COMMAND:
        # Commands are echoed literally, never interpreted
        return Text(entry.content, style=COMMAND_STYLE)
    if entry.kind is EntryKind.ERROR:
        return render_ansi(entry.content, style=ERROR_STYLE)
    return render_ansi(entry.content, style=OUTPUT_STYLE)
