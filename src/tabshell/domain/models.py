"""Core domain models for the tabshell system.

These models represent the data flowing through the system: scrollback
entries, the sessions (tabs) that own them, and the normalized result
of a command returned by the execution service.
"""

from __future__ import annotations

import enum

from pydantic import BaseModel, ConfigDict, Field

PROMPT_MARKER = "$ "
CANCEL_MARKER = "^C"
CLEAR_COMMAND = "clear"


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class EntryKind(str, enum.Enum):
    """What a scrollback entry holds."""

    COMMAND = "command"  # Text the user submitted, prompt marker included
    OUTPUT = "output"  # Raw stdout from the execution service
    ERROR = "error"  # stderr, service errors, failures and ^C markers


# ---------------------------------------------------------------------------
# Scrollback Models
# ---------------------------------------------------------------------------


class Entry(BaseModel):
    """One atomic unit of scrollback content.

    Content is stored raw; output and error text may carry ANSI styling
    codes that are only interpreted at display time. Serialized with the
    kind under ``"type"``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    kind: EntryKind = Field(alias="type", description="command, output or error")
    content: str = Field(description="Literal entry text")

    @classmethod
    def command(cls, text: str) -> Entry:
        return cls(kind=EntryKind.COMMAND, content=f"{PROMPT_MARKER}{text}")

    @classmethod
    def output(cls, text: str) -> Entry:
        return cls(kind=EntryKind.OUTPUT, content=text)

    @classmethod
    def error(cls, text: str) -> Entry:
        return cls(kind=EntryKind.ERROR, content=text)


class Session(BaseModel):
    """An independent named scrollback, analogous to a terminal tab.

    Identity is ``id``. ``history`` only grows, except for an explicit
    full clear.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(min_length=1, description="Opaque unique identifier")
    name: str = Field(description="Display name, e.g. 'Terminal 2'")
    history: list[Entry] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Execution Service Models
# ---------------------------------------------------------------------------


class ExecuteRequest(BaseModel):
    command: str = Field(description="Shell command line to run")


class ExecutionResult(BaseModel):
    """Response body of the command execution service.

    Either ``error`` is set (the service ran the command and it failed),
    or ``stdout``/``stderr`` carry the streams, possibly both empty.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    stdout: str | None = Field(default=None)
    stderr: str | None = Field(default=None)
    error: str | None = Field(default=None)
    exit_code: int | None = Field(default=None, alias="exitCode")

    def to_entries(self) -> list[Entry]:
        """Scrollback entries this result contributes, in display order."""
        if self.error:
            return [Entry.error(self.error)]
        entries = []
        if self.stdout:
            entries.append(Entry.output(self.stdout))
        if self.stderr:
            entries.append(Entry.error(self.stderr))
        return entries
