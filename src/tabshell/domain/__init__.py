"""Domain models for tabshell.

This package contains the core data structures, enumerations, and
constants used throughout the system. All models use Pydantic v2 for
validation and serialization.
"""

from tabshell.domain.models import (
    CANCEL_MARKER,
    CLEAR_COMMAND,
    PROMPT_MARKER,
    Entry,
    EntryKind,
    ExecuteRequest,
    ExecutionResult,
    Session,
)

__all__ = [
    "CANCEL_MARKER",
    "CLEAR_COMMAND",
    "PROMPT_MARKER",
    "Entry",
    "EntryKind",
    "ExecuteRequest",
    "ExecutionResult",
    "Session",
]
