"""Session lifecycle management for tabshell.

Public API:
    SessionManager -- Orchestrator for commands, tabs and persistence
    SessionStore -- Ordered session collection
    HistoryNavigator -- Command recall list
"""

from tabshell.sessions.history import HistoryNavigator
from tabshell.sessions.manager import SessionManager
from tabshell.sessions.store import SessionStore

__all__ = ["HistoryNavigator", "SessionManager", "SessionStore"]
