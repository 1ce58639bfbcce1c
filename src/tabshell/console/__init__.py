"""Interactive terminal front end for tabshell."""

from tabshell.console.app import ConsoleApp

__all__ = ["ConsoleApp"]
