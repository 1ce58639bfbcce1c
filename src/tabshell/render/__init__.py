"""Display-time rendering of raw entry text."""

from tabshell.render.ansi import render_ansi, render_entry

__all__ = ["render_ansi", "render_entry"]
