"""System clipboard access for paste-into-input and copy-from-scrollback.

Clipboard trouble (no display, missing xclip/wl-copy, permission
errors) is never fatal: it is logged and the operation becomes a no-op.
"""

from __future__ import annotations

import logging

import pyperclip

logger = logging.getLogger(__name__)


class Clipboard:
    def read_text(self) -> str:
        """Current clipboard text, or "" if it cannot be read."""
        try:
            return pyperclip.paste() or ""
        except pyperclip.PyperclipException as e:
            logger.warning("Paste not supported or permission denied: %s", e)
            return ""

    def write_text(self, text: str) -> bool:
        """Copy ``text`` to the clipboard. Returns False on failure."""
        if not text:
            return False
        try:
            pyperclip.copy(text)
        except pyperclip.PyperclipException as e:
            logger.warning("Copy failed: %s", e)
            return False
        return True
