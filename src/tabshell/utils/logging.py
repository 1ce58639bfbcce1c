"""Logging setup utilities for tabshell.

Configures the ``tabshell`` logger hierarchy from the logging section of
the settings. The interactive console owns the terminal, so it asks for
stderr output to be limited to warnings.
"""

from __future__ import annotations

import logging
import sys

from tabshell.config.settings import LoggingConfig


def setup_logging(config: LoggingConfig | None = None, quiet_stderr: bool = False) -> None:
    """Configure logging for the tabshell application.

    Args:
        config: Logging configuration. If None, uses defaults
                (INFO level, stderr output).
        quiet_stderr: Only let WARNING and above through to stderr. The
                      optional log file still receives everything at the
                      configured level.
    """
    if config is None:
        config = LoggingConfig()

    level = getattr(logging, config.level.upper(), logging.INFO)
    app_logger = logging.getLogger("tabshell")
    app_logger.setLevel(level)

    # Re-running setup (tests, repeated CLI calls) must not stack handlers
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(config.format)

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(formatter)
    if quiet_stderr:
        stderr_handler.setLevel(max(level, logging.WARNING))
    app_logger.addHandler(stderr_handler)

    if config.file:
        file_handler = logging.FileHandler(config.file)
        file_handler.setFormatter(formatter)
        app_logger.addHandler(file_handler)

    app_logger.debug("Logging initialized at %s level", config.level)
