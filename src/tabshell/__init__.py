"""tabshell -- Tabbed shell sessions over a command-execution service.

This package lets a user drive several independent shell sessions, each
with its own scrollback of commands and outputs. Commands run one at a
time through a pluggable executor (an HTTP execution service or an
in-process shell runner), can be cancelled mid-flight, and session
history survives restarts through a durable key-value store.
"""

__version__ = "0.1.0"
