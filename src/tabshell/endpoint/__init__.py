"""Command execution service for tabshell.

The server half of the system: an HTTP endpoint that runs each command
it receives in a fresh shell subprocess and returns the captured output.
Sessions, history and scrollback all live on the client side.
"""
