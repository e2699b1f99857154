"""Exception types raised by the console core."""

from __future__ import annotations


class ConsoleError(Exception):
    """Base class for console errors."""


class EmptyBatchError(ConsoleError):
    """A submission contained no executable commands."""

    def __init__(self, message: str = "No commands to execute.") -> None:
        super().__init__(message)


NoCommandsError = EmptyBatchError


class BatchInProgressError(ConsoleError):
    """A batch was submitted while the previous one is still running."""

    def __init__(self, message: str = "A batch is already running for this session.") -> None:
        super().__init__(message)


class CommandError(ConsoleError):
    """A single command failed; carries the user-facing message."""
