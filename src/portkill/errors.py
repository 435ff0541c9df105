"""Exceptions raised by portkill."""


class PortKillError(Exception):
    """Base class for all portkill errors."""


class InvalidInputError(PortKillError, ValueError):
    """A port or pid argument is malformed or out of range."""


class QueryIOError(PortKillError):
    """An external query could not be run or its output could not be read."""


class ProcessNotFoundError(PortKillError):
    """The process no longer exists."""

    def __init__(self, pid: int) -> None:
        super().__init__(f"Process {pid} not found")
        self.pid = pid


class CommandError(PortKillError):
    """A boundary command failed; the message is shown to the caller as-is."""
