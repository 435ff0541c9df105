"""Data models for portkill."""

from dataclasses import dataclass
from enum import Enum


@dataclass(slots=True, frozen=True)
class ProcessBinding:
    """A process confirmed to own a socket on the queried port."""

    pid: int
    name: str
    port: int

    def to_dict(self) -> dict[str, str]:
        """Serialize with string values, as handed to the caller."""
        return {"pid": str(self.pid), "name": self.name, "port": str(self.port)}


@dataclass(slots=True, frozen=True)
class ProcessDetail:
    """
    Extended metadata for a single process.

    Optional fields are None when the OS withholds them (insufficient
    privilege, not reported on this platform, or the process exited).
    """

    pid: int
    name: str
    port: int | None = None
    user: str | None = None
    command: str | None = None
    cpu_usage: str | None = None  # e.g. "5.2%"
    memory_usage: str | None = None  # "1.3%" on POSIX, "45,000 K" on Windows
    start_time: str | None = None

    def to_dict(self) -> dict[str, str | None]:
        return {
            "pid": str(self.pid),
            "name": self.name,
            "port": str(self.port) if self.port is not None else None,
            "user": self.user,
            "command": self.command,
            "cpu_usage": self.cpu_usage,
            "memory_usage": self.memory_usage,
            "start_time": self.start_time,
        }


@dataclass(slots=True, frozen=True)
class PortCheckResult:
    """Outcome of a single port query."""

    is_occupied: bool
    processes: tuple[ProcessBinding, ...]
    error: str | None = None

    @classmethod
    def found(cls, processes: list[ProcessBinding]) -> "PortCheckResult":
        """Build a result from parsed bindings; occupied iff any were found."""
        return cls(is_occupied=bool(processes), processes=tuple(processes))

    @classmethod
    def failed(cls, message: str) -> "PortCheckResult":
        """Build a result for a query that could not be performed."""
        return cls(is_occupied=False, processes=(), error=message)

    def to_dict(self) -> dict:
        return {
            "is_occupied": self.is_occupied,
            "processes": [binding.to_dict() for binding in self.processes],
            "error": self.error,
        }


class TerminationMode(Enum):
    """How a process should be asked to exit."""

    GRACEFUL = "graceful"
    FORCEFUL = "forceful"


class TerminationStatus(Enum):
    """Classification of a termination attempt."""

    TERMINATED = "terminated"
    ALREADY_EXITED = "already_exited"
    PERMISSION_DENIED = "permission_denied"
    UNSUPPORTED = "unsupported"
    FAILED = "failed"


@dataclass(slots=True, frozen=True)
class TerminationOutcome:
    """Result of one termination request."""

    pid: int
    mode: TerminationMode
    status: TerminationStatus
    reason: str | None = None  # OS text, set for FAILED

    @property
    def succeeded(self) -> bool:
        """True when the process is gone, whoever ended it."""
        return self.status in (TerminationStatus.TERMINATED, TerminationStatus.ALREADY_EXITED)

    @property
    def message(self) -> str:
        """Human-readable description of the outcome."""
        pid = self.pid
        if self.status is TerminationStatus.TERMINATED:
            if self.mode is TerminationMode.GRACEFUL:
                return f"Process {pid} terminated gracefully"
            return f"Process {pid} killed successfully"
        if self.status is TerminationStatus.ALREADY_EXITED:
            return f"Process {pid} has already exited"
        if self.status is TerminationStatus.PERMISSION_DENIED:
            return f"Permission denied: cannot signal process {pid}"
        if self.status is TerminationStatus.UNSUPPORTED:
            return f"Graceful termination is not supported for process {pid} on this platform"
        return f"Failed to terminate process {pid}: {self.reason}"
