"""OS query adapters: run the platform's discovery tools and return raw text."""

import logging
import subprocess
import sys
from abc import ABC, abstractmethod

from portkill.errors import ProcessNotFoundError, QueryIOError

logger = logging.getLogger(__name__)

DEFAULT_QUERY_TIMEOUT = 5.0
MIN_QUERY_TIMEOUT = 0.5

LSOF_WARNING = "WARNING:"
TASKLIST_NO_MATCH = "INFO: No tasks"


class QueryAdapter(ABC):
    """
    Capability interface for querying the OS about sockets and processes.

    Implementations return the tool output verbatim. They only recognize the
    tool's own "nothing matched" signals; everything else is left to the parsers.
    """

    def __init__(self, timeout: float = DEFAULT_QUERY_TIMEOUT) -> None:
        """
        Initialize the adapter.

        Args:
            timeout: Upper bound for a single external command (seconds).
        """
        self._timeout = max(MIN_QUERY_TIMEOUT, timeout)

    @property
    def timeout(self) -> float:
        """Get the per-command timeout."""
        return self._timeout

    @abstractmethod
    def list_socket_owners(self, port: int) -> str:
        """Return raw text listing processes with sockets on ``port``."""

    @abstractmethod
    def list_process_attributes(self, pid: int) -> str:
        """Return raw text describing process ``pid``."""

    def _run(self, args: list[str]) -> subprocess.CompletedProcess[str]:
        """Run an external command, mapping every launch failure to QueryIOError."""
        logger.debug("Running %s", " ".join(args))
        try:
            return subprocess.run(
                args,
                capture_output=True,
                text=True,
                errors="replace",
                timeout=self._timeout,
                check=False,
            )
        except FileNotFoundError as exc:
            raise QueryIOError(f"Failed to execute {args[0]}: command not found") from exc
        except subprocess.TimeoutExpired as exc:
            raise QueryIOError(
                f"{args[0]} did not finish within {self._timeout:g} seconds"
            ) from exc
        except OSError as exc:
            raise QueryIOError(f"Failed to execute {args[0]}: {exc}") from exc

    @staticmethod
    def _failure(result: subprocess.CompletedProcess[str]) -> QueryIOError:
        tool = result.args[0]
        stderr = (result.stderr or "").strip()
        detail = stderr or f"exit status {result.returncode}"
        return QueryIOError(f"{tool} failed: {detail}")


class PosixQueryAdapter(QueryAdapter):
    """
    Adapter for macOS and Linux, backed by lsof and ps.

    Process attributes come from two ps calls: one row of
    ``user pcpu pmem lstart args`` followed by a line holding only the
    process name, since names may contain spaces.
    """

    def __init__(self, timeout: float = DEFAULT_QUERY_TIMEOUT) -> None:
        super().__init__(timeout)
        # procps truncates user names to 8 characters unless given a width
        self._user_column = "user:32=" if sys.platform.startswith("linux") else "user="

    def list_socket_owners(self, port: int) -> str:
        result = self._run(["lsof", "-w", "-i", f":{port}", "-P", "-n"])
        if result.returncode == 0:
            return result.stdout
        # lsof exits 1 without output when nothing matches; warnings alone don't change that
        if result.returncode == 1 and not result.stdout.strip() and _only_warnings(result.stderr):
            return ""
        raise self._failure(result)

    def list_process_attributes(self, pid: int) -> str:
        attributes = self._run(
            ["ps", "-p", str(pid), "-o", f"{self._user_column},pcpu=,pmem=,lstart=,args="]
        )
        if attributes.returncode == 1 and not attributes.stdout.strip():
            raise ProcessNotFoundError(pid)
        if attributes.returncode != 0 or not attributes.stdout.strip():
            raise self._failure(attributes)

        name = self._run(["ps", "-p", str(pid), "-o", "ucomm="])
        # The process may exit between the two calls; the parser then names it from args.
        if name.returncode != 0:
            return attributes.stdout
        return attributes.stdout.rstrip("\n") + "\n" + name.stdout


def _only_warnings(stderr: str | None) -> bool:
    """True when stderr holds nothing but lsof warnings (or is empty).

    Indented lines continue the warning above them.
    """
    lines = [line for line in (stderr or "").splitlines() if line.strip()]
    return all(LSOF_WARNING in line or line[0].isspace() for line in lines)


class WindowsQueryAdapter(QueryAdapter):
    """Adapter for Windows, backed by netstat and tasklist."""

    def list_socket_owners(self, port: int) -> str:
        # netstat -ano has pids but no names; tasklist rows supply the names.
        sockets = self._run(["netstat", "-ano"])
        if sockets.returncode != 0:
            raise self._failure(sockets)
        tasks = self._run(["tasklist", "/FO", "CSV", "/NH"])
        if tasks.returncode != 0:
            raise self._failure(tasks)
        return sockets.stdout + "\n" + tasks.stdout

    def list_process_attributes(self, pid: int) -> str:
        result = self._run(["tasklist", "/FI", f"PID eq {pid}", "/FO", "CSV", "/NH", "/V"])
        if result.returncode != 0:
            raise self._failure(result)
        if not result.stdout.strip() or result.stdout.lstrip().startswith(TASKLIST_NO_MATCH):
            raise ProcessNotFoundError(pid)
        return result.stdout
