"""Boundary operations invoked by a front end, and a name-based dispatcher.

Every operation takes loosely typed caller input (strings or ints), performs
one blocking OS round trip, and returns a plain payload. Failures reach the
caller as strings: ``check_port`` puts them in its ``error`` field, the other
operations raise CommandError.
"""

import inspect
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from portkill.detail import ProcessDetailFetcher, parse_pid
from portkill.errors import CommandError, InvalidInputError, PortKillError
from portkill.models import PortCheckResult, TerminationMode
from portkill.platforms import Platform, current_platform
from portkill.resolver import PortResolver, parse_port
from portkill.terminator import ProcessTerminator

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class CommandResponse:
    """Reply to one invoked command: a result payload or an error string."""

    ok: bool
    result: Any = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"ok": self.ok, "result": self.result, "error": self.error}


class CommandHandler:
    """Implements the boundary operations on top of the core components."""

    def __init__(
        self,
        platform: Platform | None = None,
        terminator: ProcessTerminator | None = None,
    ) -> None:
        platform = platform or current_platform()
        self._resolver = PortResolver(platform)
        self._fetcher = ProcessDetailFetcher(platform)
        self._terminator = terminator or ProcessTerminator(
            supports_graceful=platform.supports_graceful
        )

    def check_port(self, port: str | int) -> dict:
        """Resolve the owners of ``port``. Never raises."""
        try:
            port_num = parse_port(port)
        except InvalidInputError as exc:
            return PortCheckResult.failed(str(exc)).to_dict()
        return self._resolver.resolve(port_num).to_dict()

    def kill_process(self, pid: str | int) -> str:
        """Forcefully terminate ``pid``."""
        return self._terminate(pid, TerminationMode.FORCEFUL)

    def graceful_kill_process(self, pid: str | int) -> str:
        """Ask ``pid`` to shut down cooperatively."""
        return self._terminate(pid, TerminationMode.GRACEFUL)

    def get_process_detail(self, pid: str | int, port: str | int | None = None) -> dict:
        """Describe ``pid``; ``port`` is echoed back from the binding that led here."""
        try:
            pid_num = parse_pid(pid)
            port_num = parse_port(port) if port is not None else None
            return self._fetcher.fetch(pid_num, port_num).to_dict()
        except PortKillError as exc:
            raise CommandError(str(exc)) from exc

    def _terminate(self, pid: str | int, mode: TerminationMode) -> str:
        try:
            pid_num = parse_pid(pid)
        except InvalidInputError as exc:
            raise CommandError(str(exc)) from exc
        outcome = self._terminator.terminate(pid_num, mode)
        if not outcome.succeeded:
            raise CommandError(outcome.message)
        return outcome.message

    def invoke(self, name: str, argument: Any = None) -> CommandResponse:
        """
        Run the command called ``name``.

        Args:
            name: One of COMMANDS.
            argument: A single value, or a mapping of keyword arguments.

        Returns:
            A CommandResponse; errors never propagate out of this call.
        """
        handler = self._command(name)
        if handler is None:
            return CommandResponse(ok=False, error=f"Unknown command: {name}")
        if isinstance(argument, dict):
            args, kwargs = (), argument
        else:
            args, kwargs = (argument,), {}
        try:
            inspect.signature(handler).bind(*args, **kwargs)
        except TypeError as exc:
            return CommandResponse(ok=False, error=f"Invalid arguments for {name}: {exc}")
        try:
            result = handler(*args, **kwargs)
        except CommandError as exc:
            return CommandResponse(ok=False, error=str(exc))
        return CommandResponse(ok=True, result=result)

    def _command(self, name: str) -> Callable[..., Any] | None:
        if name not in COMMANDS:
            return None
        return getattr(self, name)


COMMANDS = ("check_port", "kill_process", "graceful_kill_process", "get_process_detail")


def invoke(name: str, argument: Any = None) -> CommandResponse:
    """Dispatch one command against the running OS."""
    logger.debug("Invoking %s(%r)", name, argument)
    return CommandHandler().invoke(name, argument)


def check_port(port: str | int) -> dict:
    """Resolve the owners of ``port`` on the running OS."""
    return CommandHandler().check_port(port)


def kill_process(pid: str | int) -> str:
    """Forcefully terminate ``pid``."""
    return CommandHandler().kill_process(pid)


def graceful_kill_process(pid: str | int) -> str:
    """Ask ``pid`` to shut down cooperatively."""
    return CommandHandler().graceful_kill_process(pid)


def get_process_detail(pid: str | int, port: str | int | None = None) -> dict:
    """Describe ``pid``; raises CommandError when it cannot be looked up."""
    return CommandHandler().get_process_detail(pid, port)
