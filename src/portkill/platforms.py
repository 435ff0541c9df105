"""Selection of the query adapter and parsers for the running OS."""

import sys
from dataclasses import dataclass

from portkill.adapters import (
    DEFAULT_QUERY_TIMEOUT,
    PosixQueryAdapter,
    QueryAdapter,
    WindowsQueryAdapter,
)
from portkill.parsing import (
    DetailParser,
    LsofParser,
    NetstatParser,
    PsDetailParser,
    SocketParser,
    TasklistDetailParser,
)


@dataclass(slots=True, frozen=True)
class Platform:
    """An adapter together with the parsers that understand its output."""

    name: str
    adapter: QueryAdapter
    socket_parser: SocketParser
    detail_parser: DetailParser
    supports_graceful: bool


def posix_platform(timeout: float = DEFAULT_QUERY_TIMEOUT) -> Platform:
    """macOS and Linux: lsof for sockets, ps for attributes."""
    return Platform(
        name="posix",
        adapter=PosixQueryAdapter(timeout),
        socket_parser=LsofParser(),
        detail_parser=PsDetailParser(),
        supports_graceful=True,
    )


def windows_platform(timeout: float = DEFAULT_QUERY_TIMEOUT) -> Platform:
    """Windows: netstat + tasklist. There is no cooperative termination signal."""
    return Platform(
        name="windows",
        adapter=WindowsQueryAdapter(timeout),
        socket_parser=NetstatParser(),
        detail_parser=TasklistDetailParser(),
        supports_graceful=False,
    )


def current_platform(timeout: float = DEFAULT_QUERY_TIMEOUT) -> Platform:
    """Return the Platform for the interpreter's OS."""
    if sys.platform == "win32":
        return windows_platform(timeout)
    return posix_platform(timeout)
