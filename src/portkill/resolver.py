"""Port resolution: which processes own a port."""

import logging

from portkill.errors import InvalidInputError, QueryIOError
from portkill.models import PortCheckResult
from portkill.platforms import Platform, current_platform

logger = logging.getLogger(__name__)

MIN_PORT = 1
MAX_PORT = 65535


def validate_port(port: int) -> int:
    """
    Check that ``port`` is a usable TCP/UDP port number.

    Raises:
        InvalidInputError: Not an int, or outside 1-65535.
    """
    if isinstance(port, bool) or not isinstance(port, int):
        raise InvalidInputError(f"Invalid port number: {port!r}")
    if not MIN_PORT <= port <= MAX_PORT:
        raise InvalidInputError(
            f"Invalid port number: {port} (must be between {MIN_PORT} and {MAX_PORT})"
        )
    return port


def parse_port(value: str | int) -> int:
    """Convert caller input (``"3000"``, ``3000``) into a validated port."""
    if isinstance(value, str):
        text = value.strip()
        if not text.isdecimal():
            raise InvalidInputError(f"Invalid port number: {value!r}")
        value = int(text)
    return validate_port(value)


class PortResolver:
    """
    Resolves the processes bound to a port.

    Stateless: every call re-queries the OS, so repeated calls differ only
    when the OS state changed.
    """

    def __init__(self, platform: Platform | None = None) -> None:
        """
        Initialize the resolver.

        Args:
            platform: Adapter and parsers to use. Defaults to the running OS.
        """
        self._platform = platform or current_platform()

    def resolve(self, port: int) -> PortCheckResult:
        """Return the bindings on ``port``, or a result with ``error`` set."""
        try:
            validate_port(port)
        except InvalidInputError as exc:
            return PortCheckResult.failed(str(exc))

        try:
            raw = self._platform.adapter.list_socket_owners(port)
        except QueryIOError as exc:
            logger.warning("Port query for %d failed: %s", port, exc)
            return PortCheckResult.failed(str(exc))

        processes = self._platform.socket_parser.parse(raw, port)
        logger.debug("Port %d: %d owning process(es)", port, len(processes))
        return PortCheckResult.found(processes)
