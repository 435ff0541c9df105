"""Extended process metadata lookup."""

import logging

from portkill.errors import InvalidInputError
from portkill.models import ProcessDetail
from portkill.platforms import Platform, current_platform

logger = logging.getLogger(__name__)


def validate_pid(pid: int) -> int:
    """Reject anything that is not a positive integer pid."""
    if isinstance(pid, bool) or not isinstance(pid, int) or pid <= 0:
        raise InvalidInputError(f"Invalid PID format: {pid!r}")
    return pid


def parse_pid(value: str | int) -> int:
    """Convert caller input (``"1234"``, ``1234``) into a validated pid."""
    if isinstance(value, str):
        text = value.strip()
        if not text.isdecimal():
            raise InvalidInputError(f"Invalid PID format: {value!r}")
        value = int(text)
    return validate_pid(value)


class ProcessDetailFetcher:
    """Fetches user, command line, usage and start time for a pid."""

    def __init__(self, platform: Platform | None = None) -> None:
        self._platform = platform or current_platform()

    def fetch(self, pid: int, port: int | None = None) -> ProcessDetail:
        """
        Look up ``pid`` on the live process table.

        Args:
            pid: Process to describe.
            port: Port from the binding that led here; copied into the detail.

        Returns:
            A ProcessDetail; attributes the OS does not report are None.

        Raises:
            ProcessNotFoundError: The process has already exited.
            QueryIOError: The attribute query could not be run.
        """
        validate_pid(pid)
        raw = self._platform.adapter.list_process_attributes(pid)
        detail = self._platform.detail_parser.parse(raw, pid, port)
        logger.debug("Fetched detail for pid %d: %s", pid, detail)
        return detail
