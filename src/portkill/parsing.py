"""Parsers turning raw tool output into portkill records.

Socket parsers share one dedup pass: rows are keyed by pid alone, the first
name seen for a pid wins, and bindings come out in first-occurrence order.
Lines that cannot be read are skipped. A text with no readable rows yields an
empty list, so an unknown output format reports the port as free rather than
raising.
"""

import csv
import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Iterator

from portkill.errors import ProcessNotFoundError
from portkill.models import ProcessBinding, ProcessDetail

logger = logging.getLogger(__name__)

# (pid, name, reported local port)
Row = tuple[int, str, int]

LSOF_ESCAPE_RE = re.compile(r"\\x([0-9a-fA-F]{2})")
NETSTAT_PROTOCOLS = {"TCP", "UDP"}
UNKNOWN_NAME = "unknown"


def _parse_pid(token: str) -> int | None:
    if not token.isdecimal():
        return None
    pid = int(token)
    return pid if pid > 0 else None


def _address_port(address: str) -> int | None:
    """Extract the local port from an address like ``*:3000`` or ``[::1]:3000->10.0.0.2:51234``."""
    local = address.split("->", 1)[0]
    _, sep, port = local.rpartition(":")
    if not sep or not port.isdecimal():
        return None
    return int(port)


class SocketParser(ABC):
    """Turns socket enumeration output into deduplicated ProcessBindings."""

    def parse(self, raw_text: str, expected_port: int) -> list[ProcessBinding]:
        """
        Parse raw tool output into bindings for ``expected_port``.

        Args:
            raw_text: Output of the platform's socket enumeration.
            expected_port: Port that was queried; rows for other ports are dropped.

        Returns:
            One binding per distinct pid, in first-occurrence order.
        """
        bindings: dict[int, ProcessBinding] = {}
        for pid, name, port in self._rows(raw_text):
            if port != expected_port:
                continue
            if pid not in bindings:
                bindings[pid] = ProcessBinding(pid=pid, name=name, port=expected_port)
        return list(bindings.values())

    def _rows(self, raw_text: str) -> Iterator[Row]:
        for line in raw_text.splitlines():
            if not line.strip():
                continue
            row = self.parse_line(line)
            if row is None:
                logger.debug("Skipping unparsable line: %r", line)
                continue
            yield row

    @abstractmethod
    def parse_line(self, line: str) -> Row | None:
        """Extract a row from one line, or None for header and malformed lines."""


class LsofParser(SocketParser):
    """
    Parser for ``lsof -i :PORT -P -n`` output.

    Accepts the full layout (COMMAND PID USER FD TYPE DEVICE SIZE/OFF NODE NAME)
    as well as abbreviated rows such as ``node 1234 TCP *:3000 (LISTEN)``: the
    name and pid lead the row and the first address-looking token gives the port.
    """

    def parse_line(self, line: str) -> Row | None:
        tokens = line.split()
        if len(tokens) < 3:
            return None
        pid = _parse_pid(tokens[1])
        if pid is None:
            return None
        for token in tokens[2:]:
            port = _address_port(token)
            if port is not None:
                return pid, self._unescape(tokens[0]), port
        return None

    @staticmethod
    def _unescape(name: str) -> str:
        # lsof prints unprintable characters (including spaces) as \xNN
        return LSOF_ESCAPE_RE.sub(lambda match: chr(int(match.group(1), 16)), name)


class NetstatParser(SocketParser):
    """
    Parser for ``netstat -ano`` output followed by ``tasklist /FO CSV /NH`` rows.

    netstat rows (``TCP 0.0.0.0:3000 0.0.0.0:0 LISTENING 1234``) carry the pid
    and local port; quoted tasklist rows map pids to image names.
    """

    def _rows(self, raw_text: str) -> Iterator[Row]:
        names = self._image_names(raw_text)
        for row in super()._rows(raw_text):
            pid, _, port = row
            yield pid, names.get(pid, UNKNOWN_NAME), port

    def parse_line(self, line: str) -> Row | None:
        tokens = line.split()
        if len(tokens) < 4 or tokens[0].upper() not in NETSTAT_PROTOCOLS:
            return None
        pid = _parse_pid(tokens[-1])
        port = _address_port(tokens[1])
        if pid is None or port is None:
            return None
        return pid, UNKNOWN_NAME, port

    def _image_names(self, raw_text: str) -> dict[int, str]:
        names: dict[int, str] = {}
        for line in raw_text.splitlines():
            if not line.startswith('"'):
                continue
            fields = next(csv.reader([line]), [])
            if len(fields) < 2:
                continue
            pid = _parse_pid(fields[1])
            if pid is not None:
                names.setdefault(pid, fields[0])
        return names


class DetailParser(ABC):
    """Turns process attribute output into a ProcessDetail."""

    @abstractmethod
    def parse(self, raw_text: str, pid: int, port: int | None = None) -> ProcessDetail:
        """
        Parse the attributes of ``pid``.

        Raises:
            ProcessNotFoundError: The text holds no row for the process.
        """


def _percent(token: str | None) -> str | None:
    if token is None:
        return None
    try:
        return f"{float(token):.1f}%"
    except ValueError:
        return None


class PsDetailParser(DetailParser):
    """
    Parser for the two-line ps output of ``PosixQueryAdapter``.

    Line one is ``user pcpu pmem <lstart: five words> args...``; line two, when
    present, is the process name taken whole, so names such as "Web Content"
    keep their spaces. Without it the name comes from the first word of args.
    """

    LSTART_FIELDS = 5

    def parse(self, raw_text: str, pid: int, port: int | None = None) -> ProcessDetail:
        lines = [line for line in raw_text.splitlines() if line.strip()]
        if not lines:
            raise ProcessNotFoundError(pid)

        # args keeps its own spacing as the unsplit remainder
        parts = lines[0].split(None, 3 + self.LSTART_FIELDS)
        user = parts[0] if parts else None
        cpu = _percent(parts[1]) if len(parts) > 1 else None
        mem = _percent(parts[2]) if len(parts) > 2 else None

        start_time = None
        lstart_end = 3 + self.LSTART_FIELDS
        if len(parts) >= lstart_end:
            start_time = " ".join(parts[3:lstart_end])

        command = parts[lstart_end].strip() if len(parts) > lstart_end else None
        name = lines[1].strip() if len(lines) > 1 else None
        if not name and command:
            name = command.split()[0].rsplit("/", 1)[-1]

        return ProcessDetail(
            pid=pid,
            name=name or UNKNOWN_NAME,
            port=port,
            user=user,
            command=command or None,
            cpu_usage=cpu,
            memory_usage=mem,
            start_time=start_time,
        )


class TasklistDetailParser(DetailParser):
    """
    Parser for ``tasklist /FI "PID eq N" /FO CSV /NH /V``.

    Columns: image name, pid, session name, session#, mem usage, status,
    user name, cpu time, window title. tasklist reports no command line,
    start time or cpu percentage, so those stay None.
    """

    def parse(self, raw_text: str, pid: int, port: int | None = None) -> ProcessDetail:
        for fields in csv.reader(line for line in raw_text.splitlines() if line.strip()):
            if len(fields) < 2 or _parse_pid(fields[1]) != pid:
                continue
            memory = fields[4] if len(fields) > 4 and fields[4] else None
            user = fields[6] if len(fields) > 6 and fields[6] not in ("", "N/A") else None
            return ProcessDetail(
                pid=pid,
                name=fields[0] or UNKNOWN_NAME,
                port=port,
                user=user,
                memory_usage=memory,
            )
        raise ProcessNotFoundError(pid)
