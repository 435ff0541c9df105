"""Process termination with post-signal verification."""

import logging
import time

import psutil

from portkill.detail import validate_pid
from portkill.models import TerminationMode, TerminationOutcome, TerminationStatus

logger = logging.getLogger(__name__)

DEFAULT_VERIFY_DELAY = 0.5
MIN_VERIFY_DELAY = 0.05


class ProcessTerminator:
    """
    Sends one termination signal to a pid and checks whether it took effect.

    A graceful request never escalates: if the process outlives the
    verification delay the outcome is FAILED and the caller decides whether
    to follow up with a forceful request.

    The OS offers no atomic signal-and-confirm, so a pid can exit and be
    reused between the signal and the verification read. psutil's
    create-time check treats a reused pid as the original having exited.
    """

    def __init__(
        self,
        verify_delay: float = DEFAULT_VERIFY_DELAY,
        supports_graceful: bool | None = None,
    ) -> None:
        """
        Initialize the ProcessTerminator.

        Args:
            verify_delay: Wait between the signal and the existence check (seconds).
            supports_graceful: Whether a cooperative signal exists on this OS.
                Defaults to False on Windows, True elsewhere.
        """
        self._verify_delay = max(MIN_VERIFY_DELAY, verify_delay)
        if supports_graceful is None:
            supports_graceful = not psutil.WINDOWS
        self._supports_graceful = supports_graceful

    @property
    def verify_delay(self) -> float:
        """Get the verification delay."""
        return self._verify_delay

    def terminate(self, pid: int, mode: TerminationMode) -> TerminationOutcome:
        """
        Ask process ``pid`` to exit and report what happened.

        Raises:
            InvalidInputError: ``pid`` is not a positive integer.
        """
        validate_pid(pid)

        def outcome(status: TerminationStatus, reason: str | None = None) -> TerminationOutcome:
            return TerminationOutcome(pid=pid, mode=mode, status=status, reason=reason)

        try:
            proc = psutil.Process(pid)
        except psutil.NoSuchProcess:
            return outcome(TerminationStatus.ALREADY_EXITED)
        except psutil.AccessDenied:
            return outcome(TerminationStatus.PERMISSION_DENIED)

        if mode is TerminationMode.GRACEFUL and not self._supports_graceful:
            return outcome(TerminationStatus.UNSUPPORTED)

        try:
            if mode is TerminationMode.GRACEFUL:
                proc.terminate()
            else:
                proc.kill()
        except psutil.NoSuchProcess:
            return outcome(TerminationStatus.ALREADY_EXITED)
        except psutil.AccessDenied:
            logger.warning("Permission denied sending %s signal to pid %d", mode.value, pid)
            return outcome(TerminationStatus.PERMISSION_DENIED)
        except (psutil.Error, OSError) as exc:
            logger.warning("Signalling pid %d failed: %s", pid, exc)
            return outcome(TerminationStatus.FAILED, str(exc) or type(exc).__name__)

        logger.info("Sent %s termination signal to pid %d", mode.value, pid)
        time.sleep(self._verify_delay)

        if self._has_exited(proc):
            return outcome(TerminationStatus.TERMINATED)
        return outcome(
            TerminationStatus.FAILED,
            f"process still running {self._verify_delay:g}s after {mode.value} termination signal",
        )

    @staticmethod
    def _has_exited(proc: psutil.Process) -> bool:
        """Single verification read: gone, reused, or a zombie counts as exited."""
        try:
            if not proc.is_running():
                return True
            return proc.status() == psutil.STATUS_ZOMBIE
        except psutil.NoSuchProcess:
            # Includes ZombieProcess
            return True
        except psutil.AccessDenied:
            return False
