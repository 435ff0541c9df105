"""Tests for portkill data models."""

from portkill.models import (
    PortCheckResult,
    ProcessBinding,
    ProcessDetail,
    TerminationMode,
    TerminationOutcome,
    TerminationStatus,
)


def test_process_binding_creation():
    """Test ProcessBinding dataclass creation."""
    binding = ProcessBinding(pid=1234, name="node", port=3000)

    assert binding.pid == 1234
    assert binding.name == "node"
    assert binding.port == 3000


def test_process_binding_is_frozen():
    """Test that ProcessBinding is immutable (frozen)."""
    binding = ProcessBinding(pid=1, name="init", port=80)

    try:
        binding.pid = 999
        raise AssertionError("Should have raised FrozenInstanceError")
    except AttributeError:
        pass  # Expected behavior for frozen dataclass


def test_process_binding_uses_slots():
    """Slots-based dataclasses don't have __dict__."""
    binding = ProcessBinding(pid=1, name="init", port=80)
    assert not hasattr(binding, "__dict__")


def test_process_binding_to_dict_uses_strings():
    binding = ProcessBinding(pid=1234, name="node", port=3000)
    assert binding.to_dict() == {"pid": "1234", "name": "node", "port": "3000"}


def test_process_detail_optional_fields_default_to_none():
    """Test ProcessDetail treats every OS attribute as optional."""
    detail = ProcessDetail(pid=42, name="python")

    assert detail.port is None
    assert detail.user is None
    assert detail.command is None
    assert detail.cpu_usage is None
    assert detail.memory_usage is None
    assert detail.start_time is None


def test_process_detail_to_dict():
    detail = ProcessDetail(
        pid=1234,
        name="node",
        port=3000,
        user="testuser",
        command="/usr/bin/node app.js",
        cpu_usage="5.2%",
        memory_usage="1.3%",
        start_time="Mon Jan 15 10:30:00 2024",
    )

    assert detail.to_dict() == {
        "pid": "1234",
        "name": "node",
        "port": "3000",
        "user": "testuser",
        "command": "/usr/bin/node app.js",
        "cpu_usage": "5.2%",
        "memory_usage": "1.3%",
        "start_time": "Mon Jan 15 10:30:00 2024",
    }


def test_process_detail_to_dict_without_port():
    assert ProcessDetail(pid=7, name="sh").to_dict()["port"] is None


class TestPortCheckResult:
    """Tests for PortCheckResult."""

    def test_found_with_processes_is_occupied(self):
        result = PortCheckResult.found([ProcessBinding(pid=1234, name="node", port=3000)])

        assert result.is_occupied
        assert len(result.processes) == 1
        assert result.error is None

    def test_found_without_processes_is_available(self):
        result = PortCheckResult.found([])

        assert not result.is_occupied
        assert result.processes == ()
        assert result.error is None

    def test_failed_is_never_occupied(self):
        result = PortCheckResult.failed("lsof failed")

        assert not result.is_occupied
        assert result.processes == ()
        assert result.error == "lsof failed"

    def test_to_dict(self):
        result = PortCheckResult.found([ProcessBinding(pid=1234, name="node", port=3000)])

        assert result.to_dict() == {
            "is_occupied": True,
            "processes": [{"pid": "1234", "name": "node", "port": "3000"}],
            "error": None,
        }


class TestTerminationOutcome:
    """Tests for TerminationOutcome."""

    def test_terminated_and_already_exited_succeed(self):
        for status in (TerminationStatus.TERMINATED, TerminationStatus.ALREADY_EXITED):
            outcome = TerminationOutcome(pid=1, mode=TerminationMode.FORCEFUL, status=status)
            assert outcome.succeeded

    def test_other_statuses_do_not_succeed(self):
        for status in (
            TerminationStatus.PERMISSION_DENIED,
            TerminationStatus.UNSUPPORTED,
            TerminationStatus.FAILED,
        ):
            outcome = TerminationOutcome(pid=1, mode=TerminationMode.GRACEFUL, status=status)
            assert not outcome.succeeded

    def test_forceful_message(self):
        outcome = TerminationOutcome(
            pid=1234, mode=TerminationMode.FORCEFUL, status=TerminationStatus.TERMINATED
        )
        assert outcome.message == "Process 1234 killed successfully"

    def test_failed_message_carries_reason(self):
        outcome = TerminationOutcome(
            pid=1234,
            mode=TerminationMode.FORCEFUL,
            status=TerminationStatus.FAILED,
            reason="operation not permitted",
        )
        assert "operation not permitted" in outcome.message
        assert "1234" in outcome.message

    def test_permission_denied_message(self):
        outcome = TerminationOutcome(
            pid=1, mode=TerminationMode.GRACEFUL, status=TerminationStatus.PERMISSION_DENIED
        )
        assert outcome.message.startswith("Permission denied")
