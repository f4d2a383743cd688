"""
Unit tests for outcome reporting

Tests verify:
- Message type and exit status floor per severity
- Internal error fallback for an unrecognized severity
- Monotonic exit status accumulation
- Delivery order and abnormal termination at the host boundary
"""

import logging
import threading
import time
from unittest.mock import patch

import pytest

from rowcheck.check.errors import ExpressionFalseError, TableNotFoundError
from rowcheck.check.evaluate import EvaluationResult
from rowcheck.check.report import (
    DEFAULT_SUCCESS_MESSAGE,
    ExitStatus,
    LoggingHost,
    MessageType,
    deliver,
    failure_outcome,
    get_process_exit_status,
    success_outcome,
)
from rowcheck.check.severity import Severity


def _false_result():
    return EvaluationResult(lhs_value=3, rhs_value=0, comparison_holds=False)


class TestExitStatus:
    """Test ExitStatus"""

    def test_starts_at_zero(self):
        assert ExitStatus().code == 0

    def test_raise_floor_keeps_maximum(self):
        """Test warning then error leaves the floor at 8"""
        status = ExitStatus()

        status.raise_floor(4)
        status.raise_floor(8)

        assert status.code == 8

    def test_lowering_is_noop(self):
        """Test raising to a lower value does not lower the status"""
        status = ExitStatus()

        status.raise_floor(8)
        assert status.raise_floor(4) == 8
        assert status.raise_floor(0) == 8
        assert status.code == 8

    def test_process_status_is_shared(self):
        """Test the process-wide status is a single object"""
        assert get_process_exit_status() is get_process_exit_status()

    def test_concurrent_lower_raise_cannot_undo_higher(self):
        """Test a slow warning raise racing an error raise leaves the status at 8"""

        class SlowFloor(int):
            def __gt__(self, other):
                time.sleep(0.05)
                return int(self) > other

        status = ExitStatus()
        warning = threading.Thread(target=status.raise_floor, args=(SlowFloor(4),))

        warning.start()
        time.sleep(0.01)
        status.raise_floor(8)
        warning.join()

        assert status.code == 8

    def test_many_threads_keep_maximum(self):
        status = ExitStatus()
        threads = [
            threading.Thread(target=status.raise_floor, args=(floor,))
            for floor in [0, 4, 8, 4, 0] * 20
        ]

        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert status.code == 8


class TestSuccessOutcome:
    """Test success_outcome"""

    def test_note_regardless_of_severity(self):
        """Test success is a NOTE with no exit floor for every severity"""
        for severity in Severity:
            outcome = success_outcome(
                "one=two", severity, "5 = 5",
                EvaluationResult(5, 5, True), {"one": 5, "two": 5},
            )

            assert outcome.message_type is MessageType.NOTE
            assert outcome.exit_code_contribution == 0
            assert outcome.fatal is False
            assert outcome.passed is True

    def test_default_and_custom_message(self):
        outcome = success_outcome("a=b", Severity.ERROR, "1 = 1", EvaluationResult(1, 1, True), {})
        assert outcome.primary_message == DEFAULT_SUCCESS_MESSAGE

        outcome = success_outcome(
            "a=b", Severity.ERROR, "1 = 1", EvaluationResult(1, 1, True), {},
            success_msg="Load verified",
        )
        assert outcome.primary_message == "Load verified"

    def test_messages_include_echoes(self):
        """Test message lines echo the expression, substitution and subtotals"""
        outcome = success_outcome(
            " one+two = big ", Severity.ERROR, "5+5 = 10",
            EvaluationResult(10, 10, True), {},
            subtotal_echo="10 = 10",
        )

        lines = outcome.messages()

        assert lines[0] == DEFAULT_SUCCESS_MESSAGE
        assert "one+two = big" in lines[1]
        assert "5+5 = 10" in lines[2]
        assert "10 = 10" in lines[3]


class TestFailureOutcome:
    """Test failure_outcome"""

    @pytest.mark.parametrize("severity,message_type,floor,fatal", [
        (Severity.NOTE, MessageType.NOTE, 0, False),
        (Severity.WARNING, MessageType.WARNING, 4, False),
        (Severity.ERROR, MessageType.ERROR, 8, False),
        (Severity.ABEND, MessageType.ERROR, 8, True),
    ])
    def test_severity_mapping(self, severity, message_type, floor, fatal):
        """Test message type, floor and termination follow the severity"""
        error = ExpressionFalseError(_false_result(), "bad_has_time = 0")

        outcome = failure_outcome("bad_has_time = 0", severity, error, substituted_echo="3 = 0")

        assert outcome.message_type is message_type
        assert outcome.exit_code_contribution == floor
        assert outcome.fatal is fatal
        assert outcome.passed is False
        assert outcome.result == _false_result()

    def test_message_names_expression_and_reason(self):
        """Test the failure messages identify what failed and why"""
        error = TableNotFoundError("ghost", "one = ghost")

        outcome = failure_outcome("one = ghost", Severity.ERROR, error)
        text = "\n".join(outcome.messages())

        assert "ghost does not exist" in text
        assert "one = ghost" in text
        assert outcome.substituted_echo is None

    def test_unrecognized_severity_is_internal_error(self):
        """Test an unknown severity reaching the reporter is reported as ERROR/8"""
        error = ExpressionFalseError(_false_result(), "a = 0")

        outcome = failure_outcome("a = 0", "bogus", error)

        assert outcome.message_type is MessageType.ERROR
        assert outcome.exit_code_contribution == 8
        assert outcome.fatal is False
        assert outcome.primary_message.startswith("Internal error")
        assert "bogus" in outcome.primary_message

    def test_to_dict(self):
        """Test the JSON representation"""
        error = ExpressionFalseError(_false_result(), "bad_has_time = 0")
        outcome = failure_outcome(
            "bad_has_time = 0", Severity.WARNING, error,
            substituted_echo="3 = 0", row_counts={"bad_has_time": 3},
        )

        data = outcome.to_dict()

        assert data["passed"] is False
        assert data["severity"] == "WARNING"
        assert data["message_type"] == "WARNING"
        assert data["exit_code_contribution"] == 4
        assert data["error"] == {"kind": "EXPRESSION_FALSE", "message": "Row count assertion is false"}
        assert data["row_counts"] == {"bad_has_time": 3}
        assert data["lhs_value"] == 3
        assert data["rhs_value"] == 0


class TestDeliver:
    """Test deliver"""

    def test_emits_all_lines_then_raises_floor(self, host):
        error = ExpressionFalseError(_false_result(), "bad_has_time = 0")
        outcome = failure_outcome("bad_has_time = 0", Severity.WARNING, error, substituted_echo="3 = 0")

        deliver(outcome, host)

        assert host.texts == outcome.messages()
        assert all(level is MessageType.WARNING for level, _ in host.messages)
        assert host.events[-1] == "raise:4"
        assert host.exit_status.code == 4
        assert host.terminated is False

    def test_fatal_terminates_after_messages(self, host):
        """Test termination is the last thing the host is asked to do"""
        error = ExpressionFalseError(_false_result(), "bad_has_time = 0")
        outcome = failure_outcome("bad_has_time = 0", Severity.ABEND, error)

        deliver(outcome, host)

        assert host.terminated is True
        assert host.events[-2:] == ["raise:8", "terminate"]
        assert host.events.count("emit") == len(outcome.messages())

    def test_success_raises_nothing(self, host):
        outcome = success_outcome("a=b", Severity.ABEND, "1 = 1", EvaluationResult(1, 1, True), {})

        deliver(outcome, host)

        assert host.exit_status.code == 0
        assert host.terminated is False
        assert all(level is MessageType.NOTE for level, _ in host.messages)


class TestLoggingHost:
    """Test LoggingHost"""

    def test_defaults_to_process_status(self):
        assert LoggingHost().exit_status is get_process_exit_status()

    def test_emit_logs_with_message_type(self, caplog):
        """Test messages go to the rowcheck.check logger at the mapped level"""
        host = LoggingHost(ExitStatus())

        with caplog.at_level(logging.INFO, logger="rowcheck.check"):
            host.emit(MessageType.WARNING, "Row count assertion failed")

        record = caplog.records[-1]
        assert record.levelno == logging.WARNING
        assert record.message_type == "WARNING"
        assert record.getMessage() == "Row count assertion failed"

    def test_terminate_flushes_and_exits_with_status(self):
        """Test abnormal termination exits with the accumulated status"""
        status = ExitStatus()
        status.raise_floor(8)
        host = LoggingHost(status)

        with patch("rowcheck.check.report.flush_logging") as mock_flush:
            with pytest.raises(SystemExit) as exc_info:
                host.terminate_abnormally()

        mock_flush.assert_called_once()
        assert exc_info.value.code == 8

    def test_abend_outcome_never_returns(self):
        """Test delivering an ABEND outcome to a LoggingHost exits the process"""
        error = ExpressionFalseError(_false_result(), "bad_has_time = 0")
        outcome = failure_outcome("bad_has_time = 0", Severity.ABEND, error)

        with pytest.raises(SystemExit) as exc_info:
            deliver(outcome, LoggingHost(ExitStatus()))

        assert exc_info.value.code == 8
