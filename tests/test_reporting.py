"""Tests for failure classification and reporting (cli/reporting.py)."""

from __future__ import annotations

import logging

import pytest

from webext_cli.cli.reporting import FailureKind, classify, report
from webext_cli.exceptions import (
    OperationalError,
    OperationalFailure,
    UsageError,
    UsageFailure,
)

log = logging.getLogger("webext_cli.tests.reporting")


def _raised(error: Exception) -> Exception:
    """Return *error* after raising it, so it carries a traceback."""
    try:
        raise error
    except Exception as exc:  # noqa: BLE001
        return exc


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------

class TestClassify:
    def test_usage_error(self) -> None:
        failure = classify(UsageError("bad flag"), command="lint")
        assert failure.kind is FailureKind.USAGE
        assert not failure.detailed

    def test_usage_error_verbose_is_detailed(self) -> None:
        failure = classify(UsageError("bad flag"), command="lint", verbose=True)
        assert failure.detailed

    @pytest.mark.parametrize(
        "error",
        [RuntimeError("boom"), OperationalError("down"), OSError("disk")],
    )
    def test_other_errors_are_operational(self, error: Exception) -> None:
        failure = classify(error, command="build")
        assert failure.kind is FailureKind.OPERATIONAL
        assert failure.detailed

    def test_prefix_with_command(self) -> None:
        assert classify(UsageError("x"), command="lint").prefix == "lint: "

    def test_no_prefix_without_command(self) -> None:
        assert classify(UsageError("x")).prefix == ""

    def test_code_from_any_error(self) -> None:
        error = RuntimeError("down")
        error.code = "E_NET"  # type: ignore[attr-defined]
        failure = classify(error, command="sign")
        assert failure.code == "E_NET"
        assert failure.code_line() == "sign: Error code: E_NET"

    def test_no_code(self) -> None:
        assert classify(RuntimeError("down")).code_line() is None


# ---------------------------------------------------------------------------
# Re-raised exceptions
# ---------------------------------------------------------------------------

class TestToException:
    def test_usage_failure_is_usage_error(self) -> None:
        error = UsageError("Unknown command: frobnicate")
        raised = classify(error, command="frobnicate").to_exception()
        assert isinstance(raised, UsageFailure)
        assert isinstance(raised, UsageError)
        assert raised.error is error
        assert raised.__cause__ is error
        assert raised.command == "frobnicate"

    def test_operational_failure_message_has_code(self) -> None:
        error = RuntimeError("network down")
        error.code = "E_NET"  # type: ignore[attr-defined]
        raised = classify(error, command="sign").to_exception()
        assert isinstance(raised, OperationalFailure)
        assert not isinstance(raised, UsageError)
        assert str(raised) == "sign: network down\nsign: Error code: E_NET"
        assert raised.code == "E_NET"

    def test_hint_carried_over(self) -> None:
        raised = classify(OperationalError("x", hint="retry")).to_exception()
        assert raised.hint == "retry"


# ---------------------------------------------------------------------------
# Report rendering
# ---------------------------------------------------------------------------

class TestReport:
    def test_usage_error_short(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.ERROR)
        report(classify(_raised(UsageError("bad flag")), command="lint"), log)
        assert "lint: bad flag" in caplog.text
        assert "Traceback" not in caplog.text

    def test_usage_error_verbose_has_traceback(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.ERROR)
        report(classify(_raised(UsageError("bad flag")), command="lint", verbose=True), log)
        assert "lint: Traceback" in caplog.text
        assert "UsageError: bad flag" in caplog.text

    def test_operational_error_always_has_traceback(
        self, caplog: pytest.LogCaptureFixture,
    ) -> None:
        caplog.set_level(logging.ERROR)
        report(classify(_raised(RuntimeError("boom")), command="build"), log)
        assert "build: Traceback" in caplog.text
        assert "RuntimeError: boom" in caplog.text

    def test_code_reported_on_own_line(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.ERROR)
        error = OperationalError("down", code="E_NET")
        report(classify(_raised(error), command="sign"), log)
        messages = [record.getMessage() for record in caplog.records]
        assert "sign: Error code: E_NET\n" in messages

    def test_hint_reported(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.ERROR)
        report(classify(UsageError("bad", hint="try --help"), command="lint"), log)
        assert "lint: Hint: try --help" in caplog.text

    def test_all_records_are_errors(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.DEBUG)
        report(classify(OperationalError("down", code="E_NET")), log)
        assert {record.levelno for record in caplog.records} == {logging.ERROR}
