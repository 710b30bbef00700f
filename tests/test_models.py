from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
from pydantic import ValidationError
from shakegate.clock import SystemClock
from shakegate.feedback import LoggingFeedbackDevice
from shakegate.formatting import format_amount, format_remaining
from shakegate.models import (
    FEEDBACK_PATTERNS,
    FailureReason,
    FeedbackSignal,
    LockoutState,
    SessionOutcome,
    SessionState,
    Tone,
    TransferResult,
)
from shakegate.persistence.kv_store import SQLiteKeyValueStore
from shakegate.protocols import Clock, FeedbackDevice, KeyValueStore


class TestSessionOutcome:
    def test_failure_requires_reason(self) -> None:
        with pytest.raises(ValidationError, match="requires a reason"):
            SessionOutcome(state=SessionState.failure)

    def test_success_cannot_carry_reason(self) -> None:
        with pytest.raises(ValidationError):
            SessionOutcome(state=SessionState.success, reason=FailureReason.timeout)

    def test_only_timeout_counts_against_lockout(self) -> None:
        assert SessionOutcome.failure(FailureReason.timeout).counts_against_lockout
        assert not SessionOutcome.failure(FailureReason.cancelled).counts_against_lockout
        assert not SessionOutcome.success().counts_against_lockout
        assert not SessionOutcome.pending().is_terminal

    def test_outcome_is_frozen(self) -> None:
        outcome = SessionOutcome.pending()
        with pytest.raises(ValidationError):
            outcome.state = SessionState.success  # type: ignore[misc]


class TestLockoutState:
    def test_negative_attempts_rejected(self) -> None:
        with pytest.raises(ValidationError):
            LockoutState(failed_attempts=-1)

    def test_remaining(self) -> None:
        now = datetime(2026, 1, 1, tzinfo=UTC)
        state = LockoutState(failed_attempts=0, lockout_until=now + timedelta(seconds=30))
        assert state.is_locked_out(now)
        assert state.remaining(now) == timedelta(seconds=30)
        assert state.remaining(now + timedelta(seconds=31)) == timedelta(0)
        assert not LockoutState().is_locked_out(now)


class TestFeedbackPatterns:
    def test_every_signal_has_a_pattern(self) -> None:
        assert set(FEEDBACK_PATTERNS) == set(FeedbackSignal)

    def test_pattern_shapes(self) -> None:
        assert FEEDBACK_PATTERNS[FeedbackSignal.tick].vibration_ms == (0, 100)
        assert FEEDBACK_PATTERNS[FeedbackSignal.tick].tone == Tone.beep
        assert FEEDBACK_PATTERNS[FeedbackSignal.success].total_ms == 500
        assert FEEDBACK_PATTERNS[FeedbackSignal.failure].vibration_ms == (0, 500)
        assert FEEDBACK_PATTERNS[FeedbackSignal.failure].tone == Tone.none


def test_transfer_result_requires_positive_amount() -> None:
    with pytest.raises(ValidationError):
        TransferResult(
            session_id="s",
            amount=0,
            outcome=SessionOutcome.success(),
            balance_after=10,
        )


@pytest.mark.parametrize(
    ("amount", "expected"),
    [(0, "0"), (999, "999"), (500_000, "500,000"), (1_000_000, "1,000,000")],
)
def test_format_amount(amount: int, expected: str) -> None:
    assert format_amount(amount) == expected


@pytest.mark.parametrize(
    ("seconds", "expected"),
    [(45, "45s"), (45.9, "45s"), (60, "1m 0s"), (65, "1m 5s"), (0, "0s"), (-3, "0s")],
)
def test_format_remaining(seconds: float, expected: str) -> None:
    assert format_remaining(timedelta(seconds=seconds)) == expected


class TestAdapters:
    def test_system_adapters_satisfy_protocols(self, tmp_path: Path) -> None:
        assert isinstance(SystemClock(), Clock)
        assert isinstance(LoggingFeedbackDevice(), FeedbackDevice)
        assert isinstance(SQLiteKeyValueStore(tmp_path / "kv.db", "ns"), KeyValueStore)

    def test_system_clock_is_utc(self) -> None:
        assert SystemClock().now().tzinfo is UTC

    def test_logging_feedback_counts_signals(self, caplog: pytest.LogCaptureFixture) -> None:
        device = LoggingFeedbackDevice()
        with caplog.at_level(logging.DEBUG, logger="shakegate.feedback"):
            device.tick()
            device.tick()
            device.failure()
        assert device.counts[FeedbackSignal.tick] == 2
        assert device.counts[FeedbackSignal.failure] == 1
        assert device.counts[FeedbackSignal.success] == 0
        assert "vibrate [0, 500] ms" in caplog.text
