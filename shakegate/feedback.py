from __future__ import annotations

import logging

from shakegate.models.feedback import FEEDBACK_PATTERNS, FeedbackSignal

logger = logging.getLogger(__name__)


class LoggingFeedbackDevice:
    """Feedback device for headless runs: renders each request as a log line."""

    def __init__(self) -> None:
        self.counts: dict[FeedbackSignal, int] = {signal: 0 for signal in FeedbackSignal}

    def tick(self) -> None:
        self._emit(FeedbackSignal.tick)

    def success(self) -> None:
        self._emit(FeedbackSignal.success)

    def failure(self) -> None:
        self._emit(FeedbackSignal.failure)

    def _emit(self, signal: FeedbackSignal) -> None:
        self.counts[signal] += 1
        pattern = FEEDBACK_PATTERNS[signal]
        logger.debug(
            "feedback %s: vibrate %s ms, tone %s for %d ms",
            signal,
            list(pattern.vibration_ms),
            pattern.tone,
            pattern.tone_ms,
        )


__all__ = ["LoggingFeedbackDevice"]
