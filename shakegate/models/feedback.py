from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class FeedbackSignal(StrEnum):
    tick = "tick"
    success = "success"
    failure = "failure"


class Tone(StrEnum):
    beep = "beep"
    ack = "ack"
    none = "none"


class FeedbackPattern(BaseModel):
    """Haptic waveform plus an optional tone.

    ``vibration_ms`` alternates off/on durations starting with an off delay,
    the same layout as a platform waveform vibration.
    """

    model_config = ConfigDict(frozen=True)

    vibration_ms: tuple[int, ...] = Field(min_length=1)
    tone: Tone = Tone.none
    tone_ms: int = Field(default=0, ge=0)

    @property
    def total_ms(self) -> int:
        return sum(self.vibration_ms)


FEEDBACK_PATTERNS: dict[FeedbackSignal, FeedbackPattern] = {
    FeedbackSignal.tick: FeedbackPattern(vibration_ms=(0, 100), tone=Tone.beep, tone_ms=100),
    FeedbackSignal.success: FeedbackPattern(
        vibration_ms=(0, 100, 50, 100, 50, 200), tone=Tone.ack, tone_ms=200
    ),
    FeedbackSignal.failure: FeedbackPattern(vibration_ms=(0, 500)),
}


__all__ = ["FEEDBACK_PATTERNS", "FeedbackPattern", "FeedbackSignal", "Tone"]
