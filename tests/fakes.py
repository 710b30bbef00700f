"""Deterministic collaborators for driving sessions without real sensors or time."""

from __future__ import annotations

import threading
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

from shakegate.models.feedback import FeedbackSignal
from shakegate.models.motion import STANDARD_GRAVITY, ShakeSample


class FakeClock:
    """Manually advanced clock; ``advance`` moves monotonic and wall time together."""

    def __init__(self, start: datetime | None = None) -> None:
        self._now = start or datetime(2026, 1, 1, 12, 0, tzinfo=UTC)
        self._monotonic = 1000.0

    def monotonic(self) -> float:
        return self._monotonic

    def now(self) -> datetime:
        return self._now

    def advance(self, seconds: float) -> None:
        self._monotonic += seconds
        self._now += timedelta(seconds=seconds)


@dataclass(slots=True)
class InMemoryKeyValueStore:
    data: dict[str, str] = field(default_factory=dict)
    writes: int = 0
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def get(self, key: str) -> str | None:
        with self._lock:
            return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.set_many({key: value})

    def set_many(self, values: Mapping[str, str]) -> None:
        with self._lock:
            self.data.update(values)
            self.writes += 1


@dataclass(slots=True)
class RecordingFeedback:
    signals: list[FeedbackSignal] = field(default_factory=list)

    def tick(self) -> None:
        self.signals.append(FeedbackSignal.tick)

    def success(self) -> None:
        self.signals.append(FeedbackSignal.success)

    def failure(self) -> None:
        self.signals.append(FeedbackSignal.failure)

    def count(self, signal: FeedbackSignal) -> int:
        return self.signals.count(signal)


def sample_with_g(g: float, t: float, *, x: float = 0.0, y: float = 0.0) -> ShakeSample:
    """Sample whose magnitude is exactly ``g`` (the z axis absorbs the remainder)."""
    total = g * STANDARD_GRAVITY
    z = max(0.0, total * total - x * x - y * y) ** 0.5
    return ShakeSample(x=x, y=y, z=z, timestamp=t)


__all__ = ["FakeClock", "InMemoryKeyValueStore", "RecordingFeedback", "sample_with_g"]
