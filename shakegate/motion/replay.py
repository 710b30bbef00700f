"""Recorded accelerometer traces: loading and timed replay into a ``SensorHub``."""

from __future__ import annotations

import asyncio
import json
from collections.abc import Sequence
from pathlib import Path

from shakegate.errors import InvalidInputError
from shakegate.models.motion import ShakeSample
from shakegate.motion.hub import SensorHub


def load_samples(path: str | Path) -> list[ShakeSample]:
    """Read a JSON Lines trace: one ``{"x": .., "y": .., "z": .., "t": ..}`` per line.

    ``t`` is in seconds and must not decrease. NaN and infinite values are
    rejected. Blank lines are skipped.
    """
    trace_path = Path(path)
    samples: list[ShakeSample] = []
    for lineno, line in enumerate(trace_path.read_text(encoding="utf-8").splitlines(), start=1):
        if not line.strip():
            continue
        try:
            raw = json.loads(line)
            sample = ShakeSample(
                x=float(raw["x"]),
                y=float(raw["y"]),
                z=float(raw["z"]),
                timestamp=float(raw["t"]),
            )
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as exc:
            raise InvalidInputError(f"{trace_path}:{lineno}: malformed sample ({exc})") from exc
        if not sample.is_finite:
            raise InvalidInputError(f"{trace_path}:{lineno}: non-finite value in sample")
        if samples and sample.timestamp < samples[-1].timestamp:
            raise InvalidInputError(f"{trace_path}:{lineno}: timestamp goes backwards")
        samples.append(sample)
    return samples


async def replay_samples(
    hub: SensorHub,
    samples: Sequence[ShakeSample],
    *,
    speed: float = 1.0,
) -> int:
    """Publish samples preserving their recorded gaps divided by ``speed``.

    ``speed=0`` publishes back to back. Returns how many samples were sent.
    """
    if speed < 0:
        raise ValueError("speed must be >= 0")
    previous: float | None = None
    for sample in samples:
        if previous is not None and speed > 0:
            await asyncio.sleep((sample.timestamp - previous) / speed)
        else:
            await asyncio.sleep(0)
        hub.publish(sample)
        previous = sample.timestamp
    return len(samples)


__all__ = ["load_samples", "replay_samples"]
