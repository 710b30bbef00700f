from __future__ import annotations

import math
from dataclasses import dataclass

STANDARD_GRAVITY = 9.81


@dataclass(frozen=True, slots=True)
class ShakeSample:
    """One instantaneous 3-axis accelerometer reading (m/s²).

    ``timestamp`` is monotonic seconds; it is only ever compared against
    other sample timestamps from the same source.
    """

    x: float
    y: float
    z: float
    timestamp: float

    @property
    def g_force(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z) / STANDARD_GRAVITY

    @property
    def is_finite(self) -> bool:
        return all(math.isfinite(v) for v in (self.x, self.y, self.z, self.timestamp))


@dataclass(frozen=True, slots=True)
class ShakeEvent:
    """One qualifying shake, stamped with the monotonic time of the sample that caused it."""

    at: float


__all__ = ["STANDARD_GRAVITY", "ShakeEvent", "ShakeSample"]
