"""Shake gesture detection over a raw accelerometer stream.

A sample counts as a shake when its magnitude exceeds 1.5 g. Resting
gravity reads close to 1.0 g, so a device lying still never triggers.
Accepted shakes are debounced: one physical shake produces a burst of
high-magnitude samples and only the first within each 100 ms window counts.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from shakegate.models.motion import ShakeEvent, ShakeSample
from shakegate.protocols.sensors import SensorSource, SubscriptionHandle

logger = logging.getLogger(__name__)

SHAKE_THRESHOLD_G = 1.5
DEBOUNCE_S = 0.100
# Float subtraction of timestamps must not turn an exact 100 ms gap into 99.999 ms.
_DEBOUNCE_TOLERANCE_S = 1e-9

ShakeHandler = Callable[[ShakeEvent], None]
AxisHandler = Callable[[float, float], None]


class ShakeDetector:
    """Turns ``ShakeSample`` notifications into debounced ``ShakeEvent``s.

    The only state is the timestamp of the last accepted shake. Delivery is
    synchronous on the sensor thread; once ``detach`` returns no handler is
    invoked again, even for a sample already in flight.
    """

    def __init__(self, source: SensorSource) -> None:
        self._source = source
        self._handle: SubscriptionHandle | None = None
        self._on_shake: ShakeHandler | None = None
        self._on_axes: AxisHandler | None = None
        self._last_shake_at: float | None = None
        self._lock = threading.RLock()

    @property
    def attached(self) -> bool:
        with self._lock:
            return self._handle is not None

    @property
    def last_shake_at(self) -> float | None:
        return self._last_shake_at

    def attach(self, on_shake: ShakeHandler, on_axes: AxisHandler | None = None) -> None:
        with self._lock:
            if self._handle is not None:
                raise RuntimeError("detector is already attached")
            self._on_shake = on_shake
            self._on_axes = on_axes
            self._handle = self._source.subscribe(self._on_sample)
        logger.debug("Shake detector attached")

    def detach(self) -> None:
        """Unsubscribe from the source. Safe to call repeatedly."""
        with self._lock:
            handle = self._handle
            if handle is None:
                return
            self._handle = None
            self._on_shake = None
            self._on_axes = None
            self._source.unsubscribe(handle)
        logger.debug("Shake detector detached")

    def process(self, sample: ShakeSample) -> ShakeEvent | None:
        """Apply threshold and debounce to one sample, returning the event if accepted."""
        with self._lock:
            # Written as acceptance tests so NaN never passes a comparison.
            if not sample.is_finite or not sample.g_force > SHAKE_THRESHOLD_G:
                return None
            last = self._last_shake_at
            if last is not None:
                gap = sample.timestamp - last
                if not gap >= DEBOUNCE_S - _DEBOUNCE_TOLERANCE_S:
                    return None
            self._last_shake_at = sample.timestamp
            return ShakeEvent(at=sample.timestamp)

    def _on_sample(self, sample: ShakeSample) -> None:
        with self._lock:
            # The source may still deliver a sample it snapshotted before unsubscribe.
            if self._handle is None:
                return
            on_axes = self._on_axes
            if on_axes is not None:
                on_axes(sample.x, sample.y)
            event = self.process(sample)
            on_shake = self._on_shake
            if event is not None and on_shake is not None:
                on_shake(event)


__all__ = ["DEBOUNCE_S", "SHAKE_THRESHOLD_G", "AxisHandler", "ShakeDetector", "ShakeHandler"]
