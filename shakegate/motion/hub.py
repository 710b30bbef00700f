from __future__ import annotations

import threading
import uuid

from shakegate.clock import SystemClock
from shakegate.models.motion import ShakeSample
from shakegate.protocols.clock import Clock
from shakegate.protocols.sensors import SampleHandler, SubscriptionHandle


class SensorHub:
    """In-process accelerometer source with subscribe/unsubscribe fan-out.

    ``publish`` may be called from any thread. Handlers run on the publishing
    thread, outside the hub lock, against a snapshot of the subscribers taken
    at publish time.
    """

    def __init__(self, clock: Clock | None = None) -> None:
        self._clock = clock or SystemClock()
        self._handlers: dict[str, SampleHandler] = {}
        self._lock = threading.Lock()

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._handlers)

    def subscribe(self, handler: SampleHandler) -> SubscriptionHandle:
        handle = SubscriptionHandle(subscription_id=uuid.uuid4().hex)
        with self._lock:
            self._handlers[handle.subscription_id] = handler
        return handle

    def unsubscribe(self, handle: SubscriptionHandle) -> None:
        with self._lock:
            self._handlers.pop(handle.subscription_id, None)

    def publish(self, sample: ShakeSample) -> int:
        """Deliver one sample; returns the number of handlers it reached."""
        with self._lock:
            handlers = list(self._handlers.values())
        for handler in handlers:
            handler(sample)
        return len(handlers)

    def publish_reading(self, x: float, y: float, z: float) -> int:
        """Stamp a raw reading with the monotonic clock and publish it."""
        return self.publish(ShakeSample(x=x, y=y, z=z, timestamp=self._clock.monotonic()))


__all__ = ["SensorHub"]
