from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from shakegate.models.motion import ShakeSample

SampleHandler = Callable[[ShakeSample], None]


@dataclass(frozen=True, slots=True)
class SubscriptionHandle:
    subscription_id: str


@runtime_checkable
class SensorSource(Protocol):
    def subscribe(self, handler: SampleHandler) -> SubscriptionHandle: ...

    def unsubscribe(self, handle: SubscriptionHandle) -> None: ...


__all__ = ["SampleHandler", "SensorSource", "SubscriptionHandle"]
