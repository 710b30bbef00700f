from __future__ import annotations

from datetime import datetime
from typing import Protocol, runtime_checkable


@runtime_checkable
class Clock(Protocol):
    """``monotonic`` stamps live sensor readings for debounce; ``now`` dates lockouts."""

    def monotonic(self) -> float: ...

    def now(self) -> datetime: ...


__all__ = ["Clock"]
