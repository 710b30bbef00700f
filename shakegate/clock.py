from __future__ import annotations

import time
from datetime import UTC, datetime


class SystemClock:
    """Process clock: ``time.monotonic`` for debounce, UTC wall time for lockout expiry."""

    def monotonic(self) -> float:
        return time.monotonic()

    def now(self) -> datetime:
        return datetime.now(UTC)


__all__ = ["SystemClock"]
