from __future__ import annotations

from datetime import datetime, timedelta

from pydantic import BaseModel, Field


class LockoutState(BaseModel):
    """Snapshot of the persisted failure counter and lockout expiry."""

    failed_attempts: int = Field(default=0, ge=0)
    lockout_until: datetime | None = None

    def is_locked_out(self, now: datetime) -> bool:
        return self.lockout_until is not None and now < self.lockout_until

    def remaining(self, now: datetime) -> timedelta:
        if self.lockout_until is None:
            return timedelta(0)
        return max(timedelta(0), self.lockout_until - now)


__all__ = ["LockoutState"]
