"""Persisted three-strikes lockout policy shared by PIN entry and shake verification."""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timedelta

from shakegate.clock import SystemClock
from shakegate.models.lockout import LockoutState
from shakegate.protocols.clock import Clock
from shakegate.protocols.storage import KeyValueStore

logger = logging.getLogger(__name__)

_FAILED_ATTEMPTS_KEY = "failed_attempts"
_LOCKOUT_UNTIL_KEY = "lockout_until"

DEFAULT_MAX_FAILED_ATTEMPTS = 3
DEFAULT_LOCKOUT_DURATION = timedelta(seconds=60)


class LockoutStore:
    """Failure counter and lockout expiry on top of a key-value store.

    Every mutation is a read-modify-write under one lock followed by a single
    ``set_many`` so both fields change together. Reads always go to the
    backing store, so a value written by ``record_failure`` is visible to the
    very next ``is_locked_out`` call.
    """

    def __init__(
        self,
        kv: KeyValueStore,
        clock: Clock | None = None,
        *,
        max_failed_attempts: int = DEFAULT_MAX_FAILED_ATTEMPTS,
        lockout_duration: timedelta = DEFAULT_LOCKOUT_DURATION,
    ) -> None:
        if max_failed_attempts < 1:
            raise ValueError("max_failed_attempts must be >= 1")
        if lockout_duration <= timedelta(0):
            raise ValueError("lockout_duration must be positive")
        self._kv = kv
        self._clock = clock or SystemClock()
        self._max_failed_attempts = max_failed_attempts
        self._lockout_duration = lockout_duration
        self._lock = threading.Lock()

    @property
    def max_failed_attempts(self) -> int:
        return self._max_failed_attempts

    @property
    def lockout_duration(self) -> timedelta:
        return self._lockout_duration

    def state(self) -> LockoutState:
        with self._lock:
            return self._load()

    def is_locked_out(self, now: datetime | None = None) -> bool:
        return self.state().is_locked_out(now or self._clock.now())

    def remaining(self, now: datetime | None = None) -> timedelta:
        return self.state().remaining(now or self._clock.now())

    def record_failure(self, now: datetime | None = None) -> LockoutState:
        """Count one failed attempt; the third consecutive one starts a lockout.

        A failure reported while a lockout is already in force is ignored:
        the counter stays frozen at zero until the lockout expires.
        """
        now = now or self._clock.now()
        with self._lock:
            current = self._load()
            if current.is_locked_out(now):
                logger.info(
                    "Failure ignored during active lockout (%ss remaining)",
                    int(current.remaining(now).total_seconds()),
                )
                return current

            attempts = current.failed_attempts + 1
            if attempts >= self._max_failed_attempts:
                updated = LockoutState(failed_attempts=0, lockout_until=now + self._lockout_duration)
                logger.warning(
                    "Lockout entered after %d failed attempts; locked until %s",
                    attempts,
                    updated.lockout_until.isoformat() if updated.lockout_until else None,
                )
            else:
                updated = LockoutState(failed_attempts=attempts, lockout_until=None)
                logger.info(
                    "Failed attempt recorded (%d/%d)", attempts, self._max_failed_attempts
                )
            self._save(updated)
            return updated

    def record_success(self, now: datetime | None = None) -> LockoutState:
        """Reset the failure streak and clear an expired lockout.

        A lockout still in force is left untouched: a success can only come
        from an attempt that was allowed to start, so one arriving during a
        lockout belongs to a different, older flow.
        """
        now = now or self._clock.now()
        with self._lock:
            current = self._load()
            if current.is_locked_out(now):
                logger.warning("Success reported during active lockout; lockout kept")
                return current
            updated = LockoutState(failed_attempts=0, lockout_until=None)
            self._save(updated)
            logger.info("Success recorded; failure counter reset")
            return updated

    # -- internals ----------------------------------------------------------

    def _load(self) -> LockoutState:
        raw_attempts = self._kv.get(_FAILED_ATTEMPTS_KEY)
        raw_until = self._kv.get(_LOCKOUT_UNTIL_KEY)
        try:
            attempts = int(raw_attempts) if raw_attempts else 0
            until = datetime.fromisoformat(raw_until) if raw_until else None
            # Naive values cannot be compared with the aware clock.
            if until is not None and until.utcoffset() is None:
                raise ValueError(f"lockout_until has no UTC offset: {raw_until!r}")
            return LockoutState(failed_attempts=attempts, lockout_until=until)
        except ValueError:
            logger.warning("Persisted lockout state unreadable; starting fresh")
            return LockoutState()

    def _save(self, state: LockoutState) -> None:
        self._kv.set_many(
            {
                _FAILED_ATTEMPTS_KEY: str(state.failed_attempts),
                _LOCKOUT_UNTIL_KEY: state.lockout_until.isoformat() if state.lockout_until else "",
            }
        )


__all__ = ["DEFAULT_LOCKOUT_DURATION", "DEFAULT_MAX_FAILED_ATTEMPTS", "LockoutStore"]
