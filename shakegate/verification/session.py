"""Shake-count verification session.

A session asks for a random number of shakes (1-5) within a 20 second
countdown. Shake events arrive on the sensor thread and countdown ticks on
the event loop; both go through one re-entrant lock, so the session applies
them one at a time and the outcome changes from pending exactly once.

Lock order is detector -> session. The session never holds its own lock
while detaching the detector, because the detector holds its lock while
delivering an event to the session.
"""

from __future__ import annotations

import asyncio
import logging
import random
import threading
import uuid
from collections.abc import Callable

from shakegate.core.logging import correlation_scope
from shakegate.models.motion import ShakeEvent
from shakegate.models.verification import FailureReason, SessionOutcome, SessionState
from shakegate.motion.detector import ShakeDetector
from shakegate.persistence.lockout_store import LockoutStore
from shakegate.protocols.feedback import FeedbackDevice
from shakegate.verification.countdown import Countdown

logger = logging.getLogger(__name__)

MIN_TARGET_COUNT = 1
MAX_TARGET_COUNT = 5
DEFAULT_TIME_LIMIT_S = 20

SessionCallback = Callable[["VerificationSession"], None]
AxisCallback = Callable[[float, float], None]


class VerificationSession:
    """One shake-count attempt with its own detector attachment and countdown.

    ``on_success`` and ``on_failure`` run synchronously inside the terminal
    transition: on the thread that resolved the session, with the session lock
    held and, for a shake, the detector lock too. They may read or cancel this
    session but must not block on another thread that touches it.
    """

    def __init__(
        self,
        detector: ShakeDetector,
        store: LockoutStore,
        feedback: FeedbackDevice,
        *,
        on_success: SessionCallback | None = None,
        on_failure: SessionCallback | None = None,
        on_axes: AxisCallback | None = None,
        time_limit_s: int = DEFAULT_TIME_LIMIT_S,
        tick_interval_s: float = 1.0,
        target_count: int | None = None,
        rng: random.Random | None = None,
        session_id: str | None = None,
    ) -> None:
        if time_limit_s < 1:
            raise ValueError("time_limit_s must be >= 1")
        if target_count is None:
            rng = rng or random.SystemRandom()
            target_count = rng.randint(MIN_TARGET_COUNT, MAX_TARGET_COUNT)
        elif not MIN_TARGET_COUNT <= target_count <= MAX_TARGET_COUNT:
            raise ValueError(
                f"target_count must be between {MIN_TARGET_COUNT} and {MAX_TARGET_COUNT}"
            )

        self.session_id = session_id or uuid.uuid4().hex
        self._detector = detector
        self._store = store
        self._feedback = feedback
        self._on_success = on_success
        self._on_failure = on_failure
        self._on_axes = on_axes
        self._tick_interval_s = tick_interval_s

        self._target_count = target_count
        self._current_count = 0
        self._time_limit_s = time_limit_s
        self._remaining_seconds = time_limit_s
        self._outcome = SessionOutcome.pending()
        self._axes: tuple[float, float] = (0.0, 0.0)

        self._lock = threading.RLock()
        self._resolved = threading.Event()
        self._started = False
        self._released = False
        self._countdown: Countdown | None = None

        logger.info(
            "Verification session %s created: %d shake(s) in %ds",
            self.session_id,
            target_count,
            time_limit_s,
        )

    # -- snapshot -----------------------------------------------------------

    @property
    def target_count(self) -> int:
        return self._target_count

    @property
    def current_count(self) -> int:
        with self._lock:
            return self._current_count

    @property
    def remaining_seconds(self) -> int:
        with self._lock:
            return self._remaining_seconds

    @property
    def outcome(self) -> SessionOutcome:
        with self._lock:
            return self._outcome

    @property
    def is_pending(self) -> bool:
        return self.outcome.state == SessionState.pending

    @property
    def progress(self) -> float:
        with self._lock:
            return min(1.0, self._current_count / self._target_count)

    @property
    def axes(self) -> tuple[float, float]:
        """Latest raw (x, y) acceleration, for tilt display."""
        return self._axes

    @property
    def released(self) -> bool:
        with self._lock:
            return self._released

    # -- lifecycle ----------------------------------------------------------

    def start(self, *, run_countdown: bool = True) -> None:
        """Attach to the detector and, by default, start the 1 Hz countdown.

        With ``run_countdown=False`` the caller drives time by calling ``tick``;
        otherwise this must be called from a running event loop.
        """
        with self._lock:
            if self._started:
                raise RuntimeError("session already started")
            if self._outcome.is_terminal:
                raise RuntimeError("session already resolved")
            if run_countdown:
                countdown = Countdown(self.tick, interval_s=self._tick_interval_s)
                countdown.start()
                self._countdown = countdown
            self._started = True
        try:
            self._detector.attach(self.handle_shake, on_axes=self._handle_axes)
        except Exception:
            self.release()
            raise

    def handle_shake(self, event: ShakeEvent) -> None:
        """Count one detector event; ignored once the session is resolved."""
        try:
            with self._lock:
                if self._outcome.is_terminal:
                    return
                self._current_count += 1
                self._feedback.tick()
                logger.debug(
                    "Shake %d/%d accepted at %.3f",
                    self._current_count,
                    self._target_count,
                    event.at,
                )
                if self._current_count >= self._target_count:
                    self._resolve(SessionOutcome.success())
        finally:
            if self.outcome.is_terminal:
                self.release()

    def tick(self) -> bool:
        """Advance the countdown by one second. Returns False once resolved."""
        try:
            with self._lock:
                if self._outcome.is_terminal:
                    return False
                self._remaining_seconds -= 1
                if self._remaining_seconds > 0:
                    return True
                # Pending with no time left means the target was not reached.
                self._resolve(SessionOutcome.failure(FailureReason.timeout))
                return False
        finally:
            if self.outcome.is_terminal:
                self.release()

    def cancel(self) -> bool:
        """User abort. Resolves a pending session without touching the lockout counter.

        Always releases the detector and countdown, so it doubles as the
        teardown for a session abandoned by navigating away. Returns True if
        this call resolved the session.
        """
        try:
            with self._lock:
                return self._resolve(SessionOutcome.failure(FailureReason.cancelled))
        finally:
            self.release()

    close = cancel

    def release(self) -> None:
        """Detach from the detector and stop the countdown. Idempotent."""
        with self._lock:
            if self._released:
                return
            self._released = True
            countdown = self._countdown
        self._detector.detach()
        if countdown is not None:
            countdown.stop()

    def wait_resolved(self, timeout: float | None = None) -> bool:
        return self._resolved.wait(timeout)

    async def wait(self, timeout: float | None = None) -> SessionOutcome:
        """Await resolution from async code without blocking the loop."""
        await asyncio.to_thread(self._resolved.wait, timeout)
        return self.outcome

    def __enter__(self) -> VerificationSession:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # -- internals ----------------------------------------------------------

    def _handle_axes(self, x: float, y: float) -> None:
        self._axes = (x, y)
        if self._on_axes is not None:
            self._on_axes(x, y)

    def _resolve(self, outcome: SessionOutcome) -> bool:
        """Single compare-and-set from pending to ``outcome`` plus its effects.

        Caller holds ``self._lock``.
        """
        if self._outcome.is_terminal:
            return False
        self._outcome = outcome
        try:
            self._apply_effects(outcome)
        finally:
            self._resolved.set()
        return True

    def _apply_effects(self, outcome: SessionOutcome) -> None:
        with correlation_scope(flow="verification", session_id=self.session_id):
            logger.info(
                "Verification session %s resolved: %s%s (%d/%d shakes, %ds left)",
                self.session_id,
                outcome.state,
                f"/{outcome.reason}" if outcome.reason else "",
                self._current_count,
                self._target_count,
                self._remaining_seconds,
            )
            if outcome.state == SessionState.success:
                self._store.record_success()
                self._feedback.success()
                if self._on_success is not None:
                    self._on_success(self)
            elif outcome.counts_against_lockout:
                self._store.record_failure()
                self._feedback.failure()
                if self._on_failure is not None:
                    self._on_failure(self)


__all__ = [
    "DEFAULT_TIME_LIMIT_S",
    "MAX_TARGET_COUNT",
    "MIN_TARGET_COUNT",
    "VerificationSession",
]
