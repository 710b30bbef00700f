"""PIN login gate.

Digits are buffered one at a time and the PIN is checked automatically as
soon as the buffer reaches the PIN length. Wrong PINs feed the same lockout
counter as failed shake verifications.
"""

from __future__ import annotations

import hmac
import logging
from collections.abc import Callable
from datetime import timedelta

from shakegate.core.logging import correlation_scope
from shakegate.errors import InvalidInputError, LockedOutError
from shakegate.models.transfer import PinVerdict
from shakegate.persistence.lockout_store import LockoutStore

logger = logging.getLogger(__name__)

DEFAULT_PIN = "711520"


class LoginGate:
    def __init__(
        self,
        store: LockoutStore,
        pin: str = DEFAULT_PIN,
        *,
        on_accepted: Callable[[], None] | None = None,
    ) -> None:
        if not pin or not pin.isascii() or not pin.isdigit():
            raise ValueError("pin must be a non-empty string of digits")
        self._store = store
        self._pin = pin
        self._on_accepted = on_accepted
        self._buffer = ""
        self._authenticated = False

    @property
    def pin_length(self) -> int:
        return len(self._pin)

    @property
    def buffer_length(self) -> int:
        """Number of digits entered so far, for the PIN dots display."""
        return len(self._buffer)

    @property
    def authenticated(self) -> bool:
        return self._authenticated

    def enter_digit(self, digit: str) -> PinVerdict | None:
        """Buffer one keypad digit; returns the verdict when the PIN is complete.

        Raises ``LockedOutError`` before touching the buffer while locked out.
        """
        self._ensure_not_locked_out()
        if len(digit) != 1 or not digit.isascii() or not digit.isdigit():
            raise InvalidInputError(f"not a keypad digit: {digit!r}")
        self._buffer += digit
        if len(self._buffer) < self.pin_length:
            return None
        return self.submit_pin(self._buffer)

    def delete_digit(self) -> None:
        self._ensure_not_locked_out()
        self._buffer = self._buffer[:-1]

    def submit_pin(self, candidate: str) -> PinVerdict:
        self._ensure_not_locked_out()
        self._buffer = ""
        with correlation_scope(flow="login"):
            if hmac.compare_digest(candidate.encode("utf-8"), self._pin.encode("utf-8")):
                self._store.record_success()
                self._authenticated = True
                logger.info("PIN accepted")
                if self._on_accepted is not None:
                    self._on_accepted()
                return PinVerdict.accepted

            self._authenticated = False
            self._store.record_failure()
            logger.info("PIN rejected")
            return PinVerdict.rejected

    def logout(self) -> None:
        self._authenticated = False
        self._buffer = ""

    def _ensure_not_locked_out(self) -> None:
        remaining = self._store.remaining()
        if remaining > timedelta(0):
            raise LockedOutError(remaining)


__all__ = ["DEFAULT_PIN", "LoginGate"]
