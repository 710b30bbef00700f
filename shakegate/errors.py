"""Error taxonomy for boundary validation and lockout policy rejections.

Verification failures and cancellations are outcomes, not exceptions: they
surface through ``SessionOutcome`` on the session.
"""

from __future__ import annotations

from datetime import timedelta

from shakegate.formatting import format_remaining


class ShakegateError(Exception):
    """Base class for all shakegate errors."""


class InvalidInputError(ShakegateError, ValueError):
    """Input rejected at the boundary before it reaches the core."""


class InvalidAmountError(InvalidInputError):
    """Transfer amount is not a positive whole number."""


class InsufficientFundsError(InvalidAmountError):
    """Transfer amount exceeds the current balance."""


class LockedOutError(ShakegateError):
    """Action attempted while the account is locked out. Never counted as a failure."""

    def __init__(self, remaining: timedelta) -> None:
        self.remaining = remaining
        super().__init__(f"Account locked. Try again in {format_remaining(remaining)}")


class NotAuthenticatedError(ShakegateError):
    """Transfer requested before the PIN was accepted."""


__all__ = [
    "InsufficientFundsError",
    "InvalidAmountError",
    "InvalidInputError",
    "LockedOutError",
    "NotAuthenticatedError",
    "ShakegateError",
]
