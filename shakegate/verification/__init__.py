"""Verification: the shake-count session state machine and its countdown."""

from shakegate.verification.countdown import Countdown
from shakegate.verification.session import (
    DEFAULT_TIME_LIMIT_S,
    MAX_TARGET_COUNT,
    MIN_TARGET_COUNT,
    VerificationSession,
)

__all__ = [
    "Countdown",
    "DEFAULT_TIME_LIMIT_S",
    "MAX_TARGET_COUNT",
    "MIN_TARGET_COUNT",
    "VerificationSession",
]
