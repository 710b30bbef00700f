from __future__ import annotations

from shakegate.models.feedback import FEEDBACK_PATTERNS, FeedbackPattern, FeedbackSignal, Tone
from shakegate.models.lockout import LockoutState
from shakegate.models.motion import STANDARD_GRAVITY, ShakeEvent, ShakeSample
from shakegate.models.transfer import PinVerdict, TransferRequest, TransferResult
from shakegate.models.verification import FailureReason, SessionOutcome, SessionState

__all__ = [
    "FEEDBACK_PATTERNS",
    "FailureReason",
    "FeedbackPattern",
    "FeedbackSignal",
    "LockoutState",
    "PinVerdict",
    "STANDARD_GRAVITY",
    "SessionOutcome",
    "SessionState",
    "ShakeEvent",
    "ShakeSample",
    "Tone",
    "TransferRequest",
    "TransferResult",
]
