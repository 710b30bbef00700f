from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, model_validator


class SessionState(StrEnum):
    pending = "pending"
    success = "success"
    failure = "failure"


class FailureReason(StrEnum):
    timeout = "timeout"
    cancelled = "cancelled"


class SessionOutcome(BaseModel):
    """Tagged outcome of a verification session.

    ``reason`` is set exactly when ``state`` is ``failure``. The session swaps
    the whole value in one step, so there is never a half-terminal state.
    """

    model_config = ConfigDict(frozen=True)

    state: SessionState = SessionState.pending
    reason: FailureReason | None = None

    @model_validator(mode="after")
    def _reason_matches_state(self) -> SessionOutcome:
        if self.state == SessionState.failure and self.reason is None:
            raise ValueError("failure outcome requires a reason")
        if self.state != SessionState.failure and self.reason is not None:
            raise ValueError(f"{self.state} outcome cannot carry a failure reason")
        return self

    @classmethod
    def pending(cls) -> SessionOutcome:
        return cls(state=SessionState.pending)

    @classmethod
    def success(cls) -> SessionOutcome:
        return cls(state=SessionState.success)

    @classmethod
    def failure(cls, reason: FailureReason) -> SessionOutcome:
        return cls(state=SessionState.failure, reason=reason)

    @property
    def is_terminal(self) -> bool:
        return self.state != SessionState.pending

    @property
    def counts_against_lockout(self) -> bool:
        return self.state == SessionState.failure and self.reason == FailureReason.timeout


__all__ = ["FailureReason", "SessionOutcome", "SessionState"]
