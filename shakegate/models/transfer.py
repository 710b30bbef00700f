from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field

from shakegate.models.verification import SessionOutcome, SessionState


class PinVerdict(StrEnum):
    accepted = "accepted"
    rejected = "rejected"


class TransferRequest(BaseModel):
    """Context carried from the amount entry to the verification session."""

    amount: int = Field(gt=0)
    requested_at: datetime


class TransferResult(BaseModel):
    session_id: str
    amount: int = Field(gt=0)
    outcome: SessionOutcome
    balance_after: int = Field(ge=0)

    @property
    def completed(self) -> bool:
        return self.outcome.state == SessionState.success


__all__ = ["PinVerdict", "TransferRequest", "TransferResult"]
