"""Transfer flow: amount validation, lockout gating and one verification session per request."""

from __future__ import annotations

import logging
import random
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from functools import partial

from shakegate.banking.account import Account, parse_amount, validate_amount
from shakegate.core.logging import correlation_scope
from shakegate.errors import LockedOutError, NotAuthenticatedError
from shakegate.formatting import format_amount
from shakegate.gates.login import LoginGate
from shakegate.models.transfer import TransferRequest, TransferResult
from shakegate.motion.detector import ShakeDetector
from shakegate.persistence.lockout_store import LockoutStore
from shakegate.protocols.feedback import FeedbackDevice
from shakegate.protocols.sensors import SensorSource
from shakegate.verification.session import DEFAULT_TIME_LIMIT_S, VerificationSession

logger = logging.getLogger(__name__)


class TransferFlow:
    def __init__(
        self,
        account: Account,
        gate: LoginGate,
        store: LockoutStore,
        sensor: SensorSource,
        feedback: FeedbackDevice,
        *,
        time_limit_s: int = DEFAULT_TIME_LIMIT_S,
        tick_interval_s: float = 1.0,
        rng: random.Random | None = None,
        on_result: Callable[[TransferResult], None] | None = None,
    ) -> None:
        self._account = account
        self._gate = gate
        self._store = store
        self._sensor = sensor
        self._feedback = feedback
        self._time_limit_s = time_limit_s
        self._tick_interval_s = tick_interval_s
        self._rng = rng
        self._on_result = on_result
        self._session: VerificationSession | None = None
        self._request: TransferRequest | None = None
        self.results: list[TransferResult] = []

    @property
    def active_session(self) -> VerificationSession | None:
        session = self._session
        if session is None or not session.is_pending:
            return None
        return session

    def request_transfer(
        self,
        amount: int | str,
        *,
        run_countdown: bool = True,
        target_count: int | None = None,
    ) -> VerificationSession:
        """Validate the request and start a shake verification for it.

        Raises ``NotAuthenticatedError``, ``LockedOutError`` or
        ``InvalidAmountError``; none of them touch the failure counter. A
        still-pending earlier session is abandoned first.
        """
        with correlation_scope(flow="transfer"):
            if not self._gate.authenticated:
                raise NotAuthenticatedError("Log in with your PIN first")
            remaining = self._store.remaining()
            if remaining > timedelta(0):
                raise LockedOutError(remaining)

            balance = self._account.balance
            if isinstance(amount, str):
                amount = parse_amount(amount, balance)
            else:
                validate_amount(amount, balance)
            request = TransferRequest(amount=amount, requested_at=datetime.now(UTC))

            if self._session is not None:
                self._session.close()

            session = VerificationSession(
                ShakeDetector(self._sensor),
                self._store,
                self._feedback,
                on_success=partial(self._complete, request),
                on_failure=partial(self._fail, request),
                time_limit_s=self._time_limit_s,
                tick_interval_s=self._tick_interval_s,
                target_count=target_count,
                rng=self._rng,
            )
            self._session = session
            self._request = request
            with correlation_scope(session_id=session.session_id):
                logger.info("Transfer of %s requested", format_amount(request.amount))
                session.start(run_countdown=run_countdown)
            return session

    def cancel(self) -> TransferResult | None:
        """Back out of the pending verification. Not counted as a failure."""
        session, request = self._session, self._request
        if session is None or request is None:
            return None
        if not session.cancel():
            return None
        logger.info("Transfer verification %s cancelled", session.session_id)
        return self._record(session, request, self._account.balance)

    def _complete(self, request: TransferRequest, session: VerificationSession) -> None:
        balance = self._account.withdraw(request.amount)
        logger.info(
            "Transfer successful! %s sent; balance %s",
            format_amount(request.amount),
            format_amount(balance),
        )
        self._record(session, request, balance)

    def _fail(self, request: TransferRequest, session: VerificationSession) -> None:
        logger.info("Transaction failed: %s not sent", format_amount(request.amount))
        self._record(session, request, self._account.balance)

    def _record(
        self, session: VerificationSession, request: TransferRequest, balance: int
    ) -> TransferResult:
        result = TransferResult(
            session_id=session.session_id,
            amount=request.amount,
            outcome=session.outcome,
            balance_after=balance,
        )
        self.results.append(result)
        if self._on_result is not None:
            self._on_result(result)
        return result


__all__ = ["TransferFlow"]
