from __future__ import annotations

import threading

from shakegate.errors import InsufficientFundsError, InvalidAmountError

DEFAULT_INITIAL_BALANCE = 1_000_000


def parse_amount(raw: str, balance: int) -> int:
    """Parse a user-typed transfer amount; must be a whole number in ``1..balance``."""
    text = raw.strip()
    if not text or not text.isascii() or not text.isdigit():
        raise InvalidAmountError("Please enter a valid amount")
    amount = int(text)
    validate_amount(amount, balance)
    return amount


def validate_amount(amount: int, balance: int) -> None:
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise InvalidAmountError("Please enter a valid amount")
    if amount > balance:
        raise InsufficientFundsError("Please enter a valid amount")


class Account:
    """In-memory balance. Withdrawals may arrive from the sensor thread."""

    def __init__(self, balance: int = DEFAULT_INITIAL_BALANCE) -> None:
        if balance < 0:
            raise ValueError("balance must be >= 0")
        self._balance = balance
        self._lock = threading.Lock()

    @property
    def balance(self) -> int:
        with self._lock:
            return self._balance

    def withdraw(self, amount: int) -> int:
        """Debit ``amount`` and return the new balance."""
        with self._lock:
            validate_amount(amount, self._balance)
            self._balance -= amount
            return self._balance


__all__ = ["DEFAULT_INITIAL_BALANCE", "Account", "parse_amount", "validate_amount"]
