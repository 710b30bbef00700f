"""Banking: account balance and the shake-verified transfer flow."""

from shakegate.banking.account import DEFAULT_INITIAL_BALANCE, Account, parse_amount
from shakegate.banking.transfer import TransferFlow

__all__ = ["DEFAULT_INITIAL_BALANCE", "Account", "TransferFlow", "parse_amount"]
