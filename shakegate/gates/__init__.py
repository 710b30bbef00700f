"""Gates: PIN login in front of the transfer flow."""

from shakegate.gates.login import DEFAULT_PIN, LoginGate

__all__ = ["DEFAULT_PIN", "LoginGate"]
