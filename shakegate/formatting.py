"""User-facing number and duration rendering."""

from __future__ import annotations

from datetime import timedelta


def format_amount(amount: int) -> str:
    """Render an amount with thousands separators, e.g. ``1,000,000``."""
    return f"{amount:,}"


def format_remaining(remaining: timedelta) -> str:
    """Render a countdown as ``"1m 5s"`` or ``"45s"``.

    Sub-second remainders are truncated, matching a once-per-second display.
    """
    seconds = max(0, int(remaining.total_seconds()))
    minutes, secs = divmod(seconds, 60)
    if minutes > 0:
        return f"{minutes}m {secs}s"
    return f"{secs}s"


__all__ = ["format_amount", "format_remaining"]
