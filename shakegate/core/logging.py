"""Logging for login and transfer flows.

Records carry the flow (``login``, ``transfer``, ``verification``) and the
verification session ID. Text output shows them as a short ``[flow/session]``
tag; JSON output adds them as fields only when they are set.
"""

from __future__ import annotations

import contextvars
import json
import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import UTC, datetime

_SESSION_TAG_LENGTH = 8


@dataclass(frozen=True, slots=True)
class CorrelationContext:
    flow: str | None = None
    session_id: str | None = None

    @property
    def tag(self) -> str:
        """``transfer/1a2b3c4d``, ``login`` or ``-`` when nothing is set."""
        parts = [self.flow or "-"]
        if self.session_id:
            parts.append(self.session_id[:_SESSION_TAG_LENGTH])
        return "/".join(parts)


_NO_CONTEXT = CorrelationContext()
_current: contextvars.ContextVar[CorrelationContext] = contextvars.ContextVar(
    "shakegate_correlation", default=_NO_CONTEXT
)


def get_correlation_context() -> CorrelationContext:
    """Correlation IDs of the running flow.

    The countdown task is created inside the transfer's scope, so asyncio
    copies the context and its ticks log with the same IDs.
    """
    return _current.get()


class CorrelationFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        context = _current.get()
        record.flow = context.flow
        record.session_id = context.session_id
        record.correlation = context.tag
        return True


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in ("flow", "session_id"):
            value = getattr(record, field, None)
            if value is not None:
                payload[field] = value
        if record.exc_info is not None:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True)


_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(correlation)s] %(message)s"


def setup_logging(level: int | str = logging.INFO, json_output: bool = False) -> None:
    """Replace root handlers with one stdout handler that tags every record."""
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.filters.clear()

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(_JsonFormatter() if json_output else logging.Formatter(_TEXT_FORMAT))
    correlation_filter = CorrelationFilter()
    handler.addFilter(correlation_filter)
    root.addFilter(correlation_filter)
    root.addHandler(handler)


@contextmanager
def correlation_scope(
    *,
    flow: str | None = None,
    session_id: str | None = None,
) -> Iterator[None]:
    """Set correlation IDs for the enclosed block; omitted ones keep the outer value."""
    outer = _current.get()
    token = _current.set(
        CorrelationContext(
            flow=outer.flow if flow is None else flow,
            session_id=outer.session_id if session_id is None else session_id,
        )
    )
    try:
        yield
    finally:
        _current.reset(token)


__all__ = [
    "CorrelationContext",
    "CorrelationFilter",
    "correlation_scope",
    "get_correlation_context",
    "setup_logging",
]
