from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class FeedbackDevice(Protocol):
    def tick(self) -> None: ...

    def success(self) -> None: ...

    def failure(self) -> None: ...


__all__ = ["FeedbackDevice"]
