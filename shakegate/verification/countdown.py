from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)


class Countdown:
    """Background asyncio task that calls ``on_tick`` once per interval.

    The loop ends when ``on_tick`` returns False or ``stop`` is called.
    ``stop`` is idempotent and may be called from any thread, including
    from inside ``on_tick`` itself.
    """

    def __init__(self, on_tick: Callable[[], bool], interval_s: float = 1.0) -> None:
        if interval_s <= 0:
            raise ValueError("interval_s must be positive")
        self._on_tick = on_tick
        self._interval_s = interval_s
        self._task: asyncio.Task[None] | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._stopped = False

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Schedule the tick loop on the running event loop."""
        if self._task is not None:
            raise RuntimeError("countdown already started")
        self._loop = asyncio.get_running_loop()
        self._task = self._loop.create_task(self._run())

    def stop(self) -> None:
        self._stopped = True
        task, loop = self._task, self._loop
        if task is None or loop is None or task.done():
            return
        try:
            current_loop = asyncio.get_running_loop()
        except RuntimeError:
            current_loop = None
        if current_loop is loop:
            # Cancelling ourselves mid-tick is unnecessary: _run sees _stopped and returns.
            if task is not asyncio.current_task():
                task.cancel()
        elif not loop.is_closed():
            loop.call_soon_threadsafe(task.cancel)

    async def wait(self) -> None:
        """Wait for the tick loop to finish, swallowing its cancellation."""
        if self._task is None:
            return
        with contextlib.suppress(asyncio.CancelledError):
            await self._task

    async def _run(self) -> None:
        while not self._stopped:
            await asyncio.sleep(self._interval_s)
            if self._stopped:
                return
            try:
                keep_going = self._on_tick()
            except Exception:
                logger.exception("countdown tick failed")
                raise
            if not keep_going:
                return


__all__ = ["Countdown"]
