"""Frame schedulers — the host rendering loop seen from the layout engine.

The simulation and the zoom transition never loop on their own; they ask a
scheduler for the next frame and do one unit of work per callback. Only one
thread is involved: callbacks run on whatever loop owns the scheduler.
"""

from __future__ import annotations

import asyncio
import itertools
from collections.abc import Callable
from typing import Protocol

from wordtree_graph.config import DEFAULT_CONFIG, FRAME_INTERVAL, LayoutConfig

FrameCallback = Callable[[], None]


class FrameScheduler(Protocol):
    """Protocol that all frame schedulers must implement."""

    def request_frame(self, callback: FrameCallback) -> object:
        """Run ``callback`` once on the next frame; return a cancellation handle."""
        ...

    def cancel_frame(self, handle: object) -> None:
        """Cancel a pending frame. Cancelling a handle twice is harmless."""
        ...

    def now(self) -> float:
        """Current time in seconds on the scheduler's clock."""
        ...


class AsyncioFrameScheduler:
    """Schedules frames on an asyncio event loop at a fixed interval.

    Without an explicit ``loop`` the running loop is captured at construction,
    so the scheduler must be created inside a coroutine or callback running on
    that loop.

    Raises:
        RuntimeError: if no loop is given and none is running.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None, interval: float = FRAME_INTERVAL) -> None:
        self.loop = loop if loop is not None else asyncio.get_running_loop()
        self.interval = interval

    @classmethod
    def from_config(
        cls, config: LayoutConfig = DEFAULT_CONFIG, loop: asyncio.AbstractEventLoop | None = None
    ) -> AsyncioFrameScheduler:
        return cls(loop=loop, interval=config.frame_interval)

    def request_frame(self, callback: FrameCallback) -> asyncio.TimerHandle:
        return self.loop.call_later(self.interval, callback)

    def cancel_frame(self, handle: object) -> None:
        if isinstance(handle, asyncio.TimerHandle):
            handle.cancel()

    def now(self) -> float:
        return self.loop.time()


class ManualFrameScheduler:
    """Frames advance only when the host calls ``advance``.

    Suits synchronous hosts (export, notebooks) and tests. The clock moves by
    ``interval`` per advanced frame unless a ``clock`` is supplied.
    """

    def __init__(self, interval: float = FRAME_INTERVAL, clock: Callable[[], float] | None = None) -> None:
        self.interval = interval
        self._clock = clock
        self._elapsed = 0.0
        self._ids = itertools.count()
        self._pending: dict[int, FrameCallback] = {}

    @classmethod
    def from_config(cls, config: LayoutConfig = DEFAULT_CONFIG) -> ManualFrameScheduler:
        return cls(interval=config.frame_interval)

    def request_frame(self, callback: FrameCallback) -> int:
        handle = next(self._ids)
        self._pending[handle] = callback
        return handle

    def cancel_frame(self, handle: object) -> None:
        self._pending.pop(handle, None)  # type: ignore[arg-type]

    def now(self) -> float:
        if self._clock is not None:
            return self._clock()
        return self._elapsed

    @property
    def pending(self) -> int:
        return len(self._pending)

    def advance(self, frames: int = 1) -> int:
        """Run up to ``frames`` frames; return how many frames did any work.

        Callbacks requested during a frame run on the following frame.
        """
        ran = 0
        for _ in range(frames):
            if not self._pending:
                break
            batch, self._pending = self._pending, {}
            self._elapsed += self.interval
            for callback in batch.values():
                callback()
            ran += 1
        return ran

    def run_until_idle(self, max_frames: int = 10_000) -> int:
        """Advance until nothing is pending (or ``max_frames`` is hit)."""
        return self.advance(max_frames)
