"""Frame schedulers - the per-frame primitive a layout session runs on.

A scheduler runs one callback per frame and can revoke a callback that has
been requested but has not yet run. Callbacks never run concurrently: the
next frame is only requested once the previous one has finished.
"""

from __future__ import annotations

import asyncio
import itertools
from collections import OrderedDict
from typing import Any, Callable, Protocol, runtime_checkable

FrameCallback = Callable[[], None]


@runtime_checkable
class FrameScheduler(Protocol):
    """Protocol for per-frame scheduling primitives."""

    def request_frame(self, callback: FrameCallback) -> Any:
        """Run callback on the next frame; return a handle for cancel_frame."""
        ...

    def cancel_frame(self, handle: Any) -> None:
        """Revoke a requested frame. Unknown or already-run handles are ignored."""
        ...


class ManualFrameScheduler:
    """Scheduler driven explicitly by its owner.

    Requested frames queue up until run_next() or run_until_idle() is
    called. Used where there is no display refresh to hook into: the CLI,
    the REST server and tests.
    """

    def __init__(self) -> None:
        self._pending: OrderedDict[int, FrameCallback] = OrderedDict()
        self._handles = itertools.count(1)
        self.frames_run = 0

    def request_frame(self, callback: FrameCallback) -> int:
        handle = next(self._handles)
        self._pending[handle] = callback
        return handle

    def cancel_frame(self, handle: Any) -> None:
        self._pending.pop(handle, None)

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def run_next(self) -> bool:
        """Run the oldest pending frame.

        Returns:
            False if there was nothing to run.
        """
        if not self._pending:
            return False
        _, callback = self._pending.popitem(last=False)
        self.frames_run += 1
        callback()
        return True

    def run_until_idle(self, max_frames: int | None = None) -> int:
        """Run frames until none are pending or max_frames have run.

        Returns:
            Number of frames run by this call.
        """
        ran = 0
        while max_frames is None or ran < max_frames:
            if not self.run_next():
                break
            ran += 1
        return ran


class AsyncioFrameScheduler:
    """Scheduler that runs frames on an asyncio event loop at a fixed rate."""

    def __init__(
        self,
        loop: asyncio.AbstractEventLoop | None = None,
        frame_rate: float = 60.0,
    ) -> None:
        if frame_rate <= 0:
            raise ValueError(f"frame_rate must be positive, got {frame_rate}")
        self._loop = loop
        self.frame_interval = 1.0 / frame_rate

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def request_frame(self, callback: FrameCallback) -> asyncio.TimerHandle:
        return self.loop.call_later(self.frame_interval, callback)

    def cancel_frame(self, handle: Any) -> None:
        if handle is not None:
            handle.cancel()
