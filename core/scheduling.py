# core/scheduling.py
# "Draw on the next frame" with coalescing. The frame clock is pluggable:
# tkinter's after_idle in the desktop UI, ManualFrameClock in tests / headless.

from __future__ import annotations

from typing import Any, Callable, Optional, Protocol


class FrameClock(Protocol):
    def request_frame(self, callback: Callable[[], None]) -> Any: ...

    def cancel_frame(self, handle: Any) -> None: ...


class ManualFrameClock:
    """Frames only happen when tick() is called."""

    def __init__(self) -> None:
        self._pending: dict[int, Callable[[], None]] = {}
        self._next_handle = 1

    def request_frame(self, callback: Callable[[], None]) -> int:
        handle = self._next_handle
        self._next_handle += 1
        self._pending[handle] = callback
        return handle

    def cancel_frame(self, handle: int) -> None:
        self._pending.pop(handle, None)

    @property
    def pending(self) -> int:
        return len(self._pending)

    def tick(self) -> int:
        """Run everything queued before this frame; returns how many ran."""
        due = list(self._pending.items())
        self._pending.clear()
        for _, callback in due:
            callback()
        return len(due)


class FrameScheduler:
    """At most one callback waits for the next frame; a new request replaces it."""

    def __init__(self, clock: FrameClock):
        self._clock = clock
        self._handle: Optional[Any] = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def request(self, callback: Callable[[], None]) -> None:
        self.cancel()

        def run() -> None:
            self._handle = None
            callback()

        self._handle = self._clock.request_frame(run)

    def cancel(self) -> None:
        if self._handle is not None:
            self._clock.cancel_frame(self._handle)
            self._handle = None
