"""Deadline-ordered one-shot timers."""

from __future__ import annotations

import heapq
from dataclasses import dataclass, field
from typing import Callable, Optional

__all__ = ["MAX_DELAY_MS", "TimerCallback", "TimerEntry", "TimerWheel", "TimerGuard"]

TimerCallback = Callable[[], None]

# next_deadline_ms() is clamped to a signed 32-bit value.
MAX_DELAY_MS = 2**31 - 1


@dataclass(order=True)
class TimerEntry:
    """A scheduled timer; entries order by deadline, then by scheduling order."""

    deadline_ms: int
    id: int
    callback: Optional[TimerCallback] = field(default=None, compare=False)
    cancelled: bool = field(default=False, compare=False)


class TimerWheel:
    """Min-heap of one-shot timers with lazy cancellation."""

    def __init__(self) -> None:
        self._next_id = 1
        self._heap: list[TimerEntry] = []
        self._live: dict[int, TimerEntry] = {}

    def __len__(self) -> int:
        """Pending timers, including cancelled ones not yet discarded."""
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)

    def schedule(self, delay_ms: int, callback: TimerCallback) -> int:
        """Schedule a timer; the delay is taken as a deadline on the caller's clock."""
        return self.schedule_at(delay_ms, callback)

    def schedule_at(self, deadline_ms: int, callback: TimerCallback) -> int:
        """Schedule a timer at an absolute time and return its id."""
        timer_id = self._next_id
        self._next_id += 1
        entry = TimerEntry(deadline_ms, timer_id, callback)
        heapq.heappush(self._heap, entry)
        self._live[timer_id] = entry
        return timer_id

    def cancel(self, timer_id: int) -> bool:
        """Cancel a pending timer; True if it was pending and is now cancelled."""
        entry = self._live.pop(timer_id, None)
        if entry is None:
            return False
        entry.cancelled = True
        entry.callback = None
        return True

    def process_expired(self, now_ms: int) -> int:
        """Fire every timer due at ``now_ms`` and return how many fired."""
        fired = 0
        while self._heap and self._heap[0].deadline_ms <= now_ms:
            entry = heapq.heappop(self._heap)
            self._live.pop(entry.id, None)
            if not entry.cancelled and entry.callback is not None:
                entry.callback()
                fired += 1
        return fired

    def next_deadline_ms(self, now_ms: int) -> int:
        """Milliseconds until the next timer: -1 if none, 0 if already due."""
        if not self._heap:
            return -1
        deadline = self._heap[0].deadline_ms
        if deadline <= now_ms:
            return 0
        return min(deadline - now_ms, MAX_DELAY_MS)


class TimerGuard:
    """Owns a timer and cancels it when closed or when its block exits."""

    def __init__(self, wheel: TimerWheel | None = None, timer_id: int = 0) -> None:
        self._wheel = wheel
        self._id = timer_id

    @property
    def id(self) -> int:
        return self._id

    @property
    def valid(self) -> bool:
        return self._wheel is not None and self._id != 0

    def cancel(self) -> None:
        if self._wheel is not None and self._id != 0:
            self._wheel.cancel(self._id)
        self._wheel = None
        self._id = 0

    def release(self) -> int:
        """Give up ownership without cancelling and return the timer id."""
        released = self._id
        self._wheel = None
        self._id = 0
        return released

    def __enter__(self) -> TimerGuard:
        return self

    def __exit__(self, *args: object) -> None:
        self.cancel()