from __future__ import annotations

import heapq
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import pytest


@dataclass(order=True)
class _VirtualTimer:
    when: float
    seq: int
    callback: Callable[[], Any] = field(compare=False)
    cancelled: bool = field(default=False, compare=False)

    def cancel(self) -> None:
        self.cancelled = True


class VirtualScheduler:
    """Drop-in for ``loop.call_later`` whose clock only moves when told to."""

    def __init__(self) -> None:
        self.now = 0.0
        self._timers: list[_VirtualTimer] = []
        self._seq = 0

    def call_later(self, delay: float, callback: Callable[[], Any], /) -> _VirtualTimer:
        self._seq += 1
        timer = _VirtualTimer(self.now + delay, self._seq, callback)
        heapq.heappush(self._timers, timer)
        return timer

    @property
    def pending(self) -> int:
        return sum(1 for timer in self._timers if not timer.cancelled)

    def advance(self, seconds: float) -> None:
        deadline = self.now + seconds
        while self._timers and self._timers[0].when <= deadline:
            timer = heapq.heappop(self._timers)
            if timer.cancelled:
                continue
            self.now = timer.when
            timer.callback()
        self.now = deadline


@pytest.fixture
def scheduler() -> VirtualScheduler:
    return VirtualScheduler()
