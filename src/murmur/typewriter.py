"""Timed character reveal used to simulate a streaming reply."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any, Protocol

from loguru import logger

DEFAULT_INTERVAL = 0.03
SPEED_PRESETS: dict[str, float] = {
    "slow": 0.06,
    "normal": DEFAULT_INTERVAL,
    "fast": 0.015,
}

RevealHandler = Callable[[str], None]
CompleteHandler = Callable[[str], None]


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Anything that can run a callback after a delay, such as an asyncio event loop."""

    def call_later(self, delay: float, callback: Callable[..., Any], /) -> TimerHandle: ...


class Typewriter:
    """Reveal a target string one character per interval, left to right.

    Each ``retarget`` starts a fresh reveal and yields exactly one completion
    callback, unless a later ``retarget`` or ``cancel`` discards it first.
    """

    def __init__(
        self,
        *,
        interval: float = DEFAULT_INTERVAL,
        scheduler: Scheduler | None = None,
        on_reveal: RevealHandler | None = None,
        on_complete: CompleteHandler | None = None,
    ) -> None:
        if interval < 0:
            raise ValueError("interval must be non-negative")
        self._interval = interval
        self._scheduler = scheduler
        self._on_reveal = on_reveal
        self._on_complete = on_complete
        self._target = ""
        self._revealed = 0
        self._running = False
        self._timer: TimerHandle | None = None

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def target(self) -> str:
        return self._target

    @property
    def revealed_count(self) -> int:
        return self._revealed

    @property
    def revealed_text(self) -> str:
        return self._target[: self._revealed]

    @property
    def running(self) -> bool:
        return self._running

    def retarget(self, target: str) -> None:
        """Discard any reveal in progress and start revealing ``target`` from scratch."""
        self._cancel_timer()
        if self._running:
            logger.debug("typewriter.retarget discarded={}/{}", self._revealed, len(self._target))
        self._target = target
        self._revealed = 0
        self._running = True
        self._schedule()

    def tick(self) -> None:
        """Reveal the next character; finish once the whole target is visible."""
        if not self._running:
            return
        self._cancel_timer()
        if self._revealed < len(self._target):
            self._revealed += 1
            if self._on_reveal is not None:
                self._on_reveal(self.revealed_text)
        if self._revealed == len(self._target):
            self._finish()
            return
        self._schedule()

    def cancel(self) -> None:
        """Stop the reveal immediately without signalling completion."""
        self._cancel_timer()
        self._running = False

    def _finish(self) -> None:
        self._running = False
        if self._on_complete is not None:
            self._on_complete(self._target)

    def _schedule(self) -> None:
        scheduler = self._scheduler or asyncio.get_running_loop()
        self._timer = scheduler.call_later(self._interval, self._on_timer)

    def _on_timer(self) -> None:
        self._timer = None
        self.tick()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
