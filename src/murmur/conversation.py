"""Turn-taking state machine for one chat widget."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from blinker import Signal
from loguru import logger

from .formatter import format_reply
from .gateway.base import CompletionGateway, Failure, FailureKind, GatewayResult, Success
from .typewriter import DEFAULT_INTERVAL, Scheduler, Typewriter

FALLBACK_REPLY = "Sorry, I couldn't get a response right now. Please try again."
GREETING = "Great! I'll be here whenever you're ready to chat. Just let me know!"

ChangeHandler = Callable[["RenderState"], None]


class Speaker(StrEnum):
    USER = "user"
    ASSISTANT = "assistant"


class Phase(StrEnum):
    IDLE = "idle"
    THINKING = "thinking"
    STREAMING = "streaming"


@dataclass(frozen=True)
class Turn:
    text: str
    speaker: Speaker


@dataclass
class PendingExchange:
    prompt: str
    phase: Phase = Phase.THINKING
    revealed_prefix_length: int = 0
    full_reply_text: str | None = None


@dataclass(frozen=True)
class RenderState:
    """What a presentation layer needs to draw the widget."""

    latest_turn: Turn | None
    thinking: bool
    streaming: bool
    revealed_text: str
    input_enabled: bool


class Conversation:
    """Owns the transcript and the single pending exchange.

    ``submit`` is accepted only while idle; the reply is fetched through the
    gateway, formatted, revealed by the typewriter and then committed.
    Failures of any kind commit ``FALLBACK_REPLY`` instead.
    """

    def __init__(
        self,
        gateway: CompletionGateway,
        *,
        typing_interval: float = DEFAULT_INTERVAL,
        scheduler: Scheduler | None = None,
        greeting: str | None = None,
        fallback_reply: str = FALLBACK_REPLY,
    ) -> None:
        self._gateway = gateway
        self._fallback_reply = fallback_reply
        self._turns: list[Turn] = []
        if greeting:
            self._turns.append(Turn(greeting, Speaker.ASSISTANT))
        self._pending: PendingExchange | None = None
        self._input = ""
        self._closed = False
        self._task: asyncio.Task[None] | None = None
        self._idle = asyncio.Event()
        self._idle.set()
        self._changed = Signal("murmur.conversation.changed")
        self._typewriter = Typewriter(
            interval=typing_interval,
            scheduler=scheduler,
            on_reveal=self._on_reveal,
            on_complete=self._on_reveal_complete,
        )

    @property
    def transcript(self) -> tuple[Turn, ...]:
        return tuple(self._turns)

    @property
    def latest_turn(self) -> Turn | None:
        return self._turns[-1] if self._turns else None

    @property
    def phase(self) -> Phase:
        return self._pending.phase if self._pending is not None else Phase.IDLE

    @property
    def pending(self) -> PendingExchange | None:
        return self._pending

    @property
    def input_buffer(self) -> str:
        return self._input

    @property
    def accepts_input(self) -> bool:
        return not self._closed and self._pending is None

    @property
    def closed(self) -> bool:
        return self._closed

    def set_input(self, text: str) -> None:
        """Update the single-line input control; ignored while input is disabled."""
        if self.accepts_input:
            self._input = text

    def submit(self, text: str | None = None) -> bool:
        """Start an exchange with ``text`` (or the input buffer).

        Returns False without touching any state when the machine is busy or
        the text is blank.
        """
        raw = self._input if text is None else text
        if not self.accepts_input:
            logger.debug("conversation.submit.rejected phase={}", self.phase.value)
            return False
        prompt = raw.strip()
        if not prompt:
            return False

        loop = asyncio.get_running_loop()
        self._turns.append(Turn(raw, Speaker.USER))
        self._input = ""
        self._pending = PendingExchange(prompt=prompt)
        self._idle.clear()
        logger.info("conversation.submit chars={}", len(prompt))
        self._task = loop.create_task(self._exchange(prompt))
        self._publish()
        return True

    async def wait_idle(self) -> None:
        """Wait until the current exchange (if any) has been committed."""
        await self._idle.wait()

    def render_state(self) -> RenderState:
        pending = self._pending
        streaming = pending is not None and pending.phase is Phase.STREAMING
        return RenderState(
            latest_turn=self.latest_turn,
            thinking=pending is not None and pending.phase is Phase.THINKING,
            streaming=streaming,
            revealed_text=self._typewriter.revealed_text if streaming else "",
            input_enabled=self.accepts_input,
        )

    def on_change(self, handler: ChangeHandler) -> Callable[[], None]:
        """Subscribe to render-state changes; returns an unsubscribe callable."""

        def _receiver(sender: Any, *, state: RenderState) -> None:
            handler(state)

        self._changed.connect(_receiver, weak=False)
        return lambda: self._changed.disconnect(_receiver)

    def close(self) -> None:
        """Tear down: stop any reveal now and drop a gateway result that arrives later."""
        if self._closed:
            return
        self._closed = True
        self._typewriter.cancel()
        self._idle.set()
        logger.debug("conversation.closed phase={}", self.phase.value)

    async def _exchange(self, prompt: str) -> None:
        try:
            result = await self._gateway.complete(prompt)
        except Exception as exc:
            logger.exception("conversation.gateway.crash gateway={}", self._gateway.name)
            result = Failure(FailureKind.UPSTREAM_ERROR, f"{type(exc).__name__}: {exc!s}")
        if self._closed:
            logger.debug("conversation.result.dropped ok={}", result.ok)
            return
        self._resolve(result)

    def _resolve(self, result: GatewayResult) -> None:
        pending = self._pending
        if pending is None or pending.phase is not Phase.THINKING:
            return
        if isinstance(result, Success):
            text = format_reply(result.reply_text)
            pending.full_reply_text = text
            pending.revealed_prefix_length = 0
            pending.phase = Phase.STREAMING
            self._typewriter.retarget(text)
            self._publish()
            return

        logger.warning("conversation.exchange.failed kind={}", result.kind.value)
        self._commit(self._fallback_reply)

    def _on_reveal(self, prefix: str) -> None:
        if self._pending is None or self._pending.phase is not Phase.STREAMING:
            return
        self._pending.revealed_prefix_length = len(prefix)
        self._publish()

    def _on_reveal_complete(self, text: str) -> None:
        if self._pending is None or self._pending.phase is not Phase.STREAMING:
            return
        self._commit(text)

    def _commit(self, reply: str) -> None:
        self._turns.append(Turn(reply, Speaker.ASSISTANT))
        self._pending = None
        self._idle.set()
        logger.info("conversation.commit turns={}", len(self._turns))
        self._publish()

    def _publish(self) -> None:
        # A failing subscriber must not stall the reveal or the commit.
        state = self.render_state()
        for receiver in list(self._changed.receivers_for(self)):
            try:
                receiver(self, state=state)
            except Exception:
                logger.exception("conversation.observer.error")
