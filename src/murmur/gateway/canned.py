"""Offline gateway that answers with canned demo replies."""

from __future__ import annotations

import asyncio
import random
from collections.abc import Sequence

from loguru import logger

from .base import CompletionGateway, GatewayResult, Success

DEMO_REPLIES: tuple[str, ...] = (
    "Hello! Can you tell me your name and a bit about your business and what you're looking to build? "
    "I'll send you a summary by email after.",
    "Welcome to the Murmur chat widget! You can build an experience like this to replace complex forms.",
    "That's interesting! Could you tell me more about your specific requirements?",
    "I understand. Let me suggest a few options that might work better for your needs.",
    "Great! I've noted down your preferences. Is there anything else you'd like to add?",
)
DEFAULT_THINKING_DELAY = 2.0


class CannedCompletionGateway(CompletionGateway):
    """Pick a random reply after a fixed thinking delay, without any network."""

    name = "canned"

    def __init__(
        self,
        replies: Sequence[str] = DEMO_REPLIES,
        *,
        thinking_delay: float = DEFAULT_THINKING_DELAY,
        rng: random.Random | None = None,
    ) -> None:
        if not replies:
            raise ValueError("at least one canned reply is required")
        self._replies = tuple(replies)
        self._thinking_delay = thinking_delay
        self._rng = rng or random.Random()

    async def complete(self, prompt: str) -> GatewayResult:
        logger.debug("gateway.canned.call chars={}", len(prompt))
        if self._thinking_delay > 0:
            await asyncio.sleep(self._thinking_delay)
        return Success(self._rng.choice(self._replies))
