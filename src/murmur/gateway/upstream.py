"""Gateway that calls the model provider directly through Republic."""

from __future__ import annotations

from typing import Any

import httpx
from republic import LLM

from murmur.config import Settings

from .base import CompletionGateway, FailureKind, GatewayResult, Success

TRANSPORT_ERRORS: tuple[type[BaseException], ...] = (httpx.TransportError, ConnectionError, TimeoutError)


def build_llm(settings: Settings) -> LLM:
    """Build the Republic client for the configured provider."""
    settings.require_upstream()
    return LLM(
        model=settings.model,
        api_key=settings.resolved_api_key,
        api_base=settings.api_base,
    )


class UpstreamCompletionGateway(CompletionGateway):
    """Single-shot completion with a fixed system preamble and output cap."""

    name = "upstream"

    def __init__(self, llm: Any, *, system_prompt: str, max_tokens: int) -> None:
        self._llm = llm
        self._system_prompt = system_prompt
        self._max_tokens = max_tokens

    @classmethod
    def from_settings(cls, settings: Settings) -> UpstreamCompletionGateway:
        return cls(build_llm(settings), system_prompt=settings.system_prompt, max_tokens=settings.max_tokens)

    async def complete(self, prompt: str) -> GatewayResult:
        try:
            reply = await self._llm.chat_async(
                prompt,
                system_prompt=self._system_prompt,
                max_tokens=self._max_tokens,
            )
        except Exception as exc:
            kind = FailureKind.NETWORK_ERROR if _is_transport_error(exc) else FailureKind.UPSTREAM_ERROR
            return self.fail(kind, f"{type(exc).__name__}: {exc!s}")

        if not isinstance(reply, str):
            return self.fail(FailureKind.MALFORMED_RESPONSE, f"expected text, got {type(reply).__name__}")
        return Success(reply)


def _is_transport_error(exc: BaseException) -> bool:
    # Provider SDKs wrap transport failures, so follow the cause chain.
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        if isinstance(current, TRANSPORT_ERRORS):
            return True
        seen.add(id(current))
        current = current.__cause__ or current.__context__
    return False
