"""Completion gateway contract and result types."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import StrEnum

from loguru import logger


class FailureKind(StrEnum):
    NETWORK_ERROR = "network_error"
    UPSTREAM_ERROR = "upstream_error"
    MALFORMED_RESPONSE = "malformed_response"


@dataclass(frozen=True)
class Success:
    reply_text: str

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    kind: FailureKind
    detail: str = ""

    @property
    def ok(self) -> bool:
        return False


GatewayResult = Success | Failure


class CompletionGateway(ABC):
    """Turns one prompt into one reply, or into a typed failure.

    Implementations make exactly one outbound call per ``complete`` and never
    raise for provider problems; those come back as ``Failure`` values.
    """

    name: str = "base"

    @abstractmethod
    async def complete(self, prompt: str) -> GatewayResult:
        """Return the raw, unformatted reply for ``prompt``."""

    def fail(self, kind: FailureKind, detail: str) -> Failure:
        logger.error("gateway.{}.error kind={} detail={}", self.name, kind.value, detail)
        return Failure(kind=kind, detail=detail)

    async def aclose(self) -> None:
        """Release any held connections."""
        return None
