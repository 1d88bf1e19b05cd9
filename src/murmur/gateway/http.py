"""Gateway that talks to the ``POST /api/chat`` endpoint."""

from __future__ import annotations

from typing import Any

import httpx

from .base import CompletionGateway, FailureKind, GatewayResult, Success


class HttpCompletionGateway(CompletionGateway):
    """Client side of the chat endpoint contract."""

    name = "http"

    def __init__(
        self,
        endpoint: str,
        *,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._endpoint = endpoint
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    @property
    def endpoint(self) -> str:
        return self._endpoint

    async def complete(self, prompt: str) -> GatewayResult:
        try:
            response = await self._client.post(self._endpoint, json={"message": prompt})
        except httpx.TransportError as exc:
            return self.fail(FailureKind.NETWORK_ERROR, f"{type(exc).__name__}: {exc!s}")

        if response.is_error:
            return self.fail(
                FailureKind.UPSTREAM_ERROR,
                f"status={response.status_code} error={_error_message(response)}",
            )

        try:
            payload = response.json()
        except ValueError as exc:
            return self.fail(FailureKind.MALFORMED_RESPONSE, f"invalid json: {exc!s}")

        reply = payload.get("response") if isinstance(payload, dict) else None
        if not isinstance(reply, str):
            return self.fail(FailureKind.MALFORMED_RESPONSE, f"missing 'response' field in {_preview(payload)}")
        return Success(reply)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return _preview(response.text)
    if isinstance(payload, dict) and isinstance(payload.get("error"), str):
        return payload["error"]
    return _preview(payload)


def _preview(value: Any, limit: int = 200) -> str:
    text = str(value)
    if len(text) > limit:
        return text[:limit] + "..."
    return text
