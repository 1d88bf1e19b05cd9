from __future__ import annotations

import json
from collections.abc import Callable

import httpx
import pytest
from loguru import logger

from murmur.gateway import Failure, FailureKind, HttpCompletionGateway, Success

ENDPOINT = "http://murmur.test/api/chat"


def _gateway(handler: Callable[[httpx.Request], httpx.Response]) -> HttpCompletionGateway:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpCompletionGateway(ENDPOINT, client=client)


@pytest.mark.asyncio
async def test_http_gateway_posts_message_and_returns_raw_reply() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"response": "  raw reply\n\n\n"})

    result = await _gateway(handler).complete("Hello")

    assert result == Success("  raw reply\n\n\n")
    assert len(seen) == 1
    assert seen[0].method == "POST"
    assert str(seen[0].url) == ENDPOINT
    assert json.loads(seen[0].content) == {"message": "Hello"}


@pytest.mark.asyncio
async def test_http_gateway_maps_transport_errors_to_network_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    result = await _gateway(handler).complete("Hello")

    assert isinstance(result, Failure)
    assert result.kind is FailureKind.NETWORK_ERROR
    assert "connection refused" in result.detail


@pytest.mark.asyncio
async def test_http_gateway_maps_error_status_to_upstream_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"error": "Failed to generate response"})

    result = await _gateway(handler).complete("Hello")

    assert isinstance(result, Failure)
    assert result.kind is FailureKind.UPSTREAM_ERROR
    assert "status=500" in result.detail
    assert "Failed to generate response" in result.detail


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, text="<html>not json</html>"),
        httpx.Response(200, json={"reply": "wrong field"}),
        httpx.Response(200, json={"response": None}),
        httpx.Response(200, json=["response"]),
    ],
)
async def test_http_gateway_maps_unexpected_bodies_to_malformed_response(response: httpx.Response) -> None:
    result = await _gateway(lambda request: response).complete("Hello")

    assert isinstance(result, Failure)
    assert result.kind is FailureKind.MALFORMED_RESPONSE


@pytest.mark.asyncio
async def test_http_gateway_leaves_injected_client_open() -> None:
    client = httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(200, json={})))
    gateway = HttpCompletionGateway(ENDPOINT, client=client)

    await gateway.aclose()

    assert client.is_closed is False
    await client.aclose()


@pytest.mark.asyncio
async def test_http_gateway_logs_each_failure() -> None:
    messages: list[str] = []
    sink_id = logger.add(lambda message: messages.append(str(message)), level="ERROR", format="{message}")

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    try:
        await _gateway(handler).complete("Hello")
    finally:
        logger.remove(sink_id)

    assert any("gateway.http.error kind=network_error" in message for message in messages)
