"""HTTP chat endpoint backed by a completion gateway."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import BaseModel

from .gateway.base import CompletionGateway, Success

CHAT_PATH = "/api/chat"
GENERATION_FAILED = "Failed to generate response"


class ChatRequest(BaseModel):
    message: str


class ChatResponse(BaseModel):
    response: str


def _failure_response() -> JSONResponse:
    return JSONResponse({"error": GENERATION_FAILED}, status_code=500)


def create_app(gateway: CompletionGateway) -> FastAPI:
    """Build the ASGI app exposing ``POST /api/chat``."""

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        yield
        await gateway.aclose()

    app = FastAPI(title="Murmur", lifespan=lifespan)
    app.state.gateway = gateway

    @app.exception_handler(RequestValidationError)
    async def _invalid_request(_request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.error("server.chat.invalid_request errors={}", exc.errors())
        return _failure_response()

    @app.post(CHAT_PATH, response_model=ChatResponse)
    async def chat(body: ChatRequest) -> ChatResponse | JSONResponse:
        try:
            result = await gateway.complete(body.message)
        except Exception:
            logger.exception("server.chat.crash gateway={}", gateway.name)
            return _failure_response()
        if isinstance(result, Success):
            return ChatResponse(response=result.reply_text)
        logger.error("server.chat.error kind={} detail={}", result.kind.value, result.detail)
        return _failure_response()

    @app.get("/healthz")
    async def healthz() -> dict[str, str]:
        return {"status": "ok"}

    return app
