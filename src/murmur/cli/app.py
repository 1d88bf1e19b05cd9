"""CLI entry points for Murmur."""

from __future__ import annotations

import asyncio
from enum import StrEnum
from typing import Annotated

import typer
import uvicorn

from murmur.config import Settings, load_settings
from murmur.conversation import GREETING, Conversation
from murmur.errors import ConfigurationError
from murmur.gateway import CannedCompletionGateway, CompletionGateway, HttpCompletionGateway, UpstreamCompletionGateway
from murmur.logging_utils import configure_logging
from murmur.server import create_app
from murmur.typewriter import SPEED_PRESETS

from .live import run_chat
from .render import Renderer, create_cli_renderer

app = typer.Typer(
    name="murmur",
    help="Chat with a language model and watch the reply type itself out.",
    add_completion=False,
    rich_markup_mode="rich",
)


class ReplySource(StrEnum):
    ENDPOINT = "endpoint"
    DIRECT = "direct"
    OFFLINE = "offline"


@app.callback(invoke_without_command=True)
def main_callback(ctx: typer.Context) -> None:
    if ctx.invoked_subcommand is None:
        chat()


def build_gateway(settings: Settings, source: ReplySource) -> CompletionGateway:
    """Select the completion gateway for one chat session."""
    if source is ReplySource.OFFLINE:
        return CannedCompletionGateway(thinking_delay=settings.thinking_delay_seconds)
    if source is ReplySource.DIRECT:
        return UpstreamCompletionGateway.from_settings(settings)
    settings.require_endpoint()
    return HttpCompletionGateway(settings.endpoint, timeout=settings.request_timeout_seconds)


async def _chat_session(
    gateway: CompletionGateway, renderer: Renderer, *, typing_interval: float, greeting: str | None
) -> None:
    conversation = Conversation(gateway, typing_interval=typing_interval, greeting=greeting)
    renderer.welcome()
    renderer.usage_info(source=getattr(gateway, "endpoint", gateway.name))
    try:
        await run_chat(conversation, renderer)
    finally:
        await gateway.aclose()


@app.command()
def chat(
    source: Annotated[
        ReplySource, typer.Option("--source", "-s", help="Where replies come from.")
    ] = ReplySource.ENDPOINT,
    endpoint: Annotated[str | None, typer.Option("--endpoint", help="Override MURMUR_ENDPOINT.")] = None,
    speed: Annotated[str | None, typer.Option("--speed", help="Typing speed preset: slow, normal, fast.")] = None,
    greeting: Annotated[
        bool, typer.Option("--greeting/--no-greeting", help="Open with the assistant greeting.")
    ] = True,
) -> None:
    """Start the interactive chat widget."""
    settings = load_settings()
    configure_logging(profile="chat", level=settings.log_level)
    renderer = create_cli_renderer()
    if endpoint:
        settings = settings.model_copy(update={"endpoint": endpoint})
    if speed is not None and speed not in SPEED_PRESETS:
        renderer.error(f"Unknown speed {speed!r}; choose one of {', '.join(SPEED_PRESETS)}.")
        raise typer.Exit(2)
    typing_interval = SPEED_PRESETS[speed] if speed else settings.typing_interval

    try:
        gateway = build_gateway(settings, source)
    except ConfigurationError as exc:
        renderer.error(str(exc))
        raise typer.Exit(1) from exc

    asyncio.run(
        _chat_session(gateway, renderer, typing_interval=typing_interval, greeting=GREETING if greeting else None)
    )


@app.command()
def serve(
    host: Annotated[str | None, typer.Option("--host", help="Override MURMUR_HOST.")] = None,
    port: Annotated[int | None, typer.Option("--port", help="Override MURMUR_PORT.")] = None,
    offline: Annotated[
        bool, typer.Option("--offline", help="Answer with canned replies instead of the provider.")
    ] = False,
) -> None:
    """Serve the POST /api/chat endpoint."""
    settings = load_settings()
    configure_logging(profile="default", level=settings.log_level)
    try:
        gateway = (
            CannedCompletionGateway(thinking_delay=settings.thinking_delay_seconds)
            if offline
            else UpstreamCompletionGateway.from_settings(settings)
        )
    except ConfigurationError as exc:
        create_cli_renderer().error(str(exc))
        raise typer.Exit(1) from exc

    uvicorn.run(create_app(gateway), host=host or settings.host, port=port or settings.port, log_config=None)
