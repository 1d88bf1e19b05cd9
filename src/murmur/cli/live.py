"""Interactive chat loop for the terminal widget."""

from __future__ import annotations

from murmur.conversation import Conversation, RenderState

from .render import Renderer

QUIT_COMMANDS = frozenset({"quit", "exit", "q"})


async def run_chat(conversation: Conversation, renderer: Renderer) -> None:
    """Read lines while idle and animate each reply until the user leaves."""
    if (greeting := conversation.latest_turn) is not None:
        renderer.turn(greeting)
    try:
        while not conversation.closed:
            try:
                line = await renderer.get_user_input()
            except (KeyboardInterrupt, EOFError):
                renderer.info("Goodbye!")
                break
            if line.strip().casefold() in QUIT_COMMANDS:
                renderer.info("Goodbye!")
                break
            conversation.set_input(line)
            if not conversation.submit():
                continue
            await _follow_exchange(conversation, renderer)
    finally:
        conversation.close()


async def _follow_exchange(conversation: Conversation, renderer: Renderer) -> None:
    with renderer.live() as live:

        def _redraw(state: RenderState) -> None:
            live.update(renderer.pending_view(state))

        unsubscribe = conversation.on_change(_redraw)
        try:
            await conversation.wait_idle()
        finally:
            unsubscribe()
    if (reply := conversation.latest_turn) is not None:
        renderer.turn(reply)
