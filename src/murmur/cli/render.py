"""Terminal renderer for the chat widget."""

from __future__ import annotations

from prompt_toolkit import PromptSession
from prompt_toolkit.patch_stdout import patch_stdout
from rich.console import Console, RenderableType
from rich.live import Live
from rich.spinner import Spinner
from rich.text import Text

from murmur.conversation import RenderState, Speaker, Turn

CURSOR = "|"


class Renderer:
    """CLI renderer using Rich for output and prompt_toolkit for input."""

    def __init__(self, console: Console | None = None) -> None:
        self.console: Console = console or Console()
        self._prompt_session: PromptSession[str] | None = None

    def info(self, message: str) -> None:
        """Render an info message."""
        self.console.print(message)

    def error(self, message: str) -> None:
        """Render an error message."""
        self.console.print(f"[bold red]Error:[/bold red] {message}")

    def welcome(self, message: str = "[bold blue]Murmur[/bold blue] - type a message, Enter to send.") -> None:
        self.console.print(message)

    def usage_info(self, *, source: str) -> None:
        self.console.print(f"[bold]Replies from:[/bold] [magenta]{source}[/magenta]")
        self.console.print("[dim]Type 'quit' or press Ctrl+D to leave.[/dim]")

    def turn(self, turn: Turn) -> None:
        if turn.speaker is Speaker.USER:
            self.console.print(Text.assemble(("You: ", "bold cyan"), turn.text))
        else:
            self.console.print(Text.assemble(("Murmur: ", "bold yellow"), turn.text))

    def live(self) -> Live:
        """Live region redrawn while a reply is pending."""
        return Live(self.pending_view(None), console=self.console, transient=True, refresh_per_second=30)

    def pending_view(self, state: RenderState | None) -> RenderableType:
        if state is None or state.thinking:
            return Spinner("dots", text=Text("Thinking...", style="dim"))
        if state.streaming:
            return Text.assemble(("Murmur: ", "bold yellow"), (state.revealed_text, "grey70"), (CURSOR, "blink"))
        return Text("")

    async def get_user_input(self) -> str:
        """Prompt the user for one line."""
        if self._prompt_session is None:
            self._prompt_session = PromptSession()
        with patch_stdout(raw=True):
            return await self._prompt_session.prompt_async("> ")


def create_cli_renderer() -> Renderer:
    """Create and return a Renderer instance."""
    return Renderer()
