# carsbg/cli/chat.py

"""Interactive console chat: type ``!cars BMW 5 3`` and watch cards arrive."""

import asyncio
import logging

from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table

from carsbg.bot.commands import CommandDispatcher, ResultSink
from carsbg.bot.messages import OfferCard

logger = logging.getLogger("carsbg.chat")


class ConsoleSink(ResultSink):
    """Renders bot output to the terminal with Rich."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    async def send_text(self, text: str) -> None:
        self.console.print(Markdown(text))

    async def send_card(self, card: OfferCard) -> None:
        body = Table.grid(padding=(0, 2))
        body.add_column(style="bold")
        body.add_column()
        for name, value in card.fields:
            body.add_row(name, value)
        if card.url:
            body.add_row("🔗 Link", card.url)
        if card.image_url:
            body.add_row("🖼 Image", card.image_url)

        self.console.print(
            Panel(
                body,
                title=card.title or "(untitled)",
                subtitle=card.footer,
                border_style=f"#{card.color:06x}",
            )
        )


async def run_chat(console: Console | None = None) -> int:
    """Read commands from stdin until EOF or ``!quit``."""
    sink = ConsoleSink(console)
    dispatcher = CommandDispatcher(sink)
    sink.console.print(
        "[bold]carsbg chat[/bold] [dim]type !help, !quit to exit[/dim]"
    )

    try:
        while True:
            try:
                line = await asyncio.to_thread(input, "> ")
            except EOFError:
                break
            if line.strip().lower() == "!quit":
                break

            reply = await dispatcher.handle(line)
            if reply:
                await sink.send_text(reply)

        if dispatcher.pending:
            sink.console.print("[dim]Waiting for running searches...[/dim]")
        await dispatcher.wait_idle()
    finally:
        await dispatcher.aclose()
        logger.info("Chat session closed")

    return 0
