# carsbg/bot/commands.py

"""Chat command dispatcher: ``!cars``, ``!help`` and ``!ping``.

``!cars`` answers immediately and runs the search as a background task;
its results are pushed to a :class:`ResultSink` once the task finishes.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from carsbg.bot.messages import (
    HELP_TEXT,
    OfferCard,
    build_search_start_message,
    create_no_results_message,
    create_offer_card,
    create_offer_fallback_message,
    create_partial_results_note,
    create_search_complete_message,
    create_search_failed_message,
    create_search_summary_message,
)
from carsbg.config.settings import Settings
from carsbg.services.search_orchestrator import (
    SearchOrchestrator,
    SearchReport,
)

logger = logging.getLogger("carsbg.commands")


class ResultSink(ABC):
    """Destination for messages produced by background searches."""

    @abstractmethod
    async def send_text(self, text: str) -> None:
        """Deliver a plain message."""
        ...

    @abstractmethod
    async def send_card(self, card: OfferCard) -> None:
        """Deliver a rich offer card."""
        ...


@dataclass(frozen=True)
class CarsQuery:
    """Arguments of a ``!cars`` command."""

    brand: str = ""
    model: str = ""
    max_pages: int = Settings.DEFAULT_PAGES


def parse_cars_args(args: Sequence[str]) -> CarsQuery:
    """Parse ``[brand] [model] [pages]``.

    The page count is clamped to ``MIN_PAGES..MAX_PAGES``; anything that
    is not an integer falls back to ``DEFAULT_PAGES``.
    """
    brand = args[0] if len(args) >= 1 else ""
    model = args[1] if len(args) >= 2 else ""
    max_pages = Settings.DEFAULT_PAGES
    if len(args) >= 3:
        try:
            max_pages = int(args[2])
        except ValueError:
            logger.debug("Ignoring non-numeric page count %r", args[2])
        else:
            max_pages = max(
                Settings.MIN_PAGES, min(Settings.MAX_PAGES, max_pages)
            )
    return CarsQuery(brand=brand, model=model, max_pages=max_pages)


class CommandDispatcher:
    """Routes prefixed chat commands and owns the background searches."""

    def __init__(
        self,
        sink: ResultSink,
        orchestrator_factory: Callable[
            [], SearchOrchestrator
        ] = SearchOrchestrator,
    ) -> None:
        self.sink = sink
        self.settings = Settings()
        self._orchestrator_factory = orchestrator_factory
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def pending(self) -> int:
        """Number of searches still running."""
        return len(self._tasks)

    async def handle(self, text: str) -> str | None:
        """Process one chat message and return the immediate reply.

        Messages without the command prefix are ignored (``None``).
        """
        content = text.strip()
        if not content.startswith(self.settings.COMMAND_PREFIX):
            return None

        parts = content.split()
        command = parts[0].lower()
        args = parts[1:]

        if command == "!cars":
            return self.start_search(parse_cars_args(args))
        if command == "!help":
            return HELP_TEXT
        if command == "!ping":
            return "🏓 Pong!"
        return (
            f"❓ Unknown command: `{command}`\n"
            "Type `!help` for available commands."
        )

    def start_search(self, query: CarsQuery) -> str:
        """Schedule *query* in the background; return the start message."""
        task = asyncio.create_task(self._search_and_send(query))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return build_search_start_message(
            query.brand, query.model, query.max_pages
        )

    async def wait_idle(self) -> None:
        """Wait until every background search has delivered its results."""
        while self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    async def aclose(self) -> None:
        """Cancel every background search still running."""
        for task in list(self._tasks):
            task.cancel()
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    # ── Background work ──────────────────────────────────

    async def _search_and_send(self, query: CarsQuery) -> None:
        orchestrator = self._orchestrator_factory()
        try:
            report = await orchestrator.search(
                query.max_pages, query.brand, query.model
            )
        except Exception as exc:
            logger.error(
                "Error searching cars for %s: %s",
                query,
                exc,
                exc_info=True,
            )
            await self.sink.send_text(create_search_failed_message(exc))
            return

        logger.info("Found %d car offers", len(report.offers))
        if not report.offers:
            await self.sink.send_text(create_no_results_message(report))
            return

        await self._send_results(report)

    async def _send_results(self, report: SearchReport) -> None:
        max_results = self.settings.MAX_RESULTS_SHOWN
        total = len(report.offers)

        await self.sink.send_text(
            create_search_summary_message(total, max_results)
        )

        sent = 0
        for index, offer in enumerate(report.offers[:max_results], 1):
            card = create_offer_card(offer, index, total)
            try:
                await self.sink.send_card(card)
            except Exception as exc:
                logger.error(
                    "Error sending card for car %d: %s",
                    index,
                    exc,
                    exc_info=True,
                )
                await self.sink.send_text(
                    create_offer_fallback_message(offer)
                )
            sent += 1

        if report.is_partial:
            await self.sink.send_text(create_partial_results_note(report))
        await self.sink.send_text(
            create_search_complete_message(sent, total)
        )
