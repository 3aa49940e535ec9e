# carsbg/services/search_orchestrator.py

"""Drives a multi-page cars.bg search and aggregates the results."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

from carsbg.config.settings import Settings
from carsbg.exceptions import PageError, SearchError
from carsbg.filters.query_builder import build_search_url
from carsbg.filters.resolver import brand_from_name, model_ids_from_name
from carsbg.models.offer import Offer
from carsbg.scrapers.cars_bg_scraper import CarsBgScraper

logger = logging.getLogger("carsbg.orchestrator")


class PageStatus(Enum):
    """Outcome of a single page attempt."""

    OK = "ok"
    EMPTY = "empty"
    FAILED = "failed"


@dataclass
class PageResult:
    """What happened when one results page was requested."""

    page: int
    url: str
    status: PageStatus
    offers: list[Offer] = field(
        default_factory=lambda: list[Offer]()
    )
    error: str = ""


@dataclass
class SearchReport:
    """Container for a completed search across result pages."""

    brand: str
    model: str
    max_pages: int
    offers: list[Offer] = field(
        default_factory=lambda: list[Offer]()
    )
    pages: list[PageResult] = field(
        default_factory=lambda: list[PageResult]()
    )

    @property
    def pages_attempted(self) -> int:
        return len(self.pages)

    @property
    def pages_succeeded(self) -> int:
        return sum(
            1 for p in self.pages if p.status is not PageStatus.FAILED
        )

    @property
    def failed_pages(self) -> list[int]:
        return [
            p.page for p in self.pages if p.status is PageStatus.FAILED
        ]

    @property
    def pages_failed(self) -> int:
        return len(self.failed_pages)

    @property
    def errors(self) -> list[str]:
        return [
            p.error for p in self.pages if p.status is PageStatus.FAILED
        ]

    @property
    def stopped_early(self) -> bool:
        """True when an empty page ended the search before ``max_pages``."""
        return bool(self.pages) and (
            self.pages[-1].status is PageStatus.EMPTY
            and self.pages[-1].page < self.max_pages
        )

    @property
    def is_partial(self) -> bool:
        """Some offers were found but at least one page failed."""
        return bool(self.offers) and self.pages_failed > 0


class SearchOrchestrator:
    """Coordinates URL building, page fetching and early termination.

    Pages are requested one at a time: whether page ``n + 1`` is fetched
    depends on what page ``n`` returned.
    """

    def __init__(
        self,
        scraper_factory: Callable[[], CarsBgScraper] = CarsBgScraper,
    ) -> None:
        self.settings = Settings()
        self._scraper_factory = scraper_factory

    # ── Private helpers ──────────────────────────────────

    async def _fetch_page(
        self, scraper: CarsBgScraper, page: int, url: str,
    ) -> PageResult:
        """Fetch one page, turning page-level errors into a result."""
        try:
            offers = await scraper.fetch_offers(url)
        except PageError as exc:
            logger.error(
                "Error fetching offers on page %d: %s",
                page,
                exc,
                exc_info=True,
            )
            return PageResult(
                page=page, url=url, status=PageStatus.FAILED,
                error=str(exc),
            )

        status = PageStatus.OK if offers else PageStatus.EMPTY
        return PageResult(
            page=page, url=url, status=status, offers=offers,
        )

    # ── Public API ───────────────────────────────────────

    async def search(
        self,
        max_pages: int,
        brand: str = "",
        model: str = "",
    ) -> SearchReport:
        """Search pages ``1..max_pages`` and collect every offer.

        Stops at the first page without offers.  A page that fails is
        recorded and skipped; only invalid arguments raise.

        Raises:
            SearchError: *max_pages* is not a positive integer.
        """
        if (
            not isinstance(max_pages, int)
            or isinstance(max_pages, bool)
            or max_pages < 1
        ):
            raise SearchError(
                f"max_pages must be a positive integer, got {max_pages!r}"
            )

        brand_id = brand_from_name(brand)
        model_ids = model_ids_from_name(model)
        report = SearchReport(brand=brand, model=model, max_pages=max_pages)
        logger.info(
            "Starting car search: brand=%r (%s), model=%r (%d ids), "
            "max_pages=%d",
            brand, brand_id.name, model, len(model_ids), max_pages,
        )

        scraper = self._scraper_factory()
        try:
            for page in range(1, max_pages + 1):
                if page > 1:
                    await asyncio.sleep(self.settings.REQUEST_DELAY)

                url = build_search_url(brand_id, page, model_ids)
                logger.info("Scraping page %d: %s", page, url)

                result = await self._fetch_page(scraper, page, url)
                report.pages.append(result)
                report.offers.extend(result.offers)

                if result.status is PageStatus.EMPTY:
                    logger.info(
                        "No offers found on page %d, stopping search",
                        page,
                    )
                    break
        finally:
            await scraper.close()

        logger.info(
            "Search finished: %d offers, %d/%d pages succeeded",
            len(report.offers),
            report.pages_succeeded,
            report.pages_attempted,
        )
        return report

    async def search_cars(
        self,
        max_pages: int,
        brand: str = "",
        model: str = "",
    ) -> list[Offer]:
        """Like :meth:`search`, returning only the offers."""
        report = await self.search(max_pages, brand, model)
        return report.offers
