# tests/test_search_orchestrator.py

"""Tests for the paginated search loop."""

import asyncio
import unittest
from urllib.parse import parse_qs, urlsplit

from carsbg.exceptions import FetchError, ParseError, SearchError
from carsbg.models.offer import Offer
from carsbg.services.search_orchestrator import (
    PageStatus,
    SearchOrchestrator,
    SearchReport,
)


def _offers(page: int, count: int = 2) -> list[Offer]:
    """Canned offers tagged with their page number."""
    return [
        Offer(identifier=f"p{page}-{i}", title=f"Car {page}.{i}")
        for i in range(count)
    ]


def _page_of(url: str) -> int:
    return int(parse_qs(urlsplit(url).query)["page"][0])


class FakeScraper:
    """Stub page fetcher driven by a per-page plan.

    Plan values: an int (offers on that page) or an exception to raise.
    Pages missing from the plan have no offers.
    """

    def __init__(self, plan: dict[int, int | Exception]) -> None:
        self.plan = plan
        self.requested: list[str] = []
        self.closed = False

    async def fetch_offers(self, url: str) -> list[Offer]:
        self.requested.append(url)
        outcome = self.plan.get(_page_of(url), 0)
        if isinstance(outcome, Exception):
            raise outcome
        return _offers(_page_of(url), outcome)

    async def close(self) -> None:
        self.closed = True

    @property
    def pages(self) -> list[int]:
        return [_page_of(u) for u in self.requested]


def _orchestrator(scraper: FakeScraper) -> SearchOrchestrator:
    return SearchOrchestrator(scraper_factory=lambda: scraper)  # type: ignore[arg-type,return-value]


class TestSearchOrchestrator(unittest.IsolatedAsyncioTestCase):
    """SearchOrchestrator.search paging behaviour."""

    async def test_returns_search_report(self) -> None:
        scraper = FakeScraper({1: 2, 2: 2})
        report = await _orchestrator(scraper).search(2, "bmw", "5")
        self.assertIsInstance(report, SearchReport)
        self.assertEqual(report.brand, "bmw")
        self.assertEqual(report.model, "5")

    async def test_collects_all_pages_in_order(self) -> None:
        scraper = FakeScraper({1: 2, 2: 3, 3: 1})
        report = await _orchestrator(scraper).search(3)
        self.assertEqual(
            [o.identifier for o in report.offers],
            ["p1-0", "p1-1", "p2-0", "p2-1", "p2-2", "p3-0"],
        )
        self.assertEqual(scraper.pages, [1, 2, 3])
        self.assertFalse(report.stopped_early)

    async def test_stops_at_first_empty_page(self) -> None:
        """Page 3 is empty: pages 4 and 5 are never requested."""
        scraper = FakeScraper({1: 2, 2: 2, 3: 0, 4: 2, 5: 2})
        report = await _orchestrator(scraper).search(5)

        self.assertEqual(scraper.pages, [1, 2, 3])
        self.assertEqual(len(report.offers), 4)
        self.assertEqual(report.pages[-1].status, PageStatus.EMPTY)
        self.assertTrue(report.stopped_early)

    async def test_failed_page_is_isolated(self) -> None:
        """A fetch failure on page 2 does not stop pages 3 onward."""
        scraper = FakeScraper(
            {1: 2, 2: FetchError("u2", "timeout"), 3: 1, 4: 1}
        )
        report = await _orchestrator(scraper).search(4)

        self.assertEqual(scraper.pages, [1, 2, 3, 4])
        self.assertEqual(
            [o.identifier for o in report.offers],
            ["p1-0", "p1-1", "p3-0", "p4-0"],
        )
        self.assertEqual(report.failed_pages, [2])
        self.assertEqual(report.pages_attempted, 4)
        self.assertEqual(report.pages_succeeded, 3)
        self.assertTrue(report.is_partial)
        self.assertIn("timeout", report.errors[0])

    async def test_parse_error_is_isolated(self) -> None:
        scraper = FakeScraper({1: ParseError("u1", "empty body"), 2: 1})
        report = await _orchestrator(scraper).search(2)
        self.assertEqual(report.pages[0].status, PageStatus.FAILED)
        self.assertEqual(len(report.offers), 1)

    async def test_all_pages_fail(self) -> None:
        scraper = FakeScraper(
            {p: FetchError(f"u{p}", "down") for p in range(1, 4)}
        )
        report = await _orchestrator(scraper).search(3)
        self.assertEqual(report.offers, [])
        self.assertEqual(report.pages_failed, 3)
        self.assertFalse(report.is_partial)

    async def test_no_results_is_not_an_error(self) -> None:
        scraper = FakeScraper({})
        report = await _orchestrator(scraper).search(5)
        self.assertEqual(report.offers, [])
        self.assertEqual(report.pages_attempted, 1)
        self.assertEqual(report.pages_failed, 0)

    async def test_unexpected_error_propagates(self) -> None:
        """Only page-level errors are absorbed."""
        scraper = FakeScraper({1: RuntimeError("bug")})
        with self.assertRaises(RuntimeError):
            await _orchestrator(scraper).search(2)
        self.assertTrue(scraper.closed)

    async def test_invalid_max_pages_raises_before_fetching(self) -> None:
        for bad in (0, -1, True, "3", 2.5):
            with self.subTest(max_pages=bad):
                scraper = FakeScraper({1: 1})
                with self.assertRaises(SearchError):
                    await _orchestrator(scraper).search(bad)  # type: ignore[arg-type]
                self.assertEqual(scraper.requested, [])

    async def test_brand_and_model_resolved_into_urls(self) -> None:
        scraper = FakeScraper({1: 1})
        await _orchestrator(scraper).search(1, "BMW", "5-series")
        query = parse_qs(urlsplit(scraper.requested[0]).query)
        self.assertEqual(query["brandId"], ["10"])
        self.assertEqual(len(query["models[]"]), 12)

    async def test_unknown_brand_means_no_filter(self) -> None:
        scraper = FakeScraper({1: 1})
        await _orchestrator(scraper).search(1, "lada", "niva")
        query = parse_qs(urlsplit(scraper.requested[0]).query)
        self.assertEqual(query, {"page": ["1"]})

    async def test_scraper_closed_after_search(self) -> None:
        scraper = FakeScraper({1: 1})
        await _orchestrator(scraper).search(1)
        self.assertTrue(scraper.closed)

    async def test_search_cars_returns_offers_only(self) -> None:
        scraper = FakeScraper({1: 2})
        offers = await _orchestrator(scraper).search_cars(1)
        self.assertEqual([o.identifier for o in offers], ["p1-0", "p1-1"])

    async def test_cancellation_stops_further_pages(self) -> None:
        """Cancelling mid-fetch aborts the search; no later page starts."""
        started = asyncio.Event()

        class SlowScraper(FakeScraper):
            async def fetch_offers(self, url: str) -> list[Offer]:
                if _page_of(url) == 2:
                    self.requested.append(url)
                    started.set()
                    await asyncio.sleep(60)
                return await super().fetch_offers(url)

        scraper = SlowScraper({1: 1, 2: 1, 3: 1})
        task = asyncio.create_task(_orchestrator(scraper).search(3))
        await started.wait()
        task.cancel()

        with self.assertRaises(asyncio.CancelledError):
            await task
        self.assertEqual(scraper.pages, [1, 2])
        self.assertTrue(scraper.closed)


if __name__ == "__main__":
    unittest.main()
