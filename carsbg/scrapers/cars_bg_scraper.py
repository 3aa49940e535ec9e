# carsbg/scrapers/cars_bg_scraper.py

"""Fetch a single cars.bg results page and extract its offers."""

import logging
from types import TracebackType

from bs4 import BeautifulSoup
from curl_cffi import requests as curl_requests

from carsbg.config.settings import Settings
from carsbg.exceptions import FetchError, ParseError
from carsbg.models.offer import Offer
from carsbg.scrapers.offer_extractor import OfferExtractor, load_selectors


class CarsBgScraper:
    """Page fetcher for cars.bg search results.

    One GET per call with a bounded timeout and no retries: a failed page
    is reported to the caller, which decides whether to carry on.
    Cancelling the awaiting task aborts the in-flight request.
    """

    def __init__(self, extractor: OfferExtractor | None = None) -> None:
        self.logger = logging.getLogger("carsbg.cars_bg")
        self.settings = Settings()
        self.extractor = extractor or OfferExtractor(load_selectors())
        self.session = curl_requests.AsyncSession(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )
        self._request_timeout: int = self.settings.REQUEST_TIMEOUT

    async def __aenter__(self) -> "CarsBgScraper":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def close(self) -> None:
        """Release the underlying HTTP session."""
        await self.session.close()

    async def _fetch_html(self, url: str) -> str:
        """GET *url* and return the decoded body."""
        try:
            resp = await self.session.get(
                url,
                headers=self.settings.DEFAULT_HEADERS,
                timeout=self._request_timeout,
            )
        except Exception as exc:
            raise FetchError(url, f"request failed: {exc}") from exc

        if not 200 <= resp.status_code < 300:
            raise FetchError(url, f"HTTP {resp.status_code}")

        try:
            return str(resp.text)
        except Exception as exc:
            raise FetchError(url, f"unreadable body: {exc}") from exc

    def _parse_html(self, url: str, html: str) -> BeautifulSoup:
        if not html.strip():
            raise ParseError(url, "empty body")
        try:
            return BeautifulSoup(html, "lxml")
        except Exception as exc:
            raise ParseError(url, f"invalid HTML: {exc}") from exc

    async def fetch_offers(self, url: str) -> list[Offer]:
        """Fetch *url* and return the offers on that page.

        Raises:
            FetchError: the request failed or the body could not be read.
            ParseError: the body is not parseable as HTML.
        """
        self.logger.debug("[cars_bg] GET %s", url)
        html = await self._fetch_html(url)
        soup = self._parse_html(url, html)
        offers = self.extractor.extract(soup)
        self.logger.info(
            "[cars_bg] %d offers on %s", len(offers), url
        )
        return offers
