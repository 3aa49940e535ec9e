# carsbg/scrapers/offer_extractor.py

"""Extract ``Offer`` records from a parsed cars.bg results page.

A result card is any ``div`` carrying a non-empty ``data-item``
attribute.  Cards are found with a depth-first, pre-order walk that never
descends into a card once it has been matched, so markup inside a card
cannot produce a second, partial offer.  Within a card each field is the
first matching node of a pre-order walk over the card's subtree; a missing
field degrades to an empty string (or the price sentinel) rather than
dropping the offer.

The marker names live in ``selectors.json`` so they can be adjusted
without touching the walk itself.
"""

import json
import logging
import re
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from pathlib import Path

from bs4 import BeautifulSoup, Tag

from carsbg.config.settings import Settings
from carsbg.models.offer import Offer
from carsbg.scrapers.price_normalizer import normalize_price

logger = logging.getLogger("carsbg.extractor")

_CSS_URL_PATTERN = re.compile(r"""url\(['"]?([^'")]+)['"]?\)""")


@dataclass(frozen=True)
class OfferSelectors:
    """Marker tags, attributes and classes identifying card fields."""

    offer_tag: str = "div"
    offer_marker: str = "data-item"
    title_attr: str = "title"
    price_tag: str = "h6"
    price_classes: frozenset[str] = field(
        default_factory=lambda: frozenset({
            "card__title",
            "mdc-typography",
            "mdc-typography--headline6",
            "price",
        })
    )
    image_tag: str = "div"
    link_tag: str = "a"
    link_marker: str = "list-link"


def load_selectors(
    path: Path | None = None, source: str = "cars_bg",
) -> OfferSelectors:
    """Load the selectors for *source* from ``selectors.json``.

    Keys missing from the file keep their built-in defaults.
    """
    with open(path or Settings.SELECTORS_PATH, encoding="utf-8") as f:
        raw: dict[str, object] = json.load(f).get(source, {})
    if "price_classes" in raw:
        raw["price_classes"] = frozenset(raw["price_classes"])  # type: ignore[arg-type]
    return OfferSelectors(**raw)  # type: ignore[arg-type]


def _walk(node: Tag) -> Iterator[Tag]:
    """Yield *node* and its descendant elements in document order."""
    stack: list[Tag] = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(
            reversed([c for c in current.children if isinstance(c, Tag)])
        )


def _first(node: Tag, predicate: Callable[[Tag], bool]) -> Tag | None:
    return next((n for n in _walk(node) if predicate(n)), None)


class OfferExtractor:
    """Walks a results page and builds one ``Offer`` per card."""

    def __init__(self, selectors: OfferSelectors | None = None) -> None:
        self.selectors = selectors or OfferSelectors()

    # ── Card detection ───────────────────────────────────

    def _identifier(self, node: Tag) -> str:
        if node.name != self.selectors.offer_tag:
            return ""
        return str(node.get(self.selectors.offer_marker) or "")

    def iter_cards(self, document: Tag) -> Iterator[Tag]:
        """Yield card roots in document order without entering them."""
        stack: list[Tag] = [document]
        while stack:
            node = stack.pop()
            if self._identifier(node):
                yield node
                continue
            stack.extend(
                reversed([c for c in node.children if isinstance(c, Tag)])
            )

    # ── Field sub-extractors ─────────────────────────────

    def _is_price_heading(self, node: Tag) -> bool:
        if node.name != self.selectors.price_tag:
            return False
        classes = set(node.get_attribute_list("class"))
        return self.selectors.price_classes <= classes

    def find_price(self, card: Tag) -> str:
        """Normalised price of the first price heading in *card*."""
        heading = _first(card, self._is_price_heading)
        return normalize_price(heading.get_text() if heading else "")

    def find_image_url(self, card: Tag) -> str:
        """URL of the first ``background-image`` declared in *card*."""
        for node in _walk(card):
            if node.name != self.selectors.image_tag:
                continue
            style = str(node.get("style") or "")
            if "background-image" not in style:
                continue
            match = _CSS_URL_PATTERN.search(style)
            if match:
                return match.group(1)
        return ""

    def find_listing_link(self, card: Tag) -> str:
        """Value of the first link marker in *card*."""
        marker = self.selectors.link_marker
        anchor = _first(
            card,
            lambda n: n.name == self.selectors.link_tag
            and bool(n.get(marker)),
        )
        return str(anchor.get(marker)) if anchor else ""

    # ── Public API ───────────────────────────────────────

    def parse_card(self, card: Tag) -> Offer:
        """Build an ``Offer`` from a detected card root."""
        return Offer(
            identifier=self._identifier(card),
            title=str(card.get(self.selectors.title_attr) or ""),
            image_url=self.find_image_url(card),
            listing_link=self.find_listing_link(card),
            price=self.find_price(card),
        )

    def extract(self, document: Tag) -> list[Offer]:
        """Return every offer in *document*, in document order."""
        offers = [self.parse_card(card) for card in self.iter_cards(document)]
        logger.debug("Extracted %d offers", len(offers))
        return offers


def extract_offers(
    document: str | Tag,
    selectors: OfferSelectors | None = None,
) -> list[Offer]:
    """Extract offers from raw HTML or an already parsed tree."""
    if isinstance(document, str):
        document = BeautifulSoup(document, "lxml")
    return OfferExtractor(selectors).extract(document)
