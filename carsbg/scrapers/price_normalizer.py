# carsbg/scrapers/price_normalizer.py

"""Turn the raw text of a cars.bg price heading into ``"<amount> <currency>"``.

Price headings mix line breaks, tabs, Bulgarian and Euro amounts and the
``лв.`` abbreviation.  Normalisation is tiered and never raises:

1. a structured ``<amount> <currency>`` match, preferring Bulgarian Lev;
2. the first amount and the first currency found anywhere in the text;
3. the whitespace-cleaned text as-is.
"""

import logging
import re

from carsbg.models.offer import PRICE_NOT_AVAILABLE

logger = logging.getLogger("carsbg.price")

# Integer part: space/comma grouped thousands or a plain digit run,
# followed by an optional two-digit fraction.
_AMOUNT = (
    r"(?<!\d)(\d{1,3}(?:[ ,]\d{3}(?!\d))+|\d+)"
    r"(?:[.,](\d{2})(?!\d))?"
)
_CURRENCY = r"(BGN|EUR|лв\.?)"

_PRICE_PATTERN = re.compile(_AMOUNT + r"\s*" + _CURRENCY)
_AMOUNT_PATTERN = re.compile(_AMOUNT)
_CURRENCY_PATTERN = re.compile(_CURRENCY)

_LEV = "лв"


def clean_whitespace(text: str) -> str:
    """Collapse every whitespace run to a single space and trim."""
    return " ".join(text.split())


def _format_amount(integer: str, fraction: str | None) -> str:
    amount = integer.replace(" ", ",")
    if fraction and fraction != "00":
        amount = f"{amount}.{fraction}"
    return amount


def _format_currency(currency: str) -> str:
    return "BGN" if currency.startswith(_LEV) else currency


def _is_bgn(currency: str) -> bool:
    return currency == "BGN" or currency.startswith(_LEV)


def normalize_price(raw: str | None) -> str:
    """Normalise raw price text, e.g. ``"12 500,00 \\n BGN"`` -> ``"12,500 BGN"``.

    Returns ``PRICE_NOT_AVAILABLE`` for empty input and the cleaned text
    when nothing price-like can be found.
    """
    price = clean_whitespace(raw or "")
    if not price:
        return PRICE_NOT_AVAILABLE

    matches = list(_PRICE_PATTERN.finditer(price))
    if matches:
        chosen = next(
            (m for m in matches if _is_bgn(m.group(3))), matches[0]
        )
        integer, fraction, currency = chosen.groups()
        return (
            f"{_format_amount(integer, fraction)} "
            f"{_format_currency(currency)}"
        )

    # Amount and currency may be unrelated substrings here
    amount_match = _AMOUNT_PATTERN.search(price)
    currency_match = _CURRENCY_PATTERN.search(price)
    if amount_match and currency_match:
        logger.debug("Loose price match in %r", price)
        integer, fraction = amount_match.groups()
        return (
            f"{_format_amount(integer, fraction)} "
            f"{_format_currency(currency_match.group(1))}"
        )

    logger.debug("Unrecognised price text kept as-is: %r", price)
    return price
