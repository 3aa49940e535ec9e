# carsbg/bot/messages.py

"""Chat message and card builders for search results."""

from dataclasses import dataclass, field

from carsbg.models.offer import PRICE_NOT_AVAILABLE, Offer
from carsbg.services.search_orchestrator import SearchReport

CARD_COLOR = 0x3498DB

HELP_TEXT = """🤖 **Car Search Bot Commands**

**!cars** [brand] [model] [pages]
Search for cars on cars.bg
• **brand** - Car brand (optional, e.g., BMW, Audi)
• **model** - Car model (optional, e.g., 5-series)
• **pages** - Number of pages to search (1-10, default: 2)

**Examples:**
• `!cars` - Search all cars (first 2 pages)
• `!cars BMW` - Search all BMW cars
• `!cars BMW 5` - Search BMW 5 series
• `!cars BMW 5 5` - Search BMW 5 series (first 5 pages)

**Other Commands:**
• **!help** - Show this help message
• **!ping** - Test if the bot is responsive"""


@dataclass
class OfferCard:
    """Rich card describing one offer."""

    title: str
    description: str
    footer: str
    url: str = ""
    image_url: str = ""
    color: int = CARD_COLOR
    fields: list[tuple[str, str]] = field(default_factory=list)


def build_search_start_message(
    brand: str, model: str, max_pages: int,
) -> str:
    """Immediate acknowledgement sent when a search is started."""
    lines = ["🚗 **Searching for cars...**"]
    lines.append(
        f"**Brand:** {brand.upper()}" if brand else "**Brand:** All brands"
    )
    lines.append(
        f"**Model:** {model}" if model else "**Model:** All models"
    )
    lines.append(f"**Max Pages:** {max_pages}")
    lines.append("")
    lines.append("*Results will be sent here shortly...*")
    return "\n".join(lines)


def create_offer_card(
    offer: Offer, result_index: int, total_results: int,
) -> OfferCard:
    """Build the card for *offer*, numbered ``result_index`` of ``total_results``."""
    price = offer.price.strip() or PRICE_NOT_AVAILABLE
    card = OfferCard(
        title=offer.title,
        description="Click the title to view the full listing",
        footer=f"Result {result_index} of {total_results}",
        url=offer.listing_link,
        image_url=offer.image_url,
        fields=[("💰 Price", price)],
    )
    if offer.identifier:
        card.fields.append(("📋 Listing ID", offer.identifier))
    return card


def create_search_summary_message(
    total_results: int, max_results: int,
) -> str:
    msg = f"🎉 **Found {total_results} car(s)**"
    if total_results > max_results:
        msg += f" (showing first {max_results})"
    return msg


def create_search_complete_message(
    result_count: int, total_results: int,
) -> str:
    msg = f"✅ **Search complete!** Showing {result_count} results"
    if total_results > result_count:
        msg += f" out of {total_results} total found"
    return msg


def create_offer_fallback_message(offer: Offer) -> str:
    """Plain-text stand-in for a card that could not be delivered."""
    msg = f"🚗 **{offer.title}**\n💰 {offer.price}"
    if offer.listing_link:
        msg += f"\n🔗 {offer.listing_link}"
    return msg


def create_partial_results_note(report: SearchReport) -> str:
    pages = ", ".join(str(p) for p in report.failed_pages)
    return (
        f"⚠️ {report.pages_failed} of {report.pages_attempted} "
        f"page(s) could not be loaded (page {pages}); "
        "results may be incomplete."
    )


def create_no_results_message(report: SearchReport | None = None) -> str:
    msg = "🔍 **No cars found** matching your criteria."
    if report is not None and report.pages_failed:
        msg += (
            f"\n⚠️ {report.pages_failed} of {report.pages_attempted} "
            "page(s) failed to load."
        )
    return msg


def create_search_failed_message(error: BaseException) -> str:
    return f"❌ **Error searching cars:** {error}"
