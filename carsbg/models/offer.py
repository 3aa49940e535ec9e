# carsbg/models/offer.py

"""Offer data model for inter-module data flow."""

from dataclasses import dataclass

PRICE_NOT_AVAILABLE = "Price not available"


@dataclass(frozen=True)
class Offer:
    """A single car listing scraped from a cars.bg results page."""

    identifier: str
    title: str = ""
    image_url: str = ""
    listing_link: str = ""
    price: str = PRICE_NOT_AVAILABLE
