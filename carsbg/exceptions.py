# carsbg/exceptions.py

"""Exception hierarchy for the carsbg search pipeline."""


class CarsBgError(Exception):
    """Base class for every error raised by carsbg."""


class PageError(CarsBgError):
    """A single results page could not be turned into offers."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"{reason} ({url})")
        self.url = url
        self.reason = reason


class FetchError(PageError):
    """The page request could not be built, sent, or read."""


class ParseError(PageError):
    """The page body is not parseable as HTML."""


class SearchError(CarsBgError):
    """The search could not run at all."""
