# carsbg/filters/query_builder.py

"""Build cars.bg search-results URLs from resolved filters."""

from collections.abc import Iterable
from urllib.parse import urlencode

from carsbg.config.settings import Settings
from carsbg.filters.resolver import CarBrand


def build_search_url(
    brand: CarBrand,
    page: int,
    model_ids: Iterable[str] = (),
    base_url: str | None = None,
) -> str:
    """Compose the results URL for one page.

    A known brand switches on the site's filter form (``subm``,
    ``add_search``, ``typeoffer``) and sets ``brandId``.  Model codes are
    sent as repeated ``models[]`` parameters in the given order.
    """
    params: list[tuple[str, str]] = []
    if brand != CarBrand.UNKNOWN:
        params.extend([
            ("subm", "1"),
            ("add_search", "1"),
            ("typeoffer", "1"),
            ("brandId", str(int(brand))),
        ])
    params.append(("page", str(page)))
    params.extend(("models[]", model_id) for model_id in model_ids)

    return f"{base_url or Settings.SEARCH_URL}?{urlencode(params)}"
