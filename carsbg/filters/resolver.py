# carsbg/filters/resolver.py

"""Map free-text brand and model names to cars.bg filter codes."""

from enum import IntEnum


class CarBrand(IntEnum):
    """Brand codes used by the cars.bg ``brandId`` parameter.

    ``UNKNOWN`` means "no brand filter".
    """

    UNKNOWN = 0
    BMW = 10
    AUDI = 20
    VW = 30


_BRAND_ALIASES: dict[str, CarBrand] = {
    "bmw": CarBrand.BMW,
    "audi": CarBrand.AUDI,
    "vw": CarBrand.VW,
    "volkswagen": CarBrand.VW,
}

_BMW_5_SERIES: tuple[str, ...] = (
    "1000003",
    "122", "123", "124", "125", "126", "127",
    "128", "129", "130", "131", "132",
)

# Model names are brand-independent on cars.bg search URLs
_MODEL_IDS: dict[str, tuple[str, ...]] = {
    "5series": _BMW_5_SERIES,
    "5-series": _BMW_5_SERIES,
    "5": _BMW_5_SERIES,
}


def brand_from_name(name: str | None) -> CarBrand:
    """Resolve a brand name, case-insensitively.

    Unrecognised or empty names resolve to ``CarBrand.UNKNOWN``.
    """
    if not name:
        return CarBrand.UNKNOWN
    return _BRAND_ALIASES.get(name.strip().lower(), CarBrand.UNKNOWN)


def model_ids_from_name(name: str | None) -> tuple[str, ...]:
    """Return the ordered model codes for *name*, or ``()`` if unknown."""
    if not name:
        return ()
    return _MODEL_IDS.get(name.strip().lower(), ())
