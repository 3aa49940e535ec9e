# tests/test_price_normalizer.py

"""Tests for tiered price text normalisation."""

import unittest

from carsbg.models.offer import PRICE_NOT_AVAILABLE
from carsbg.scrapers.price_normalizer import clean_whitespace, normalize_price


class TestCleanWhitespace(unittest.TestCase):
    """clean_whitespace collapsing rules."""

    def test_collapses_mixed_whitespace(self) -> None:
        self.assertEqual(
            clean_whitespace("  a\n\tb   c \r\n"), "a b c"
        )

    def test_non_breaking_space(self) -> None:
        self.assertEqual(clean_whitespace("12\u00a0500"), "12 500")


class TestStructuredMatch(unittest.TestCase):
    """Tier 1: adjacent amount and currency."""

    def test_grouped_amount_with_fraction(self) -> None:
        """Whitespace collapses and the space-grouped amount gets commas."""
        self.assertEqual(
            normalize_price("  12 500,00 \n BGN  "), "12,500 BGN"
        )

    def test_lev_preferred_over_eur(self) -> None:
        """A Lev-tagged amount wins even when EUR comes first."""
        self.assertEqual(
            normalize_price("1500 EUR 2700 лв"), "2700 BGN"
        )

    def test_bgn_preferred_over_eur(self) -> None:
        self.assertEqual(
            normalize_price("10 000 EUR / 19 558 BGN"), "19,558 BGN"
        )

    def test_cars_bg_heading_layout(self) -> None:
        """Lev line followed by a smaller EUR line."""
        raw = "\n   42 500\n   лв.\n   21 729,93 EUR\n"
        self.assertEqual(normalize_price(raw), "42,500 BGN")

    def test_lev_with_period_and_no_space(self) -> None:
        self.assertEqual(normalize_price("2700лв."), "2700 BGN")

    def test_eur_only_keeps_fraction(self) -> None:
        """Without a Lev price the first match is used."""
        self.assertEqual(
            normalize_price("21 729,93 EUR"), "21,729.93 EUR"
        )

    def test_first_eur_match_when_no_bgn(self) -> None:
        self.assertEqual(
            normalize_price("9 000 EUR, беше 9 500 EUR"), "9,000 EUR"
        )

    def test_non_zero_fraction_rendered_with_dot(self) -> None:
        self.assertEqual(
            normalize_price("9 999,99 лв."), "9,999.99 BGN"
        )

    def test_non_breaking_space_grouping(self) -> None:
        self.assertEqual(
            normalize_price("12\u00a0500 лв."), "12,500 BGN"
        )

    def test_canonical_strings_are_fixed_points(self) -> None:
        """Normalising an already canonical price changes nothing."""
        for canonical in (
            "1,234 BGN",
            "12,500 BGN",
            "2700 BGN",
            "1,234.50 EUR",
            "15,900 EUR",
        ):
            with self.subTest(canonical=canonical):
                self.assertEqual(normalize_price(canonical), canonical)
                self.assertEqual(
                    normalize_price(normalize_price(canonical)), canonical
                )


class TestLooseMatch(unittest.TestCase):
    """Tier 2: amount and currency found separately."""

    def test_currency_before_amount(self) -> None:
        self.assertEqual(normalize_price("EUR: 15 000"), "15,000 EUR")

    def test_currency_in_parentheses(self) -> None:
        self.assertEqual(
            normalize_price("Цена: 8 900 (лв. с ДДС)"), "8,900 BGN"
        )

    def test_unrelated_substrings_are_combined(self) -> None:
        """The first number and first currency are joined as found."""
        self.assertEqual(normalize_price("2019 г., EUR"), "2019 EUR")


class TestFallback(unittest.TestCase):
    """Tier 3 and the empty sentinel."""

    def test_empty_input(self) -> None:
        for raw in ("", "   ", "\n\t ", None):
            with self.subTest(raw=raw):
                self.assertEqual(normalize_price(raw), PRICE_NOT_AVAILABLE)

    def test_unrecognised_text_returned_cleaned(self) -> None:
        """Text without amount or currency is only whitespace-cleaned."""
        self.assertEqual(normalize_price("Договаряне"), "Договаряне")
        self.assertEqual(
            normalize_price("  Call \n for\tprice "), "Call for price"
        )

    def test_amount_without_currency(self) -> None:
        self.assertEqual(normalize_price("15 000"), "15 000")


if __name__ == "__main__":
    unittest.main()
