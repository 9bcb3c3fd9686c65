"""Tests for locale-aware price parsing, currency detection and discounts."""

import unittest

from beautydrop.normalize import (
    compute_discount,
    detect_currency,
    first_price_token,
    parse_localized_number,
)


class TestParseLocalizedNumber(unittest.TestCase):

    def test_dot_thousands_comma_decimal(self) -> None:
        self.assertEqual(parse_localized_number("1.234,56"), 1234.56)

    def test_comma_thousands_dot_decimal(self) -> None:
        self.assertEqual(parse_localized_number("1,234.56"), 1234.56)

    def test_lone_comma_is_decimal(self) -> None:
        self.assertEqual(parse_localized_number("19,99 €"), 19.99)

    def test_currency_symbols_and_spaces_are_ignored(self) -> None:
        self.assertEqual(parse_localized_number("€ 1 299,00"), 1299.0)
        self.assertEqual(parse_localized_number("1 299,00 zł"), 1299.0)
        self.assertEqual(parse_localized_number("1&nbsp;299,00"), 1299.0)

    def test_apostrophe_thousands_separator(self) -> None:
        """Swiss prices group thousands with an apostrophe."""
        self.assertEqual(parse_localized_number("CHF 1'299.50"), 1299.5)

    def test_whole_amount_dash_suffix(self) -> None:
        self.assertEqual(parse_localized_number("12,-"), 12.0)

    def test_repeated_separator_is_thousands(self) -> None:
        self.assertEqual(parse_localized_number("1.234.567"), 1234567.0)
        self.assertEqual(parse_localized_number("1,234,567"), 1234567.0)

    def test_numbers_pass_through(self) -> None:
        self.assertEqual(parse_localized_number(29.9), 29.9)
        self.assertEqual(parse_localized_number(15), 15.0)

    def test_non_numeric_returns_none(self) -> None:
        self.assertIsNone(parse_localized_number("Ausverkauft"))
        self.assertIsNone(parse_localized_number(""))
        self.assertIsNone(parse_localized_number(None))
        self.assertIsNone(parse_localized_number(float("nan")))
        self.assertIsNone(parse_localized_number(True))

    def test_negative_sign_is_kept(self) -> None:
        self.assertEqual(parse_localized_number("-5,00"), -5.0)


class TestFirstPriceToken(unittest.TestCase):

    def test_picks_first_price_in_mixed_text(self) -> None:
        self.assertEqual(first_price_token("Now £12.50 was £15"), "12.50")

    def test_keeps_thousands_groups(self) -> None:
        self.assertEqual(first_price_token("ab 1.234,56 €"), "1.234,56")
        self.assertEqual(first_price_token("1 299,00 zł"), "1 299,00")

    def test_discount_percentage_is_not_a_price(self) -> None:
        self.assertEqual(first_price_token("-20% 12,00 €"), "12,00")
        self.assertEqual(first_price_token("-12,5 % 9,99 €"), "9,99")
        self.assertIsNone(first_price_token("Save 30%"))

    def test_no_digits(self) -> None:
        self.assertIsNone(first_price_token("Sold out"))
        self.assertIsNone(first_price_token(None))


class TestDetectCurrency(unittest.TestCase):

    def test_euro_symbol(self) -> None:
        self.assertEqual(detect_currency("€19,99"), "EUR")

    def test_code_suffix(self) -> None:
        self.assertEqual(detect_currency("19.99 PLN"), "PLN")

    def test_no_currency(self) -> None:
        self.assertIsNone(detect_currency("no currency here"))
        self.assertIsNone(detect_currency(None))

    def test_symbols_and_codes(self) -> None:
        cases = {
            "£15": "GBP",
            "19,99 zł": "PLN",
            "CHF 49.00": "CHF",
            "299 Kč": "CZK",
            "4 990 Ft": "HUF",
            "59,99 lei": "RON",
            "25 лв": "BGN",
            "199 DKK": "DKK",
            "249 sek": "SEK",
            "NOK 399": "NOK",
            "1.299,90 TL": "TRY",
            "₺499": "TRY",
        }
        for text, expected in cases.items():
            with self.subTest(text=text):
                self.assertEqual(detect_currency(text), expected)

    def test_native_symbols_are_case_sensitive(self) -> None:
        self.assertIsNone(detect_currency("5 ft tall, 2 tl spoons"))
        self.assertEqual(detect_currency("249 Lei"), "RON")
        self.assertEqual(detect_currency("99 try"), "TRY")

    def test_first_match_in_table_order_wins(self) -> None:
        self.assertEqual(detect_currency("£12 (approx. 14 EUR)"), "EUR")


class TestComputeDiscount(unittest.TestCase):

    def test_discount_percentage(self) -> None:
        self.assertEqual(compute_discount(80, 100), 20.0)

    def test_rounded_to_one_decimal(self) -> None:
        self.assertEqual(compute_discount(12.5, 15), 16.7)
        self.assertEqual(compute_discount(29.90, 39.90), 25.1)

    def test_inverted_pair_is_none(self) -> None:
        self.assertIsNone(compute_discount(100, 80))

    def test_equal_prices_is_none(self) -> None:
        self.assertIsNone(compute_discount(50, 50))

    def test_missing_or_invalid_inputs(self) -> None:
        self.assertIsNone(compute_discount(None, 100))
        self.assertIsNone(compute_discount(80, None))
        self.assertIsNone(compute_discount(-1, 0))
        self.assertIsNone(compute_discount(float("inf"), 100))
        self.assertIsNone(compute_discount(80, float("nan")))
