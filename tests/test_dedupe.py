import unittest

from beautydrop.identity import dedupe, identity_key
from models import ProductRecord


def _make_record(
    *,
    source: str = "ldjson",
    name: str = "Moisture Cream",
    url: str = "https://shop.example.de/p/123",
    price: float | None = 29.9,
    currency: str | None = "EUR",
) -> ProductRecord:
    return ProductRecord(
        source=source, name=name, url=url, price_current=price, currency=currency
    )


class TestDedupe(unittest.TestCase):
    def test_records_differing_only_by_source_keep_first(self) -> None:
        first = _make_record(source="dom-microdata")
        second = _make_record(source="dom-script")

        kept = dedupe([first, second])

        self.assertEqual(len(kept), 1)
        self.assertIs(kept[0], first)

    def test_identity_is_case_insensitive(self) -> None:
        upper = _make_record(name="MOISTURE CREAM", url="https://SHOP.example.de/p/123")
        lower = _make_record(name="moisture cream", url="https://shop.example.de/p/123")
        self.assertEqual(identity_key(upper), identity_key(lower))
        self.assertEqual(dedupe([upper, lower]), [upper])

    def test_price_and_currency_are_part_of_identity(self) -> None:
        records = [
            _make_record(),
            _make_record(price=24.9),
            _make_record(currency="CHF"),
            _make_record(price=None),
        ]
        self.assertEqual(len(dedupe(records)), 4)

    def test_integer_and_float_prices_match(self) -> None:
        self.assertEqual(
            identity_key(_make_record(price=15)), identity_key(_make_record(price=15.0))
        )

    def test_order_is_stable(self) -> None:
        a = _make_record(name="A")
        b = _make_record(name="B")
        c = _make_record(name="C")
        self.assertEqual(dedupe([a, b, a, c, b]), [a, b, c])

    def test_dedupe_is_idempotent(self) -> None:
        records = [
            _make_record(name="A"),
            _make_record(name="a", source="og"),
            _make_record(name="B", price=None),
            _make_record(name="B", price=None, source="dom-visible"),
        ]
        once = dedupe(records)
        self.assertEqual(dedupe(once), once)

    def test_empty_input(self) -> None:
        self.assertEqual(dedupe([]), [])
