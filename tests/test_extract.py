"""Unit tests for extraction components (script price search, JSON-LD mapping, HTML signals, URLs)."""

import unittest

from beautydrop.extract.html_signals import extract_html_signals
from beautydrop.extract.mapping import MappingRules, iter_jsonld_nodes, to_price
from beautydrop.extract.script_blob import iter_script_prices
from beautydrop.extract.urls import UrlNormalizer


class TestScriptPriceSearch(unittest.TestCase):
    """"price"/"priceCurrency" pairs are found by text search, not JSON parsing."""

    def test_price_with_adjacent_currency(self) -> None:
        script = 'window.__STATE__ = {"product": {"price": "24.90", "priceCurrency": "EUR"}};'
        hits = iter_script_prices(script)
        self.assertEqual(len(hits), 1)
        self.assertEqual(hits[0].price_text, "24.90")
        self.assertEqual(hits[0].currency, "EUR")

    def test_escaped_json_inside_js_string(self) -> None:
        script = 'var raw = "{\\"price\\":\\"9,99\\",\\"priceCurrency\\":\\"PLN\\"}";'
        hits = iter_script_prices(script)
        self.assertEqual([(h.price_text, h.currency) for h in hits], [("9,99", "PLN")])

    def test_distant_currency_is_not_paired(self) -> None:
        script = '{"price": 5}' + " " * 500 + '{"priceCurrency": "GBP"}'
        hits = iter_script_prices(script)
        self.assertEqual(len(hits), 1)
        self.assertIsNone(hits[0].currency)

    def test_nearest_currency_wins(self) -> None:
        script = (
            '[{"price": 10, "priceCurrency": "EUR"},'
            ' {"price": 20, "priceCurrency": "CHF"}]'
        )
        hits = iter_script_prices(script)
        self.assertEqual([(h.price_text, h.currency) for h in hits], [("10", "EUR"), ("20", "CHF")])

    def test_field_separator_is_not_part_of_the_price(self) -> None:
        script = '{"price":"1.234,50","priceCurrency":"CZK"},{"price":7,"x":1}'
        hits = iter_script_prices(script)
        self.assertEqual([h.price_text for h in hits], ["1.234,50", "7"])

    def test_invalid_script_is_tolerated(self) -> None:
        self.assertEqual(iter_script_prices("function() { return price; }"), [])


class TestJsonLdMapping(unittest.TestCase):

    def test_nested_item_list_products(self) -> None:
        payload = {
            "@type": "ItemList",
            "itemListElement": [
                {"@type": "ListItem", "item": {"@type": "Product", "name": "A"}},
                {"@type": "ListItem", "item": {"@type": "Product", "name": "B"}},
            ],
        }
        names = [node["name"] for node in iter_jsonld_nodes(payload, MappingRules())]
        self.assertEqual(names, ["A", "B"])

    def test_product_children_are_not_walked(self) -> None:
        payload = {
            "@type": "Product",
            "name": "Set",
            "isRelatedTo": {"@type": "Product", "name": "Refill"},
        }
        self.assertEqual([n["name"] for n in iter_jsonld_nodes(payload)], ["Set"])

    def test_prefixed_product_type(self) -> None:
        payload = [{"@type": "http://schema.org/Product", "name": "C"}, "noise", 3]
        self.assertEqual([n["name"] for n in iter_jsonld_nodes(payload)], ["C"])

    def test_to_price(self) -> None:
        self.assertEqual(to_price(12), 12.0)
        self.assertEqual(to_price("1.299,90"), 1299.9)
        self.assertEqual(to_price({"value": "7.5"}), 7.5)
        self.assertIsNone(to_price(None))
        self.assertIsNone(to_price(False))
        self.assertIsNone(to_price(["1"]))


class TestHtmlSignals(unittest.TestCase):

    def test_collects_scripts_meta_title_and_elements(self) -> None:
        html = """
        <html><head>
          <title> Rose   Water </title>
          <meta property="og:title" content="Rose Water &amp; Mist">
          <script type="application/ld+json">{"@type": "Product"}</script>
        </head><body><div class="a"><p>One <b>two</b></p></div></body></html>
        """
        page = extract_html_signals(html)

        self.assertEqual(page.title, "Rose Water")
        self.assertEqual(page.meta_content("og:title"), "Rose Water & Mist")
        self.assertEqual(len(page.scripts), 1)
        self.assertEqual(page.scripts[0].script_type, "application/ld+json")
        paragraph = next(e for e in page.elements if e.tag == "p")
        self.assertEqual(paragraph.text, "One two")
        parent = page.elements[paragraph.parent]
        self.assertEqual(parent.naming, "a")

    def test_svg_icon_titles_do_not_join_the_page_title(self) -> None:
        html = (
            "<html><head><title>Glow Serum</title></head><body>"
            "<svg><title>Cart icon</title></svg>"
            "<title>Second</title><span class=\"price\">9,99 €</span></body></html>"
        )
        self.assertEqual(extract_html_signals(html).title, "Glow Serum")

    def test_script_and_style_text_is_not_visible_text(self) -> None:
        html = "<div><style>.x{}</style><script>var a = 1;</script>Hi</div>"
        page = extract_html_signals(html)
        self.assertEqual(page.elements[0].text, "Hi")

    def test_unclosed_elements_are_closed_by_parent(self) -> None:
        html = "<ul><li>One<li>Two</ul><p>After"
        page = extract_html_signals(html)
        items = [e for e in page.elements if e.tag == "li"]
        self.assertEqual([i.text for i in items], ["One", "Two"])
        after = next(e for e in page.elements if e.tag == "p")
        self.assertIsNone(after.parent)


class TestUrlNormalizer(unittest.TestCase):

    def test_relative_and_protocol_relative(self) -> None:
        normalizer = UrlNormalizer()
        self.assertEqual(
            normalizer.absolutize("/p/1#reviews", "https://shop.example.de/c/2"),
            "https://shop.example.de/p/1",
        )
        self.assertEqual(
            normalizer.absolutize("//cdn.example.de/a.jpg", None), "https://cdn.example.de/a.jpg"
        )

    def test_non_http_links_are_rejected(self) -> None:
        normalizer = UrlNormalizer()
        self.assertIsNone(normalizer.absolutize("javascript:void(0)", "https://s.example.de/"))
        self.assertIsNone(normalizer.absolutize("/relative-only", None))
        self.assertIsNone(normalizer.absolutize("  ", "https://s.example.de/"))

    def test_image_resize_params_are_stripped(self) -> None:
        normalizer = UrlNormalizer()
        self.assertEqual(
            normalizer.canonicalize_image("https://cdn.example.de/a.jpg?w=600&v=3", None),
            "https://cdn.example.de/a.jpg?v=3",
        )
