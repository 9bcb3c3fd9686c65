"""
DOM fallback extraction.

Used when structured markup produced no priced record. Four scans run over the
rendered page, each a DomScan that turns a PageSignals snapshot into raw
(text, currency) candidates:

  1. MicrodataScan      itemprop="price" elements, paired with a sibling priceCurrency
  2. VisiblePriceScan   elements named like a price, plus the Twitter product card price
  3. ScriptPriceScan    "price"/"priceCurrency" pairs in inline script bodies
  4. PreviousPriceScan  struck-through "was" prices (old/was/strike classes, <s>, <del>)

Candidates from 1-3 become records. The first positive value from 4 is a single
page-wide previous price, back-filled onto every record it exceeds.

No network access and no JavaScript execution: the snapshot is whatever HTML the
fetch layer captured after rendering.
"""

import logging
import re
from dataclasses import dataclass
from typing import Protocol

from beautydrop.normalize import detect_currency, first_price_token, parse_localized_number
from models import ProductRecord, Source

from .html_signals import ElementSignal, PageSignals, extract_html_signals
from .script_blob import iter_script_prices
from .urls import UrlNormalizer

logger = logging.getLogger(__name__)

# Naming that marks a reference price rather than the selling price.
_PREVIOUS_PRICE_NAMING_RE = re.compile(
    r"(?:^|[\s_-])(?:old|was|strike\w*|crossed|before|compare\w*|rrp|uvp)(?=$|[\s_-])"
)
_PREVIOUS_PRICE_TAGS = frozenset({"s", "strike", "del"})
_PRICE_NAMING_RE = re.compile(r"price")
_PRICE_ATTRS = ("data-price", "data-price-amount", "data-product-price")
# Elements that never carry a visible price of their own.
_NON_VISUAL_TAGS = frozenset({"meta", "link", "head", "html", "body", "title", "img", "input"})

_CURRENCY_META_KEYS = ("product:price:currency", "og:price:currency", "pricecurrency")


@dataclass(frozen=True)
class DomCandidate:
    text: str
    currency: str | None = None


class DomScan(Protocol):
    source: Source

    def scan(self, page: PageSignals) -> list[DomCandidate]: ...


class MicrodataScan:
    source: Source = "dom-microdata"

    def scan(self, page: PageSignals) -> list[DomCandidate]:
        candidates: list[DomCandidate] = []
        for element in page.elements:
            if _itemprop(element) != "price":
                continue
            text = element.attrs.get("content", "").strip() or element.text
            if not text:
                continue
            currency = _sibling_currency(page.elements, element) or detect_currency(text)
            candidates.append(DomCandidate(text=text, currency=currency))
        return candidates


class VisiblePriceScan:
    source: Source = "dom-visible"

    def scan(self, page: PageSignals) -> list[DomCandidate]:
        page_currency = page.meta_content(*_CURRENCY_META_KEYS)
        candidates: list[DomCandidate] = []
        for element in _leaf_price_elements(page.elements):
            text = _price_attr(element) or element.text
            if first_price_token(text) is None:
                continue
            candidates.append(
                DomCandidate(text=text, currency=detect_currency(text) or page_currency)
            )

        # Twitter product cards put the price in label/data pairs.
        label = page.meta_content("twitter:label1") or ""
        card_price = page.meta_content("twitter:data1")
        if card_price and "price" in label.lower() and first_price_token(card_price):
            candidates.append(
                DomCandidate(
                    text=card_price,
                    currency=detect_currency(card_price) or page_currency,
                )
            )
        return candidates


class ScriptPriceScan:
    source: Source = "dom-script"

    def scan(self, page: PageSignals) -> list[DomCandidate]:
        candidates: list[DomCandidate] = []
        for script in page.scripts:
            if script.is_external or not script.body:
                continue
            for hit in iter_script_prices(script.body):
                candidates.append(DomCandidate(text=hit.price_text, currency=hit.currency))
        return candidates


class PreviousPriceScan:
    """Struck-through reference prices, in document order."""

    def scan(self, page: PageSignals) -> list[DomCandidate]:
        candidates: list[DomCandidate] = []
        for element in page.elements:
            if not _is_previous_price(element):
                continue
            text = _price_attr(element) or element.text
            if first_price_token(text) is None:
                continue
            candidates.append(DomCandidate(text=text, currency=detect_currency(text)))
        return candidates


DEFAULT_PRICE_SCANS: tuple[DomScan, ...] = (MicrodataScan(), VisiblePriceScan(), ScriptPriceScan())


def extract_dom_records(
    html_text: str,
    page_url: str | None = None,
    *,
    signals: PageSignals | None = None,
    scans: tuple[DomScan, ...] = DEFAULT_PRICE_SCANS,
    previous_price_scan: PreviousPriceScan | None = None,
    url_normalizer: UrlNormalizer | None = None,
) -> list[ProductRecord]:
    """
    Run every price scan, then back-fill the page-wide previous price.

    All scans run unconditionally and their records are concatenated in scan
    order. Safe to call on any HTML including empty strings.
    """
    page = signals or extract_html_signals(html_text)
    normalizer = url_normalizer or UrlNormalizer()
    old_price_scan = previous_price_scan or PreviousPriceScan()

    base = {
        "name": page.first_heading() or page.meta_content("og:title") or page.title,
        "image": normalizer.canonicalize_image(page.meta_content("og:image"), page_url),
        "url": normalizer.absolutize(page_url, None),
    }

    records: list[ProductRecord] = []
    for scan in scans:
        found = scan.scan(page)
        logger.debug("%s scan found %d candidates on %s", scan.source, len(found), page_url)
        for candidate in found:
            price = parse_localized_number(first_price_token(candidate.text))
            if price is None:
                continue
            records.append(
                ProductRecord.model_validate(
                    {
                        **base,
                        "source": scan.source,
                        "price_current": price,
                        "currency": candidate.currency,
                    }
                )
            )

    previous = _first_positive_price(old_price_scan.scan(page))
    if previous is None:
        return records
    return [_backfill_previous_price(record, previous) for record in records]


def _backfill_previous_price(record: ProductRecord, previous: float) -> ProductRecord:
    if record.price_original is not None or record.price_current is None:
        return record
    if previous <= record.price_current:
        return record
    return record.with_previous_price(previous)


def _first_positive_price(candidates: list[DomCandidate]) -> float | None:
    for candidate in candidates:
        value = parse_localized_number(first_price_token(candidate.text))
        if value is not None and value > 0:
            return value
    return None


def _itemprop(element: ElementSignal) -> str:
    return element.attrs.get("itemprop", "").strip().lower()


def _sibling_currency(elements: list[ElementSignal], element: ElementSignal) -> str | None:
    for other in elements:
        if other.parent != element.parent or _itemprop(other) != "pricecurrency":
            continue
        value = other.attrs.get("content", "").strip() or other.text
        if value:
            return value
    return None


def _price_attr(element: ElementSignal) -> str | None:
    for key in _PRICE_ATTRS:
        value = element.attrs.get(key, "").strip()
        if value:
            return value
    return None


def _is_previous_price(element: ElementSignal) -> bool:
    if element.tag in _PREVIOUS_PRICE_TAGS:
        return True
    if element.tag in _NON_VISUAL_TAGS:
        return False
    return bool(_PREVIOUS_PRICE_NAMING_RE.search(element.naming))


def _is_price_like(element: ElementSignal) -> bool:
    if element.tag in _NON_VISUAL_TAGS:
        return False
    return bool(_PRICE_NAMING_RE.search(element.naming)) or _price_attr(element) is not None


def _leaf_price_elements(elements: list[ElementSignal]) -> list[ElementSignal]:
    """
    Price-like elements that are not previous prices, microdata, or wrappers around
    another price-like element. A wrapper's text mixes the selling and the "was"
    price, so only the innermost element is read.
    """
    by_index = {element.index: element for element in elements}
    wrappers: set[int] = set()
    for element in elements:
        if not (_is_price_like(element) or _is_previous_price(element)):
            continue
        parent = element.parent
        while parent is not None and parent not in wrappers:
            wrappers.add(parent)
            parent = by_index[parent].parent

    return [
        element
        for element in elements
        if _is_price_like(element)
        and not _is_previous_price(element)
        and _itemprop(element) != "price"
        and element.index not in wrappers
    ]
