import json
import logging
from typing import Any

from beautydrop.normalize import detect_currency, parse_localized_number
from models import ProductRecord

from .html_signals import PageSignals, ScriptSignal, extract_html_signals
from .mapping import (
    MappingRules,
    iter_jsonld_nodes,
    normalize_availability,
    records_from_product_node,
)
from .urls import UrlNormalizer

logger = logging.getLogger(__name__)

_PRICE_AMOUNT_KEYS = ("product:price:amount", "og:price:amount")
_PRICE_CURRENCY_KEYS = ("product:price:currency", "og:price:currency")
_SALE_AMOUNT_KEYS = ("product:sale_price:amount", "og:sale_price:amount")
_SALE_CURRENCY_KEYS = ("product:sale_price:currency", "og:sale_price:currency")
_ORIGINAL_AMOUNT_KEYS = ("product:original_price:amount", "og:original_price:amount")


def extract_structured_records(
    html_text: str,
    page_url: str | None = None,
    *,
    signals: PageSignals | None = None,
    mapping_rules: MappingRules | None = None,
    url_normalizer: UrlNormalizer | None = None,
) -> list[ProductRecord]:
    """
    Extract product records from structured sources on the page.

    Two sources, in priority order:
    1) JSON-LD (schema.org Product with nested Offer / AggregateOffer)
    2) OpenGraph / product meta tags (single-product pages)

    Args:
        html_text: Raw HTML content of the product or listing page
        page_url: Final URL of the page; used for relative URLs and as the
            record URL when the markup has none
        signals: Pre-parsed page signals, to avoid parsing the same HTML twice
        mapping_rules: Optional custom schema.org mapping rules
        url_normalizer: Optional custom URL normalizer

    Returns:
        Records in source order. A Product node without offers produces a record
        whose price fields are all None, so callers can tell "found a product but
        no price" apart from "found nothing".

    Example:
        ```python
        html = (PAGES_DIR / "ldjson-cream.html").read_text()  # PAGES_DIR from beautydrop.corpus
        records = extract_structured_records(html, page_url="https://shop.example.de/p/123")
        print(records[0].name, records[0].price_current)  # Moisture Cream 29.9
        ```
    """
    rules = mapping_rules or MappingRules()
    normalizer = url_normalizer or UrlNormalizer()
    page = signals or extract_html_signals(html_text)

    records = _extract_json_ld(page.scripts, page_url=page_url, rules=rules, normalizer=normalizer)
    records.extend(_extract_meta_tags(page, page_url=page_url, normalizer=normalizer))
    return records


def _extract_json_ld(
    scripts: list[ScriptSignal],
    page_url: str | None,
    rules: MappingRules,
    normalizer: UrlNormalizer,
) -> list[ProductRecord]:
    records: list[ProductRecord] = []
    for script in scripts:
        if script.script_type != "application/ld+json":
            continue
        payload = _safe_json_loads(script.body)
        if payload is None:
            logger.debug("Skipping malformed JSON-LD block on %s", page_url)
            continue
        for node in iter_jsonld_nodes(payload, rules):
            records.extend(
                records_from_product_node(
                    node, page_url=page_url, rules=rules, url_normalizer=normalizer
                )
            )
    return records


def _extract_meta_tags(
    page: PageSignals,
    page_url: str | None,
    normalizer: UrlNormalizer,
) -> list[ProductRecord]:
    amount = page.meta_content(*_PRICE_AMOUNT_KEYS)
    sale_amount = page.meta_content(*_SALE_AMOUNT_KEYS)
    if not amount and not sale_amount:
        return []

    if sale_amount:
        current_text = sale_amount
        original_text = amount or page.meta_content(*_ORIGINAL_AMOUNT_KEYS)
        currency = page.meta_content(*_SALE_CURRENCY_KEYS, *_PRICE_CURRENCY_KEYS)
    else:
        current_text = amount
        original_text = page.meta_content(*_ORIGINAL_AMOUNT_KEYS)
        currency = page.meta_content(*_PRICE_CURRENCY_KEYS)

    record = ProductRecord.model_validate(
        {
            "source": "og",
            "name": page.meta_content("og:title", "twitter:title") or page.title,
            "brand": page.meta_content("product:brand", "og:brand"),
            "price_current": parse_localized_number(current_text),
            "price_original": parse_localized_number(original_text),
            "currency": currency or detect_currency(current_text),
            "availability": normalize_availability(
                page.meta_content("product:availability", "og:availability")
            ),
            "url": normalizer.absolutize(page.meta_content("og:url"), page_url)
            or normalizer.absolutize(page_url, None),
            "image": normalizer.canonicalize_image(
                page.meta_content("og:image", "og:image:url", "og:image:secure_url"), page_url
            ),
        }
    )
    return [record]


def _safe_json_loads(value: str) -> Any | None:
    try:
        return json.loads(value)
    except json.JSONDecodeError:
        return None
