from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from beautydrop.normalize import parse_localized_number
from models import ProductRecord

from .urls import UrlNormalizer

_SCHEMA_ORG_PREFIXES = ("https://schema.org/", "http://schema.org/")


@dataclass(frozen=True)
class MappingRules:
    product_types: frozenset[str] = field(
        default_factory=lambda: frozenset({"product", "productmodel", "individualproduct"})
    )
    current_price_keys: tuple[str, ...] = ("price", "lowPrice")
    original_price_keys: tuple[str, ...] = ("listPrice", "highPrice")
    # priceSpecification.priceType values that mark a reference (pre-discount) price.
    original_price_types: frozenset[str] = field(
        default_factory=lambda: frozenset({"listprice", "strikethroughprice", "msrp", "srp"})
    )


@dataclass(frozen=True)
class _OfferPrices:
    current: float | None
    original: float | None
    currency: str | None
    availability: str | None


def iter_jsonld_nodes(payload: Any, rules: MappingRules | None = None) -> Iterator[dict[str, Any]]:
    """
    Yield every product-typed node in a JSON-LD payload.

    Walks @graph arrays, top-level lists and nested containers such as
    ItemList.itemListElement[].item, so listing pages yield one node per product.
    Product nodes are not descended into.
    """
    rules = rules or MappingRules()
    if isinstance(payload, list):
        for item in payload:
            yield from iter_jsonld_nodes(item, rules)
        return
    if not isinstance(payload, dict):
        return
    if is_product_node(payload, rules):
        yield payload
        return
    for value in payload.values():
        if isinstance(value, (dict, list)):
            yield from iter_jsonld_nodes(value, rules)


def is_product_node(node: dict[str, Any], rules: MappingRules) -> bool:
    raw_type = node.get("@type")
    types = raw_type if isinstance(raw_type, list) else [raw_type]
    for value in types:
        if not isinstance(value, str):
            continue
        token = value.rsplit("/", 1)[-1].rsplit(":", 1)[-1].lower()
        if token in rules.product_types:
            return True
    return False


def records_from_product_node(
    node: dict[str, Any],
    page_url: str | None,
    rules: MappingRules,
    url_normalizer: UrlNormalizer,
) -> list[ProductRecord]:
    """One record per offer; a product without offers still yields one unpriced record."""
    base = {
        "source": "ldjson",
        "name": _first_text(node.get("name")),
        "brand": _brand_name(node.get("brand")),
        "image": url_normalizer.canonicalize_image(_first_image(node.get("image")), page_url),
        "url": url_normalizer.absolutize(_first_text(node.get("url")), page_url)
        or url_normalizer.absolutize(page_url, None),
    }

    offers = list(_iter_offers(node.get("offers")))
    if not offers:
        return [ProductRecord.model_validate(base)]

    records: list[ProductRecord] = []
    for offer in offers:
        prices = _read_offer(offer, rules)
        records.append(
            ProductRecord.model_validate(
                {
                    **base,
                    "price_current": prices.current,
                    "price_original": prices.original,
                    "currency": prices.currency,
                    "availability": prices.availability,
                }
            )
        )
    return records


def _iter_offers(offers: Any) -> Iterator[dict[str, Any]]:
    if isinstance(offers, list):
        for offer in offers:
            yield from _iter_offers(offer)
        return
    if not isinstance(offers, dict):
        return
    # AggregateOffer wrapping concrete offers: the concrete ones carry the prices.
    nested = offers.get("offers")
    if isinstance(nested, (list, dict)) and nested:
        yield from _iter_offers(nested)
        return
    yield offers


def _read_offer(offer: dict[str, Any], rules: MappingRules) -> _OfferPrices:
    current = _first_price(offer, rules.current_price_keys)
    original = _first_price(offer, rules.original_price_keys)
    currency = _first_text(offer.get("priceCurrency"))

    for spec in _as_dicts(offer.get("priceSpecification")):
        price = to_price(spec.get("price"))
        if price is None:
            continue
        price_type = (_first_text(spec.get("priceType")) or "").rsplit("/", 1)[-1].lower()
        if price_type in rules.original_price_types:
            if original is None:
                original = price
        elif current is None:
            current = price
        if currency is None:
            currency = _first_text(spec.get("priceCurrency"))

    return _OfferPrices(
        current=current,
        original=original,
        currency=currency,
        availability=normalize_availability(offer.get("availability")),
    )


def to_price(value: Any) -> float | None:
    """Numeric values pass through; strings go through the locale-aware parser."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float, str)):
        return parse_localized_number(value)
    if isinstance(value, dict):
        return to_price(value.get("value", value.get("price")))
    return None


def normalize_availability(value: Any) -> str | None:
    text = _first_text(value)
    if not text:
        return None
    for prefix in _SCHEMA_ORG_PREFIXES:
        if text.startswith(prefix):
            return text[len(prefix):]
    return text


def _first_price(offer: dict[str, Any], keys: tuple[str, ...]) -> float | None:
    for key in keys:
        price = to_price(offer.get(key))
        if price is not None:
            return price
    return None


def _as_dicts(value: Any) -> list[dict[str, Any]]:
    if isinstance(value, dict):
        return [value]
    if isinstance(value, list):
        return [item for item in value if isinstance(item, dict)]
    return []


def _first_text(value: Any) -> str | None:
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    if isinstance(value, list):
        for item in value:
            text = _first_text(item)
            if text:
                return text
    return None


def _brand_name(value: Any) -> str | None:
    if isinstance(value, dict):
        return _first_text(value.get("name"))
    if isinstance(value, list):
        for item in value:
            name = _brand_name(item)
            if name:
                return name
        return None
    return _first_text(value)


def _first_image(value: Any) -> str | None:
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, dict):
        return _first_text(value.get("url") or value.get("contentUrl"))
    if isinstance(value, list):
        for item in value:
            image = _first_image(item)
            if image:
                return image
    return None
