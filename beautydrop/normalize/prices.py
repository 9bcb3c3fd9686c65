"""
Locale-aware price parsing and currency detection.

Both helpers are pure and table-driven; there is no locale database. The decimal
separator is inferred from the string itself: when both "," and "." occur the one
appearing last is the decimal point, a lone single "," is a decimal comma.
"""

import math
import re

# Entity spellings of a non-breaking space that survive in scraped attribute values.
_ENTITY_SPACES = ("&nbsp;", "&#160;", "&#xa0;", "&#xA0;")
_IGNORED_RE = re.compile(r"[\s'’ʼ]")
_NON_NUMERIC_RE = re.compile(r"[^0-9,.\-]")
# "12,-" and "12.--" mean a whole amount in German and Scandinavian shops.
_WHOLE_AMOUNT_DASH_RE = re.compile(r"[.,]-+$")

# Thousands groups may be split by space, nbsp, narrow nbsp, dot, comma or apostrophe.
# A number followed by "%" is a discount badge, not a price.
_PRICE_TOKEN_RE = re.compile(
    r"\d+(?:[ \u00a0\u202f.,'\u2019]\d{3})*(?:[.,]\d{1,2})?(?!\d)(?![.,]?\d*\s*%)"
)

# Ordered: first match wins. ISO codes match case-insensitively with word
# boundaries so "EURO" style prose does not leak in through longer words. Native
# symbols are case-sensitive, so "5 ft" or "tl" in prose is not a currency.
CURRENCY_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"€|(?i:\bEUR\b)"), "EUR"),
    (re.compile(r"£|(?i:\bGBP\b)"), "GBP"),
    (re.compile(r"zł|(?i:\bPLN\b)"), "PLN"),
    (re.compile(r"(?i:\bCHF\b)"), "CHF"),
    (re.compile(r"Kč|(?i:\bCZK\b)"), "CZK"),
    (re.compile(r"(?i:\bHUF\b)|\bFt\b"), "HUF"),
    (re.compile(r"(?i:\bRON\b)|\b[Ll]ei\b"), "RON"),
    (re.compile(r"лв|(?i:\bBGN\b)"), "BGN"),
    (re.compile(r"(?i:\bDKK\b)"), "DKK"),
    (re.compile(r"(?i:\bSEK\b)"), "SEK"),
    (re.compile(r"(?i:\bNOK\b)"), "NOK"),
    (re.compile(r"₺|(?i:\bTRY\b)|\bTL\b"), "TRY"),
)


def parse_localized_number(text: str | int | float | None) -> float | None:
    """
    Parse a price written in any common European or US convention.

        "1.234,56" -> 1234.56
        "1,234.56" -> 1234.56
        "19,99 €"  -> 19.99
        "CHF 1'299.-" -> 1299.0

    Returns None when nothing numeric remains or the result is not finite.
    """
    if text is None or isinstance(text, bool):
        return None
    if isinstance(text, (int, float)):
        return float(text) if math.isfinite(text) else None

    cleaned = text
    for entity in _ENTITY_SPACES:
        cleaned = cleaned.replace(entity, "")
    cleaned = _IGNORED_RE.sub("", cleaned)
    cleaned = _NON_NUMERIC_RE.sub("", cleaned)
    cleaned = _WHOLE_AMOUNT_DASH_RE.sub("", cleaned)
    if not any(ch.isdigit() for ch in cleaned):
        return None

    cleaned = _normalize_separators(cleaned)
    try:
        value = float(cleaned)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def _normalize_separators(value: str) -> str:
    has_comma = "," in value
    has_dot = "." in value
    if has_comma and has_dot:
        if value.rfind(",") > value.rfind("."):
            return value.replace(".", "").replace(",", ".")
        return value.replace(",", "")
    if has_comma:
        # A repeated comma can only be a thousands separator.
        if value.count(",") > 1:
            return value.replace(",", "")
        return value.replace(",", ".")
    if has_dot and value.count(".") > 1:
        return value.replace(".", "")
    return value


def first_price_token(text: str | None) -> str | None:
    """Return the first price-shaped run of digits in `text`, e.g. "12.50" from "Now £12.50 was £15"."""
    if not text:
        return None
    normalized = text
    for entity in _ENTITY_SPACES:
        normalized = normalized.replace(entity, " ")
    match = _PRICE_TOKEN_RE.search(normalized)
    return match.group() if match else None


def detect_currency(text: str | None) -> str | None:
    """Return the ISO code of the first currency symbol or code found in `text`, else None."""
    if not text:
        return None
    for pattern, code in CURRENCY_PATTERNS:
        if pattern.search(text):
            return code
    return None
