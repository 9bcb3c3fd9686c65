import re
from dataclasses import dataclass

# "price": 12.5 / "price":"12,50" / \"price\":\"12.50\" (JSON embedded in a JS string)
_PRICE_RE = re.compile(r'\\?"price\\?"\s*:\s*\\?"?(-?\d+(?:[.,]\d+)*)')
_CURRENCY_RE = re.compile(r'\\?"priceCurrency\\?"\s*:\s*\\?"([A-Za-z]{3})\\?"')

# How far from a price match a currency key still counts as belonging to it.
_PAIRING_WINDOW = 200


@dataclass(frozen=True)
class ScriptPrice:
    price_text: str
    currency: str | None


def iter_script_prices(script_body: str) -> list[ScriptPrice]:
    """
    Find "price" values and the nearest "priceCurrency" in a script body.

    Inline scripts are usually JS with JSON fragments inside (state assignments,
    analytics pushes), not standalone JSON, so this is a text search rather than
    a parse. A currency key is paired with a price when it sits within
    _PAIRING_WINDOW characters of it on either side.
    """
    currency_hits = [(m.start(), m.group(1).upper()) for m in _CURRENCY_RE.finditer(script_body)]
    found: list[ScriptPrice] = []
    for match in _PRICE_RE.finditer(script_body):
        found.append(
            ScriptPrice(
                price_text=match.group(1),
                currency=_nearest_currency(match.start(), currency_hits),
            )
        )
    return found


def _nearest_currency(position: int, currency_hits: list[tuple[int, str]]) -> str | None:
    best: tuple[int, str] | None = None
    for hit_position, code in currency_hits:
        distance = abs(hit_position - position)
        if distance > _PAIRING_WINDOW:
            continue
        if best is None or distance < best[0]:
            best = (distance, code)
    return best[1] if best else None
