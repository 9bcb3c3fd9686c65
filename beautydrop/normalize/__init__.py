from .discount import compute_discount
from .prices import detect_currency, first_price_token, parse_localized_number

__all__ = [
    "compute_discount",
    "detect_currency",
    "first_price_token",
    "parse_localized_number",
]
