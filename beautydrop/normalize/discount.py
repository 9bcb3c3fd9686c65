import math


def compute_discount(price_current: float | None, price_original: float | None) -> float | None:
    """
    Percentage saved going from `price_original` to `price_current`, one decimal.

    None unless both prices are finite, the original is positive and the current
    price is strictly lower. Every discount value in the pipeline comes from here.
    """
    if not _is_finite_number(price_current) or not _is_finite_number(price_original):
        return None
    if price_original <= 0 or price_current >= price_original:
        return None
    return round(((price_original - price_current) / price_original) * 100, 1)


def _is_finite_number(value: object) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)
