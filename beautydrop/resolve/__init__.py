from .country import UNKNOWN_COUNTRY, default_currency, resolve_country

__all__ = ["UNKNOWN_COUNTRY", "default_currency", "resolve_country"]
