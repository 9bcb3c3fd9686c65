"""
Hostname -> market country, and market country -> default currency.

Resolution order for a storefront:
  1. Exact host overrides, for storefronts whose TLD does not match their market
     (a .com that only sells in Turkey).
  2. A locale path segment such as /es-es/ or /en_gb/ on multi-market domains.
  3. The top-level domain.
  4. "UNK".

All tables are read-only mappings; nothing here is mutated after import.
"""

import re
from collections.abc import Mapping
from types import MappingProxyType
from urllib.parse import urlsplit

UNKNOWN_COUNTRY = "UNK"

HOST_COUNTRY_OVERRIDES: MappingProxyType[str, str] = MappingProxyType(
    {
        "trendyol.com": "TR",
        "gratis.com": "TR",
        "hepsiburada.com": "TR",
        "flormar.com": "TR",
        "lookfantastic.com": "UK",
        "feelunique.com": "UK",
        "beautybay.com": "UK",
        "notino.com": "CZ",
    }
)

TLD_COUNTRY: MappingProxyType[str, str] = MappingProxyType(
    {
        "de": "DE",
        "at": "AT",
        "ch": "CH",
        "fr": "FR",
        "es": "ES",
        "it": "IT",
        "nl": "NL",
        "be": "BE",
        "pt": "PT",
        "ie": "IE",
        "fi": "FI",
        "gr": "GR",
        "sk": "SK",
        "si": "SI",
        "ee": "EE",
        "lv": "LV",
        "lt": "LT",
        "lu": "LU",
        "mt": "MT",
        "cy": "CY",
        "hr": "HR",
        "pl": "PL",
        "cz": "CZ",
        "hu": "HU",
        "ro": "RO",
        "bg": "BG",
        "dk": "DK",
        "se": "SE",
        "no": "NO",
        "tr": "TR",
        "uk": "UK",
        "gb": "UK",
    }
)

COUNTRY_CURRENCY: MappingProxyType[str, str] = MappingProxyType(
    {
        **{
            code: "EUR"
            for code in (
                "DE", "AT", "FR", "ES", "IT", "NL", "BE", "PT", "IE", "FI", "GR",
                "SK", "SI", "EE", "LV", "LT", "LU", "MT", "CY", "HR", "BG",
            )
        },
        "UK": "GBP",
        "TR": "TRY",
        "PL": "PLN",
        "CH": "CHF",
        "CZ": "CZK",
        "HU": "HUF",
        "RO": "RON",
        "DK": "DKK",
        "SE": "SEK",
        "NO": "NOK",
    }
)

# "es-es", "en_GB", "de-at": the region half names the market.
_LOCALE_SEGMENT_RE = re.compile(r"^[a-z]{2}[-_]([a-z]{2})$", re.IGNORECASE)


def resolve_country(
    host_or_url: str | None,
    overrides: Mapping[str, str] = HOST_COUNTRY_OVERRIDES,
    tld_country: Mapping[str, str] = TLD_COUNTRY,
) -> str:
    """Map a hostname or absolute URL to a market country code, or "UNK"."""
    if not host_or_url:
        return UNKNOWN_COUNTRY
    host, path = _split_host_and_path(host_or_url)
    if not host:
        return UNKNOWN_COUNTRY

    override = _lookup_override(host, overrides)
    if override:
        return override

    for segment in path.split("/"):
        match = _LOCALE_SEGMENT_RE.match(segment)
        if not match:
            continue
        hinted = tld_country.get(match.group(1).lower())
        if hinted:
            return hinted

    tld = host.rsplit(".", 1)[-1]
    return tld_country.get(tld, UNKNOWN_COUNTRY)


def default_currency(
    country: str | None,
    country_currency: Mapping[str, str] = COUNTRY_CURRENCY,
) -> str | None:
    """Last-resort currency for a market, used only when no extractor found one."""
    if not country:
        return None
    return country_currency.get(country.upper())


def _split_host_and_path(value: str) -> tuple[str, str]:
    raw = value.strip()
    if "://" not in raw:
        raw = f"//{raw}"
    parts = urlsplit(raw)
    host = (parts.hostname or "").lower().rstrip(".")
    return host, parts.path


def _lookup_override(host: str, overrides: Mapping[str, str]) -> str | None:
    """Exact host first, then the host without its leading "www."."""
    if host in overrides:
        return overrides[host]
    return overrides.get(host.removeprefix("www."))
