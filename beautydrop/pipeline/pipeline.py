"""
Per-page deal extraction pipeline.

  1. Parse the page once into PageSignals.
  2. Run the primary strategies (structured markup). If none of their records has
     a current price, run the fallback strategies (DOM scans) and append.
  3. Fill missing currencies from the storefront's market (hostname -> country ->
     currency) and tag every record with store and country.
  4. Dedupe on (name, url, priceCurrent, currency), first occurrence wins.
  5. Drop records without name or url, and, in priced mode, without a price.
  6. Cap to max_records.

Nothing here raises on bad markup: a page that yields no records is a normal
result with count 0.
"""
from __future__ import annotations

import logging
import os
from collections.abc import Callable
from dataclasses import dataclass

from beautydrop.extract import extract_dom_records, extract_html_signals, extract_structured_records
from beautydrop.extract.html_signals import PageSignals
from beautydrop.identity import dedupe
from beautydrop.resolve import default_currency, resolve_country
from models import PageInput, PageResult, ProductRecord

logger = logging.getLogger(__name__)

Strategy = Callable[[PageInput, PageSignals], list[ProductRecord]]


def _read_env_int(name: str, default: int) -> int:
    """Read env var as a positive int; return default if unset or invalid."""
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def _read_env_bool(name: str, default: bool) -> bool:
    """Read env var as a bool ("1/true/yes" or "0/false/no"); return default otherwise."""
    raw = os.getenv(name)
    if raw is None:
        return default
    lowered = raw.strip().lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    return default


@dataclass(frozen=True)
class PipelineConfig:
    """Output limits and retention policy. Overridable via DEALS_* env vars."""

    max_records: int = 60
    # Priced-deals-only by default; False keeps unpriced records for reporting.
    require_price: bool = True

    @classmethod
    def from_env(cls) -> "PipelineConfig":
        """Build config from DEALS_* env vars, falling back to defaults."""
        return cls(
            max_records=_read_env_int("DEALS_MAX_PER_PAGE", 60),
            require_price=_read_env_bool("DEALS_REQUIRE_PRICE", True),
        )


def structured_strategy(page: PageInput, signals: PageSignals) -> list[ProductRecord]:
    return extract_structured_records(page.html, page_url=page.final_url, signals=signals)


def dom_strategy(page: PageInput, signals: PageSignals) -> list[ProductRecord]:
    return extract_dom_records(page.html, page_url=page.final_url, signals=signals)


PRIMARY_STRATEGIES: tuple[Strategy, ...] = (structured_strategy,)
FALLBACK_STRATEGIES: tuple[Strategy, ...] = (dom_strategy,)


class DealPipeline:
    """Runs the extraction strategies for one page and shapes the output."""

    def __init__(
        self,
        config: PipelineConfig | None = None,
        primary: tuple[Strategy, ...] = PRIMARY_STRATEGIES,
        fallback: tuple[Strategy, ...] = FALLBACK_STRATEGIES,
    ) -> None:
        self.config = config or PipelineConfig.from_env()
        self.primary = primary
        self.fallback = fallback

    def run(self, page: PageInput) -> PageResult:
        signals = extract_html_signals(page.html)

        records = self._run_strategies(self.primary, page, signals)
        if not _has_price(records):
            records.extend(self._run_strategies(self.fallback, page, signals))

        country = resolve_country(page.final_url or page.hostname)
        enriched = [self._enrich(record, page, country) for record in records]
        unique = dedupe(enriched)
        kept = [record for record in unique if self._is_retained(record)]
        capped = kept[: self.config.max_records]

        if capped:
            logger.info(
                "%s: %d candidates, %d unique, %d kept (country=%s)",
                page.final_url, len(records), len(unique), len(capped), country,
            )
        else:
            logger.warning("%s: no deals extracted from %d candidates", page.final_url, len(records))
        return PageResult(records=capped, count=len(capped))

    def _run_strategies(
        self,
        strategies: tuple[Strategy, ...],
        page: PageInput,
        signals: PageSignals,
    ) -> list[ProductRecord]:
        records: list[ProductRecord] = []
        for strategy in strategies:
            found = strategy(page, signals)
            logger.debug("%s produced %d records for %s", strategy.__name__, len(found), page.final_url)
            records.extend(found)
        return records

    def _enrich(self, record: ProductRecord, page: PageInput, country: str) -> ProductRecord:
        return record.model_copy(
            update={
                "currency": record.currency or default_currency(country),
                "store": page.hostname,
                "country": country,
            }
        )

    def _is_retained(self, record: ProductRecord) -> bool:
        if not record.name or not record.url:
            return False
        if self.config.require_price and record.price_current is None:
            return False
        return True


def extract_deals(page: PageInput, config: PipelineConfig | None = None) -> PageResult:
    """Run the default pipeline on one page."""
    return DealPipeline(config=config).run(page)


def _has_price(records: list[ProductRecord]) -> bool:
    return any(record.price_current is not None for record in records)
