"""
Seed script: runs the deal pipeline over the bundled sample pages and writes
data/deals/deals-YYYY-MM-DD.json and data/deals/deals-latest.json.

Usage:
    uv run python seed.py
"""

import logging
from datetime import date
from itertools import chain
from urllib.parse import urlsplit

from beautydrop.corpus import DEALS_DIR, LATEST_SNAPSHOT, PAGES, PAGES_DIR, snapshot_name
from beautydrop.identity import dedupe
from beautydrop.pipeline import DealPipeline
from models import DealsSnapshot, PageInput, PageResult

logger = logging.getLogger(__name__)


def seed_page(pipeline: DealPipeline, filename: str, final_url: str) -> PageResult:
    html = (PAGES_DIR / filename).read_text(encoding="utf-8")
    page = PageInput(html=html, final_url=final_url, hostname=urlsplit(final_url).hostname)
    return pipeline.run(page)


def build_snapshot(results: list[PageResult], day: str) -> DealsSnapshot:
    """Merge per-page results; the same deal seen on two pages is kept once."""
    merged = dedupe(chain.from_iterable(result.records for result in results))
    return DealsSnapshot(date=day, total=len(merged), results=merged)


def _write_snapshot(snapshot: DealsSnapshot) -> None:
    payload = snapshot.model_dump_json(indent=2, by_alias=True)
    for name in (snapshot_name(snapshot.date), LATEST_SNAPSHOT):
        out_path = DEALS_DIR / name
        out_path.write_text(payload, encoding="utf-8")
        logger.info("Wrote %s", out_path)


def seed_all(day: str | None = None) -> DealsSnapshot:
    DEALS_DIR.mkdir(parents=True, exist_ok=True)
    pipeline = DealPipeline()

    logger.info("Seeding %d pages...", len(PAGES))
    results = [seed_page(pipeline, filename, url) for filename, url in PAGES]

    snapshot = build_snapshot(results, day or date.today().isoformat())
    _write_snapshot(snapshot)
    logger.info("Seeded %d deals from %d pages.", snapshot.total, len(PAGES))
    return snapshot


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    seed_all()
