"""
Paths and page registry for the bundled sample pages.

Single source of truth for:
- DATA_DIR: root data directory
- PAGES_DIR: captured HTML snapshots of product and listing pages
- DEALS_DIR: where deals-YYYY-MM-DD.json and deals-latest.json are written/read
- PAGES: the sample pages (filename, final URL the page was captured from)
"""

import os
from pathlib import Path

DATA_DIR: Path = Path(__file__).resolve().parent.parent / "data"
PAGES_DIR: Path = DATA_DIR / "pages"
DEALS_DIR: Path = Path(os.getenv("DEALS_DIR", str(DATA_DIR / "deals")))

LATEST_SNAPSHOT = "deals-latest.json"

# (html_filename, final_url)
PAGES: list[tuple[str, str]] = [
    ("ldjson-cream.html", "https://shop.example.de/p/123"),
    ("og-serum.html", "https://www.lookfantastic.com/glow-serum-30ml/1234567.html"),
    ("dom-lipstick.html", "https://www.beautyshop.co.uk/velvet-lipstick"),
    ("listing-trendyol.html", "https://www.trendyol.com/cilt-bakim-x-c123"),
    ("dom-microdata-toner.html", "https://www.hebe.pl/tonik-nawilzajacy-200-ml"),
]


def snapshot_name(day: str) -> str:
    return f"deals-{day}.json"
