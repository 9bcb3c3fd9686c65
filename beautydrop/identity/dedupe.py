"""
Deal deduplication.

Two records are the same deal when they agree, case-insensitively, on
name, url, current price and currency. The first occurrence wins, so the order in
which extraction strategies emit records decides which provenance survives.
"""
from __future__ import annotations

import hashlib
from collections.abc import Iterable

from models import ProductRecord


def identity_key(record: ProductRecord) -> str:
    """sha1 of the lowercased name|url|priceCurrent|currency tuple."""
    price = "" if record.price_current is None else repr(float(record.price_current))
    raw = "|".join(
        [record.name or "", record.url or "", price, record.currency or ""]
    ).lower()
    return hashlib.sha1(raw.encode("utf-8")).hexdigest()


def dedupe(records: Iterable[ProductRecord]) -> list[ProductRecord]:
    """Stable filter keeping the first record of each identity. Idempotent."""
    seen: set[str] = set()
    kept: list[ProductRecord] = []
    for record in records:
        key = identity_key(record)
        if key in seen:
            continue
        seen.add(key)
        kept.append(record)
    return kept
