import math
import re
from typing import Literal
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from beautydrop.normalize.discount import compute_discount

MAX_NAME_LENGTH = 140

_WHITESPACE_RE = re.compile(r"\s+")
_CURRENCY_CODE_RE = re.compile(r"^[A-Z]{3}$")

Source = Literal["ldjson", "og", "dom-microdata", "dom-visible", "dom-script"]


def truncate_name(value: str, limit: int = MAX_NAME_LENGTH) -> str:
    """Collapse whitespace and cut to `limit` characters, marking the cut with an ellipsis."""
    collapsed = _WHITESPACE_RE.sub(" ", value).strip()
    if len(collapsed) > limit:
        return collapsed[:limit] + "…"
    return collapsed


class ProductRecord(BaseModel):
    """
    One normalized deal observation.

    Field aliases are the interchange names written to the deals JSON. Prices are
    sanitized on validation: priceOriginal survives only when it is strictly greater
    than priceCurrent, and discountPct is always derived from the two prices.
    """

    model_config = ConfigDict(populate_by_name=True)

    source: Source
    name: str | None = None
    brand: str | None = None
    price_current: float | None = Field(default=None, alias="priceCurrent")
    price_original: float | None = Field(default=None, alias="priceOriginal")
    discount_pct: float | None = Field(default=None, alias="discountPct")
    currency: str | None = None
    availability: str | None = None
    url: str | None = None
    image: str | None = None
    store: str | None = None
    country: str | None = None

    @field_validator("name", "brand", mode="before")
    @classmethod
    def _clean_text(cls, v: object) -> object:
        if v is None:
            return None
        if isinstance(v, str):
            cleaned = truncate_name(v)
            return cleaned or None
        return v

    @field_validator("price_current", "price_original", mode="before")
    @classmethod
    def _drop_unusable_price(cls, v: object) -> object:
        if isinstance(v, bool):
            return None
        if isinstance(v, (int, float)) and (not math.isfinite(v) or v < 0):
            return None
        return v

    @field_validator("currency", mode="before")
    @classmethod
    def _normalize_currency(cls, v: object) -> object:
        if not isinstance(v, str):
            return None
        code = v.strip().upper()
        return code if _CURRENCY_CODE_RE.match(code) else None

    @model_validator(mode="after")
    def _derive_discount(self) -> "ProductRecord":
        if self.price_current is None or (
            self.price_original is not None and self.price_original <= self.price_current
        ):
            self.price_original = None
        self.discount_pct = compute_discount(self.price_current, self.price_original)
        return self

    def with_previous_price(self, previous: float) -> "ProductRecord":
        """Return a re-validated copy carrying `previous` as the original price."""
        payload = self.model_dump()
        payload["price_original"] = previous
        return ProductRecord.model_validate(payload)


class PageInput(BaseModel):
    """Page content handed to the pipeline by the fetch layer."""

    html: str
    final_url: str
    hostname: str | None = None

    @model_validator(mode="after")
    def _fill_hostname(self) -> "PageInput":
        if not self.hostname:
            self.hostname = urlsplit(self.final_url).hostname
        return self


class PageResult(BaseModel):
    records: list[ProductRecord] = Field(default_factory=list)
    count: int = 0


class DealsSnapshot(BaseModel):
    """Shape of the persisted deals document (dated and latest)."""

    date: str
    total: int
    results: list[ProductRecord] = Field(default_factory=list)
