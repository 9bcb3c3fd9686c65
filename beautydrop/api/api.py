"""
Deals API: run the pipeline on a captured page, read persisted snapshots.
"""

from pathlib import Path

from fastapi import FastAPI, HTTPException

from beautydrop.corpus import DEALS_DIR, LATEST_SNAPSHOT, snapshot_name
from beautydrop.pipeline import extract_deals
from models import DealsSnapshot, PageInput, PageResult

app = FastAPI(title="BeautyDrop Deals API")


def _load_snapshot(path: Path) -> DealsSnapshot:
    return DealsSnapshot.model_validate_json(path.read_text(encoding="utf-8"))


@app.post("/extract", response_model=PageResult)
def extract(page: PageInput) -> PageResult:
    return extract_deals(page)


@app.get("/deals", response_model=DealsSnapshot)
def latest_deals() -> DealsSnapshot:
    path = DEALS_DIR / LATEST_SNAPSHOT
    if not path.exists():
        raise HTTPException(status_code=404, detail="No deals snapshot has been written yet")
    return _load_snapshot(path)


@app.get("/deals/{day}", response_model=DealsSnapshot)
def deals_for_day(day: str) -> DealsSnapshot:
    path = DEALS_DIR / snapshot_name(day)
    if not path.exists():
        raise HTTPException(status_code=404, detail=f"No deals snapshot for '{day}'")
    return _load_snapshot(path)
