# src/models/result_row.py

"""Persisted scrape record model for the results store."""

from dataclasses import dataclass
from typing import Any


@dataclass
class ResultRow:
    """One raw scraped record keyed by a stable external id."""

    external_id: str
    payload: dict[str, Any]
    inserted_at: str
    dataset_id: str | None = None
    run_id: str | None = None
    source: str = "apify"


@dataclass
class CachedRow:
    """A stored payload returned by a cache lookup."""

    payload: dict[str, Any]
    source: str | None = None
