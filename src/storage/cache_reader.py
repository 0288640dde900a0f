# src/storage/cache_reader.py

"""Cache path: serve previously ingested records in lieu of a live call."""

import logging

from src.config.settings import Settings
from src.filters.item_validator import ItemValidator
from src.models.item import Item
from src.models.payload import item_from_payload
from src.models.result_row import CachedRow
from src.storage.results_store import ResultsStore

logger = logging.getLogger("topseller.cache")

CACHE_TAG = "cache"


def cache_source_tag(row: CachedRow) -> str:
    """Tag a cached row as ``<source>_cache``, or ``cache`` if unknown."""
    origin = row.payload.get("source")
    if not isinstance(origin, str) or not origin:
        origin = row.source or ""
    return f"{origin}_cache" if origin else CACHE_TAG


class CacheReader:
    """Fuzzy topic lookup over the persisted results corpus.

    The corpus is written only by the ingestion sink; this class
    never writes to it.
    """

    def __init__(self, store: ResultsStore | None = None) -> None:
        self._store = store

    def _get_store(self) -> ResultsStore:
        if self._store is None:
            self._store = ResultsStore()
        return self._store

    def cached_items(
        self, topic: str, *, limit: int | None = None,
    ) -> list[Item]:
        """Return cached listings whose title/name/description match *topic*.

        A blank topic returns ``[]`` without querying the store.
        Store errors are logged and yield ``[]``.
        """
        needle = (topic or "").strip()
        if not needle:
            return []

        try:
            rows = self._get_store().search_payloads(
                needle, limit or Settings.CACHE_LIMIT
            )
        except Exception as exc:
            logger.warning(
                "Cache lookup failed for '%s': %s",
                needle,
                exc,
                exc_info=True,
            )
            return []

        items = [
            item_from_payload(row.payload, cache_source_tag(row))
            for row in rows
        ]
        valid, _dropped = ItemValidator.validate(items)
        logger.info(
            "Cache returned %d items for '%s'", len(valid), needle
        )
        return valid
