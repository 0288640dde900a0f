# src/filters/aggregator.py

"""Cross-source merge, deduplication and ranking of listings."""

import logging
import math
from collections.abc import Iterable, Sequence
from typing import Any

from src.config.settings import Settings
from src.models.item import Item, ScoredItem

logger = logging.getLogger("topseller.aggregator")


def fingerprint(item: Item) -> str:
    """Dedup key for a listing: its lowercased title prefix.

    Two items with the same key are treated as the same product,
    whatever their source.  Swap this function to change identity
    matching without touching merge or scoring.
    """
    return item.title.lower()[: Settings.FINGERPRINT_LENGTH]


def _is_number(value: Any) -> bool:
    """True for finite ints and floats; bools and NaN/inf do not count."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not isinstance(value, float) or math.isfinite(value)


def score_item(item: Item) -> float:
    """Commercial signal contributed by one occurrence of a listing."""
    score = 0.0
    if _is_number(item.reviews):
        capped = min(item.reviews, Settings.REVIEWS_CAP)
        score += capped / Settings.REVIEWS_CAP * Settings.REVIEWS_WEIGHT
    if _is_number(item.rating):
        score += item.rating / 5 * Settings.RATING_WEIGHT
    # Only a numeric price counts as sellable data
    if _is_number(item.price):
        score += Settings.PRICE_BONUS
    return score


class ItemAggregator:
    """Merge item batches from many sources into a ranked top list."""

    @staticmethod
    def aggregate(
        batches: Iterable[Sequence[Item]],
        top_n: int | None = None,
    ) -> list[ScoredItem]:
        """Deduplicate, score and rank items from every batch.

        Batches are consumed in order, and items within a batch in
        order.  The first occurrence of a fingerprint fixes the display
        fields; every occurrence, duplicates included, adds its score.
        Ties keep first-seen order.
        """
        limit = Settings.TOP_N if top_n is None else top_n
        by_key: dict[str, ScoredItem] = {}
        occurrences = 0

        for batch in batches:
            for item in batch:
                occurrences += 1
                key = fingerprint(item)
                merged = by_key.get(key)
                if merged is None:
                    merged = ScoredItem.from_item(item)
                    by_key[key] = merged
                else:
                    merged.add_source(item.source)
                merged.score += score_item(item)

        # sorted() is stable, so equal scores keep insertion order
        ranked = sorted(
            by_key.values(), key=lambda s: s.score, reverse=True
        )
        top = ranked[:limit]

        if occurrences:
            logger.info(
                "Aggregated %d items into %d products, returning %d",
                occurrences,
                len(by_key),
                len(top),
            )
        return top
