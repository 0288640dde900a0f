# src/filters/item_validator.py

"""Item validation: drop listings that cannot be deduplicated."""

import logging

from src.models.item import Item

logger = logging.getLogger("topseller.filters")


class ItemValidator:
    """Drop items whose title is missing before they reach ranking."""

    @staticmethod
    def validate(
        items: list[Item],
    ) -> tuple[list[Item], int]:
        """Drop items with empty/whitespace titles.

        Returns the valid items and the count of dropped items.
        """
        valid: list[Item] = []
        dropped = 0

        for item in items:
            if not item.title.strip():
                logger.debug(
                    "Dropped item with empty title "
                    "(source=%s, url=%s)",
                    item.source,
                    item.url,
                )
                dropped += 1
                continue
            valid.append(item)

        if dropped:
            logger.info(
                "Validation dropped %d untitled items",
                dropped,
            )

        return valid, dropped
