# tests/test_item_model.py

"""Tests for the Item and ScoredItem dataclasses."""

import dataclasses
import unittest

from src.models.item import Item, ScoredItem


class TestItem(unittest.TestCase):
    """Item dataclass unit tests."""

    def test_defaults_are_none(self) -> None:
        """Optional fields default to None, never fabricated values."""
        item = Item(title="X")
        self.assertIsNone(item.price)
        self.assertIsNone(item.currency)
        self.assertIsNone(item.rating)
        self.assertIsNone(item.reviews)
        self.assertIsNone(item.url)
        self.assertIsNone(item.thumbnail)
        self.assertEqual(item.raw, {})

    def test_immutable(self) -> None:
        """Items are frozen."""
        item = Item(title="X")
        with self.assertRaises(dataclasses.FrozenInstanceError):
            item.title = "Y"  # type: ignore[misc]

    def test_raw_excluded_from_equality(self) -> None:
        """Provider payloads do not affect equality."""
        self.assertEqual(
            Item(title="X", raw={"a": 1}), Item(title="X", raw={"b": 2})
        )


class TestScoredItem(unittest.TestCase):
    """ScoredItem helpers."""

    def _scored(self) -> ScoredItem:
        return ScoredItem.from_item(
            Item(
                title="Lamp",
                price=20.0,
                currency="EUR",
                rating=4.0,
                reviews=10,
                url="https://example.com/lamp",
                source="p1",
            )
        )

    def test_from_item_seeds_fields(self) -> None:
        """The first occurrence fixes display fields."""
        scored = self._scored()
        self.assertEqual(scored.title, "Lamp")
        self.assertEqual(scored.score, 0.0)
        self.assertEqual(scored.sources, ["p1"])

    def test_add_source_deduplicates(self) -> None:
        """Repeated tags are ignored; order is preserved."""
        scored = self._scored()
        scored.add_source("p2")
        scored.add_source("p1")
        scored.add_source("p2")
        self.assertEqual(scored.sources, ["p1", "p2"])

    def test_summary_row_fields(self) -> None:
        """Narrator rows carry exactly the plain summary fields."""
        row = self._scored().to_summary_row()
        self.assertEqual(
            row,
            {
                "title": "Lamp",
                "price": 20.0,
                "rating": 4.0,
                "reviews": 10,
                "sources": ["p1"],
                "url": "https://example.com/lamp",
            },
        )

    def test_to_dict_rounds_score(self) -> None:
        """JSON output rounds the score."""
        scored = self._scored()
        scored.score = 1.234567
        self.assertEqual(scored.to_dict()["score"], 1.2346)


if __name__ == "__main__":
    unittest.main()
