# tests/test_file_manager.py

"""Tests for the FileManager storage module."""

import json
import unittest

from src.config.settings import Settings
from src.models.item import ScoredItem
from src.services.report_orchestrator import Report
from src.storage.file_manager import FileManager


def _sample_report() -> Report:
    """Return a two-item report."""
    return Report(
        topic="air fryer",
        market="US",
        window_months=12,
        top=[
            ScoredItem(
                title="Ninja AF101",
                price=89.99,
                currency="USD",
                rating=4.7,
                reviews=41250,
                url="https://example.com/ninja",
                source="serpapi",
                score=2.34,
                sources=["serpapi", "apify"],
            ),
            ScoredItem(title="Unpriced Fryer", source="apify"),
        ],
        summary="Fryers sell.",
    )


class TestFileManager(unittest.TestCase):
    """Tests for JSON/CSV report output."""

    def setUp(self) -> None:
        self.fm = FileManager()

    def test_results_dir_created(self) -> None:
        """The configured results directory exists after init."""
        self.assertTrue(Settings.RESULTS_DIR.is_dir())
        self.assertEqual(self.fm.results_dir, Settings.RESULTS_DIR)

    def test_save_report_writes_json(self) -> None:
        """save_report writes the caller-facing report shape."""
        path = self.fm.save_report(_sample_report())
        self.assertTrue(path.exists())
        self.assertTrue(path.name.startswith("US_air_fryer_"))

        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        self.assertEqual(data["topic"], "air fryer")
        self.assertEqual(data["windowMonths"], 12)
        self.assertEqual(data["summary"], "Fryers sell.")
        self.assertEqual(len(data["top"]), 2)
        self.assertEqual(data["top"][0]["sources"], ["serpapi", "apify"])
        self.assertIsNone(data["top"][1]["price"])

    def test_unsafe_topic_slugged(self) -> None:
        """Path separators in topics never reach the filename."""
        report = _sample_report()
        report.topic = "usb-c / hubs"
        path = self.fm.save_report(report)
        self.assertEqual(path.parent, self.fm.results_dir)
        self.assertNotIn("/", path.name)


if __name__ == "__main__":
    unittest.main()
