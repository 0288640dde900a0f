# tests/test_apify_scraper.py

"""Tests for the Apify dataset/run resolver and scraper."""

import json
import unittest
from typing import Any
from unittest.mock import MagicMock, patch

from src.config.settings import ProviderCredentials
from src.scrapers.apify_scraper import ApifyScraper

SESSION_PATH = "src.scrapers.base_scraper.curl_requests.Session"
CREDS = ProviderCredentials(apify_token="apify-test-token")

RECORDS: list[dict[str, Any]] = [
    {
        "title": "Ninja AF101 Air Fryer",
        "price": {"value": 89.99, "currency": "USD"},
        "stars": 4.7,
        "reviewsCount": 41250,
        "url": "https://www.amazon.com/dp/B07FDJMC9Q",
        "thumbnailImage": "https://img.example.com/ninja.jpg",
    },
    {
        "name": "COSORI Pro LE Air Fryer",
        "price": 99.0,
        "url": "https://www.amazon.com/dp/B0936FGLQS",
    },
    {"description": "record without a title"},
]


def _json_response(data: Any, status: int = 200) -> MagicMock:
    mock_resp = MagicMock(status_code=status)
    mock_resp.text = json.dumps(data)
    return mock_resp


class TestItemsForJob(unittest.TestCase):
    """ApifyScraper.items_for_job resolution."""

    @patch(SESSION_PATH)
    def test_dataset_returns_raw_records(
        self, mock_session_cls: MagicMock
    ) -> None:
        """Dataset records are passed through untouched."""
        mock_get = mock_session_cls.return_value.get
        mock_get.return_value = _json_response(RECORDS)

        records = ApifyScraper(CREDS).items_for_job(
            "ds-123", "dataset", limit=50
        )
        self.assertEqual(records, RECORDS)

        call = mock_get.call_args
        self.assertEqual(
            call.args[0],
            "https://api.apify.com/v2/datasets/ds-123/items",
        )
        self.assertEqual(
            call.kwargs["params"],
            {"clean": "true", "token": "apify-test-token", "limit": "50"},
        )

    @patch(SESSION_PATH)
    def test_dataset_object_body_uses_items(
        self, mock_session_cls: MagicMock
    ) -> None:
        """An object body yields its 'items' list."""
        mock_session_cls.return_value.get.return_value = _json_response(
            {"items": RECORDS[:1]}
        )
        records = ApifyScraper(CREDS).items_for_job("ds-1", "dataset")
        self.assertEqual(records, RECORDS[:1])

    @patch(SESSION_PATH)
    def test_dataset_without_token_omits_param(
        self, mock_session_cls: MagicMock
    ) -> None:
        """Public datasets can be read without a token."""
        mock_get = mock_session_cls.return_value.get
        mock_get.return_value = _json_response(RECORDS)

        ApifyScraper(ProviderCredentials()).items_for_job("ds-1", "dataset")
        self.assertNotIn("token", mock_get.call_args.kwargs["params"])

    @patch(SESSION_PATH)
    def test_run_resolves_to_dataset(
        self, mock_session_cls: MagicMock
    ) -> None:
        """A run id is looked up first, then its dataset is read."""
        mock_get = mock_session_cls.return_value.get
        mock_get.side_effect = [
            _json_response({"data": {"id": "run-9", "defaultDatasetId": "ds-9"}}),
            _json_response(RECORDS),
        ]

        records = ApifyScraper(CREDS).items_for_job("run-9", "run")
        self.assertEqual(records, RECORDS)
        urls = [c.args[0] for c in mock_get.call_args_list]
        self.assertEqual(
            urls,
            [
                "https://api.apify.com/v2/runs/run-9",
                "https://api.apify.com/v2/datasets/ds-9/items",
            ],
        )

    @patch(SESSION_PATH)
    def test_run_without_dataset_returns_empty(
        self, mock_session_cls: MagicMock
    ) -> None:
        """A run with no associated dataset yields []."""
        mock_get = mock_session_cls.return_value.get
        mock_get.return_value = _json_response({"data": {"id": "run-1"}})

        self.assertEqual(ApifyScraper(CREDS).items_for_job("run-1", "run"), [])
        self.assertEqual(mock_get.call_count, 1)

    @patch(SESSION_PATH)
    def test_run_without_token_skips(
        self, mock_session_cls: MagicMock
    ) -> None:
        """Run lookup needs a token; without one nothing is requested."""
        records = ApifyScraper(ProviderCredentials()).items_for_job(
            "run-1", "run"
        )
        self.assertEqual(records, [])
        mock_session_cls.return_value.get.assert_not_called()

    @patch(SESSION_PATH)
    def test_unknown_kind_returns_empty(
        self, mock_session_cls: MagicMock
    ) -> None:
        """An unsupported job kind yields [] with a warning."""
        with self.assertLogs("topseller.apify", level="WARNING"):
            records = ApifyScraper(CREDS).items_for_job("x", "actor")
        self.assertEqual(records, [])

    @patch(SESSION_PATH)
    def test_http_error_returns_empty(
        self, mock_session_cls: MagicMock
    ) -> None:
        """Upstream failure yields []."""
        mock_session_cls.return_value.get.return_value = _json_response(
            {"error": {"type": "record-not-found"}}, status=404
        )
        self.assertEqual(
            ApifyScraper(CREDS).items_for_job("missing", "dataset"), []
        )


class TestApifyFetch(unittest.TestCase):
    """ApifyScraper.fetch reshaping."""

    @patch(SESSION_PATH)
    def test_fetch_dataset_reshapes_records(
        self, mock_session_cls: MagicMock
    ) -> None:
        """Records become Items tagged 'apify'; untitled ones are dropped."""
        mock_session_cls.return_value.get.return_value = _json_response(
            RECORDS
        )
        items = ApifyScraper(CREDS).fetch("air fryer", dataset_id="ds-1")

        self.assertEqual(len(items), 2)
        first, second = items
        self.assertEqual(first.source, "apify")
        self.assertEqual(first.price, 89.99)
        self.assertEqual(first.currency, "USD")
        self.assertEqual(first.rating, 4.7)
        self.assertEqual(first.reviews, 41250)
        self.assertEqual(first.thumbnail, "https://img.example.com/ninja.jpg")
        self.assertEqual(second.title, "COSORI Pro LE Air Fryer")
        self.assertIsNone(second.rating)

    @patch(SESSION_PATH)
    def test_fetch_non_finite_numbers(
        self, mock_session_cls: MagicMock
    ) -> None:
        """NaN or overflowing counts in dataset records never raise."""
        mock_resp = MagicMock(status_code=200)
        mock_resp.text = (
            '[{"title": "A", "reviewsCount": NaN, "stars": 1e400}]'
        )
        mock_session_cls.return_value.get.return_value = mock_resp

        items = ApifyScraper(CREDS).fetch("a", dataset_id="ds-1")
        self.assertEqual([i.title for i in items], ["A"])
        self.assertIsNone(items[0].reviews)
        self.assertIsNone(items[0].rating)

    @patch(SESSION_PATH)
    def test_fetch_parse_error_returns_empty(
        self, mock_session_cls: MagicMock
    ) -> None:
        """An unexpected reshaping error is logged and yields []."""
        mock_session_cls.return_value.get.return_value = _json_response(
            RECORDS
        )
        with patch(
            "src.scrapers.apify_scraper.item_from_payload",
            side_effect=RuntimeError("bad record"),
        ):
            with self.assertLogs("topseller.apify", level="WARNING"):
                items = ApifyScraper(CREDS).fetch("x", dataset_id="ds-1")
        self.assertEqual(items, [])

    @patch(SESSION_PATH)
    def test_fetch_default_limit(self, mock_session_cls: MagicMock) -> None:
        """Dataset pulls default to 100 records."""
        mock_get = mock_session_cls.return_value.get
        mock_get.return_value = _json_response([])
        ApifyScraper(CREDS).fetch("air fryer", dataset_id="ds-1")
        self.assertEqual(mock_get.call_args.kwargs["params"]["limit"], "100")

    @patch(SESSION_PATH)
    def test_fetch_without_job_skips(
        self, mock_session_cls: MagicMock
    ) -> None:
        """No dataset or run id means nothing to fetch."""
        self.assertEqual(ApifyScraper(CREDS).fetch("air fryer"), [])
        mock_session_cls.return_value.get.assert_not_called()


if __name__ == "__main__":
    unittest.main()
