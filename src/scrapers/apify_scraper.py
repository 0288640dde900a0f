# src/scrapers/apify_scraper.py

"""Apify dataset/run resolver and listing scraper."""

import urllib.parse
from typing import Any

from src.config.settings import ProviderCredentials
from src.models.item import Item
from src.models.payload import item_from_payload
from src.scrapers.base_scraper import BaseScraper

JOB_KINDS = ("dataset", "run")


class ApifyScraper(BaseScraper):
    """Reads materialized results of asynchronous Apify actor jobs.

    Apify scrapes run out of band; by the time a report is built the
    listings already sit in a dataset.  A job is addressed either by
    its dataset id or by the run id that produced it.
    """

    def __init__(
        self, credentials: ProviderCredentials | None = None
    ) -> None:
        super().__init__("apify", credentials)

    def _token_params(self) -> dict[str, str]:
        token = self.credentials.apify_token
        return {"token": token} if token else {}

    def dataset_items(
        self, dataset_id: str, limit: int | None = None
    ) -> list[dict[str, Any]]:
        """Fetch raw records of a dataset, or ``[]`` on failure."""
        if not dataset_id:
            return []
        url = (
            f"{self.settings.APIFY_BASE}/datasets/"
            f"{urllib.parse.quote(dataset_id, safe='')}/items"
        )
        params = {"clean": "true", **self._token_params()}
        if limit:
            params["limit"] = str(limit)

        data = self._get_json(url, params)
        if isinstance(data, dict):
            data = data.get("items")
        if not isinstance(data, list):
            return []
        return [r for r in data if isinstance(r, dict)]

    def run_dataset_id(self, run_id: str) -> str | None:
        """Look up the default dataset id produced by a run."""
        if not run_id:
            return None
        url = (
            f"{self.settings.APIFY_BASE}/runs/"
            f"{urllib.parse.quote(run_id, safe='')}"
        )
        data = self._get_json(url, self._token_params())
        if not isinstance(data, dict):
            return None
        run = data.get("data")
        if not isinstance(run, dict):
            run = data
        dataset_id = run.get("defaultDatasetId")
        return str(dataset_id) if dataset_id else None

    def items_for_job(
        self,
        job_id: str,
        kind: str,
        *,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """Return the provider-native records for a dataset or run.

        Records are passed through untouched.  A run without an
        associated dataset yields ``[]``.
        """
        if kind not in JOB_KINDS:
            self.logger.warning(
                "[apify] Unknown job kind '%s'", kind
            )
            return []
        if not job_id:
            self.logger.warning("[apify] Empty %s id", kind)
            return []

        if kind == "run":
            if not self.credentials.apify_token:
                self.logger.warning(
                    "[apify] APIFY_TOKEN not set, cannot resolve run %s",
                    job_id,
                )
                return []
            dataset_id = self.run_dataset_id(job_id)
            if not dataset_id:
                self.logger.info(
                    "[apify] Run %s has no dataset", job_id
                )
                return []
            job_id = dataset_id

        records = self.dataset_items(job_id, limit)
        self.logger.info(
            "[apify] %d records from dataset %s", len(records), job_id
        )
        return records

    def fetch(
        self,
        topic: str,
        market: str | None = None,
        *,
        limit: int | None = None,
        **options: Any,
    ) -> list[Item]:
        """Reshape a job's records into Items.

        Options: ``dataset_id`` (preferred) or ``run_id``.  The topic
        and market are already baked into the job, so neither is
        sent upstream.
        """
        count = limit or self.settings.DATASET_LIMIT
        dataset_id = options.get("dataset_id")
        run_id = options.get("run_id")

        if dataset_id:
            records = self.items_for_job(
                dataset_id, "dataset", limit=count
            )
        elif run_id:
            records = self.items_for_job(run_id, "run", limit=count)
        else:
            self.logger.debug(
                "[apify] No dataset_id or run_id for '%s', skipping",
                topic,
            )
            return []

        try:
            items = [
                item_from_payload(record, self.source_name)
                for record in records
            ]
            return self._finalise(items)
        except Exception as e:
            self.logger.warning(
                "[apify] Parse failed: %s", e, exc_info=True
            )
            return []
