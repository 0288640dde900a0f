# src/scrapers/base_scraper.py

"""Abstract base class for all provider scrapers."""

import json
import logging
from abc import ABC, abstractmethod
from typing import Any

from curl_cffi import requests as curl_requests

from src.config.settings import ProviderCredentials, Settings
from src.filters.item_validator import ItemValidator
from src.models.item import Item


class BaseScraper(ABC):
    """Abstract base class for all provider scrapers.

    Subclasses issue exactly one outbound request per ``fetch`` call.
    Every failure (missing credentials, network error, timeout,
    non-2xx status, unparsable body) is logged and turned into an
    empty result; nothing is raised to the caller.
    """

    def __init__(
        self,
        source_name: str,
        credentials: ProviderCredentials | None = None,
    ) -> None:
        self.source_name = source_name
        self.logger = logging.getLogger(
            f"topseller.{source_name}"
        )
        self.settings = Settings()
        self.credentials = (
            credentials
            if credentials is not None
            else ProviderCredentials.from_env()
        )
        self.session = curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )
        self._request_timeout: int = (
            self.settings.REQUEST_TIMEOUT
        )

    def _get_json(
        self,
        url: str,
        params: dict[str, str] | None = None,
    ) -> Any | None:
        """GET *url* and decode JSON, or return ``None`` on any failure."""
        try:
            resp = self.session.get(
                url,
                params=params,
                headers=self.settings.DEFAULT_HEADERS,
                timeout=self._request_timeout,
            )
        except Exception as exc:
            self.logger.warning(
                "[%s] Request failed: %s",
                self.source_name,
                exc,
                exc_info=True,
            )
            return None

        if not 200 <= resp.status_code < 300:
            self.logger.warning(
                "[%s] HTTP %d: %s",
                self.source_name,
                resp.status_code,
                str(resp.text)[:200],
            )
            return None

        try:
            text = resp.text
            return json.loads(text) if text else None
        except (TypeError, ValueError) as exc:
            self.logger.warning(
                "[%s] Unparsable response body: %s",
                self.source_name,
                exc,
            )
            return None

    def _finalise(self, items: list[Item]) -> list[Item]:
        """Drop untitled items and log the batch size."""
        valid, _dropped = ItemValidator.validate(items)
        self.logger.info(
            "[%s] %d items normalised", self.source_name, len(valid)
        )
        return valid

    @staticmethod
    def market_code(market: str | None) -> str:
        """Two-letter uppercase market code, or ``""`` when absent."""
        return (market or "").strip()[:2].upper()

    @abstractmethod
    def fetch(
        self,
        topic: str,
        market: str | None = None,
        *,
        limit: int | None = None,
        **options: Any,
    ) -> list[Item]:
        """Fetch listings for *topic* in *market* as normalized Items."""
        ...
