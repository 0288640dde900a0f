# src/scrapers/rainforest_scraper.py

"""Scraper for Amazon search results via the Rainforest API."""

from typing import Any

from src.config.settings import ProviderCredentials
from src.models.item import Item
from src.models.payload import (
    as_rating,
    as_reviews,
    as_text,
    currency_from,
    pick,
    price_from,
)
from src.scrapers.base_scraper import BaseScraper


class RainforestScraper(BaseScraper):
    """Scraper for Amazon search via Rainforest.

    Amazon partitions by region, so the market code selects the
    regional Amazon domain.
    """

    def __init__(
        self, credentials: ProviderCredentials | None = None
    ) -> None:
        super().__init__("rainforest", credentials)

    def amazon_domain(
        self, market: str | None, override: str | None = None
    ) -> str:
        """Resolve the Amazon domain for a market code."""
        if override:
            return override
        return self.settings.AMAZON_DOMAINS.get(
            self.market_code(market),
            self.settings.DEFAULT_AMAZON_DOMAIN,
        )

    def _parse_result(self, result: dict[str, Any]) -> Item:
        """Parse a single search result into an Item."""
        title = pick(result, "title", "name")
        return Item(
            title=str(title) if title is not None else "",
            price=price_from(result.get("price")),
            currency=currency_from(result),
            rating=as_rating(result.get("rating")),
            reviews=as_reviews(result.get("ratings_total")),
            url=as_text(pick(result, "link", "url")),
            thumbnail=as_text(pick(result, "image", "thumbnail")),
            source=self.source_name,
            raw=result,
        )

    def fetch(
        self,
        topic: str,
        market: str | None = None,
        *,
        limit: int | None = None,
        **options: Any,
    ) -> list[Item]:
        """Search Amazon for *topic* in the domain matching *market*.

        Accepts an ``amazon_domain`` option to bypass the market map.
        """
        if not self.credentials.rainforest_api_key:
            self.logger.warning(
                "[rainforest] RAINFOREST_API_KEY not set, skipping"
            )
            return []

        count = limit or self.settings.DEFAULT_LIMIT
        params = {
            "api_key": self.credentials.rainforest_api_key,
            "type": "search",
            "amazon_domain": self.amazon_domain(
                market, options.get("amazon_domain")
            ),
            "search_term": topic,
        }
        data = self._get_json(self.settings.RAINFOREST_URL, params)
        if not isinstance(data, dict):
            return []

        results = data.get("search_results")
        if results is None:
            results = data.get("results")
        if not isinstance(results, list):
            return []

        try:
            items = [
                self._parse_result(r)
                for r in results[:count]
                if isinstance(r, dict)
            ]
            return self._finalise(items)
        except Exception as e:
            self.logger.warning(
                "[rainforest] Parse failed: %s", e, exc_info=True
            )
            return []
