# src/scrapers/serpapi_scraper.py

"""Scraper for Google Shopping results via SerpAPI."""

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


class SerpApiScraper(BaseScraper):
    """Scraper for Google Shopping (``tbm=shop``) via SerpAPI."""

    def __init__(
        self, credentials: ProviderCredentials | None = None
    ) -> None:
        super().__init__("serpapi", credentials)

    def _build_params(
        self, topic: str, market: str | None, limit: int
    ) -> dict[str, str]:
        """Map topic and market onto SerpAPI query parameters."""
        gl = self.market_code(market) or self.settings.DEFAULT_MARKET
        return {
            "q": topic,
            "tbm": "shop",
            "gl": gl,
            "hl": gl.lower(),
            "num": str(limit),
            "api_key": self.credentials.serpapi_key,
        }

    def _parse_result(self, result: dict[str, Any]) -> Item:
        """Parse a single shopping result into an Item."""
        title = pick(result, "title", "name")
        return Item(
            title=str(title) if title is not None else "",
            price=price_from(result.get("price")),
            currency=currency_from(result),
            rating=as_rating(result.get("rating")),
            reviews=as_reviews(result.get("reviews")),
            url=as_text(
                pick(result, "link", "product_link", "url")
            ),
            thumbnail=as_text(pick(result, "thumbnail", "image")),
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
        """Search Google Shopping for *topic* in *market*."""
        if not self.credentials.serpapi_key:
            self.logger.warning(
                "[serpapi] SERPAPI_KEY not set, skipping"
            )
            return []

        count = limit or self.settings.DEFAULT_LIMIT
        data = self._get_json(
            self.settings.SERPAPI_URL,
            self._build_params(topic, market, count),
        )
        if not isinstance(data, dict):
            return []

        results = data.get("shopping_results")
        if results is None:
            results = data.get("organic_results")
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
                "[serpapi] Parse failed: %s", e, exc_info=True
            )
            return []
