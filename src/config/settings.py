# src/config/settings.py

"""Central configuration for the topseller engine."""

import os
from dataclasses import dataclass
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class ProviderCredentials:
    """API keys and tokens for the upstream providers.

    Read once per process and handed to each scraper at construction
    time, so tests can inject fake or missing credentials.
    """

    serpapi_key: str = ""
    rainforest_api_key: str = ""
    apify_token: str = ""

    @classmethod
    def from_env(cls) -> "ProviderCredentials":
        """Build credentials from environment variables."""
        rainforest = (
            os.environ.get("RAINFOREST_API_KEY")
            or os.environ.get("RAINFORREST_API_KEY")
            or ""
        )
        return cls(
            serpapi_key=os.environ.get("SERPAPI_KEY", "").strip(),
            rainforest_api_key=rainforest.strip(),
            apify_token=os.environ.get("APIFY_TOKEN", "").strip(),
        )


class Settings:
    """Central configuration for the topseller engine."""

    # --- Fetching ---
    REQUEST_TIMEOUT: int = 15           # Seconds before a request times out
    DEFAULT_LIMIT: int = 20             # Listings per live provider call
    DATASET_LIMIT: int = 100            # Records per Apify dataset pull
    CACHE_LIMIT: int = 100              # Rows per cache lookup

    # --- Ranking ---
    TOP_N: int = 10
    FINGERPRINT_LENGTH: int = 160
    REVIEWS_CAP: int = 5000
    REVIEWS_WEIGHT: float = 1.2
    RATING_WEIGHT: float = 0.8
    PRICE_BONUS: float = 0.4

    # --- Browser Impersonation ---
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": "application/json",
        "Accept-Language": "en-US,en;q=0.9",
    }

    # --- Provider endpoints ---
    SERPAPI_URL: str = "https://serpapi.com/search.json"
    RAINFOREST_URL: str = "https://api.rainforestapi.com/request"
    APIFY_BASE: str = "https://api.apify.com/v2"

    DEFAULT_MARKET: str = "US"
    AMAZON_DOMAINS: dict[str, str] = {
        "DE": "amazon.de",
        "IT": "amazon.it",
        "US": "amazon.com",
        "GB": "amazon.co.uk",
        "FR": "amazon.fr",
        "ES": "amazon.es",
    }
    DEFAULT_AMAZON_DOMAIN: str = "amazon.com"

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    RESULTS_DIR: Path = BASE_DIR / "results"
    LOGS_DIR: Path = BASE_DIR / "logs"
    RESULTS_DB_PATH: Path = BASE_DIR / "data" / "results.db"

    # --- Sources (registry for future extensibility) ---
    AVAILABLE_SOURCES: list[dict[str, str]] = [
        {
            "id": "serpapi",
            "label": "Google Shopping (SerpAPI)",
            "scraper": "src.scrapers.serpapi_scraper.SerpApiScraper",
        },
        {
            "id": "rainforest",
            "label": "Amazon (Rainforest)",
            "scraper": "src.scrapers.rainforest_scraper.RainforestScraper",
        },
        {
            "id": "apify",
            "label": "Apify datasets",
            "scraper": "src.scrapers.apify_scraper.ApifyScraper",
        },
    ]
