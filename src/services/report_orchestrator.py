# src/services/report_orchestrator.py

"""Orchestrates multi-provider best-seller reports."""

import asyncio
import importlib
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from src.config.settings import ProviderCredentials, Settings
from src.filters.aggregator import ItemAggregator
from src.models.item import Item, ScoredItem
from src.storage.cache_reader import CacheReader

logger = logging.getLogger("topseller.orchestrator")


@dataclass
class ReportRequest:
    """Caller input: which topic, where, and over what window."""

    topic: str
    market: str = Settings.DEFAULT_MARKET
    window_months: int = 12

    @property
    def window_text(self) -> str:
        """Human-readable window, e.g. ``"12 months"``."""
        unit = "month" if self.window_months == 1 else "months"
        return f"{self.window_months} {unit}"


# Receives the request and flattened top rows, returns narrative text
Narrator = Callable[[ReportRequest, list[dict[str, Any]]], str]


@dataclass
class Report:
    """Ranked best-seller list for one request."""

    topic: str
    market: str
    window_months: int
    top: list[ScoredItem] = field(
        default_factory=lambda: list[ScoredItem]()
    )
    summary: str = ""
    source_counts: dict[str, int] = field(
        default_factory=lambda: dict[str, int]()
    )
    errors: list[str] = field(
        default_factory=lambda: list[str]()
    )

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the caller-facing response shape."""
        return {
            "topic": self.topic,
            "market": self.market,
            "windowMonths": self.window_months,
            "top": [s.to_dict() for s in self.top],
            "summary": self.summary,
        }


def _load_scraper_class(dotted_path: str) -> type[Any]:
    """Dynamically import a scraper class from its dotted module path."""
    module_path, class_name = dotted_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    cls: type[Any] = getattr(module, class_name)
    return cls


class ReportOrchestrator:
    """Coordinates provider fetches, the cache path and ranking."""

    def __init__(
        self,
        credentials: ProviderCredentials | None = None,
        cache_reader: CacheReader | None = None,
        narrator: Narrator | None = None,
    ) -> None:
        self.settings = Settings()
        self.credentials = (
            credentials
            if credentials is not None
            else ProviderCredentials.from_env()
        )
        self.cache_reader = cache_reader or CacheReader()
        self.narrator = narrator

    # ── Private helpers ──────────────────────────────────

    @staticmethod
    def _source_options(
        source_id: str, options: dict[str, Any],
    ) -> dict[str, Any]:
        """Pick the provider-specific options a source understands."""
        if source_id == "apify":
            keys = ("dataset_id", "run_id")
        elif source_id == "rainforest":
            keys = ("amazon_domain",)
        else:
            keys = ()
        return {
            k: options[k] for k in keys if options.get(k)
        }

    async def _run_sources(
        self,
        request: ReportRequest,
        sources: list[dict[str, str]],
        limit: int | None,
        use_cache: bool,
        options: dict[str, Any],
    ) -> tuple[list[tuple[str, list[Item]]], list[str]]:
        """Fetch from every selected source concurrently.

        Returns ``(source_id, items)`` batches in source order, cache
        last, and a list of error messages.
        """
        async def run_one(
            scraper_path: str, source_id: str,
        ) -> list[Item]:
            scraper_cls = _load_scraper_class(scraper_path)
            scraper = scraper_cls(self.credentials)
            items: list[Item] = await asyncio.to_thread(
                scraper.fetch,
                request.topic,
                request.market,
                limit=limit,
                **self._source_options(source_id, options),
            )
            return items

        labels = [src["id"] for src in sources]
        tasks = [
            run_one(src["scraper"], src["id"]) for src in sources
        ]
        if use_cache:
            labels.append("cache")
            tasks.append(
                asyncio.to_thread(
                    self.cache_reader.cached_items,
                    request.topic,
                    limit=limit,
                )
            )

        outcomes = await asyncio.gather(
            *tasks, return_exceptions=True
        )

        batches: list[tuple[str, list[Item]]] = []
        errors: list[str] = []
        for label, outcome in zip(labels, outcomes):
            if isinstance(outcome, list):
                batches.append((label, outcome))
            elif isinstance(outcome, Exception):
                errors.append(f"{label}: {outcome}")
                logger.error(
                    "Source '%s' failed for topic '%s': %s",
                    label,
                    request.topic,
                    outcome,
                    exc_info=outcome,
                )
        return batches, errors

    def _narrate(self, request: ReportRequest, report: Report) -> None:
        """Ask the narrator for a summary of the ranked list."""
        if self.narrator is None or not report.top:
            return
        rows = [s.to_summary_row() for s in report.top]
        try:
            report.summary = self.narrator(request, rows)
        except Exception as exc:
            report.errors.append(f"narrator: {exc}")
            logger.error(
                "Narrator failed for topic '%s': %s",
                request.topic,
                exc,
                exc_info=True,
            )

    # ── Public entry point ───────────────────────────────

    async def build_report(
        self,
        request: ReportRequest,
        sources: list[dict[str, str]],
        *,
        limit: int | None = None,
        use_cache: bool = False,
        **options: Any,
    ) -> Report:
        """Fetch, aggregate and summarise a best-seller report.

        Options are routed to the sources that understand them:
        ``dataset_id``/``run_id`` for Apify, ``amazon_domain`` for
        Rainforest.  A failing source contributes nothing.
        """
        report = Report(
            topic=request.topic,
            market=request.market,
            window_months=request.window_months,
        )
        if not request.topic.strip():
            return report

        batches, errors = await self._run_sources(
            request, sources, limit, use_cache, options
        )
        report.errors.extend(errors)
        report.source_counts = {
            label: len(items) for label, items in batches
        }
        report.top = ItemAggregator.aggregate(
            items for _label, items in batches
        )
        logger.info(
            "Report for '%s' (%s): %d ranked from %s",
            request.topic,
            request.market,
            len(report.top),
            report.source_counts,
        )

        await asyncio.to_thread(self._narrate, request, report)
        return report
