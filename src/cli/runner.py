# src/cli/runner.py

"""Headless CLI runner that reuses the async report orchestrator."""

import json
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

from src.config.settings import Settings
from src.models.item import ScoredItem
from src.services.report_orchestrator import (
    Report,
    ReportOrchestrator,
    ReportRequest,
)
from src.storage.file_manager import FileManager

logger = logging.getLogger("topseller.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


def resolve_sources(
    source_csv: str | None,
) -> list[dict[str, str]]:
    """Map a comma-separated list of source IDs to their config dicts.

    Returns all sources when *source_csv* is ``None``.
    Raises ``SystemExit`` on unknown IDs.
    """
    available = {
        s["id"]: s for s in Settings.AVAILABLE_SOURCES
    }
    if source_csv is None:
        return Settings.AVAILABLE_SOURCES

    requested = [
        s.strip() for s in source_csv.split(",") if s.strip()
    ]
    unknown = [r for r in requested if r not in available]
    if unknown:
        valid = ", ".join(sorted(available))
        _err.print(
            f"[red]Unknown source(s): {', '.join(unknown)}[/red]"
        )
        _err.print(f"[dim]Available: {valid}[/dim]")
        raise SystemExit(1)

    return [available[r] for r in requested]


def _fmt(value: object) -> str:
    return "N/A" if value is None else str(value)


def _print_table(report: Report) -> None:
    """Render the ranked list as a Rich table on stdout."""
    table = Table(
        title=(
            f"Best sellers: {report.topic} "
            f"({report.market}, {report.window_months} months)"
        ),
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("#", style="dim", width=4)
    table.add_column("Title", max_width=60)
    table.add_column("Price", justify="right", style="green")
    table.add_column("Rating", justify="center")
    table.add_column("Reviews", justify="right")
    table.add_column("Score", justify="right", style="bold")
    table.add_column("Sources", style="magenta")

    item: ScoredItem
    for idx, item in enumerate(report.top, 1):
        price = _fmt(item.price)
        if item.price is not None and item.currency:
            price = f"{item.currency} {item.price}"
        table.add_row(
            str(idx),
            item.title[:60],
            price,
            _fmt(item.rating),
            _fmt(item.reviews),
            f"{item.score:.2f}",
            ", ".join(item.sources),
        )

    Console().print(table)
    if report.summary:
        Console().print(report.summary)


async def cli_report(
    topic: str,
    market: str,
    window_months: int,
    source_csv: str | None,
    output_format: str,
    output_dir: str | None,
    limit: int | None = None,
    use_cache: bool = False,
    dataset_id: str | None = None,
    run_id: str | None = None,
) -> int:
    """Build a report headlessly and return an exit code (0=ok, 1=empty)."""
    sources = resolve_sources(source_csv)

    if output_dir is not None:
        Settings.RESULTS_DIR = Path(output_dir)

    orchestrator = ReportOrchestrator()
    request = ReportRequest(
        topic=topic, market=market, window_months=window_months
    )

    source_labels = ", ".join(s["label"] for s in sources)
    if use_cache:
        source_labels += ", cache"
    _err.print(
        f"[bold]Topic:[/bold] {topic}  [bold]Market:[/bold] {market}  "
        f"[dim]sources={source_labels}[/dim]"
    )

    report = await orchestrator.build_report(
        request,
        sources,
        limit=limit,
        use_cache=use_cache,
        dataset_id=dataset_id,
        run_id=run_id,
    )

    for error_msg in report.errors:
        _err.print(f"[red]Error: {error_msg}[/red]")

    if not report.top:
        _err.print("[yellow]No products found.[/yellow]")
        return 1

    counts = ", ".join(
        f"{k}={v}" for k, v in report.source_counts.items()
    )
    _err.print(
        f"[green]✓ {len(report.top)} ranked products[/green] "
        f"[dim]({counts})[/dim]"
    )

    try:
        path = FileManager().save_report(report)
        _err.print(f"[dim]Saved report → {path}[/dim]")
    except OSError as exc:
        logger.error("Save failed: %s", exc, exc_info=True)
        _err.print(f"[red]Save failed: {exc}[/red]")

    if output_format == "table":
        _print_table(report)
    else:
        json.dump(
            report.to_dict(),
            sys.stdout,
            ensure_ascii=False,
            indent=2,
        )
        sys.stdout.write("\n")

    return 0


def run_ingest(body_path: str) -> int:
    """Load a scrape-webhook JSON body from disk into the results store."""
    from src.services.ingestion import ingest_webhook_body
    from src.storage.results_store import ResultsStore

    try:
        with open(body_path, encoding="utf-8") as f:
            body = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        logger.error("Cannot read %s: %s", body_path, exc)
        _err.print(f"[red]Cannot read {body_path}: {exc}[/red]")
        return 1

    store = ResultsStore()
    try:
        written = ingest_webhook_body(body, store)
    finally:
        store.close()

    if not written:
        _err.print("[yellow]No items in webhook body.[/yellow]")
        return 0
    _err.print(f"[green]✓ Upserted {written:,} records[/green]")
    return 0
