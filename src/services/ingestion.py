# src/services/ingestion.py

"""Ingestion sink: turn scrape-webhook bodies into stored result rows."""

import hashlib
import json
import logging
from datetime import datetime
from typing import Any

from src.models.result_row import ResultRow
from src.storage.results_store import ResultsStore

logger = logging.getLogger("topseller.ingestion")


def _nested(body: dict[str, Any], *path: str) -> Any:
    """Walk *path* through nested dicts, returning ``None`` on a miss."""
    node: Any = body
    for key in path:
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    return node


def extract_items(body: Any) -> list[dict[str, Any]]:
    """Find the scraped record list inside a webhook body."""
    if not isinstance(body, dict):
        return []
    candidates = (
        ("datasetItems",),
        ("items",),
        ("data", "items"),
        ("resource", "items"),
        ("data",),
    )
    for path in candidates:
        found = _nested(body, *path)
        if isinstance(found, list):
            return [it for it in found if isinstance(it, dict)]
    return []


def _first(body: dict[str, Any], *paths: tuple[str, ...]) -> str | None:
    for path in paths:
        value = _nested(body, *path)
        if value:
            return str(value)
    return None


def record_external_id(
    record: dict[str, Any], dataset_id: str | None,
) -> str:
    """Stable id for a record: its own ``_id``/``id``, else a content hash."""
    own = record.get("_id") or record.get("id")
    if own:
        return str(own)
    digest = hashlib.sha1(
        json.dumps(record, sort_keys=True, default=str).encode("utf-8")
    ).hexdigest()[:16]
    return f"{dataset_id or 'ds'}::{digest}"


def build_rows(
    body: dict[str, Any], source: str = "apify",
) -> list[ResultRow]:
    """Build result rows for every record carried by a webhook body."""
    items = extract_items(body)
    dataset_id = _first(
        body,
        ("datasetId",),
        ("defaultDatasetId",),
        ("resource", "defaultDatasetId"),
    )
    run_id = _first(body, ("runId",), ("id",), ("resource", "id"))
    now = datetime.now().isoformat()
    return [
        ResultRow(
            external_id=record_external_id(it, dataset_id),
            payload=it,
            inserted_at=now,
            dataset_id=dataset_id,
            run_id=run_id,
            source=source,
        )
        for it in items
    ]


def ingest_webhook_body(
    body: Any, store: ResultsStore, source: str = "apify",
) -> int:
    """Upsert every record in *body* into *store*.

    Returns the number of rows written; a body without records
    writes nothing.
    """
    if not isinstance(body, dict):
        logger.warning("Ignoring non-object webhook body")
        return 0
    rows = build_rows(body, source)
    logger.info(
        "Webhook body: dataset=%s run=%s items=%d",
        rows[0].dataset_id if rows else None,
        rows[0].run_id if rows else None,
        len(rows),
    )
    if not rows:
        return 0
    return store.upsert_records(rows)
