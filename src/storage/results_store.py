# src/storage/results_store.py

"""SQLite-backed store of raw scraped records used as the cache corpus."""

import json
import logging
import sqlite3
from pathlib import Path
from typing import Any

from src.config.settings import Settings
from src.models.result_row import CachedRow, ResultRow

logger = logging.getLogger("topseller.results_store")

_SCHEMA = """\
CREATE TABLE IF NOT EXISTS results (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    external_id TEXT    NOT NULL UNIQUE,
    dataset_id  TEXT,
    run_id      TEXT,
    source      TEXT    NOT NULL DEFAULT 'apify',
    payload     TEXT    NOT NULL,
    inserted_at TEXT    NOT NULL
);
"""

# Payload fields searched by a cache lookup
_SEARCH_FIELDS: tuple[str, ...] = ("title", "name", "description")


def _icontains(haystack: Any, needle: Any) -> int:
    """SQL function: case-insensitive substring test, NULL-safe."""
    if haystack is None or needle is None:
        return 0
    return int(str(needle).casefold() in str(haystack).casefold())


class ResultsStore:
    """SQLite-backed store for raw records pushed by scrape webhooks."""

    def __init__(
        self, db_path: Path | None = None,
    ) -> None:
        path = db_path or Settings.RESULTS_DB_PATH
        path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(
            str(path), check_same_thread=False,
        )
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.create_function(
            "icontains", 2, _icontains, deterministic=True,
        )
        self._conn.executescript(_SCHEMA)
        logger.debug("ResultsStore opened at %s", path)

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()

    # ── Ingestion ────────────────────────────────────────

    def upsert_records(self, rows: list[ResultRow]) -> int:
        """Insert or overwrite records keyed by ``external_id``.

        Re-submitting an id replaces the stored row instead of
        adding a second one.  Returns the number of distinct ids written.
        """
        if not rows:
            return 0
        self._conn.executemany(
            "INSERT INTO results "
            "(external_id, dataset_id, run_id, source, payload, inserted_at) "
            "VALUES (?, ?, ?, ?, ?, ?) "
            "ON CONFLICT(external_id) DO UPDATE SET "
            "dataset_id=excluded.dataset_id, "
            "run_id=excluded.run_id, "
            "source=excluded.source, "
            "payload=excluded.payload, "
            "inserted_at=excluded.inserted_at",
            [
                (
                    r.external_id,
                    r.dataset_id,
                    r.run_id,
                    r.source,
                    json.dumps(r.payload, ensure_ascii=False),
                    r.inserted_at,
                )
                for r in rows
            ],
        )
        self._conn.commit()
        stored = len({r.external_id for r in rows})
        logger.info("Upserted %d result rows", stored)
        return stored

    def count(self) -> int:
        """Return the number of stored records."""
        row = self._conn.execute(
            "SELECT COUNT(*) FROM results"
        ).fetchone()
        return int(row[0]) if row else 0

    # ── Querying ─────────────────────────────────────────

    def search_payloads(
        self, topic: str, limit: int,
    ) -> list[CachedRow]:
        """Return stored payloads whose title/name/description contain *topic*.

        Matching is a case-insensitive substring test; rows come back
        in insertion order.
        """
        clause = " OR ".join(
            f"icontains(json_extract(payload, '$.{name}'), :topic)"
            for name in _SEARCH_FIELDS
        )
        rows = self._conn.execute(
            f"SELECT payload, source FROM results WHERE {clause} "
            "ORDER BY id ASC LIMIT :limit",
            {"topic": topic, "limit": limit},
        ).fetchall()

        found: list[CachedRow] = []
        for payload_text, source in rows:
            try:
                payload = json.loads(payload_text)
            except json.JSONDecodeError:
                logger.warning("Skipping unreadable stored payload")
                continue
            if isinstance(payload, dict):
                found.append(CachedRow(payload=payload, source=source))
        return found
