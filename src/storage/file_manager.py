# src/storage/file_manager.py

"""Handles saving reports to disk."""

import json
import logging
import re
from datetime import datetime
from pathlib import Path

from src.config.settings import Settings
from src.services.report_orchestrator import Report

logger = logging.getLogger("topseller.storage")


def _slug(text: str) -> str:
    """Filesystem-safe fragment of a topic or market."""
    return re.sub(r"[^\w-]+", "_", text.strip()).strip("_") or "report"


class FileManager:
    """Handles saving reports to disk."""

    def __init__(self) -> None:
        self.results_dir: Path = Settings.RESULTS_DIR
        self.results_dir.mkdir(parents=True, exist_ok=True)
        logger.debug("FileManager initialised, results_dir=%s", self.results_dir)

    def _path_for(self, report: Report, suffix: str) -> Path:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        name = (
            f"{_slug(report.market)}_{_slug(report.topic)}"
            f"_{timestamp}.{suffix}"
        )
        return self.results_dir / name

    def save_report(self, report: Report) -> Path:
        """Save a report to a timestamped JSON file."""
        filepath = self._path_for(report, "json")
        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(report.to_dict(), f, ensure_ascii=False, indent=2)

        logger.info(
            "Saved %d ranked items for '%s' to %s",
            len(report.top),
            report.topic,
            filepath,
        )
        return filepath
