# main.py

"""Entry point for the topseller best-seller report CLI."""

import argparse
import asyncio
import logging
import sys

from src.config.logging_config import setup_logging
from src.config.settings import Settings

logger = logging.getLogger("topseller.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    valid_ids = ", ".join(s["id"] for s in Settings.AVAILABLE_SOURCES)

    parser = argparse.ArgumentParser(
        prog="topseller",
        description="Cross-provider best-selling product reports.",
        epilog=f"Available sources: {valid_ids}",
    )
    parser.add_argument(
        "topic",
        nargs="?",
        default=None,
        help="Product topic to rank, e.g. 'wireless earbuds'.",
    )
    parser.add_argument(
        "-m",
        "--market",
        default=Settings.DEFAULT_MARKET,
        help="Market code such as US, DE, IT (default: US).",
    )
    parser.add_argument(
        "-w",
        "--window-months",
        type=int,
        default=12,
        dest="window_months",
        help="Reporting window in months (default: 12).",
    )
    parser.add_argument(
        "-s",
        "--sources",
        default=None,
        help="Comma-separated source IDs (default: all).",
    )
    parser.add_argument(
        "-l",
        "--limit",
        type=int,
        default=None,
        help="Max listings requested per source.",
    )
    parser.add_argument(
        "--dataset-id",
        default=None,
        dest="dataset_id",
        help="Apify dataset to read listings from.",
    )
    parser.add_argument(
        "--run-id",
        default=None,
        dest="run_id",
        help="Apify run whose dataset should be read.",
    )
    parser.add_argument(
        "--cache",
        action="store_true",
        default=False,
        dest="use_cache",
        help="Also serve matching listings from the results store.",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="json",
        dest="output_format",
        help="Output format (default: json).",
    )
    parser.add_argument(
        "-o",
        "--output",
        default=None,
        dest="output_dir",
        help="Custom output directory (default: results/).",
    )
    parser.add_argument(
        "--ingest",
        default=None,
        metavar="FILE",
        help="Upsert a scrape-webhook JSON body into the results store.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Show INFO logs on the console.",
    )
    return parser


def _run_report(args: argparse.Namespace) -> None:
    """Build a report and exit."""
    from src.cli.runner import cli_report

    exit_code = asyncio.run(
        cli_report(
            topic=args.topic,
            market=args.market,
            window_months=args.window_months,
            source_csv=args.sources,
            output_format=args.output_format,
            output_dir=args.output_dir,
            limit=args.limit,
            use_cache=args.use_cache,
            dataset_id=args.dataset_id,
            run_id=args.run_id,
        )
    )
    sys.exit(exit_code)


def _run_ingest(body_path: str) -> None:
    """Load a webhook body into the results store."""
    from src.cli.runner import run_ingest

    exit_code = run_ingest(body_path)
    sys.exit(exit_code)


def main() -> None:
    """Route to ingestion or report generation."""
    parser = _build_parser()
    args = parser.parse_args()

    log_file = setup_logging(verbose=args.verbose)
    logger.info("topseller starting, log file: %s", log_file)

    if args.ingest:
        _run_ingest(args.ingest)
    elif args.topic is None:
        parser.print_help(sys.stderr)
        sys.exit(2)
    else:
        _run_report(args)


if __name__ == "__main__":
    main()
