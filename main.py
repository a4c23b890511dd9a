# main.py

"""Entry point for the pricematch command-line search."""

import argparse
import asyncio
import logging
import sys

from pricematch.config.logging_config import setup_logging
from pricematch.config.settings import Settings

logger = logging.getLogger("pricematch.main")


def _positive_float(text: str) -> float:
    """argparse type for a timeout strictly greater than zero."""
    try:
        value = float(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number: {text!r}")
    if not value > 0:
        raise argparse.ArgumentTypeError(
            f"timeout must be positive, got {text!r}"
        )
    return value


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    valid_ids = ", ".join(s["id"] for s in Settings.AVAILABLE_SOURCES)

    parser = argparse.ArgumentParser(
        prog="pricematch",
        description=(
            "Search several marketplaces at once and compare "
            "matching listings."
        ),
        epilog=f"Available sources: {valid_ids}",
    )
    parser.add_argument("query", help="Search query.")
    parser.add_argument(
        "-s",
        "--sources",
        default=None,
        help="Comma-separated source IDs (default: all).",
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
        "-c",
        "--compare",
        action="store_true",
        default=False,
        help="Pair matching listings across the first two sources.",
    )
    parser.add_argument(
        "-t",
        "--timeout",
        type=_positive_float,
        default=None,
        help=(
            "Per-source timeout in seconds "
            f"(default: {Settings.SOURCE_TIMEOUT:g})."
        ),
    )
    return parser


def main() -> None:
    """Parse arguments, run the search and exit with its status."""
    log_file = setup_logging()
    logger.info("pricematch starting, log file: %s", log_file)

    args = _build_parser().parse_args()

    from pricematch.cli.runner import cli_search

    exit_code = asyncio.run(
        cli_search(
            query=args.query,
            source_csv=args.sources,
            output_format=args.output_format,
            compare=args.compare,
            timeout=args.timeout,
        )
    )
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
