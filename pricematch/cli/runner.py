# pricematch/cli/runner.py

"""Headless CLI search runner built on the async aggregator."""

import json
import logging
import sys
from typing import Any

from rich.console import Console
from rich.table import Table

from pricematch.config.settings import Settings
from pricematch.errors import ConfigurationError
from pricematch.matching.matcher import ProductMatcher
from pricematch.models.record import CanonicalRecord
from pricematch.models.result import AggregationResult, MatchedPair
from pricematch.models.source import SourceId, SourceQuery
from pricematch.services.aggregator import Aggregator

logger = logging.getLogger("pricematch.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


def resolve_sources(source_csv: str | None) -> list[str]:
    """Split a comma-separated source list; all sources when ``None``."""
    if source_csv is None:
        return [s["id"] for s in Settings.AVAILABLE_SOURCES]
    return [s.strip() for s in source_csv.split(",") if s.strip()]


def _label(source_id: SourceId) -> str:
    """Human-readable label for a source id."""
    for entry in Settings.AVAILABLE_SOURCES:
        if entry["id"] == source_id.value:
            return entry["label"]
    return source_id.value


def _print_records(
    source_id: SourceId, records: list[CanonicalRecord],
) -> None:
    """Render a Rich table of one source's records to stdout."""
    table = Table(
        title=f"{_label(source_id)} Results",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("#", style="dim", width=4)
    table.add_column("Product", max_width=60)
    table.add_column("Price", justify="right", style="green")
    table.add_column("Rating", justify="center")
    table.add_column("Reviews", justify="right")
    table.add_column("Availability")
    table.add_column("Link", overflow="fold", style="dim")

    for idx, r in enumerate(records, 1):
        table.add_row(
            str(idx),
            r.product_name[:60] or "N/A",
            f"{r.price:,.2f}" if r.price > 0 else "N/A",
            f"{r.rating:g}" if r.rating else "—",
            f"{r.review_count:,}",
            r.availability,
            r.link,
        )

    Console().print(table)


def _print_comparison(
    pairs: list[MatchedPair], left: SourceId, right: SourceId,
) -> None:
    """Render matched pairs with the cheaper side highlighted."""
    table = Table(
        title="Price Comparison",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("Score", justify="right", style="dim")
    table.add_column(_label(left), max_width=40)
    table.add_column(f"{_label(left)} Price", justify="right")
    table.add_column(_label(right), max_width=40)
    table.add_column(f"{_label(right)} Price", justify="right")
    table.add_column("Better Deal", style="green")

    for pair in pairs:
        if pair.cheaper is None:
            verdict = "—"
        else:
            winner = left if pair.cheaper == "left" else right
            verdict = (
                f"{_label(winner)} saves {pair.savings:,.2f} "
                f"({pair.savings_percent:.1f}% less)"
            )
        table.add_row(
            f"{pair.similarity_score:.2f}",
            pair.left.product_name[:40],
            f"{pair.left.price:,.2f}",
            pair.right.product_name[:40],
            f"{pair.right.price:,.2f}",
            verdict,
        )

    Console().print(table)


def _comparison_sides(
    result: AggregationResult,
) -> tuple[SourceId, SourceId] | None:
    """Return the first two requested sources, if there are two."""
    sources = list(result)
    if len(sources) < 2:
        return None
    return sources[0], sources[1]


async def cli_search(
    query: str,
    source_csv: str | None,
    output_format: str,
    compare: bool = False,
    timeout: float | None = None,
) -> int:
    """Run a headless search and return an exit code (0=ok, 1=fail)."""
    try:
        request = SourceQuery.create(query, resolve_sources(source_csv))
        aggregator = Aggregator(timeout=timeout)
    except ConfigurationError as exc:
        logger.warning("Rejected CLI request: %s", exc)
        valid = ", ".join(s["id"] for s in Settings.AVAILABLE_SOURCES)
        _err.print(f"[red]{exc}[/red]")
        _err.print(f"[dim]Available: {valid}[/dim]")
        return 1

    _err.print(
        f"[bold]Searching:[/bold] {request.text}  "
        f"[dim]sources={', '.join(_label(s) for s in request.sources)}[/dim]"
    )

    result = await aggregator.aggregate(request)

    for failure in result.failures.values():
        _err.print(f"[red]Error: {failure.reason}[/red]")

    pairs: list[MatchedPair] = []
    sides = _comparison_sides(result) if compare else None
    if compare and sides is None:
        _err.print(
            "[yellow]Comparison needs two sources; skipping.[/yellow]"
        )
    elif sides is not None:
        pairs = ProductMatcher.match_result(result, *sides)
        _err.print(f"[dim]{len(pairs)} matched pairs[/dim]")

    if output_format == "table":
        for sid in result.succeeded:
            _print_records(sid, result.records(sid))
        if sides is not None:
            _print_comparison(pairs, *sides)
    else:
        payload: dict[str, Any] = result.to_dict()
        if sides is not None:
            payload = {
                "results": payload,
                "matches": [
                    p.to_dict(sides[0].value, sides[1].value)
                    for p in pairs
                ],
            }
        json.dump(payload, sys.stdout, ensure_ascii=False, indent=2)
        sys.stdout.write("\n")

    logger.info(
        "CLI search for '%s' finished: %d ok, %d failed, %d pairs",
        request.text,
        len(result.succeeded),
        len(result.failures),
        len(pairs),
    )
    if not result.succeeded:
        _err.print("[red]All sources failed.[/red]")
        return 1
    return 0
