# carsbg/cli/runner.py

"""Headless CLI search runner, reuses the async orchestrator."""

import json
import logging
import sys

from rich.console import Console
from rich.table import Table

from carsbg.exceptions import SearchError
from carsbg.models.offer import Offer
from carsbg.services.search_orchestrator import (
    SearchOrchestrator,
    SearchReport,
)

logger = logging.getLogger("carsbg.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


def _offers_to_dicts(offers: list[Offer]) -> list[dict[str, str]]:
    """Serialise offers to plain dicts for JSON output."""
    return [
        {
            "identifier": o.identifier,
            "title": o.title,
            "price": o.price,
            "image_url": o.image_url,
            "listing_link": o.listing_link,
        }
        for o in offers
    ]


def _print_table(offers: list[Offer]) -> None:
    """Render a Rich table of offers to stdout."""
    table = Table(
        title="cars.bg Results",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("#", style="dim", width=4)
    table.add_column("Title", max_width=60)
    table.add_column("Price", justify="right", style="green")
    table.add_column("ID", style="magenta")
    table.add_column("URL", overflow="fold", style="dim")

    for idx, o in enumerate(offers, 1):
        table.add_row(
            str(idx),
            o.title[:60] or "—",
            o.price,
            o.identifier,
            o.listing_link or "—",
        )

    Console().print(table)


def _print_summary(report: SearchReport) -> None:
    """Page statistics to stderr."""
    detail = ""
    if report.pages_failed:
        pages = ", ".join(str(p) for p in report.failed_pages)
        detail = f" ({report.pages_failed} failed: page {pages})"
    _err.print(
        f"[green]✓ {len(report.offers)} offers from "
        f"{report.pages_succeeded}/{report.pages_attempted} pages"
        f"{detail}[/green]"
    )
    for error_msg in report.errors:
        _err.print(f"[red]Error: {error_msg}[/red]")


async def cli_search(
    brand: str,
    model: str,
    max_pages: int,
    output_format: str,
) -> int:
    """Run a headless search and return an exit code (0=ok, 1=fail)."""
    orchestrator = SearchOrchestrator()
    _err.print(
        f"[bold]Searching cars.bg:[/bold] "
        f"brand={brand or 'all'} model={model or 'all'} "
        f"[dim]pages={max_pages}[/dim]"
    )

    try:
        report = await orchestrator.search(max_pages, brand, model)
    except SearchError as exc:
        logger.error("Search could not run: %s", exc, exc_info=True)
        _err.print(f"[red]Search failed: {exc}[/red]")
        return 1

    _print_summary(report)
    if not report.offers:
        _err.print("[yellow]No cars found.[/yellow]")
        return 1

    if output_format == "table":
        _print_table(report.offers)
    else:
        json.dump(
            _offers_to_dicts(report.offers),
            sys.stdout,
            ensure_ascii=False,
            indent=2,
        )
        sys.stdout.write("\n")

    return 0
