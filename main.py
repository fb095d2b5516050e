"""Command-line version of the seller dashboard.

Reads a sales CSV export, applies the same filter / interval choices as the
Streamlit app and prints the summary, the bucketed series and the top items.
"""
from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Optional

import typer

from analytics import AUTO, DEFAULT_TOP_N, GRANULARITIES, build_dashboard, items_frame, series_frame
from ingest import parse_with_report, read_csv_file
from logging_setup import configure_logging, get_logger
from model import DashboardBundle, ParseError

log = get_logger("seller_dashboard.cli")

DATE_FORMATS = ["%Y-%m-%d", "%d-%m-%Y"]

app = typer.Typer(
    add_completion=False,
    help="Summarize a seller's sales CSV export: profit/revenue trend, top items, totals.",
)


def render_report(bundle: DashboardBundle) -> str:
    s = bundle.summary
    lines = [
        f"Orders:                  {s.order_count}",
        f"Returns / cancellations: {s.returns_count}",
        f"Gross profit:            {s.gross_profit:.2f}",
        f"Gross revenue:           {s.gross_revenue:.2f}",
        "",
        f"Profit & revenue by {bundle.granularity}:",
        series_frame(bundle.series)[["date", "total_profit", "net_revenue"]].to_string(index=False),
        "",
        f"Top {len(bundle.top_items)} items by quantity:",
        items_frame(bundle.top_items).to_string(index=False),
    ]
    return "\n".join(lines)


@app.command()
def report(
    csv_path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Sales CSV export"),
    start: Optional[datetime] = typer.Option(None, formats=DATE_FORMATS, help="First day to include"),
    end: Optional[datetime] = typer.Option(None, formats=DATE_FORMATS, help="Last day to include"),
    interval: str = typer.Option(AUTO, help=f"{AUTO} | {' | '.join(GRANULARITIES)}"),
    top: int = typer.Option(DEFAULT_TOP_N, min=1, help="How many items to rank"),
    log_level: Optional[str] = typer.Option(None, help="Overrides SELLER_DASHBOARD_LOG_LEVEL"),
) -> None:
    configure_logging(log_level)

    if interval != AUTO and interval not in GRANULARITIES:
        raise typer.BadParameter(f"expected one of {(AUTO,) + GRANULARITIES}", param_hint="--interval")

    try:
        records, parse_report = parse_with_report(read_csv_file(str(csv_path)))
    except ParseError as e:
        log.error("CSV parse error in %s: %s", csv_path, e)
        typer.echo(str(e), err=True)
        raise typer.Exit(1)

    log.info("parsed %d rows from %s (item column %s)", parse_report.total_rows, csv_path, parse_report.item_column)

    bundle = build_dashboard(records, start=start, end=end, interval=interval, top_n=top)
    if bundle.is_empty:
        typer.echo("No data found for selected date range")
        return

    typer.echo(render_report(bundle))


if __name__ == "__main__":
    app()
