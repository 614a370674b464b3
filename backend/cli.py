#!/usr/bin/env python3
"""
CLI for terminal reports over the land transaction dataset

Commands:
    summary  - Headline KPIs, department table and price increment table

Usage:
    python cli.py summary data/data.csv
    python cli.py summary data/data.csv --region Florida --window 3
    python cli.py summary data/data.csv --boundaries data/uruguay.geojson --json
"""

import json
import sys

import click

from config import Config
from models.filters import FilterSelection
from services.data_loader import DataLoadError, load_state
from services.dashboard_service import on_selection_changed
from utils.formatting import format_currency, format_number, format_signed_pct


@click.group()
@click.version_option(version="1.0.0", prog_name="land-dashboard")
def cli():
    """Land transaction dashboard reports."""
    pass


@cli.command("summary")
@click.argument("data_csv", type=click.Path(exists=True, dir_okay=False))
@click.option("--boundaries", type=click.Path(dir_okay=False), default=None,
              help="Department boundaries GeoJSON")
@click.option("--region", default=None, help="Restrict to one department")
@click.option("--transaction-type", default=None, help="Art. 5°, Art. 35°, Directo, ...")
@click.option("--min-year", type=int, default=None)
@click.option("--max-year", type=int, default=None)
@click.option("--window", type=click.IntRange(min=1), default=Config.DEFAULT_WINDOW_YEARS,
              show_default=True, help="Increment window in years")
@click.option("--delimiter", default=Config.CSV_DELIMITER, show_default=True)
@click.option("--encoding", default=Config.CSV_ENCODING, show_default=True)
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
def summary(data_csv, boundaries, region, transaction_type, min_year, max_year,
            window, delimiter, encoding, output_json):
    """
    Print headline KPIs, the department table and the increment table.

    DATA_CSV: Path to the records file
    """
    try:
        state = load_state(
            data_csv,
            boundaries_path=boundaries,
            delimiter=delimiter,
            encoding=encoding,
            window_years=window,
        )
    except DataLoadError as e:
        click.secho(f"Error: {e}", fg="red")
        sys.exit(1)

    state = state.with_selection(FilterSelection(
        region=region,
        transaction_type=transaction_type,
        min_year=min_year,
        max_year=max_year,
    ))
    result = on_selection_changed(
        state, panels=['summary', 'region_table', 'increment']
    )

    if output_json:
        click.echo(json.dumps(result, indent=2, default=str, ensure_ascii=False))
        return

    _print_summary(result['data']['summary'])
    _print_region_table(result['data']['region_table']['rows'])
    _print_increment(result['data']['increment'])


def _print_summary(s):
    f = s['formatted']
    click.secho("=== Summary ===", bold=True)
    click.echo(f"Transactions:   {f['filteredCount']} of {f['totalCount']}")
    click.echo(f"Total value:    {f['totalValue']}")
    click.echo(f"Total surface:  {f['totalSurface']} ha")
    click.echo(f"Avg USD/ha:     {f['avgPxHa']}")
    click.echo(f"Median USD/ha:  {f['medianPxHa']}")
    click.echo()


def _print_region_table(rows):
    click.secho("=== Departments ===", bold=True)
    if not rows:
        click.echo("  (no data)")
        click.echo()
        return
    click.echo(f"{'Department':<18}{'Count':>7}{'Value':>18}{'Ha':>12}{'Avg/ha':>10}{'Med/ha':>10}")
    for r in rows:
        click.echo(
            f"{r['name']:<18}{r['count']:>7}{format_number(r['totalVal']):>18}"
            f"{format_number(r['totalHa']):>12}{format_number(r['avgPxHa']):>10}"
            f"{format_number(r['medPxHa']):>10}"
        )
    click.echo()


def _print_increment(inc):
    click.secho(f"=== Price increment ({inc['windowYears']}y window) ===", bold=True)
    rows = inc['table']['rows']
    if not rows:
        click.echo("  Not enough years of data for the period")
        return
    kpis = inc['kpis']
    click.echo(f"Period: {kpis['period']}   Avg change: {kpis['avgFormatted']}")
    click.echo(f"Best:   {kpis['best']['name']} {kpis['best']['formatted']}")
    click.echo(f"Worst:  {kpis['worst']['name']} {kpis['worst']['formatted']}")
    click.echo()
    click.echo(f"{'Department':<18}{'Start':>14}{'End':>14}{'Change':>10}{'Tx':>6}")
    for r in rows:
        color = "green" if r['pctChange'] >= 0 else "red"
        click.echo(
            f"{r['name']:<18}{format_currency(r['startPrice']):>14}"
            f"{format_currency(r['endPrice']):>14}", nl=False
        )
        click.secho(f"{format_signed_pct(r['pctChange']):>10}", fg=color, nl=False)
        click.echo(f"{r['txCount']:>6}")


if __name__ == "__main__":
    cli()
