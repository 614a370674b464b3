"""
Increment Analyzer - price per hectare change per department over a year window

Compares each department's average price per hectare in its first and last
year with data inside a trailing window of N years.

Methodology:
- Only dated records with a valid (defined, non-outlier) price per hectare
- Departments credited exactly like the Regional Aggregator, including the
  active-department restriction; no surface splitting (price per ha only)
- Window: end = latest year present anywhere, start = max(earliest year,
  end - (N - 1)); only years that actually have data are kept
- A department-year with no transactions is ABSENT, never zero
- Departments with fewer than 2 in-window years with data are excluded

Formula:
  Change (%) = (End Avg - Start Avg) / Start Avg × 100   (0 when Start Avg is 0)

Insufficient data never raises: fewer than 2 distinct years overall yields
an empty result.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from constants import MIN_WINDOW_YEARS, MIN_YEARS_FOR_INCREMENT
from models.stats import IncrementResult, IncrementStat
from models.transaction import LandTransaction
from services.regional_aggregator import credited_regions
from utils.formatting import format_signed_pct
from utils.stats import mean

logger = logging.getLogger('increment')


def group_by_region_year(
    records: Sequence[LandTransaction],
    active_region: Optional[str] = None,
) -> Dict[str, Dict[int, Dict[str, float]]]:
    """
    Build {department: {year: {'sum': float, 'count': int}}}.

    Records without a date or a valid price per hectare are skipped.
    """
    grouped: Dict[str, Dict[int, Dict[str, float]]] = {}
    for record in records:
        if record.transaction_date is None or not record.has_valid_price_per_ha:
            continue
        year = record.transaction_date.year
        for region in credited_regions(record, active_region):
            bucket = grouped.setdefault(region, {}).setdefault(year, {'sum': 0.0, 'count': 0})
            bucket['sum'] += record.price_per_ha
            bucket['count'] += 1
    return grouped


def resolve_window(years: Sequence[int], window_years: int) -> List[int]:
    """
    In-window years with data, ascending.

    Example: years [2015, 2018, 2019, 2021], window 5 -> [2018, 2019, 2021]
    """
    ordered = sorted(set(years))
    if not ordered:
        return []
    window_years = max(MIN_WINDOW_YEARS, int(window_years))
    end_year = ordered[-1]
    start_year = max(ordered[0], end_year - (window_years - 1))
    return [y for y in ordered if start_year <= y <= end_year]


def compute_price_increment(
    records: Sequence[LandTransaction],
    window_years: int,
    active_region: Optional[str] = None,
) -> IncrementResult:
    """
    Per-department price trajectory over the trailing window.

    Args:
        records: Filtered subset
        window_years: Window length in whole years (>= 1)
        active_region: Optional single-department restriction

    Returns:
        IncrementResult(stats, years, region_year_avg)
    """
    grouped = group_by_region_year(records, active_region)

    all_years = sorted({year for by_year in grouped.values() for year in by_year})
    if len(all_years) < MIN_YEARS_FOR_INCREMENT:
        logger.debug(f"Increment skipped: {len(all_years)} distinct year(s) with data")
        return IncrementResult(stats=[], years=[], region_year_avg={})

    window = resolve_window(all_years, window_years)

    region_year_avg: Dict[str, Dict[int, float]] = {}
    stats: List[IncrementStat] = []
    excluded = []

    for region, by_year in grouped.items():
        averages = {}
        tx_count = 0
        for year in window:
            bucket = by_year.get(year)
            if bucket is None:
                continue
            averages[year] = bucket['sum'] / bucket['count']
            tx_count += bucket['count']
        region_year_avg[region] = averages

        if len(averages) < MIN_YEARS_FOR_INCREMENT:
            excluded.append(region)
            continue

        first_year = min(averages)
        last_year = max(averages)
        start_price = averages[first_year]
        end_price = averages[last_year]
        abs_change = end_price - start_price
        pct_change = (abs_change / start_price) * 100 if start_price > 0 else 0

        stats.append(IncrementStat(
            name=region,
            start_year=first_year,
            end_year=last_year,
            start_price=start_price,
            end_price=end_price,
            abs_change=abs_change,
            pct_change=pct_change,
            tx_count=tx_count,
        ))

    if excluded:
        logger.debug(f"Increment excluded (fewer than 2 years in window): {excluded}")

    return IncrementResult(stats=stats, years=window, region_year_avg=region_year_avg)


def increment_kpis(result: IncrementResult) -> Dict[str, Any]:
    """
    Headline numbers for the increment tab.

    Returns:
        {
            "best": {"name", "pctChange", "formatted"} or None,
            "worst": {...} or None,
            "avgPctChange": float or None,
            "avgFormatted": "+12,3%" or "—",
            "period": "2019–2023" or None
        }
    """
    if not result.stats or not result.years:
        return {
            'best': None,
            'worst': None,
            'avgPctChange': None,
            'avgFormatted': format_signed_pct(None),
            'period': None,
        }

    ranked = sorted(result.stats, key=lambda s: s.pct_change, reverse=True)
    best, worst = ranked[0], ranked[-1]
    avg_pct = mean([s.pct_change for s in result.stats])

    def _entry(stat: IncrementStat) -> Dict[str, Any]:
        return {
            'name': stat.name,
            'pctChange': stat.pct_change,
            'formatted': format_signed_pct(stat.pct_change),
        }

    return {
        'best': _entry(best),
        'worst': _entry(worst),
        'avgPctChange': avg_pct,
        'avgFormatted': format_signed_pct(avg_pct),
        'period': f"{result.years[0]}–{result.years[-1]}",
    }
