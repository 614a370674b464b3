"""
Regional Aggregator - per-department summary statistics

Used by both choropleth maps, the department bar ranking and the
department economics table.

Methodology:
- A record credits every department in its parcel path, or only the
  active department when a single-department filter is set
- Surface is SPLIT across departments: each credited department gets
  surface_ha / len(record.regions), using the record's full department
  count even when the active filter narrows which departments are credited
- Price is credited in full to each credited department
- Price per hectare statistics skip undefined values and outliers
  (>= PRICE_PER_HA_CEILING); the record still counts toward totals
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple

from models.app_state import SortState
from models.stats import RegionSummary
from models.transaction import LandTransaction
from utils.stats import mean, median


def credited_regions(
    record: LandTransaction,
    active_region: Optional[str] = None,
) -> Tuple[str, ...]:
    """
    Departments a record contributes to.

    With an active region, a multi-department record contributes to that one
    department only, and to none if it does not list it.
    """
    if active_region:
        return tuple(r for r in record.regions if r == active_region)
    return record.regions


def compute_region_stats(
    records: Sequence[LandTransaction],
    active_region: Optional[str] = None,
) -> Dict[str, RegionSummary]:
    """
    Aggregate records into one RegionSummary per department.

    Args:
        records: Filtered subset
        active_region: Optional single-department restriction

    Returns:
        {department: RegionSummary}, departments in first-seen order
    """
    stats: Dict[str, RegionSummary] = {}

    for record in records:
        regions = credited_regions(record, active_region)
        if not regions:
            continue
        area_share = record.surface_ha / len(record.regions)
        for region in regions:
            summary = stats.get(region)
            if summary is None:
                summary = stats[region] = RegionSummary(name=region)
            summary.count += 1
            summary.total_value += record.price
            summary.total_ha += area_share
            if record.has_valid_price_per_ha:
                summary.price_per_ha_values.append(record.price_per_ha)

    for summary in stats.values():
        values = summary.price_per_ha_values
        summary.avg_price_per_ha = mean(values)
        summary.median_price_per_ha = median(values)
        summary.min_price_per_ha = min(values) if values else 0
        summary.max_price_per_ha = max(values) if values else 0
        summary.avg_size = summary.total_ha / summary.count if summary.count > 0 else 0

    return stats


def region_ranking(stats: Dict[str, RegionSummary]) -> List[Dict[str, Any]]:
    """Departments with a positive average price per hectare, highest first."""
    ranked = sorted(
        (s for s in stats.values() if s.avg_price_per_ha > 0),
        key=lambda s: s.avg_price_per_ha,
        reverse=True,
    )
    return [{'name': s.name, 'avgPxHa': round(s.avg_price_per_ha)} for s in ranked]


def sort_rows(rows: List[Dict[str, Any]], sort: SortState) -> List[Dict[str, Any]]:
    """
    Sort table rows (dicts keyed by column) by the current sort state.

    String columns compare case-insensitively; numeric columns numerically.
    Rows missing the column sort last.
    """
    present = [r for r in rows if r.get(sort.column) is not None]
    missing = [r for r in rows if r.get(sort.column) is None]

    def key(row):
        value = row[sort.column]
        return value.casefold() if isinstance(value, str) else value

    return sorted(present, key=key, reverse=not sort.ascending) + missing


def region_table(
    stats: Dict[str, RegionSummary],
    sort: SortState,
) -> List[Dict[str, Any]]:
    """Department economics table rows, sorted."""
    return sort_rows([s.to_dict() for s in stats.values()], sort)
