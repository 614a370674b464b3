"""
Dashboard Service - Unified Dashboard Aggregation

Single entry point for every filter, window or sort change:

    on_selection_changed(state) -> {'data': {panel: ...}, 'meta': {...}}

Pipeline (synchronous, full recomputation, no caching):
    Filter Engine -> {Regional Aggregator, Increment Analyzer, per-record folds}
    -> panel payloads for the render layer

Every panel is a pure function of the filtered records and the AppState;
the loaded dataset is never mutated.

Usage:
    from services.dashboard_service import on_selection_changed

    state = state.with_selection(FilterSelection(region='Florida'))
    result = on_selection_changed(state)
    result['data']['region_table']
"""

import time
import logging
from collections import Counter
from functools import wraps
from typing import Any, Callable, Dict, List, Optional, Sequence

from constants import (
    BOUNDARY_NAME_PROPERTY,
    OPEN_ENDED_BIN_THRESHOLD,
    MISSING_CATEGORY_LABEL,
    MONTH_SHORT_NAMES,
    OTHER_LABEL,
    PRICE_BIN_EDGES,
    PRICE_PER_HA_BIN_EDGES,
    SURFACE_BIN_EDGES,
    TIMELINE_MA_WINDOW,
    TOP_TRANSACTIONS_LIMIT,
)
from models.app_state import AppState
from models.stats import IncrementResult, RegionSummary
from models.transaction import LandTransaction
from services.filter_engine import apply_filters
from services.increment_analyzer import compute_price_increment, increment_kpis
from services.regional_aggregator import (
    compute_region_stats,
    region_ranking,
    region_table,
    sort_rows,
)
from utils.formatting import format_currency, format_number
from utils.stats import bin_counts, generate_bins, mean, median, moving_average

logger = logging.getLogger('dashboard')


# ============================================================================
# TIMING DECORATOR
# ============================================================================

def log_timing(operation: str):
    """Decorator to log operation timing."""
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            start = time.perf_counter()
            try:
                result = func(*args, **kwargs)
                elapsed = (time.perf_counter() - start) * 1000
                logger.debug(f"{operation} completed in {elapsed:.1f}ms")
                if elapsed > 1000:
                    logger.warning(f"SLOW OPERATION: {operation} took {elapsed:.1f}ms")
                return result
            except Exception as e:
                elapsed = (time.perf_counter() - start) * 1000
                logger.error(f"{operation} failed after {elapsed:.1f}ms: {e}")
                raise
        return wrapper
    return decorator


# ============================================================================
# DERIVED CONTEXT
# ============================================================================

class DerivedContext:
    """Values computed once per selection change and shared by the panels."""

    def __init__(self, state: AppState):
        self.state = state
        self.records: List[LandTransaction] = apply_filters(state.records, state.selection)
        active_region = state.selection.active_region
        self.region_stats: Dict[str, RegionSummary] = compute_region_stats(
            self.records, active_region
        )
        self.increment: IncrementResult = compute_price_increment(
            self.records, state.window_years, active_region
        )

    @property
    def valid_price_per_ha(self) -> List[float]:
        return [r.price_per_ha for r in self.records if r.has_valid_price_per_ha]


# ============================================================================
# PANELS
# ============================================================================

def query_summary(ctx: DerivedContext) -> Dict[str, Any]:
    """Headline KPIs for the filtered subset."""
    values = ctx.valid_price_per_ha
    total_value = sum(r.price for r in ctx.records)
    total_surface = sum(r.surface_ha for r in ctx.records)
    avg = mean(values)
    med = median(values)
    return {
        'filteredCount': len(ctx.records),
        'totalCount': len(ctx.state.records),
        'totalValue': total_value,
        'totalSurface': total_surface,
        'avgPxHa': avg,
        'medianPxHa': med,
        'formatted': {
            'filteredCount': format_number(len(ctx.records)),
            'totalCount': format_number(len(ctx.state.records)),
            'totalValue': format_currency(total_value),
            'totalSurface': format_number(total_surface),
            'avgPxHa': format_number(avg),
            'medianPxHa': format_number(med),
        },
    }


def _boundary_names(boundaries: Dict[str, Any]) -> List[str]:
    return [
        (feature.get('properties') or {}).get(BOUNDARY_NAME_PROPERTY)
        for feature in boundaries.get('features', [])
    ]


def build_choropleth(
    boundaries: Optional[Dict[str, Any]],
    values: Dict[str, Optional[Dict[str, Any]]],
    metric: str,
    max_value: float,
    min_value: float = 0,
) -> Dict[str, Any]:
    """
    Join per-region values onto boundary features by exact name.

    Regions without data get fill 'unknown'. Without boundaries the map is
    a placeholder.
    """
    if boundaries is None:
        return {'available': False}

    features = []
    for name in _boundary_names(boundaries):
        entry = values.get(name)
        features.append({
            'name': name,
            'fill': 'data' if entry else 'unknown',
            'value': entry.get(metric) if entry else None,
            'stats': entry,
        })
    return {
        'available': True,
        'metric': metric,
        'minValue': min_value,
        'maxValue': max_value,
        'features': features,
    }


def query_maps(ctx: DerivedContext) -> Dict[str, Any]:
    """Average price per hectare map and transaction count map."""
    rows = {name: s.to_dict() for name, s in ctx.region_stats.items()}
    price_values = [s.avg_price_per_ha for s in ctx.region_stats.values() if s.avg_price_per_ha > 0]
    count_values = [s.count for s in ctx.region_stats.values()]
    return {
        'price': build_choropleth(ctx.state.boundaries, rows, 'avgPxHa', max(price_values + [1])),
        'count': build_choropleth(ctx.state.boundaries, rows, 'count', max(count_values + [1])),
    }


def build_histogram(
    values: Sequence[float],
    edges: Sequence[float],
    fmt: Callable[[float], str],
) -> List[Dict[str, Any]]:
    bins = generate_bins(edges)
    counts = bin_counts(values, bins)
    out = []
    for b, count in zip(bins, counts):
        if b['max'] >= OPEN_ENDED_BIN_THRESHOLD:
            label = f"{fmt(b['min'])}+"
        else:
            label = f"{fmt(b['min'])} – {fmt(b['max'])}"
        out.append({'min': b['min'], 'max': b['max'], 'count': count, 'label': label})
    return out


def query_histograms(ctx: DerivedContext) -> Dict[str, Any]:
    return {
        'price': build_histogram(
            [r.price for r in ctx.records if r.price > 0],
            PRICE_BIN_EDGES, format_currency,
        ),
        'surface': build_histogram(
            [r.surface_ha for r in ctx.records if r.surface_ha > 0],
            SURFACE_BIN_EDGES, lambda v: f"{format_number(v)} ha",
        ),
        'pricePerHa': build_histogram(
            ctx.valid_price_per_ha,
            PRICE_PER_HA_BIN_EDGES, format_currency,
        ),
    }


def query_scatter(ctx: DerivedContext) -> List[Dict[str, Any]]:
    """Surface (x) vs price (y) for records with a valid price per hectare."""
    return [
        {
            'x': r.surface_ha,
            'y': r.price,
            'region': r.primary_region,
            'pricePerHa': r.price_per_ha,
        }
        for r in ctx.records
        if r.has_valid_price_per_ha and r.surface_ha > 0 and r.price > 0
    ]


def query_timeline(ctx: DerivedContext) -> Dict[str, Any]:
    """Monthly transaction count and value with trailing moving averages."""
    counts: Dict[str, int] = {}
    values: Dict[str, float] = {}
    for r in ctx.records:
        if r.transaction_date is None:
            continue
        key = f"{r.transaction_date.year}-{r.transaction_date.month:02d}"
        counts[key] = counts.get(key, 0) + 1
        values[key] = values.get(key, 0) + r.price

    keys = sorted(counts)
    labels = [f"{MONTH_SHORT_NAMES[int(k[5:]) - 1]} {k[:4]}" for k in keys]
    count_series = [counts[k] for k in keys]
    value_series = [values[k] for k in keys]
    return {
        'months': keys,
        'labels': labels,
        'counts': count_series,
        'values': value_series,
        'countMA': moving_average(count_series, TIMELINE_MA_WINDOW),
        'valueMA': moving_average(value_series, TIMELINE_MA_WINDOW),
        'maWindow': TIMELINE_MA_WINDOW,
    }


def count_by(records: Sequence[LandTransaction], key: Callable[[LandTransaction], str]) -> List[Dict[str, Any]]:
    """Category counts, highest first; ties keep first-seen order."""
    counts = Counter(key(r) for r in records)
    ordered = sorted(counts.items(), key=lambda kv: kv[1], reverse=True)
    return [{'label': label, 'count': count} for label, count in ordered]


def query_breakdowns(ctx: DerivedContext) -> Dict[str, Any]:
    return {
        'transactionType': count_by(ctx.records, lambda r: r.transaction_type or OTHER_LABEL),
        'businessType': count_by(ctx.records, lambda r: r.business_type or OTHER_LABEL),
        'occupancyStatus': count_by(ctx.records, lambda r: r.occupancy_status or MISSING_CATEGORY_LABEL),
    }


def query_region_ranking(ctx: DerivedContext) -> List[Dict[str, Any]]:
    return region_ranking(ctx.region_stats)


def query_region_table(ctx: DerivedContext) -> Dict[str, Any]:
    sort = ctx.state.region_sort
    return {
        'rows': region_table(ctx.region_stats, sort),
        'sort': {'column': sort.column, 'ascending': sort.ascending},
    }


def query_top_transactions(ctx: DerivedContext) -> List[Dict[str, Any]]:
    priced = sorted(
        (r for r in ctx.records if r.price > 0),
        key=lambda r: r.price,
        reverse=True,
    )
    return [r.to_dict() for r in priced[:TOP_TRANSACTIONS_LIMIT]]


def increment_map(
    boundaries: Optional[Dict[str, Any]],
    stat_rows: Dict[str, Dict[str, Any]],
    pct_values: List[float],
) -> Dict[str, Any]:
    """
    Diverging pctChange map. The colour domain always contains 0.
    No stats means a placeholder.
    """
    if not stat_rows:
        return {'available': False}
    return build_choropleth(
        boundaries, stat_rows, 'pctChange',
        max_value=max(pct_values + [1]),
        min_value=min(pct_values + [0]),
    )


def query_increment(ctx: DerivedContext) -> Dict[str, Any]:
    """Increment tab: KPIs, map, ranking bar, trend lines and table."""
    result = ctx.increment
    sort = ctx.state.increment_sort
    stat_rows = {s.name: s.to_dict() for s in result.stats}
    pct_values = [s.pct_change for s in result.stats]

    bars = sorted(result.stats, key=lambda s: s.pct_change, reverse=True)
    payload = result.to_dict()
    payload.update({
        'windowYears': ctx.state.window_years,
        'kpis': increment_kpis(result),
        'map': increment_map(ctx.state.boundaries, stat_rows, pct_values),
        'ranking': [{'name': s.name, 'pctChange': round(s.pct_change, 1)} for s in bars],
        'table': {
            'rows': sort_rows(list(stat_rows.values()), sort),
            'sort': {'column': sort.column, 'ascending': sort.ascending},
        },
        'trend': {
            'regions': sorted(result.region_year_avg),
            'years': list(result.years),
        },
    })
    return payload


PANEL_QUERIES: Dict[str, Callable[[DerivedContext], Any]] = {
    'summary': query_summary,
    'maps': query_maps,
    'histograms': query_histograms,
    'scatter': query_scatter,
    'timeline': query_timeline,
    'breakdowns': query_breakdowns,
    'region_ranking': query_region_ranking,
    'region_table': query_region_table,
    'top_transactions': query_top_transactions,
    'increment': query_increment,
}

ALL_PANELS = list(PANEL_QUERIES)


# ============================================================================
# MAIN ENTRY POINT
# ============================================================================

@log_timing("on_selection_changed")
def on_selection_changed(
    state: AppState,
    panels: Optional[List[str]] = None,
) -> Dict[str, Any]:
    """
    Recompute every derived view for the current state.

    Args:
        state: Current application state (dataset + selection + window + sorts)
        panels: Subset of panels to return. Default: all panels.

    Returns:
        {
            'data': {panel_name: panel_data, ...},
            'meta': {
                'elapsed_ms': float,
                'filters_applied': dict,
                'window_years': int,
                'total_records': int,
                'total_records_matched': int,
                'boundaries_available': bool,
                'panels_returned': [...]
            }
        }
    """
    start_time = time.perf_counter()
    panels = panels or ALL_PANELS

    ctx = DerivedContext(state)
    data = {panel: PANEL_QUERIES[panel](ctx) for panel in panels if panel in PANEL_QUERIES}

    elapsed = (time.perf_counter() - start_time) * 1000
    return {
        'data': data,
        'meta': {
            'elapsed_ms': round(elapsed, 1),
            'filters_applied': state.selection.to_dict(),
            'window_years': state.window_years,
            'total_records': len(state.records),
            'total_records_matched': len(ctx.records),
            'boundaries_available': state.has_boundaries,
            'panels_returned': [p for p in panels if p in PANEL_QUERIES],
        },
    }
