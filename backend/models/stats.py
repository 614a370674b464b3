"""
Derived statistics - recomputed on every aggregation call, never persisted.

Attribute names are snake_case; to_dict() emits the camelCase keys the
dashboard tables and maps sort and render by.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class RegionSummary:
    """Per-department totals and price-per-hectare distribution."""
    name: str
    count: int = 0
    total_value: float = 0.0
    total_ha: float = 0.0
    price_per_ha_values: List[float] = field(default_factory=list)
    avg_price_per_ha: float = 0.0
    median_price_per_ha: float = 0.0
    min_price_per_ha: float = 0.0
    max_price_per_ha: float = 0.0
    avg_size: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'count': self.count,
            'totalVal': self.total_value,
            'totalHa': self.total_ha,
            'avgPxHa': self.avg_price_per_ha,
            'medPxHa': self.median_price_per_ha,
            'minPxHa': self.min_price_per_ha,
            'maxPxHa': self.max_price_per_ha,
            'avgSize': self.avg_size,
        }


@dataclass(frozen=True)
class IncrementStat:
    """Price-per-hectare change between a region's first and last year in window."""
    name: str
    start_year: int
    end_year: int
    start_price: float
    end_price: float
    abs_change: float
    pct_change: float
    tx_count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'startYear': self.start_year,
            'endYear': self.end_year,
            'startPrice': self.start_price,
            'endPrice': self.end_price,
            'absChange': self.abs_change,
            'pctChange': self.pct_change,
            'txCount': self.tx_count,
        }


@dataclass
class IncrementResult:
    """
    Output of the increment analysis.

    stats: one entry per region with at least two years of data in window
    years: the resolved in-window years (ascending)
    region_year_avg: region -> year -> average price per hectare, for trend lines
    """
    stats: List[IncrementStat] = field(default_factory=list)
    years: List[int] = field(default_factory=list)
    region_year_avg: Dict[str, Dict[int, float]] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.stats

    def stat_for(self, region: str) -> Optional[IncrementStat]:
        for stat in self.stats:
            if stat.name == region:
                return stat
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'stats': [s.to_dict() for s in self.stats],
            'years': list(self.years),
            # JSON object keys must be strings
            'regionYearAvg': {
                region: {str(year): avg for year, avg in by_year.items()}
                for region, by_year in self.region_year_avg.items()
            },
        }
