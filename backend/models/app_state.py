"""
Application State - the single owned structure behind the dashboard.

Holds the loaded dataset (read-only after load) plus the user's current
selection, increment window and table sort states. Changes never mutate
an instance: every update returns a new AppState via dataclasses.replace().
"""
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional, Tuple

from constants import (
    DEFAULT_INCREMENT_SORT,
    DEFAULT_REGION_SORT,
    DEFAULT_WINDOW_YEARS,
    MIN_WINDOW_YEARS,
    NAME_COLUMNS,
)
from models.filters import FilterSelection
from models.transaction import LandTransaction


@dataclass(frozen=True)
class SortState:
    column: str
    ascending: bool

    @classmethod
    def for_column(cls, column: str) -> 'SortState':
        """First click on a column: ascending for names, descending for numbers."""
        return cls(column, column in NAME_COLUMNS)

    def toggle(self, column: str) -> 'SortState':
        """Column header click. Same column flips direction."""
        if column == self.column:
            return SortState(column, not self.ascending)
        return SortState.for_column(column)


@dataclass(frozen=True)
class AppState:
    records: Tuple[LandTransaction, ...] = ()
    boundaries: Optional[Dict[str, Any]] = None
    selection: FilterSelection = field(default_factory=FilterSelection)
    window_years: int = DEFAULT_WINDOW_YEARS
    region_sort: SortState = SortState(*DEFAULT_REGION_SORT)
    increment_sort: SortState = SortState(*DEFAULT_INCREMENT_SORT)

    @property
    def has_boundaries(self) -> bool:
        return self.boundaries is not None

    def with_selection(self, selection: FilterSelection) -> 'AppState':
        return replace(self, selection=selection)

    def reset_filters(self) -> 'AppState':
        return replace(self, selection=FilterSelection())

    def with_window(self, window_years: int) -> 'AppState':
        return replace(self, window_years=max(MIN_WINDOW_YEARS, int(window_years)))

    def with_region_sort(self, sort: SortState) -> 'AppState':
        return replace(self, region_sort=sort)

    def with_increment_sort(self, sort: SortState) -> 'AppState':
        return replace(self, increment_sort=sort)

    def sort_regions_by(self, column: str) -> 'AppState':
        return replace(self, region_sort=self.region_sort.toggle(column))

    def sort_increments_by(self, column: str) -> 'AppState':
        return replace(self, increment_sort=self.increment_sort.toggle(column))
