"""
Models package - immutable value types for the land transaction dashboard
"""
from models.transaction import LandTransaction
from models.filters import FilterSelection
from models.stats import RegionSummary, IncrementStat, IncrementResult
from models.app_state import AppState, SortState

__all__ = [
    'LandTransaction',
    'FilterSelection',
    'RegionSummary',
    'IncrementStat',
    'IncrementResult',
    'AppState',
    'SortState',
]
