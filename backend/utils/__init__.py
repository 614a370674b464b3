"""
Utility modules for the backend.
"""
from .stats import mean, median, moving_average, generate_bins, bin_counts
from .formatting import format_number, format_currency, format_signed_pct
from .normalize import ValidationError

__all__ = [
    'mean',
    'median',
    'moving_average',
    'generate_bins',
    'bin_counts',
    'format_number',
    'format_currency',
    'format_signed_pct',
    'ValidationError',
]
