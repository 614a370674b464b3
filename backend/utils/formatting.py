"""
Display formatting for the dashboard locale (es-UY).

Thousands separator '.', decimal separator ','. Missing or non-finite
values render as an em dash.
"""
import math
from typing import Optional

from constants import CURRENCY_PREFIX, MISSING_VALUE_DISPLAY


def format_number(value: Optional[float], decimals: int = 0) -> str:
    """
    Examples:
        format_number(1234567)       -> '1.234.567'
        format_number(1234.5, 1)     -> '1.234,5'
        format_number(None)          -> '—'
    """
    if value is None:
        return MISSING_VALUE_DISPLAY
    try:
        value = float(value)
    except (TypeError, ValueError):
        return MISSING_VALUE_DISPLAY
    if math.isnan(value) or math.isinf(value):
        return MISSING_VALUE_DISPLAY

    text = f"{value:,.{decimals}f}"
    # Swap en-US separators for es-UY ones
    return text.replace(',', '\x00').replace('.', ',').replace('\x00', '.')


def format_currency(value: Optional[float], decimals: int = 0) -> str:
    """'U$S 1.234' style amount."""
    formatted = format_number(value, decimals)
    if formatted == MISSING_VALUE_DISPLAY:
        return formatted
    return f"{CURRENCY_PREFIX} {formatted}"


def format_signed_pct(value: Optional[float], decimals: int = 1) -> str:
    """Percentage with explicit sign for non-negative values: '+12,5%'."""
    formatted = format_number(value, decimals)
    if formatted == MISSING_VALUE_DISPLAY:
        return formatted
    sign = '+' if value >= 0 else ''
    return f"{sign}{formatted}%"
