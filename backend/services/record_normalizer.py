"""
Record Normalizer - raw CSV row -> LandTransaction

This module is responsible for TYPING rows only:
- Locale-tolerant number parsing ("1.234,56", "1234.56", "U$S 12.000")
- dd/mm/yyyy date parsing
- Department extraction from the parcel path ("Canelones->123; Florida->456")
- Transaction type classification by ordered substring rules

Malformed fields degrade to defaults (0, None, empty tuple). Nothing here
raises on bad input; one bad cell never fails the whole load.
"""

import logging
import math
import re
from datetime import date
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from constants import (
    COL_BUSINESS_TYPE,
    COL_DATE,
    COL_FILE_ID,
    COL_OCCUPANCY,
    COL_PARCELS,
    COL_PRICE,
    COL_SURFACE,
    COL_TYPE,
    TRANSACTION_TYPE_ART_5,
    TRANSACTION_TYPE_ART_35,
    TRANSACTION_TYPE_DIRECT,
)
from models.transaction import LandTransaction

logger = logging.getLogger('record_normalizer')

_NON_NUMERIC = re.compile(r'[^\d,.\-]')
# Leading numeric prefix, like a lenient float parse ("12.5abc" -> 12.5)
_NUMERIC_PREFIX = re.compile(r'^[-+]?(\d+\.?\d*|\.\d+)([eE][-+]?\d+)?')
_REGION_MARKER = re.compile(r'([A-Za-záéíóúñÁÉÍÓÚÑü\s]+)->')


# =============================================================================
# FIELD PARSERS
# =============================================================================

def parse_number(value: Optional[str]) -> float:
    """
    Parse a price or surface cell.

    Rules:
    - Drop everything except digits, ',', '.', '-'
    - Both ',' and '.' present: '.' is the thousands separator, ',' the decimal
    - Only ',' present: ',' is the decimal separator
    - Unparseable, empty or non-finite -> 0

    Examples:
        "1.234,56" -> 1234.56
        "1234.56"  -> 1234.56
        "abc"      -> 0
    """
    if not value:
        return 0
    cleaned = _NON_NUMERIC.sub('', str(value))
    if ',' in cleaned and '.' in cleaned:
        cleaned = cleaned.replace('.', '').replace(',', '.', 1)
    elif ',' in cleaned:
        cleaned = cleaned.replace(',', '.', 1)

    match = _NUMERIC_PREFIX.match(cleaned)
    if not match:
        return 0
    number = float(match.group(0))
    return number if math.isfinite(number) else 0


def parse_date(value: Optional[str]) -> Optional[date]:
    """
    Parse "dd/mm/yyyy". Any other shape, or an impossible calendar date,
    returns None.
    """
    if not value:
        return None
    parts = value.strip().split('/')
    if len(parts) != 3:
        return None
    try:
        day, month, year = (int(p) for p in parts)
        return date(year, month, day)
    except ValueError:
        return None


def extract_regions(parcel_path: Optional[str]) -> Tuple[str, ...]:
    """
    Department names from a parcel path, first-seen order, no duplicates.

    "Canelones->123; Florida->456; Canelones->789" -> ("Canelones", "Florida")
    """
    regions: List[str] = []
    for match in _REGION_MARKER.finditer(parcel_path or ''):
        name = match.group(1).strip()
        if name and name not in regions:
            regions.append(name)
    return tuple(regions)


# Ordered (predicate, label) rules, first match wins. The "5" check runs
# before "35", so "35" rows classify as Art. 5°. Do not reorder.
TRANSACTION_TYPE_RULES: List[Tuple[Callable[[str], bool], str]] = [
    (lambda raw: '5' in raw, TRANSACTION_TYPE_ART_5),
    (lambda raw: '35' in raw, TRANSACTION_TYPE_ART_35),
    (lambda raw: 'direct' in raw.lower(), TRANSACTION_TYPE_DIRECT),
]


def classify_transaction_type(raw: Optional[str]) -> str:
    """Map the free-text type column to a category; unmatched text is kept trimmed."""
    text = (raw or '').strip()
    for predicate, label in TRANSACTION_TYPE_RULES:
        if predicate(text):
            return label
    return text


# =============================================================================
# ROW NORMALIZATION
# =============================================================================

def _cell(row: Dict[str, str], column: str) -> str:
    value = row.get(column)
    return '' if value is None else str(value).strip()


def normalize_record(row: Dict[str, str]) -> LandTransaction:
    """Build one LandTransaction from a header-keyed raw row."""
    price = parse_number(row.get(COL_PRICE))
    surface_ha = parse_number(row.get(COL_SURFACE))
    date_text = _cell(row, COL_DATE)

    return LandTransaction(
        transaction_type=classify_transaction_type(row.get(COL_TYPE)),
        business_type=_cell(row, COL_BUSINESS_TYPE),
        file_id=_cell(row, COL_FILE_ID),
        occupancy_status=_cell(row, COL_OCCUPANCY),
        price=price,
        surface_ha=surface_ha,
        price_per_ha=price / surface_ha if surface_ha > 0 and price > 0 else None,
        regions=extract_regions(row.get(COL_PARCELS)),
        transaction_date=parse_date(date_text),
        date_text=date_text,
    )


def is_meaningful(record: LandTransaction) -> bool:
    """A record needs a file id or a positive price or surface to be kept."""
    return bool(record.file_id) or record.price > 0 or record.surface_ha > 0


def normalize_records(rows: Iterable[Dict[str, str]]) -> List[LandTransaction]:
    """
    Normalize every raw row and drop empty ones, preserving order.

    Logs a one-line summary of what degraded.
    """
    diagnostics = {
        'rows_read': 0,
        'rows_kept': 0,
        'empty_rows': 0,
        'invalid_dates': 0,
        'no_regions': 0,
    }
    records = []
    for row in rows:
        diagnostics['rows_read'] += 1
        record = normalize_record(row)
        if not is_meaningful(record):
            diagnostics['empty_rows'] += 1
            continue
        if record.date_text and record.transaction_date is None:
            diagnostics['invalid_dates'] += 1
            logger.debug(f"Unparseable date {record.date_text!r} (file {record.file_id!r})")
        if not record.regions:
            diagnostics['no_regions'] += 1
        records.append(record)

    diagnostics['rows_kept'] = len(records)
    logger.info(
        "Normalized records: %(rows_kept)d kept of %(rows_read)d read "
        "(empty=%(empty_rows)d, invalid_dates=%(invalid_dates)d, no_regions=%(no_regions)d)",
        diagnostics,
    )
    return records
