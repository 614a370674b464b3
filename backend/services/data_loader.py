"""
Data Loading Service - records file + boundary file -> AppState

This module is responsible for LOADING data only:
- Delimited records file read with pandas (delimiter/encoding from config,
  never auto-detected), every cell kept as text
- Boundary GeoJSON read with json
- Row typing is delegated to services/record_normalizer.py

Failure policy:
- Records file missing/unreadable -> DataLoadError (fatal, the dashboard
  must not start empty)
- Boundary file missing/unreadable -> None, logged; map panels degrade to
  placeholders and everything else keeps working

Pipeline: **Read Raw** → Normalize → Drop empty rows → Read Boundaries → AppState
"""

import json
import logging
import os
import time
from typing import Any, Dict, List, Optional

import pandas as pd

from constants import BOUNDARY_NAME_PROPERTY, SOURCE_COLUMNS
from models.app_state import AppState
from models.transaction import LandTransaction
from services.record_normalizer import normalize_records

logger = logging.getLogger('data_loader')


class DataLoadError(RuntimeError):
    """The records dataset could not be loaded."""


def read_raw_rows(
    path: str,
    delimiter: str = ';',
    encoding: str = 'utf-8',
) -> List[Dict[str, str]]:
    """
    Read the records file into header-keyed string rows.

    Blank lines are skipped. Missing expected columns are logged, not fatal:
    the normalizer treats them as empty cells.
    """
    if not path or not os.path.exists(path):
        raise DataLoadError(f"Records file not found: {path!r}")

    try:
        df = pd.read_csv(
            path,
            sep=delimiter,
            encoding=encoding,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
        )
    except (OSError, UnicodeDecodeError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise DataLoadError(f"Could not read records file {path!r}: {e}") from e

    df.columns = [str(c).strip() for c in df.columns]
    missing = [c for c in SOURCE_COLUMNS if c not in df.columns]
    if missing:
        logger.warning(f"Records file {path!r} is missing columns: {missing}")

    return df.to_dict(orient='records')


def load_records(
    path: str,
    delimiter: str = ';',
    encoding: str = 'utf-8',
) -> List[LandTransaction]:
    """Read and normalize the records file."""
    start = time.perf_counter()
    rows = read_raw_rows(path, delimiter=delimiter, encoding=encoding)
    records = normalize_records(rows)
    elapsed = (time.perf_counter() - start) * 1000
    logger.info(f"Loaded {len(records):,} records from {path} in {elapsed:.1f}ms")
    return records


def load_boundaries(path: Optional[str]) -> Optional[Dict[str, Any]]:
    """
    Read the department boundary GeoJSON.

    Returns None (never raises) when the file is absent or malformed.
    """
    if not path:
        logger.warning("No boundaries path configured - maps disabled")
        return None
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning(f"Boundaries not available ({path}): {e}")
        return None

    if not isinstance(data, dict) or not isinstance(data.get('features'), list):
        logger.warning(f"Boundaries file {path} is not a FeatureCollection - maps disabled")
        return None

    unnamed = sum(
        1 for f in data['features']
        if not (f.get('properties') or {}).get(BOUNDARY_NAME_PROPERTY)
    )
    if unnamed:
        logger.warning(f"{unnamed} boundary feature(s) without {BOUNDARY_NAME_PROPERTY}")
    return data


def load_state(
    records_path: str,
    boundaries_path: Optional[str] = None,
    delimiter: str = ';',
    encoding: str = 'utf-8',
    window_years: Optional[int] = None,
) -> AppState:
    """
    Load both datasets and build the initial AppState.

    Both loads complete before any aggregation can run; only the records
    load can fail the whole call.
    """
    records = load_records(records_path, delimiter=delimiter, encoding=encoding)
    boundaries = load_boundaries(boundaries_path)
    state = AppState(records=tuple(records), boundaries=boundaries)
    if window_years is not None:
        state = state.with_window(window_years)
    return state


def load_state_from_config(config) -> AppState:
    """Build the initial AppState from a Config-like mapping or object."""
    get = config.get if isinstance(config, dict) else lambda k, d=None: getattr(config, k, d)
    return load_state(
        records_path=get('DATA_CSV_PATH'),
        boundaries_path=get('BOUNDARIES_PATH'),
        delimiter=get('CSV_DELIMITER', ';'),
        encoding=get('CSV_ENCODING', 'utf-8'),
        window_years=get('DEFAULT_WINDOW_YEARS'),
    )
