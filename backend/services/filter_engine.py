"""
Filter Engine - full dataset + FilterSelection -> filtered subset

Pure functions only. Order of the input is preserved and the input is
never mutated.

Matching rules:
- region: membership in the record's department list (not the primary one)
- transaction/business type, occupancy: exact match
- min/max year: only constrain records with a parseable date; undated
  records always pass the year bounds
"""

from typing import Any, Dict, List, Sequence

from models.filters import FilterSelection
from models.transaction import LandTransaction


def matches(record: LandTransaction, selection: FilterSelection) -> bool:
    if selection.region and selection.region not in record.regions:
        return False
    if selection.transaction_type and record.transaction_type != selection.transaction_type:
        return False
    if selection.business_type and record.business_type != selection.business_type:
        return False
    if selection.occupancy_status and record.occupancy_status != selection.occupancy_status:
        return False

    year = record.year
    if year is not None:
        if selection.min_year is not None and year < selection.min_year:
            return False
        if selection.max_year is not None and year > selection.max_year:
            return False
    return True


def apply_filters(
    records: Sequence[LandTransaction],
    selection: FilterSelection,
) -> List[LandTransaction]:
    """Records matching every non-empty field of the selection."""
    if selection.is_empty():
        return list(records)
    return [r for r in records if matches(r, selection)]


def filter_options(records: Sequence[LandTransaction]) -> Dict[str, List[Any]]:
    """
    Distinct values for each selector, sorted.

    Returns:
        {
            "regions": [...],
            "transactionTypes": [...],
            "businessTypes": [...],
            "occupancyStatuses": [...],
            "years": [2018, 2019, ...]
        }
    """
    regions, types, businesses, statuses, years = set(), set(), set(), set(), set()
    for r in records:
        regions.update(r.regions)
        if r.transaction_type:
            types.add(r.transaction_type)
        if r.business_type:
            businesses.add(r.business_type)
        if r.occupancy_status:
            statuses.add(r.occupancy_status)
        if r.year is not None:
            years.add(r.year)

    return {
        'regions': sorted(regions),
        'transactionTypes': sorted(types),
        'businessTypes': sorted(businesses),
        'occupancyStatuses': sorted(statuses),
        'years': sorted(years),
    }
