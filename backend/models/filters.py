"""
Filter Selection - the user's current choice in each dashboard selector.

Every field is optional; None (or an empty string) means "no constraint".
"""
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class FilterSelection:
    region: Optional[str] = None
    transaction_type: Optional[str] = None
    business_type: Optional[str] = None
    occupancy_status: Optional[str] = None
    min_year: Optional[int] = None
    max_year: Optional[int] = None

    @property
    def active_region(self) -> Optional[str]:
        """Single region restriction for per-region aggregations."""
        return self.region or None

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) in (None, '') for f in fields(self))

    def to_dict(self) -> Dict[str, Any]:
        """Applied filters in API (camelCase) naming, empty fields omitted."""
        out = {
            'region': self.region,
            'transactionType': self.transaction_type,
            'businessType': self.business_type,
            'occupancyStatus': self.occupancy_status,
            'minYear': self.min_year,
            'maxYear': self.max_year,
        }
        return {k: v for k, v in out.items() if v not in (None, '')}
