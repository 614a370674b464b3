"""
Pydantic models for dashboard endpoint params.

Coercion replicates utils/normalize.py so routes and the CLI share one
set of rules:
- Empty strings are "not set"
- Years and window are integers
- Sort columns are validated against the table's columns

Usage:
    params = parse_dashboard_params(request.args)
    state = params.apply_to(current_app.extensions['land_state'])
"""

from typing import Annotated, Any, List, Mapping, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from constants import INCREMENT_TABLE_COLUMNS, REGION_TABLE_COLUMNS
from models.app_state import AppState, SortState
from models.filters import FilterSelection
from utils.normalize import ValidationError, to_choice, to_direction, to_int, to_str


def _split_comma_list(v: Any) -> Optional[List[str]]:
    """Comma-separated string to list; empty input -> None."""
    if v is None or v == '':
        return None
    if isinstance(v, list):
        return [str(item).strip() for item in v if item]
    items = [item.strip() for item in str(v).split(',') if item.strip()]
    return items or None


CoercedInt = Annotated[Optional[int], BeforeValidator(lambda v: to_int(v))]
CoercedStr = Annotated[Optional[str], BeforeValidator(lambda v: to_str(v))]
CommaList = Annotated[Optional[List[str]], BeforeValidator(_split_comma_list)]
Direction = Annotated[Optional[bool], BeforeValidator(lambda v: to_direction(v))]
RegionSortColumn = Annotated[
    Optional[str], BeforeValidator(lambda v: to_choice(v, REGION_TABLE_COLUMNS))
]
IncrementSortColumn = Annotated[
    Optional[str], BeforeValidator(lambda v: to_choice(v, INCREMENT_TABLE_COLUMNS))
]


class DashboardParams(BaseModel):
    """
    Query params for /api/dashboard, /api/regions and /api/increment.

    Accepts camelCase (query string) or snake_case (Python callers).
    """

    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    # === Filters ===
    region: CoercedStr = Field(default=None, description="Department name")
    transaction_type: CoercedStr = Field(default=None, alias='transactionType')
    business_type: CoercedStr = Field(default=None, alias='businessType')
    occupancy_status: CoercedStr = Field(default=None, alias='occupancyStatus')
    min_year: CoercedInt = Field(default=None, alias='minYear')
    max_year: CoercedInt = Field(default=None, alias='maxYear')

    # === Increment window ===
    window: CoercedInt = Field(default=None, description="Window length in years (>= 1)")

    # === Table sorting ===
    sort: RegionSortColumn = Field(default=None, description="Department table column")
    dir: Direction = Field(default=None, description="asc or desc")
    inc_sort: IncrementSortColumn = Field(default=None, alias='incSort')
    inc_dir: Direction = Field(default=None, alias='incDir')

    # === Output ===
    panels: CommaList = Field(default=None, description="Comma-separated panels")

    def to_selection(self) -> FilterSelection:
        return FilterSelection(
            region=self.region,
            transaction_type=self.transaction_type,
            business_type=self.business_type,
            occupancy_status=self.occupancy_status,
            min_year=self.min_year,
            max_year=self.max_year,
        )

    def apply_to(self, state: AppState) -> AppState:
        """New state carrying these params; unset params keep the state's values."""
        state = state.with_selection(self.to_selection())
        if self.window is not None:
            state = state.with_window(self.window)
        if self.sort is not None or self.dir is not None:
            state = state.with_region_sort(_resolve_sort(state.region_sort, self.sort, self.dir))
        if self.inc_sort is not None or self.inc_dir is not None:
            state = state.with_increment_sort(
                _resolve_sort(state.increment_sort, self.inc_sort, self.inc_dir)
            )
        return state


def _resolve_sort(current: SortState, column: Optional[str], ascending: Optional[bool]) -> SortState:
    base = SortState.for_column(column) if column else current
    if ascending is None:
        return base
    return SortState(base.column, ascending)


def parse_dashboard_params(args: Mapping[str, Any]) -> DashboardParams:
    """
    Validate raw params into DashboardParams.

    Raises:
        ValidationError: first offending field, in the normalize.py error shape
    """
    try:
        raw = args.to_dict() if hasattr(args, 'to_dict') else dict(args)
        return DashboardParams.model_validate(raw)
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = str(first['loc'][0]) if first.get('loc') else None
        raise ValidationError(
            first.get('msg', 'Invalid parameter'),
            field=field,
            received_value=first.get('input'),
        ) from e
