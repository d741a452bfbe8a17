"""Column filters for grid rows.

Filters are case-insensitive substring matches, one per filterable column,
combined with logical AND. ``compute_active_filters`` is also what the grid
emits in external filter mode, where row reduction belongs to the data source.
"""

from __future__ import annotations

from typing import Callable, Mapping, Sequence, TypeVar

from nicegrid.grid.config import ColumnConfig

T = TypeVar("T")

ActiveFilters = dict[int, str]


def compute_active_filters(
    columns: Sequence[ColumnConfig],
    raw_filters: Mapping[int, str],
) -> ActiveFilters:
    """Reduce raw filter input to the filters that actually apply.

    Args:
        columns: Column definitions, indexed by position.
        raw_filters: Column index -> filter text as typed by the user.

    Returns:
        Column index -> trimmed filter text, omitting blank values and
        columns that are out of range or not filterable. Keys are in
        column order.
    """
    active: ActiveFilters = {}
    for index in sorted(raw_filters):
        if not 0 <= index < len(columns) or not columns[index].filterable:
            continue
        value = (raw_filters[index] or "").strip()
        if value:
            active[index] = value
    return active


def matches(row: Sequence[str], active_filters: Mapping[int, str]) -> bool:
    """True if every filtered cell of ``row`` contains its filter text (case-insensitive)."""
    for index, value in active_filters.items():
        if value.lower() not in str(row[index]).lower():
            return False
    return True


def filter_rows(
    rows: Sequence[T],
    active_filters: Mapping[int, str],
    *,
    cells: Callable[[T], Sequence[str]] = lambda row: row,  # type: ignore[assignment,return-value]
) -> list[T]:
    """Rows matching all active filters, in their original order."""
    if not active_filters:
        return list(rows)
    return [row for row in rows if matches(cells(row), active_filters)]
