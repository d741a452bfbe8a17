"""Stable single-column sorting for grid rows.

The sort compares lower-cased cell strings and breaks ties on the original
position explicitly, so equal cells keep their relative order in both
directions regardless of the underlying sort algorithm.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import cmp_to_key
from typing import Callable, Optional, Sequence, TypeVar

T = TypeVar("T")


class SortDirection(Enum):
    """Sort state of a column."""
    ASCENDING = "ascending"
    DESCENDING = "descending"
    NONE = "none"


@dataclass(frozen=True)
class SortSpec:
    """At most one sorted column; ``NONE`` direction means original order."""
    column_index: Optional[int] = None
    direction: SortDirection = SortDirection.NONE

    @property
    def active(self) -> bool:
        return self.column_index is not None and self.direction is not SortDirection.NONE

    def direction_for(self, column_index: int) -> SortDirection:
        """Direction shown on a column header."""
        if self.column_index == column_index:
            return self.direction
        return SortDirection.NONE

    def to_dict(self) -> dict[str, object]:
        return {"column": self.column_index, "direction": self.direction.value}


NO_SORT = SortSpec()


def next_sort_spec(current: SortSpec, column_index: int) -> SortSpec:
    """Toggle rule for a header click.

    Clicking the sorted column flips descending <-> ascending (an ascending
    column becomes descending); clicking any other column sorts it ascending
    and discards the previous column's state.
    """
    if current.column_index == column_index and current.direction is not SortDirection.NONE:
        if current.direction is SortDirection.DESCENDING:
            return SortSpec(column_index, SortDirection.ASCENDING)
        return SortSpec(column_index, SortDirection.DESCENDING)
    return SortSpec(column_index, SortDirection.ASCENDING)


def sort_rows(
    rows: Sequence[T],
    column_index: Optional[int],
    direction: SortDirection,
    *,
    cells: Callable[[T], Sequence[str]] = lambda row: row,  # type: ignore[assignment,return-value]
) -> list[T]:
    """Return ``rows`` ordered by the lower-cased cell at ``column_index``.

    Args:
        rows: Rows to order. Not modified.
        column_index: Column to compare, or None for original order.
        direction: Sort direction; ``NONE`` keeps original order.
        cells: Accessor returning the cell sequence for a row, for callers
            that wrap rows (e.g. keyed row records).

    Returns:
        A new list. Rows whose cells compare equal keep their original
        relative order.
    """
    if column_index is None or direction is SortDirection.NONE:
        return list(rows)

    descending = direction is SortDirection.DESCENDING
    decorated = [(str(cells(row)[column_index]).lower(), i, row) for i, row in enumerate(rows)]

    def _compare(a: tuple[str, int, T], b: tuple[str, int, T]) -> int:
        if a[0] < b[0]:
            return 1 if descending else -1
        if a[0] > b[0]:
            return -1 if descending else 1
        return a[1] - b[1]

    decorated.sort(key=cmp_to_key(_compare))
    return [row for _, _, row in decorated]
