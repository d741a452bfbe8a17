"""Immutable view state handed to the presentation layer after every command."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Optional

from nicegrid.grid.events import GridEvent, event_to_dict
from nicegrid.grid.navigation import Cursor


class FocusTarget(Enum):
    """Element that should receive input focus on the next render."""
    CELL = "cell"            # the active cell (or its checkbox)
    EDIT_INPUT = "edit_input"
    CONTAINER = "container"  # aria pattern: the grid keeps focus, rows are active descendants


@dataclass(frozen=True)
class ColumnView:
    index: int
    name: str
    sortable: bool
    filterable: bool
    editable: bool
    sort_direction: str = "none"
    filter_value: str = ""


@dataclass(frozen=True)
class RowView:
    """A displayed row.

    Attributes:
        key: Stable row key, None for pending placeholders.
        cells: Cell texts in content-column order.
        selected: Current selection flag.
        pending: True for rows not loaded yet (virtualized grids).
        label: Accessible row label taken from the title column.
        data_index: Position of the row in the data supplied to set_data.
    """
    key: Optional[str]
    cells: tuple[str, ...]
    selected: bool = False
    pending: bool = False
    label: str = ""
    data_index: int = -1


@dataclass(frozen=True)
class GridSnapshot:
    """Canonical, serializable state of the grid after a command.

    ``focus_request`` and ``select_text_request`` are one-shot: they are set
    only on the snapshot returned by the command that raised them.
    """
    columns: tuple[ColumnView, ...]
    rows: tuple[RowView, ...]
    active_cell: Cursor
    column_base: int
    editing: bool
    edit_value: Optional[str]
    sort_column: Optional[int]
    sort_direction: str
    filters: dict[int, str]
    selection_state: str
    selected_count: int
    page: int
    total_pages: int
    total_rows: int
    grid_type: str
    row_selection: str
    has_previous_page: bool = False
    has_next_page: bool = False
    active_row_key: Optional[str] = None
    description: Optional[str] = None
    focus_request: Optional[FocusTarget] = None
    select_text_request: bool = False

    @property
    def column_count(self) -> int:
        """Columns in the cursor space, including a leading checkbox column."""
        return self.column_base + len(self.columns)

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def is_active(self, column: int, row: int) -> bool:
        return self.active_cell == (column, row)

    def to_dict(self) -> dict[str, Any]:
        return {
            "columns": [asdict(c) for c in self.columns],
            "rows": [{**asdict(r), "cells": list(r.cells)} for r in self.rows],
            "active_cell": {"column": self.active_cell.column, "row": self.active_cell.row},
            "column_base": self.column_base,
            "editing": self.editing,
            "edit_value": self.edit_value,
            "sort": {"column": self.sort_column, "direction": self.sort_direction},
            "filters": dict(self.filters),
            "selection_state": self.selection_state,
            "selected_count": self.selected_count,
            "page": self.page,
            "total_pages": self.total_pages,
            "total_rows": self.total_rows,
            "grid_type": self.grid_type,
            "row_selection": self.row_selection,
            "has_previous_page": self.has_previous_page,
            "has_next_page": self.has_next_page,
            "active_row_key": self.active_row_key,
            "description": self.description,
            "focus_request": self.focus_request.value if self.focus_request else None,
            "select_text_request": self.select_text_request,
        }


@dataclass(frozen=True)
class CommandResult:
    """Snapshot plus the notifications a command produced.

    ``handled`` tells the presentation layer whether to suppress the input's
    default browser behavior (e.g. a navigation key that moved the cursor).
    """
    snapshot: GridSnapshot
    notifications: tuple[GridEvent, ...] = field(default_factory=tuple)
    handled: bool = False

    def names(self) -> list[str]:
        return [n.name for n in self.notifications]

    def to_dict(self) -> dict[str, Any]:
        return {
            "snapshot": self.snapshot.to_dict(),
            "notifications": [event_to_dict(n) for n in self.notifications],
            "handled": self.handled,
        }
