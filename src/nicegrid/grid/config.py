# src/nicegrid/grid/config.py

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any, Literal, Optional, get_args


GridType = Literal["grid", "table"]
RowSelectionPattern = Literal["none", "checkbox", "aria"]
FilterMode = Literal["internal", "external"]
SelectionPolicy = Literal["retain", "reset"]


def _check_literal(name: str, value: Any, alias: Any) -> None:
    allowed = get_args(alias)
    if value not in allowed:
        raise ValueError(f"{name} must be one of {allowed!r}, got {value!r}")


@dataclass(frozen=True)
class ColumnConfig:
    """Declarative configuration for a single grid column.

    Column identity is its position in the column list, so callers must not
    reorder columns without resetting sort/filter state.

    Attributes:
        name: Column label shown in the header.
        filterable: Whether the header shows a filter input for this column.
        sortable: Whether the header shows a sort toggle for this column.
        editable: Whether cells in this column may enter edit mode.
    """

    name: str
    filterable: bool = False
    sortable: bool = True
    editable: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ColumnConfig":
        return cls(
            name=str(data.get("name", "")),
            filterable=bool(data.get("filterable", False)),
            sortable=bool(data.get("sortable", True)),
            editable=bool(data.get("editable", False)),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class GridConfig:
    """Declarative configuration for grid-level behavior.

    Attributes:
        page_length: Rows per page. Drives PageUp/PageDown distance and, when
            ``paginate`` is set, the size of the displayed page.
        paginate: If True, only the current page of the view is displayed.
        title_column: Index of the column that best labels a row (used for
            accessible row labels).
        grid_type: ``"grid"`` enables cell navigation and editing,
            ``"table"`` renders a static, non-interactive table.
        editable: Global edit toggle; individual columns must also be editable.
        edit_on_click: If True, a single click on any editable cell opens it
            for editing (instead of click-to-activate, click-again-to-edit).
        edit_on_active_click: If True (default), clicking the already-active
            cell opens it for editing. Double-click and Enter always do.
        row_selection: ``"none"``, ``"checkbox"`` (leading checkbox column) or
            ``"aria"`` (active-descendant row selection, no checkbox column).
        virtualized: If True, rows may be supplied as ``None`` placeholders
            and ``total_rows`` may exceed the loaded rows; sorting and
            filtering are delegated to the data source.
        total_rows: Server-known total, overriding the loaded row count.
        filter_mode: ``"internal"`` filters rows in memory, ``"external"``
            only emits the active filter map.
        row_id_column: Optional column index whose cell value is used as the
            stable row key instead of object identity.
        selection_on_reload: ``"retain"`` keeps selection for rows that
            survive a ``set_data`` call, ``"reset"`` clears it whenever the
            row set changes.
        description: Optional caption for the rendered grid.
    """

    page_length: int = 30
    paginate: bool = False
    title_column: int = 0
    grid_type: GridType = "grid"
    editable: bool = True
    edit_on_click: bool = False
    edit_on_active_click: bool = True
    row_selection: RowSelectionPattern = "checkbox"
    virtualized: bool = False
    total_rows: Optional[int] = None
    filter_mode: FilterMode = "internal"
    row_id_column: Optional[int] = None
    selection_on_reload: SelectionPolicy = "retain"
    description: Optional[str] = None

    def __post_init__(self) -> None:
        if int(self.page_length) <= 0:
            raise ValueError(f"page_length must be > 0, got {self.page_length!r}")
        if self.total_rows is not None and int(self.total_rows) < 0:
            raise ValueError(f"total_rows must be >= 0, got {self.total_rows!r}")
        if self.title_column < 0:
            raise ValueError(f"title_column must be >= 0, got {self.title_column!r}")
        _check_literal("grid_type", self.grid_type, GridType)
        _check_literal("row_selection", self.row_selection, RowSelectionPattern)
        _check_literal("filter_mode", self.filter_mode, FilterMode)
        _check_literal("selection_on_reload", self.selection_on_reload, SelectionPolicy)

    @property
    def column_base(self) -> int:
        """Cursor column of the first content column (1 when a checkbox column leads)."""
        return 1 if self.row_selection == "checkbox" else 0

    @property
    def interactive(self) -> bool:
        return self.grid_type == "grid"

    @property
    def external_filtering(self) -> bool:
        return self.filter_mode == "external" or self.virtualized

    @property
    def external_sorting(self) -> bool:
        return self.virtualized

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GridConfig":
        """Build a GridConfig from a dict, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})
