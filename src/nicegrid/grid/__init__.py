"""Grid engine, its components, and the NiceGUI view."""

from .config import ColumnConfig, GridConfig
from .engine import GridEngine
from .events import (
    ActiveCellChanged,
    CellEdited,
    EditStateChanged,
    FilterChanged,
    PageChanged,
    RowSelectionChanged,
    SortChanged,
)
from .snapshot import CommandResult, FocusTarget, GridSnapshot
from .view import GridView

__all__ = [
    "ActiveCellChanged",
    "CellEdited",
    "ColumnConfig",
    "CommandResult",
    "EditStateChanged",
    "FilterChanged",
    "FocusTarget",
    "GridConfig",
    "GridEngine",
    "GridSnapshot",
    "GridView",
    "PageChanged",
    "RowSelectionChanged",
    "SortChanged",
]
