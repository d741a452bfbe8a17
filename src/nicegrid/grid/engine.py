# src/nicegrid/grid/engine.py
"""GridEngine: the grid's interaction state machine.

Every public command runs to completion, updates the owned components, and
returns a ``CommandResult`` holding a fresh immutable ``GridSnapshot`` plus
the notifications it produced. The same notifications are delivered, in
order, to listeners registered with ``on(...)`` before the command returns.

Invalid input coming from the UI (unknown row key, non-sortable column,
out-of-range cursor, editing a read-only cell, ...) is a silent no-op logged at
DEBUG. Only data contract violations in ``set_data`` raise.
"""

from __future__ import annotations

from typing import Callable, Optional, Sequence

from nicegrid.grid.config import ColumnConfig, GridConfig
from nicegrid.grid.conversion import ColumnLike, DataLike, to_columns_and_rows
from nicegrid.grid.data_view import DataView, RowRecord
from nicegrid.grid.edit_session import EditSession
from nicegrid.grid.events import (
    ActiveCellChanged,
    CellEdited,
    EditStateChanged,
    EventEmitter,
    FilterChanged,
    GridEvent,
    GridEventHandler,
    PageChanged,
    RowSelectionChanged,
    SortChanged,
)
from nicegrid.grid.filter_engine import ActiveFilters, compute_active_filters
from nicegrid.grid.navigation import (
    ACTIVATE_KEYS,
    ENTER,
    ESCAPE,
    NAVIGATION_KEYS,
    ORIGIN,
    SPACE,
    TAB,
    Cursor,
    GridBounds,
    move_cursor,
    move_within_row,
)
from nicegrid.grid.paginator import Paginator
from nicegrid.grid.selection import SelectionTracker
from nicegrid.grid.snapshot import ColumnView, CommandResult, FocusTarget, GridSnapshot, RowView
from nicegrid.grid.sort_engine import NO_SORT, SortSpec, next_sort_spec
from nicegrid.utils.logging import get_logger

logger = get_logger(__name__)


class GridEngine:
    """Owns grid data, selection, sort/filter state, cursor, edit session and pager.

    Public API (commands, each returning a CommandResult):
        set_data(columns, rows, total_rows=None)
        sort_by(column_index)
        set_filter(column_index, value)
        select_row(row_key, selected) / select_all(selected)
        move_active_cell(key) / key_down(key, shift=False, ctrl=False)
        click(cursor) / double_click(cursor)
        open_edit() / update_edit_value(value) / commit_edit(value=None) / cancel_edit()
        set_page(n) / next_page() / previous_page()
        blur(related_target_inside_grid)

    Queries:
        snapshot(), view_rows(), active_cell, editing, selected_keys(), columns

    Events:
        on(name, handler) with name in filterChanged, sortChanged,
        rowSelectionChanged, cellEdited, pageChanged, activeCellChanged,
        editStateChanged (or None for all events).
    """

    def __init__(
        self,
        config: GridConfig | None = None,
        columns: Optional[Sequence[ColumnLike]] = None,
        rows: Optional[DataLike] = None,
    ) -> None:
        self._cfg: GridConfig = config or GridConfig()

        self._data = DataView(row_id_column=self._cfg.row_id_column)
        self._selection = SelectionTracker()
        self._edit = EditSession()
        self._paginator = Paginator(page_length=self._cfg.page_length)
        self._emitter = EventEmitter()

        self._sort: SortSpec = NO_SORT
        self._raw_filters: dict[int, str] = {}
        self._active_filters: ActiveFilters = {}
        self._total_rows_override: Optional[int] = self._cfg.total_rows

        self._cursor: Cursor = ORIGIN
        self._edit_row_key: Optional[str] = None

        # derived view: full projection and the displayed page
        self._view: list[RowRecord] = []
        self._page_rows: list[RowRecord] = []

        # per-command accumulators
        self._pending: list[GridEvent] = []
        self._focus: Optional[FocusTarget] = None
        self._select_text: bool = False

        if columns is not None or rows is not None:
            self.set_data(columns, rows if rows is not None else [])

    # ------------------------------------------------------------------
    # Listener registration
    # ------------------------------------------------------------------

    def on(self, name: Optional[str], handler: GridEventHandler) -> None:
        """Register handler(event) for one event name, or for all events with None."""
        self._emitter.on(name, handler)

    def off(self, name: Optional[str], handler: GridEventHandler) -> None:
        self._emitter.off(name, handler)

    def on_cell_edited(self, handler: Callable[[CellEdited], None]) -> None:
        self._emitter.on(CellEdited.name, handler)  # type: ignore[arg-type]

    def on_row_selection_changed(self, handler: Callable[[RowSelectionChanged], None]) -> None:
        self._emitter.on(RowSelectionChanged.name, handler)  # type: ignore[arg-type]

    def on_filter_changed(self, handler: Callable[[FilterChanged], None]) -> None:
        self._emitter.on(FilterChanged.name, handler)  # type: ignore[arg-type]

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def config(self) -> GridConfig:
        return self._cfg

    @property
    def columns(self) -> list[ColumnConfig]:
        return self._data.columns

    @property
    def active_cell(self) -> Cursor:
        return self._cursor

    @property
    def editing(self) -> bool:
        return self._edit.active

    @property
    def sort(self) -> SortSpec:
        return self._sort

    @property
    def active_filters(self) -> ActiveFilters:
        return dict(self._active_filters)

    def selected_keys(self) -> list[str]:
        """Selected row keys in data order."""
        return [k for k in self._data.keys() if self._selection.is_selected(k)]

    def view_rows(self) -> list[RowRecord]:
        """Sorted and filtered rows across all pages (pending placeholders included)."""
        return list(self._view)

    def snapshot(self) -> GridSnapshot:
        """Current view state without one-shot focus/selection requests."""
        return self._build_snapshot(focus=None, select_text=False)

    # ------------------------------------------------------------------
    # Commands: data
    # ------------------------------------------------------------------

    def set_data(
        self,
        columns: Optional[Sequence[ColumnLike]],
        rows: DataLike,
        total_rows: Optional[int] = None,
    ) -> CommandResult:
        """Replace columns and rows.

        Args:
            columns: Column definitions (ColumnConfig, dict or name). May be
                None when ``rows`` is a DataFrame or a list of dicts.
            rows: Row data; see ``nicegrid.grid.conversion``.
            total_rows: Server-known row total overriding the loaded count.

        Raises:
            ValueError: Row length differs from the column count, or other
                data contract violations (see ``DataView.load``).
            TypeError: Unsupported row container.
        """
        cols, row_list = to_columns_and_rows(rows, columns)
        if total_rows is not None and total_rows < 0:
            raise ValueError(f"total_rows must be >= 0, got {total_rows!r}")
        override = total_rows if total_rows is not None else self._cfg.total_rows

        active_key = self._active_row_key()
        result = self._data.load(cols, row_list, total_rows=override, virtualized=self._cfg.virtualized)
        if result.unchanged:
            # same row objects: keys and selection stand, but cells may have been edited in place
            logger.debug("set_data: same rows/columns, re-projecting only")
            self._reproject(follow_key=active_key)
            return self._finish()
        self._total_rows_override = override

        logger.info(
            "set_data rows=%s cols=%s total_rows=%s structural=%s",
            len(row_list),
            len(cols),
            override,
            result.structural,
        )

        # selection follows the row set
        dropped: list[str] = []
        if self._cfg.selection_on_reload == "reset" and (result.added_keys or result.retired_keys):
            dropped.extend(self._selection.clear())
        dropped.extend(k for k in self._selection.retain(self._data.keys()) if k not in dropped)
        if dropped:
            self._emit_selection(dropped, False)

        if result.structural:
            self._structural_reset()
            active_key = None
        else:
            self._revalidate_sort_and_filters()

        self._reproject(follow_key=active_key)
        return self._finish()

    # ------------------------------------------------------------------
    # Commands: sort / filter
    # ------------------------------------------------------------------

    def sort_by(self, column_index: int) -> CommandResult:
        """Header sort toggle for ``column_index`` (content column index)."""
        columns = self._data.columns
        if not 0 <= column_index < len(columns) or not columns[column_index].sortable:
            logger.debug("sort_by ignored: column %s is not sortable", column_index)
            return self._finish()

        active_key = self._active_row_key()
        self._sort = next_sort_spec(self._sort, column_index)
        logger.debug("sort_by column=%s direction=%s", column_index, self._sort.direction.value)
        self._pending.append(SortChanged(self._sort.column_index, self._sort.direction.value))
        self._reproject(follow_key=active_key)
        return self._finish(handled=True)

    def set_filter(self, column_index: int, value: str) -> CommandResult:
        """Set the filter text for one column. Emits filterChanged when the active map changes."""
        columns = self._data.columns
        if not 0 <= column_index < len(columns) or not columns[column_index].filterable:
            logger.debug("set_filter ignored: column %s is not filterable", column_index)
            return self._finish()

        active_key = self._active_row_key()
        self._raw_filters[column_index] = value or ""
        new_active = compute_active_filters(columns, self._raw_filters)
        if new_active == self._active_filters:
            return self._finish()

        self._active_filters = new_active
        self._pending.append(FilterChanged(dict(new_active)))
        if not self._cfg.external_filtering:
            self._reproject(follow_key=active_key)
        return self._finish(handled=True)

    # ------------------------------------------------------------------
    # Commands: selection
    # ------------------------------------------------------------------

    def select_row(self, row_key: str, selected: bool) -> CommandResult:
        if self._cfg.row_selection == "none":
            logger.debug("select_row ignored: row selection disabled")
            return self._finish()
        if not self._selection.set_selected(row_key, bool(selected)):
            return self._finish()
        self._emit_selection([row_key], bool(selected))
        return self._finish(handled=True)

    def select_all(self, selected: bool) -> CommandResult:
        if self._cfg.row_selection == "none":
            logger.debug("select_all ignored: row selection disabled")
            return self._finish()
        changed = self._selection.set_all_selected(bool(selected), self._data.keys())
        if changed:
            self._emit_selection(changed, bool(selected))
        return self._finish(handled=bool(changed))

    # ------------------------------------------------------------------
    # Commands: keyboard
    # ------------------------------------------------------------------

    def move_active_cell(self, key: str, *, ctrl: bool = False) -> CommandResult:
        """Grid-level navigation key. Ignored while editing (the edit input owns the keys)."""
        if not self._cfg.interactive or self._edit.active:
            return self._finish()
        move = move_cursor(self._cursor, key, self._bounds(), self._cfg.page_length, ctrl=ctrl)
        if move.changed:
            self._set_cursor(move.cursor)
            self._request_focus(self._navigation_focus())
        return self._finish(handled=move.changed)

    def key_down(self, key: str, *, shift: bool = False, ctrl: bool = False) -> CommandResult:
        """Route a keydown from the grid body.

        While editing, the edit layer captures every key: Enter commits,
        Escape cancels, Tab/Shift+Tab move within the row; other keys belong
        to the input. Otherwise arrows/Home/End/PageUp/PageDown move the
        active cell and Enter/Space activate it.
        """
        if not self._cfg.interactive:
            return self._finish()

        if self._edit.active:
            if key == ESCAPE:
                return self.cancel_edit()
            if key == ENTER:
                return self.commit_edit()
            if key == TAB:
                return self._tab_while_editing(shift)
            return self._finish()

        if key in ACTIVATE_KEYS:
            return self._activate(key)
        if key in NAVIGATION_KEYS:
            return self.move_active_cell(key, ctrl=ctrl)
        return self._finish()

    def _activate(self, key: str) -> CommandResult:
        record = self._record_at(self._cursor.row)
        on_checkbox = self._cfg.column_base == 1 and self._cursor.column == 0
        toggles_row = on_checkbox or (self._cfg.row_selection == "aria" and key == SPACE)
        if toggles_row:
            if record is not None and record.key is not None:
                selected = not self._selection.is_selected(record.key)
                if self._selection.set_selected(record.key, selected):
                    self._emit_selection([record.key], selected)
            return self._finish(handled=True)
        self._open_edit()
        return self._finish(handled=True)

    def _tab_while_editing(self, shift: bool) -> CommandResult:
        move = move_within_row(self._cursor, shift, self._bounds(), min_column=self._cfg.column_base)
        if not move.changed:
            return self._finish()
        self._cancel_edit(focus=False)
        self._set_cursor(move.cursor)
        if not self._open_edit():
            self._request_focus(FocusTarget.CELL)
        return self._finish(handled=True)

    # ------------------------------------------------------------------
    # Commands: pointer
    # ------------------------------------------------------------------

    def click(self, cursor: tuple[int, int]) -> CommandResult:
        """Single click on a cell.

        Clicking the already-active cell opens it for editing (unless
        ``edit_on_active_click`` is off); with ``edit_on_click`` any click on
        an editable cell does.
        """
        cursor = Cursor(*cursor)
        if not self._cfg.interactive or not self._bounds().contains(cursor):
            return self._finish()
        if self._edit.active:
            if cursor == self._cursor:
                return self._finish()
            self._cancel_edit(focus=True)
            was_active = False
        else:
            was_active = cursor == self._cursor

        self._set_cursor(cursor)
        if (was_active and self._cfg.edit_on_active_click) or self._cfg.edit_on_click:
            self._open_edit()
        return self._finish(handled=True)

    def double_click(self, cursor: tuple[int, int]) -> CommandResult:
        cursor = Cursor(*cursor)
        if not self._cfg.interactive or not self._bounds().contains(cursor):
            return self._finish()
        if self._edit.active:
            if cursor == self._cursor:
                return self._finish()
            self._cancel_edit(focus=True)
        self._set_cursor(cursor)
        self._open_edit()
        return self._finish(handled=True)

    def blur(self, related_target_inside_grid: bool) -> CommandResult:
        """Focus left an element of the grid.

        Focus moving outside the grid cancels an active edit. Focus moving
        within the grid is resolved by the command that follows (click,
        double_click, ...).
        """
        if related_target_inside_grid or not self._edit.active:
            return self._finish()
        self._cancel_edit(focus=False)
        return self._finish()

    # ------------------------------------------------------------------
    # Commands: editing
    # ------------------------------------------------------------------

    def open_edit(self) -> CommandResult:
        opened = self._open_edit()
        return self._finish(handled=opened)

    def update_edit_value(self, value: str) -> CommandResult:
        """Track the edit input's content (the pending value)."""
        self._edit.update(value)
        return self._finish()

    def commit_edit(self, value: Optional[str] = None) -> CommandResult:
        """Close the edit keeping ``value`` (defaults to the pending value) and emit cellEdited."""
        if not self._edit.active:
            return self._finish()
        commit = self._edit.commit(value)
        row_key = self._edit_row_key
        self._edit_row_key = None
        if commit is not None:
            column = commit.cursor.column - self._cfg.column_base
            logger.debug("commit_edit column=%s row=%s key=%s", column, commit.cursor.row, row_key)
            self._pending.append(CellEdited(commit.value, column, commit.cursor.row, row_key))
        self._pending.append(EditStateChanged(False))
        self._request_focus(FocusTarget.CELL)
        return self._finish(handled=True)

    def cancel_edit(self) -> CommandResult:
        if not self._edit.active:
            return self._finish()
        self._cancel_edit(focus=True)
        return self._finish(handled=True)

    # ------------------------------------------------------------------
    # Commands: paging
    # ------------------------------------------------------------------

    def set_page(self, page: int) -> CommandResult:
        if not self._paged:
            logger.debug("set_page ignored: paging disabled")
            return self._finish()
        return self._change_page(lambda: self._paginator.set_page(page))

    def next_page(self) -> CommandResult:
        if not self._paged:
            return self._finish()
        return self._change_page(self._paginator.next_page)

    def previous_page(self) -> CommandResult:
        if not self._paged:
            return self._finish()
        return self._change_page(self._paginator.previous_page)

    def _change_page(self, move: Callable[[], bool]) -> CommandResult:
        # the edited row leaves the display, so close the edit first
        was_editing = self._edit.active
        if not move():
            return self._finish()
        if was_editing:
            self._cancel_edit(focus=False)
        self._pending.append(PageChanged(self._paginator.current_page))
        self._reproject(follow_key=None)
        return self._finish(handled=True)

    # ------------------------------------------------------------------
    # Internal: state helpers
    # ------------------------------------------------------------------

    @property
    def _server_paged(self) -> bool:
        """Host supplies one page at a time and a server-known total."""
        return self._total_rows_override is not None and not self._cfg.virtualized

    @property
    def _paged(self) -> bool:
        return self._cfg.paginate or self._server_paged

    def _bounds(self) -> GridBounds:
        return GridBounds(self._cfg.column_base + self._data.column_count, len(self._page_rows))

    def _record_at(self, row: int) -> Optional[RowRecord]:
        if 0 <= row < len(self._page_rows):
            return self._page_rows[row]
        return None

    def _active_row_key(self) -> Optional[str]:
        record = self._record_at(self._cursor.row)
        return record.key if record is not None else None

    def _navigation_focus(self) -> FocusTarget:
        return FocusTarget.CONTAINER if self._cfg.row_selection == "aria" else FocusTarget.CELL

    def _request_focus(self, target: FocusTarget) -> None:
        # consecutive requests in one command coalesce; the last one wins
        self._focus = target

    def _set_cursor(self, cursor: Cursor) -> None:
        if cursor == self._cursor:
            return
        self._cursor = cursor
        self._pending.append(ActiveCellChanged(cursor.column, cursor.row))

    def _can_edit(self, cursor: Cursor) -> bool:
        if not (self._cfg.interactive and self._cfg.editable):
            return False
        content_index = cursor.column - self._cfg.column_base
        columns = self._data.columns
        if not 0 <= content_index < len(columns) or not columns[content_index].editable:
            return False
        record = self._record_at(cursor.row)
        return record is not None and not record.pending

    def _open_edit(self) -> bool:
        if self._edit.active:
            logger.debug("open_edit ignored: a cell is already being edited")
            return False
        if not self._can_edit(self._cursor):
            logger.debug("open_edit ignored: cell %s is not editable", tuple(self._cursor))
            return False
        record = self._record_at(self._cursor.row)
        if record is None:
            return False
        value = str(record.cells[self._cursor.column - self._cfg.column_base])
        self._edit.open(self._cursor, value)
        self._edit_row_key = record.key
        self._pending.append(EditStateChanged(True))
        self._request_focus(FocusTarget.EDIT_INPUT)
        self._select_text = True
        return True

    def _cancel_edit(self, *, focus: bool) -> None:
        if not self._edit.cancel():
            return
        self._edit_row_key = None
        self._pending.append(EditStateChanged(False))
        if focus:
            self._request_focus(FocusTarget.CELL)

    def _emit_selection(self, keys: Sequence[str], selected: bool) -> None:
        self._pending.append(
            RowSelectionChanged(
                keys=tuple(keys),
                selected=selected,
                state=self._selection.aggregate_state().value,
                count=self._selection.selected_count,
            )
        )

    def _structural_reset(self) -> None:
        """Column count changed: sort, filters, cursor and edit go back to defaults."""
        self._cancel_edit(focus=False)
        if self._sort.active:
            self._pending.append(SortChanged(None, NO_SORT.direction.value))
        self._sort = NO_SORT
        self._raw_filters = {}
        if self._active_filters:
            self._active_filters = {}
            self._pending.append(FilterChanged({}))
        self._set_cursor(ORIGIN)

    def _revalidate_sort_and_filters(self) -> None:
        columns = self._data.columns
        index = self._sort.column_index
        if index is not None and (index >= len(columns) or not columns[index].sortable):
            self._sort = NO_SORT
            self._pending.append(SortChanged(None, NO_SORT.direction.value))
        new_active = compute_active_filters(columns, self._raw_filters)
        if new_active != self._active_filters:
            self._active_filters = new_active
            self._pending.append(FilterChanged(dict(new_active)))

    def _reproject(self, follow_key: Optional[str]) -> None:
        """Recompute the view and page, then re-seat the cursor and edit session."""
        self._view = self._data.project(
            self._sort,
            self._active_filters,
            apply_sort=not self._cfg.external_sorting,
            apply_filter=not self._cfg.external_filtering,
        )

        if self._paged:
            total = self._total_rows_override if self._server_paged else len(self._view)
            if self._paginator.update_total_rows(total or 0):
                self._pending.append(PageChanged(self._paginator.current_page))

        if self._cfg.paginate and not self._server_paged:
            start, end = self._paginator.page_bounds()
            self._page_rows = self._view[start:end]
        else:
            self._page_rows = list(self._view)

        bounds = self._bounds()
        cursor = self._cursor
        if follow_key is not None:
            for i, record in enumerate(self._page_rows):
                if record.key == follow_key:
                    cursor = Cursor(cursor.column, i)
                    break
        self._set_cursor(bounds.clamp(cursor))

        if self._edit.active:
            record = self._record_at(self._cursor.row)
            if record is None or record.key != self._edit_row_key or not self._can_edit(self._cursor):
                self._cancel_edit(focus=True)
            else:
                self._edit.retarget(self._cursor)

    # ------------------------------------------------------------------
    # Internal: snapshot + dispatch
    # ------------------------------------------------------------------

    def _build_snapshot(self, *, focus: Optional[FocusTarget], select_text: bool) -> GridSnapshot:
        columns = self._data.columns
        column_views = tuple(
            ColumnView(
                index=i,
                name=col.name,
                sortable=col.sortable,
                filterable=col.filterable,
                editable=col.editable,
                sort_direction=self._sort.direction_for(i).value,
                filter_value=self._raw_filters.get(i, ""),
            )
            for i, col in enumerate(columns)
        )
        title = self._cfg.title_column
        row_views = tuple(
            RowView(
                key=r.key,
                cells=tuple(str(c) for c in r.cells),
                selected=r.key is not None and self._selection.is_selected(r.key),
                pending=r.pending,
                label=str(r.cells[title]) if 0 <= title < len(r.cells) else "",
                data_index=r.data_index,
            )
            for r in self._page_rows
        )
        paged = self._paged
        return GridSnapshot(
            columns=column_views,
            rows=row_views,
            active_cell=self._cursor,
            column_base=self._cfg.column_base,
            editing=self._edit.active,
            edit_value=self._edit.pending_value,
            sort_column=self._sort.column_index,
            sort_direction=self._sort.direction.value,
            filters=dict(self._active_filters),
            selection_state=self._selection.aggregate_state().value,
            selected_count=self._selection.selected_count,
            page=self._paginator.current_page if paged else 1,
            total_pages=self._paginator.total_pages if paged else 1,
            total_rows=int(self._total_rows_override or 0) if self._server_paged else len(self._view),
            grid_type=self._cfg.grid_type,
            row_selection=self._cfg.row_selection,
            has_previous_page=paged and self._paginator.has_previous,
            has_next_page=paged and self._paginator.has_next,
            active_row_key=self._active_row_key(),
            description=self._cfg.description,
            focus_request=focus,
            select_text_request=select_text,
        )

    def _finish(self, handled: bool = False) -> CommandResult:
        notifications = tuple(self._pending)
        snapshot = self._build_snapshot(focus=self._focus, select_text=self._select_text)
        self._pending = []
        self._focus = None
        self._select_text = False

        for event in notifications:
            self._emitter.emit(event)
        return CommandResult(snapshot=snapshot, notifications=notifications, handled=handled)

    def __repr__(self) -> str:
        return (
            f"GridEngine(rows={len(self._view)}, cols={self._data.column_count}, "
            f"cursor={tuple(self._cursor)}, editing={self._edit.active})"
        )
