# src/nicegrid/grid/view.py
"""NiceGUI rendering of a GridEngine snapshot.

GridView holds no interaction state: it renders the latest snapshot and turns
NiceGUI events into engine commands. After each command it re-renders and
applies the snapshot's one-shot focus / select-text requests.
"""

from __future__ import annotations

from typing import Any, Optional

from nicegui import ui

from nicegrid.grid.engine import GridEngine
from nicegrid.grid.snapshot import CommandResult, FocusTarget, GridSnapshot
from nicegrid.utils.logging import get_logger

logger = get_logger(__name__)

SORT_ICONS = {
    "ascending": "arrow_upward",
    "descending": "arrow_downward",
    "none": "unfold_more",
}

# Emits True when focus moves to another element inside the grid container.
JS_FOCUSOUT_INSIDE = (
    "(e) => emit(!!(e.relatedTarget && e.currentTarget.contains(e.relatedTarget)))"
)

# Grid-level keys from the body (or the table itself in the aria pattern); filter
# inputs in the header keep their keys.
JS_GRID_KEYDOWN = """(e) => {
    if (e.target.closest("thead")) return;
    if (["ArrowUp", "ArrowDown", "ArrowLeft", "ArrowRight", "Home", "End", "PageUp", "PageDown"].includes(e.key)) {
        e.preventDefault();
    }
    emit({key: e.key, shiftKey: e.shiftKey, ctrlKey: e.ctrlKey});
}"""

# The edit input owns every key except Enter, Escape and Tab, which close or move the edit.
JS_EDIT_KEYDOWN = """(e) => {
    e.stopPropagation();
    if (["Enter", "Escape", "Tab"].includes(e.key)) {
        e.preventDefault();
        emit({key: e.key, shiftKey: e.shiftKey});
    }
}"""


def cell_dom_id(grid_id: str, column: int, row: int) -> str:
    """DOM id of a body cell in cursor coordinates."""
    return f"{grid_id}-cell-{column}-{row}"


def row_dom_id(grid_id: str, row_key: Optional[str], data_index: int) -> str:
    """DOM id of a body row: its key, or its data position for pending placeholders."""
    if row_key is None:
        return f"{grid_id}-pending-{data_index}"
    return f"{grid_id}-row-{row_key}"


def pager_state(snapshot: GridSnapshot) -> Optional[dict[str, Any]]:
    """Previous/Next enabled state, or None when everything fits on one page."""
    if snapshot.total_pages <= 1:
        return None
    return {
        "previous_enabled": snapshot.has_previous_page,
        "next_enabled": snapshot.has_next_page,
        "label": f"Page {snapshot.page} of {snapshot.total_pages}",
    }


class GridView:
    """Render a GridEngine as an HTML table inside a NiceGUI container.

    Public API:
        render(snapshot=None): rebuild the table from a snapshot
        engine: the underlying GridEngine (escape hatch)
    """

    def __init__(self, engine: GridEngine, parent: ui.element | None = None) -> None:
        self._engine = engine
        self._grid_id = f"nicegrid-{id(self)}"
        self._snapshot: GridSnapshot = engine.snapshot()

        self._container: ui.element = parent or ui.element("div")
        self._container.classes("nicegrid-container w-full")
        self._container.on("focusout", self._on_focusout, js_handler=JS_FOCUSOUT_INSIDE)

        with self._container:
            self._table = ui.element("table").classes("nicegrid w-full")
            with self._table:
                if engine.config.description:
                    with ui.element("caption").classes("nicegrid-caption"):
                        ui.label(engine.config.description)
                self._thead = ui.element("thead").props("role=rowgroup")
                self._tbody = ui.element("tbody").props("role=rowgroup").classes("grid-body")
            self._pager = ui.row().classes("grid-pager items-center gap-2")
        self._table.on("keydown", self._on_body_keydown, js_handler=JS_GRID_KEYDOWN)

        self.render()

    @property
    def engine(self) -> GridEngine:
        return self._engine

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render(self, snapshot: GridSnapshot | None = None) -> None:
        """Rebuild header, body and pager from ``snapshot`` (default: current engine state)."""
        snap = snapshot or self._engine.snapshot()
        self._snapshot = snap
        self._table.props(f'role={"grid" if snap.grid_type == "grid" else "table"}')
        if snap.row_selection == "aria":
            self._table.props("tabindex=0")
            if snap.active_row_key is not None:
                active_id = row_dom_id(self._grid_id, snap.active_row_key, -1)
                self._table.props(f'aria-activedescendant="{active_id}"')
            else:
                self._table.props(remove="aria-activedescendant")
        self._thead.clear()
        with self._thead:
            self._render_header(snap)
        self._render_rows(snap)

    def _render_rows(self, snap: GridSnapshot) -> None:
        self._snapshot = snap
        self._tbody.clear()
        with self._tbody:
            self._render_body(snap)
        self._pager.clear()
        with self._pager:
            self._render_pager(snap)

    def _render_header(self, snap: GridSnapshot) -> None:
        with ui.element("tr").props("role=row"):
            if snap.column_base == 1:
                with ui.element("th").props("role=columnheader").classes("checkbox-cell"):
                    state = {"all": True, "indeterminate": None}.get(snap.selection_state, False)
                    ui.checkbox(value=state, on_change=self._on_select_all_change)
            for col in snap.columns:
                with ui.element("th").props("role=columnheader").classes("cell heading-cell"):
                    ui.label(col.name).classes("column-title")
                    if col.sortable:
                        ui.button(
                            icon=SORT_ICONS.get(col.sort_direction, SORT_ICONS["none"]),
                            on_click=lambda _e, i=col.index: self._apply(self._engine.sort_by(i)),
                        ).props(f'flat dense aria-label="sort {col.sort_direction}"')
                    if col.filterable:
                        # filter inputs stay mounted while typing: only the rows re-render
                        ui.input(
                            value=col.filter_value,
                            on_change=lambda e, i=col.index: self._apply(
                                self._engine.set_filter(i, e.value or ""), header=False
                            ),
                        ).props("dense").classes("filter-input")

    def _render_body(self, snap: GridSnapshot) -> None:
        for r, row in enumerate(snap.rows):
            tr = ui.element("tr").props(f'role=row id="{row_dom_id(self._grid_id, row.key, row.data_index)}"')
            tr.classes("row" + (" selected-row" if row.selected else "") + (" pending-row" if row.pending else ""))
            if row.label:
                tr.props(f'aria-label="{row.label.replace(chr(34), chr(39))}"')
            if snap.row_selection != "none":
                tr.props(f"aria-selected={str(row.selected).lower()}")
            with tr:
                if snap.column_base == 1:
                    self._render_checkbox_cell(snap, r, row.key, row.selected, row.pending)
                for c, text in enumerate(row.cells):
                    self._render_cell(snap, c + snap.column_base, r, text, row.pending)

    def _render_checkbox_cell(self, snap: GridSnapshot, r: int, key: Optional[str], selected: bool, pending: bool) -> None:
        active = snap.is_active(0, r)
        with ui.element("td").props(f'role=gridcell id="{cell_dom_id(self._grid_id, 0, r)}"').classes("checkbox-cell"):
            box = ui.checkbox(value=selected).props(f"tabindex={0 if active else -1}")
            if pending or key is None:
                box.props("disable")
            else:
                box.on_value_change(lambda e, k=key: self._apply(self._engine.select_row(k, bool(e.value))))

    def _render_cell(self, snap: GridSnapshot, column: int, r: int, text: str, pending: bool) -> None:
        active = snap.is_active(column, r)
        editing = active and snap.editing
        td = ui.element("td").props(
            f'role=gridcell id="{cell_dom_id(self._grid_id, column, r)}" tabindex={0 if active and snap.row_selection != "aria" else -1}'
        )
        td.classes("cell" + (" editing" if editing else "") + (" active-cell" if active else ""))
        td.on("click", lambda _e, c=column, row=r: self._apply(self._engine.click((c, row))))
        td.on("dblclick", lambda _e, c=column, row=r: self._apply(self._engine.double_click((c, row))))
        with td:
            if editing:
                edit = ui.input(
                    value=snap.edit_value or "",
                    on_change=lambda e: self._engine.update_edit_value(e.value or ""),
                ).props("dense autofocus").classes("cell-edit")
                edit.on("keydown", self._on_input_keydown, js_handler=JS_EDIT_KEYDOWN)
            elif pending:
                ui.label("…").classes("cell-content pending")
            else:
                ui.label(text).classes("cell-content")

    def _render_pager(self, snap: GridSnapshot) -> None:
        state = pager_state(snap)
        if state is None:
            return
        prev_btn = ui.button("Previous", on_click=lambda _e: self._apply(self._engine.previous_page()))
        next_btn = ui.button("Next", on_click=lambda _e: self._apply(self._engine.next_page()))
        prev_btn.set_enabled(state["previous_enabled"])
        next_btn.set_enabled(state["next_enabled"])
        ui.label(state["label"]).classes("text-sm")

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    def _apply(self, result: CommandResult, *, header: bool = True) -> None:
        if result.notifications:
            logger.debug("grid notifications: %s", result.names())
        if header:
            self.render(result.snapshot)
        else:
            self._render_rows(result.snapshot)
        self._apply_focus(result.snapshot)

    def _apply_focus(self, snap: GridSnapshot) -> None:
        if snap.focus_request is None:
            return
        if snap.focus_request is FocusTarget.CONTAINER:
            js = f'document.getElementById("{self._table.html_id}")?.focus()'
        else:
            column, row = snap.active_cell
            selector = f"#{cell_dom_id(self._grid_id, column, row)}"
            if snap.focus_request is FocusTarget.EDIT_INPUT:
                selector += " input"
            elif snap.column_base == 1 and column == 0:
                selector += " [tabindex='0']"
            js = f'document.querySelector("{selector}")?.focus()'
            if snap.select_text_request:
                js += f'; document.querySelector("{selector}")?.select?.()'
        ui.run_javascript(js)

    def _on_select_all_change(self, e: Any) -> None:
        # None (indeterminate) is only ever a rendered state; a click on it selects all
        self._apply(self._engine.select_all(e.value is not False))

    def _on_body_keydown(self, e: Any) -> None:
        args: dict[str, Any] = e.args or {}
        key = args.get("key")
        if not key:
            return
        result = self._engine.key_down(str(key), shift=bool(args.get("shiftKey")), ctrl=bool(args.get("ctrlKey")))
        if result.handled or result.notifications:
            self._apply(result)

    def _on_input_keydown(self, e: Any) -> None:
        args: dict[str, Any] = e.args or {}
        key = args.get("key")
        if not key:
            return
        result = self._engine.key_down(str(key), shift=bool(args.get("shiftKey")))
        if result.handled or result.notifications:
            self._apply(result)

    def _on_focusout(self, e: Any) -> None:
        inside = bool(getattr(e, "args", False))
        result = self._engine.blur(inside)
        if result.notifications:
            self._apply(result)
