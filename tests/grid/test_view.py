"""Smoke tests for GridView with a mocked NiceGUI ``ui``."""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

import nicegrid.grid.view as view_mod
from nicegrid.grid.config import ColumnConfig, GridConfig
from nicegrid.grid.engine import GridEngine
from nicegrid.grid.view import GridView, cell_dom_id, pager_state, row_dom_id


def _engine(**cfg: object) -> GridEngine:
    columns = [ColumnConfig("name", filterable=True, editable=True), ColumnConfig("city")]
    rows = [[f"n{i}", f"c{i}"] for i in range(45)]
    return GridEngine(GridConfig(page_length=20, **cfg), columns, rows)  # type: ignore[arg-type]


@pytest.fixture
def fake_ui(monkeypatch: pytest.MonkeyPatch) -> MagicMock:
    fake = MagicMock()
    monkeypatch.setattr(view_mod, "ui", fake, raising=True)
    return fake


def test_cell_dom_id() -> None:
    assert cell_dom_id("g", 2, 7) == "g-cell-2-7"


def test_pager_state_hidden_for_single_page() -> None:
    assert pager_state(_engine().snapshot()) is None


def test_pager_state_labels_and_bounds() -> None:
    engine = _engine(paginate=True)
    state = pager_state(engine.snapshot())
    assert state == {"previous_enabled": False, "next_enabled": True, "label": "Page 1 of 3"}
    state = pager_state(engine.set_page(3).snapshot)
    assert state is not None
    assert state["previous_enabled"] and not state["next_enabled"]


@pytest.mark.requires_nicegui
def test_view_renders_and_moves_focus(fake_ui: MagicMock) -> None:
    engine = _engine(paginate=True)
    view = GridView(engine)
    assert view.engine is engine
    assert fake_ui.element.called

    view._on_body_keydown(SimpleNamespace(args={"key": "ArrowRight"}))
    assert engine.active_cell == (1, 0)
    js = fake_ui.run_javascript.call_args[0][0]
    assert cell_dom_id(view._grid_id, 1, 0) in js


@pytest.mark.requires_nicegui
def test_view_edit_focus_selects_text(fake_ui: MagicMock) -> None:
    engine = _engine()
    view = GridView(engine)
    view._apply(engine.double_click((1, 2)))
    js = fake_ui.run_javascript.call_args[0][0]
    assert f"#{cell_dom_id(view._grid_id, 1, 2)} input" in js
    assert "select" in js

    view._on_focusout(SimpleNamespace(args=False))
    assert not engine.editing


@pytest.mark.requires_nicegui
def test_view_ignores_unhandled_keys(fake_ui: MagicMock) -> None:
    engine = _engine()
    view = GridView(engine)
    fake_ui.run_javascript.reset_mock()
    view._on_body_keydown(SimpleNamespace(args={"key": "q"}))
    view._on_body_keydown(SimpleNamespace(args={}))
    assert not fake_ui.run_javascript.called


def test_row_dom_id_is_unique_for_pending_rows() -> None:
    assert row_dom_id("g", "ab12", 0) == "g-row-ab12"
    assert row_dom_id("g", None, 3) != row_dom_id("g", None, 4)


@pytest.mark.requires_nicegui
def test_select_all_checkbox_from_none_selects_every_row(fake_ui: MagicMock) -> None:
    engine = _engine()
    view = GridView(engine)
    view._on_select_all_change(SimpleNamespace(value=None))
    assert engine.snapshot().selection_state == "all"
    view._on_select_all_change(SimpleNamespace(value=False))
    assert engine.snapshot().selection_state == "none"
    view._on_select_all_change(SimpleNamespace(value=True))
    assert engine.snapshot().selected_count == 45


@pytest.mark.requires_nicegui
def test_aria_activedescendant_removed_without_active_row(fake_ui: MagicMock) -> None:
    engine = GridEngine(GridConfig(row_selection="aria"), [ColumnConfig("name")], [])
    view = GridView(engine)
    view._table.props.assert_any_call(remove="aria-activedescendant")
