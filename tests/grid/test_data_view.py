import pytest

from nicegrid.grid.config import ColumnConfig
from nicegrid.grid.data_view import DataView
from nicegrid.grid.sort_engine import NO_SORT, SortDirection, SortSpec

COLS = [ColumnConfig("name", filterable=True), ColumnConfig("city", filterable=True)]


def test_same_row_objects_keep_their_keys() -> None:
    rows = [["Alice", "Paris"], ["Bob", "Rome"]]
    view = DataView()
    view.load(COLS, rows)
    keys = view.keys()

    result = view.load(COLS, list(rows))
    assert result.unchanged
    assert view.keys() == keys


def test_equal_cells_get_distinct_keys() -> None:
    rows = [["x", "y"], ["x", "y"]]
    view = DataView()
    view.load(COLS, rows)
    assert len(set(view.keys())) == 2


def test_reload_retires_missing_rows() -> None:
    a, b, c = ["a", "1"], ["b", "2"], ["c", "3"]
    view = DataView()
    view.load(COLS, [a, b])
    key_a, key_b = view.keys()

    result = view.load(COLS, [a, c])
    assert not result.unchanged
    assert result.retired_keys == (key_b,)
    assert view.keys()[0] == key_a
    assert len(result.added_keys) == 1
    assert not view.has_key(key_b)


def test_row_id_column_keys_survive_fresh_objects() -> None:
    view = DataView(row_id_column=0)
    view.load(COLS, [["1", "Paris"], ["2", "Rome"]])
    assert view.keys() == ["1", "2"]
    result = view.load(COLS, [["2", "Rome"], ["3", "Oslo"]])
    assert result.retired_keys == ("1",)
    assert result.added_keys == ("3",)


def test_structural_change_is_reported() -> None:
    view = DataView()
    view.load(COLS, [["a", "b"]])
    result = view.load([ColumnConfig("only")], [["a"]])
    assert result.structural


@pytest.mark.parametrize(
    "rows, message",
    [
        ([["a"]], "expected 2"),
        ([None], "virtualized"),
    ],
)
def test_invalid_rows_raise_and_leave_state_untouched(rows: list, message: str) -> None:
    view = DataView()
    view.load(COLS, [["a", "b"]])
    before = view.keys()
    with pytest.raises(ValueError, match=message):
        view.load(COLS, rows)
    assert view.keys() == before


def test_same_object_twice_raises() -> None:
    row = ["a", "b"]
    with pytest.raises(ValueError, match="same object"):
        DataView().load(COLS, [row, row])


def test_duplicate_row_id_raises() -> None:
    with pytest.raises(ValueError, match="Duplicate row id"):
        DataView(row_id_column=0).load(COLS, [["1", "a"], ["1", "b"]])


def test_virtualized_pads_pending_rows() -> None:
    view = DataView()
    view.load(COLS, [["a", "b"], None], total_rows=5, virtualized=True)
    records = view.records
    assert len(records) == 5
    assert [r.pending for r in records] == [False, True, True, True, True]
    assert view.loaded_row_count == 1
    assert view.total_rows == 5


def test_project_filters_then_sorts() -> None:
    rows = [["Carol", "Paris"], ["alice", "Rome"], ["Bob", "Paris"]]
    view = DataView()
    view.load(COLS, rows)
    projected = view.project(SortSpec(0, SortDirection.ASCENDING), {1: "paris"})
    assert [r.cells[0] for r in projected] == ["Bob", "Carol"]
    assert [r.data_index for r in projected] == [2, 0]

    untouched = view.project(SortSpec(0, SortDirection.ASCENDING), {1: "paris"}, apply_sort=False, apply_filter=False)
    assert [r.cells[0] for r in untouched] == ["Carol", "alice", "Bob"]
    assert [r.cells[0] for r in view.project(NO_SORT, {})] == ["Carol", "alice", "Bob"]
