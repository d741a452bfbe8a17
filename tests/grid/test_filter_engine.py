from nicegrid.grid.config import ColumnConfig
from nicegrid.grid.filter_engine import compute_active_filters, filter_rows, matches


def _columns() -> list[ColumnConfig]:
    return [
        ColumnConfig("fruit", filterable=True),
        ColumnConfig("color", filterable=True),
        ColumnConfig("notes"),
    ]


def test_matches_is_and_across_columns() -> None:
    row = ["Apple", "Red", ""]
    assert matches(row, {0: "app"})
    assert not matches(row, {0: "app", 1: "blue"})


def test_matches_is_case_insensitive_substring() -> None:
    assert matches(["Pineapple", "Yellow"], {0: "APPLE", 1: "ell"})


def test_compute_active_filters_drops_blank_and_unfilterable() -> None:
    active = compute_active_filters(_columns(), {1: "  red ", 0: "   ", 2: "x", 7: "y"})
    assert active == {1: "red"}


def test_compute_active_filters_key_order() -> None:
    active = compute_active_filters(_columns(), {1: "r", 0: "a"})
    assert list(active) == [0, 1]


def test_filter_rows_preserves_order() -> None:
    rows = [["Apple", "Red"], ["Banana", "Yellow"], ["Crabapple", "Red"]]
    assert filter_rows(rows, {0: "apple"}) == [rows[0], rows[2]]
    assert filter_rows(rows, {}) == rows
