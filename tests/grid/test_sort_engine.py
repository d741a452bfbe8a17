from nicegrid.grid.sort_engine import (
    NO_SORT,
    SortDirection,
    SortSpec,
    next_sort_spec,
    sort_rows,
)


def test_sort_is_stable_for_equal_cells() -> None:
    rows = [("b", "x"), ("b", "y")]
    result = sort_rows(rows, 0, SortDirection.ASCENDING)
    assert [r[1] for r in result] == ["x", "y"]


def test_sort_descending_keeps_ties_in_original_order() -> None:
    rows = [("a", "1"), ("b", "2"), ("a", "3"), ("b", "4")]
    result = sort_rows(rows, 0, SortDirection.DESCENDING)
    assert [r[1] for r in result] == ["2", "4", "1", "3"]


def test_sort_is_case_insensitive() -> None:
    rows = [["banana"], ["Apple"], ["cherry"]]
    result = sort_rows(rows, 0, SortDirection.ASCENDING)
    assert [r[0] for r in result] == ["Apple", "banana", "cherry"]


def test_sort_none_keeps_identity_order_and_returns_new_list() -> None:
    rows = [["b"], ["a"]]
    result = sort_rows(rows, 0, SortDirection.NONE)
    assert result == rows
    assert result is not rows
    assert sort_rows(rows, None, SortDirection.ASCENDING) == rows


def test_sort_with_cell_accessor() -> None:
    records = [{"cells": ["z"]}, {"cells": ["m"]}]
    result = sort_rows(records, 0, SortDirection.ASCENDING, cells=lambda r: r["cells"])
    assert result[0]["cells"] == ["m"]


def test_next_sort_spec_toggle_rule() -> None:
    spec = next_sort_spec(NO_SORT, 2)
    assert spec == SortSpec(2, SortDirection.ASCENDING)

    spec = next_sort_spec(spec, 2)
    assert spec == SortSpec(2, SortDirection.DESCENDING)

    spec = next_sort_spec(spec, 2)
    assert spec == SortSpec(2, SortDirection.ASCENDING)

    spec = next_sort_spec(spec, 3)
    assert spec == SortSpec(3, SortDirection.ASCENDING)
    assert spec.direction_for(2) is SortDirection.NONE


def test_sort_spec_to_dict() -> None:
    assert NO_SORT.to_dict() == {"column": None, "direction": "none"}
    assert not NO_SORT.active
    assert SortSpec(1, SortDirection.DESCENDING).to_dict() == {"column": 1, "direction": "descending"}
