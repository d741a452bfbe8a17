from nicegrid.grid.selection import SelectionState, SelectionTracker


def _tracker(keys: list[str]) -> SelectionTracker:
    tracker = SelectionTracker()
    tracker.retain(keys)
    return tracker


def test_select_all_then_deselect_one_is_indeterminate() -> None:
    tracker = _tracker(["a", "b", "c"])
    changed = tracker.set_all_selected(True, ["a", "b", "c"])
    assert changed == ["a", "b", "c"]
    assert tracker.aggregate_state() is SelectionState.ALL

    assert tracker.set_selected("b", False)
    assert tracker.aggregate_state() is SelectionState.INDETERMINATE
    assert tracker.selected_count == 2


def test_set_selected_reports_changes_only() -> None:
    tracker = _tracker(["a"])
    assert tracker.set_selected("a", True)
    assert not tracker.set_selected("a", True)
    assert tracker.selected_count == 1


def test_unknown_key_is_ignored() -> None:
    tracker = _tracker(["a"])
    assert not tracker.set_selected("zzz", True)
    assert tracker.selected_count == 0
    assert tracker.aggregate_state() is SelectionState.NONE


def test_retain_drops_missing_rows_and_recounts() -> None:
    tracker = _tracker(["a", "b", "c"])
    tracker.set_all_selected(True, ["a", "b", "c"])
    dropped = tracker.retain(["a", "d"])
    assert dropped == ["b", "c"]
    assert tracker.selected_count == 1
    assert tracker.total_count == 2
    assert tracker.aggregate_state() is SelectionState.INDETERMINATE


def test_empty_tracker_state_is_none() -> None:
    assert SelectionTracker().aggregate_state() is SelectionState.NONE


def test_clear_returns_previously_selected() -> None:
    tracker = _tracker(["a", "b"])
    tracker.set_selected("b", True)
    assert tracker.clear() == ["b"]
    assert tracker.selected_keys() == []
