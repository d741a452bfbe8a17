import logging

import pytest

from nicegrid.grid.events import (
    CellEdited,
    EventEmitter,
    FilterChanged,
    PageChanged,
    event_to_dict,
)


def test_handlers_receive_named_and_wildcard_events() -> None:
    emitter = EventEmitter()
    named: list = []
    everything: list = []
    emitter.on("pageChanged", named.append)
    emitter.on(None, everything.append)

    emitter.emit(PageChanged(2))
    emitter.emit(FilterChanged({0: "a"}))

    assert named == [PageChanged(2)]
    assert everything == [PageChanged(2), FilterChanged({0: "a"})]


def test_unknown_event_name_raises() -> None:
    with pytest.raises(ValueError):
        EventEmitter().on("rowClicked", lambda e: None)


def test_off_removes_handler() -> None:
    emitter = EventEmitter()
    seen: list = []
    emitter.on("pageChanged", seen.append)
    emitter.off("pageChanged", seen.append)
    emitter.emit(PageChanged(1))
    assert seen == []


def test_failing_handler_is_logged_and_others_still_run(caplog: pytest.LogCaptureFixture) -> None:
    emitter = EventEmitter()
    seen: list = []

    def boom(_event: object) -> None:
        raise RuntimeError("boom")

    emitter.on("cellEdited", boom)
    emitter.on("cellEdited", seen.append)
    with caplog.at_level(logging.ERROR, logger="nicegrid"):
        emitter.emit(CellEdited("v", 0, 0))
    assert len(seen) == 1
    assert "Error in cellEdited handler" in caplog.text


def test_event_to_dict() -> None:
    assert event_to_dict(CellEdited("new", 0, 3, "k1")) == {
        "type": "cellEdited",
        "value": "new",
        "column": 0,
        "row": 3,
        "row_key": "k1",
    }
