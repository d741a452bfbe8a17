from nicegrid.grid.edit_session import EditSession, EditState
from nicegrid.grid.navigation import Cursor


def test_open_commit_returns_value_and_goes_idle() -> None:
    session = EditSession()
    assert session.open(Cursor(1, 0), "old")
    assert session.state is EditState.EDITING
    session.update("typed")
    commit = session.commit()
    assert commit is not None
    assert commit.value == "typed"
    assert commit.cursor == Cursor(1, 0)
    assert session.state is EditState.IDLE
    assert session.pending_value is None


def test_commit_with_explicit_value_overrides_buffer() -> None:
    session = EditSession()
    session.open(Cursor(0, 0), "old")
    commit = session.commit("new")
    assert commit is not None and commit.value == "new"


def test_only_one_session_at_a_time() -> None:
    session = EditSession()
    assert session.open(Cursor(0, 0), "a")
    assert not session.open(Cursor(1, 1), "b")
    assert session.target == Cursor(0, 0)


def test_cancel_and_idle_operations() -> None:
    session = EditSession()
    assert not session.cancel()
    assert session.commit() is None
    assert not session.update("x")
    session.open(Cursor(0, 0), "a")
    assert session.cancel()
    assert not session.active


def test_retarget_follows_row() -> None:
    session = EditSession()
    session.open(Cursor(1, 4), "a")
    session.retarget(Cursor(1, 0))
    assert session.target == Cursor(1, 0)
