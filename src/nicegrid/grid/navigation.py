"""Keyboard navigation of the active cell.

Key names follow the browser ``KeyboardEvent.key`` values that NiceGUI passes
through (``"ArrowUp"``, ``"PageDown"``, ``" "`` for Space, ...).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple

ARROW_UP = "ArrowUp"
ARROW_DOWN = "ArrowDown"
ARROW_LEFT = "ArrowLeft"
ARROW_RIGHT = "ArrowRight"
HOME = "Home"
END = "End"
PAGE_UP = "PageUp"
PAGE_DOWN = "PageDown"
ENTER = "Enter"
SPACE = " "
ESCAPE = "Escape"
TAB = "Tab"

# "Spacebar" is what some older browsers report for the space key.
ACTIVATE_KEYS = frozenset({ENTER, SPACE, "Spacebar"})
NAVIGATION_KEYS = frozenset({ARROW_UP, ARROW_DOWN, ARROW_LEFT, ARROW_RIGHT, HOME, END, PAGE_UP, PAGE_DOWN})


class Cursor(NamedTuple):
    """``(column, row)`` position in the displayed view, 0-based."""
    column: int
    row: int


ORIGIN = Cursor(0, 0)


@dataclass(frozen=True)
class GridBounds:
    """Size of the displayed view, including any leading checkbox column."""
    column_count: int
    row_count: int

    @property
    def max_column(self) -> int:
        return max(0, self.column_count - 1)

    @property
    def max_row(self) -> int:
        return max(0, self.row_count - 1)

    def clamp(self, cursor: Cursor) -> Cursor:
        return Cursor(
            max(0, min(cursor.column, self.max_column)),
            max(0, min(cursor.row, self.max_row)),
        )

    def contains(self, cursor: Cursor) -> bool:
        return 0 <= cursor.column < self.column_count and 0 <= cursor.row < self.row_count


@dataclass(frozen=True)
class MoveResult:
    """Outcome of a navigation key.

    Attributes:
        cursor: The cursor after the key (unchanged if the key did not move it).
        changed: True if the cursor moved; the caller suppresses the key's
            default action and requests focus for the new cell.
        activate: True for Enter/Space, which request edit mode instead of moving.
    """
    cursor: Cursor
    changed: bool = False
    activate: bool = False


def move_cursor(
    cursor: Cursor,
    key: str,
    bounds: GridBounds,
    page_length: int,
    *,
    ctrl: bool = False,
) -> MoveResult:
    """Compute the cursor after a grid-level key press.

    All deltas clamp to the bounds; nothing wraps. Unknown keys leave the
    cursor unchanged.
    """
    column, row = cursor

    if key in ACTIVATE_KEYS:
        return MoveResult(cursor, changed=False, activate=True)

    if key == ARROW_UP:
        row -= 1
    elif key == ARROW_DOWN:
        row += 1
    elif key == ARROW_LEFT:
        column -= 1
    elif key == ARROW_RIGHT:
        column += 1
    elif key == HOME:
        column = 0
        if ctrl:
            row = 0
    elif key == END:
        column = bounds.max_column
        if ctrl:
            row = bounds.max_row
    elif key == PAGE_UP:
        row -= page_length
    elif key == PAGE_DOWN:
        row += page_length
    else:
        return MoveResult(cursor)

    new_cursor = bounds.clamp(Cursor(column, row))
    return MoveResult(new_cursor, changed=new_cursor != cursor)


def move_within_row(cursor: Cursor, shift: bool, bounds: GridBounds, *, min_column: int = 0) -> MoveResult:
    """Tab / Shift+Tab: one column right / left within the row, no wrap to adjacent rows."""
    step = -1 if shift else 1
    column = max(min_column, min(cursor.column + step, bounds.max_column))
    new_cursor = Cursor(column, cursor.row)
    return MoveResult(new_cursor, changed=new_cursor != cursor)
