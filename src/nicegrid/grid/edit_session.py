"""Edit-mode state machine for a single grid cell.

States::

    IDLE --open(cursor, value)--> EDITING
    EDITING --commit()--> IDLE   (returns the committed value)
    EDITING --cancel()--> IDLE   (pending value discarded)

Only one cell can be in edit mode; ``open`` is refused while a session is
active, so the previous session must be committed or cancelled first. The
editability checks (grid flag, column flag) belong to the caller, which knows
the columns.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from nicegrid.grid.navigation import Cursor


class EditState(Enum):
    IDLE = "idle"
    EDITING = "editing"


@dataclass(frozen=True)
class EditCommit:
    """Value and target of a committed edit."""
    cursor: Cursor
    value: str


class EditSession:
    def __init__(self) -> None:
        self._state = EditState.IDLE
        self._target: Optional[Cursor] = None
        self._pending: Optional[str] = None

    @property
    def state(self) -> EditState:
        return self._state

    @property
    def active(self) -> bool:
        return self._state is EditState.EDITING

    @property
    def target(self) -> Optional[Cursor]:
        return self._target

    @property
    def pending_value(self) -> Optional[str]:
        return self._pending

    def open(self, cursor: Cursor, value: str) -> bool:
        """Start editing ``cursor`` with ``value`` in the edit buffer.

        Returns False (and changes nothing) if a session is already active.
        """
        if self.active:
            return False
        self._state = EditState.EDITING
        self._target = cursor
        self._pending = value
        return True

    def update(self, value: str) -> bool:
        """Replace the edit buffer. Ignored when idle."""
        if not self.active:
            return False
        self._pending = value
        return True

    def retarget(self, cursor: Cursor) -> None:
        """Follow the edited row when the view reorders around it."""
        if self.active:
            self._target = cursor

    def commit(self, value: Optional[str] = None) -> Optional[EditCommit]:
        """Close the session keeping the edit.

        Args:
            value: Final buffer content; defaults to the pending value.

        Returns:
            The committed edit, or None if no session was active.
        """
        if not self.active or self._target is None:
            return None
        final = self._pending if value is None else value
        result = EditCommit(self._target, final if final is not None else "")
        self._reset()
        return result

    def cancel(self) -> bool:
        """Close the session discarding the edit. Returns False if idle."""
        if not self.active:
            return False
        self._reset()
        return True

    def _reset(self) -> None:
        self._state = EditState.IDLE
        self._target = None
        self._pending = None
