"""Row selection tracking keyed by synthetic row keys."""

from __future__ import annotations

from enum import Enum
from typing import Iterable

from nicegrid.utils.logging import get_logger

logger = get_logger(__name__)


class SelectionState(Enum):
    """Aggregate selection summary, used for the select-all checkbox."""
    NONE = "none"
    ALL = "all"
    INDETERMINATE = "indeterminate"


class SelectionTracker:
    """Owns the per-row selected flags and the selected count.

    The count is maintained incrementally so ``aggregate_state()`` is O(1).
    Whenever the row set is replaced (``retain``), the count is re-derived
    from the surviving entries instead of trusting the old counter.
    """

    def __init__(self) -> None:
        self._selected: dict[str, bool] = {}
        self._known: set[str] = set()
        self._count: int = 0

    @property
    def selected_count(self) -> int:
        return self._count

    @property
    def total_count(self) -> int:
        return len(self._known)

    def is_selected(self, key: str) -> bool:
        return self._selected.get(key, False)

    def selected_keys(self) -> list[str]:
        return [k for k, v in self._selected.items() if v]

    def set_selected(self, key: str, selected: bool) -> bool:
        """Set one row's flag. Returns True if the flag changed.

        Unknown keys are ignored.
        """
        if key not in self._known:
            logger.debug("set_selected ignored unknown row key=%r", key)
            return False
        previous = self._selected.get(key, False)
        if previous == selected:
            return False
        self._selected[key] = selected
        self._count += 1 if selected else -1
        return True

    def set_all_selected(self, selected: bool, keys: Iterable[str]) -> list[str]:
        """Set every given row to ``selected``. Returns the keys that changed."""
        changed: list[str] = []
        for key in keys:
            if self.set_selected(key, selected):
                changed.append(key)
        return changed

    def aggregate_state(self) -> SelectionState:
        if self._count == 0:
            return SelectionState.NONE
        if self._count == len(self._known):
            return SelectionState.ALL
        return SelectionState.INDETERMINATE

    def retain(self, keys: Iterable[str]) -> list[str]:
        """Adopt ``keys`` as the current row set.

        Entries for rows no longer present are dropped; new rows start
        unselected. Returns the keys that were selected and got dropped.
        """
        self._known = set(keys)
        dropped = [k for k, v in self._selected.items() if v and k not in self._known]
        self._selected = {k: v for k, v in self._selected.items() if k in self._known}
        self._count = sum(1 for v in self._selected.values() if v)
        return dropped

    def clear(self) -> list[str]:
        """Deselect every row. Returns the keys that were selected."""
        cleared = self.selected_keys()
        self._selected = {}
        self._count = 0
        return cleared
