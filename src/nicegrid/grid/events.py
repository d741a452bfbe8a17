"""Typed notifications emitted by the grid engine, and the listener registry."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import asdict, dataclass
from typing import Any, Callable, Optional, Union

from nicegrid.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class FilterChanged:
    """Active filter map (column index -> trimmed filter text)."""
    filters: dict[int, str]
    name = "filterChanged"


@dataclass(frozen=True)
class SortChanged:
    column: Optional[int]
    direction: str
    name = "sortChanged"


@dataclass(frozen=True)
class RowSelectionChanged:
    """Rows whose selected flag changed, plus the resulting aggregate."""
    keys: tuple[str, ...]
    selected: bool
    state: str
    count: int
    name = "rowSelectionChanged"


@dataclass(frozen=True)
class CellEdited:
    """Committed edit. ``column`` is the content column index (checkbox column excluded)."""
    value: str
    column: int
    row: int
    row_key: Optional[str] = None
    name = "cellEdited"


@dataclass(frozen=True)
class PageChanged:
    page: int
    name = "pageChanged"


@dataclass(frozen=True)
class ActiveCellChanged:
    column: int
    row: int
    name = "activeCellChanged"


@dataclass(frozen=True)
class EditStateChanged:
    active: bool
    name = "editStateChanged"


GridEvent = Union[
    FilterChanged,
    SortChanged,
    RowSelectionChanged,
    CellEdited,
    PageChanged,
    ActiveCellChanged,
    EditStateChanged,
]

EVENT_NAMES = frozenset(
    cls.name
    for cls in (
        FilterChanged,
        SortChanged,
        RowSelectionChanged,
        CellEdited,
        PageChanged,
        ActiveCellChanged,
        EditStateChanged,
    )
)

GridEventHandler = Callable[[GridEvent], None]


def event_to_dict(event: GridEvent) -> dict[str, Any]:
    """Serializable ``{"type": ..., **payload}`` form of an event."""
    return {"type": event.name, **asdict(event)}


class EventEmitter:
    """Synchronous in-process dispatch to registered handlers.

    Handlers run in registration order. A handler that raises is logged and
    skipped so the remaining handlers still receive the event.
    """

    def __init__(self) -> None:
        self._handlers: dict[Optional[str], list[GridEventHandler]] = defaultdict(list)

    def on(self, name: Optional[str], handler: GridEventHandler) -> None:
        """Register ``handler`` for events called ``name`` (None = every event)."""
        if name is not None and name not in EVENT_NAMES:
            raise ValueError(f"Unknown grid event {name!r}; expected one of {sorted(EVENT_NAMES)}")
        self._handlers[name].append(handler)

    def off(self, name: Optional[str], handler: GridEventHandler) -> None:
        handlers = self._handlers.get(name, [])
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, event: GridEvent) -> None:
        for handler in list(self._handlers.get(event.name, [])) + list(self._handlers.get(None, [])):
            try:
                handler(event)
            except Exception:
                logger.exception("Error in %s handler", event.name)
