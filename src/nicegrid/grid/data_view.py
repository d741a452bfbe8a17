"""Raw grid data, row keys, and the sorted + filtered projection.

Each row gets a synthetic key the first time it is seen. By default identity is
the row object itself: two rows with equal cells are distinct, and passing the
same list object again keeps its key. The key table holds a reference to every
live row, so an ``id()`` can only match a row that is still present. Keys of rows
missing from a new ``load`` are retired explicitly.

With ``row_id_column`` set, the cell in that column is the key instead, which
keeps keys stable across reloads that build fresh row objects (DataFrames,
server refetches).
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass, field
from typing import Mapping, Optional, Sequence

from nicegrid.grid.config import ColumnConfig
from nicegrid.grid.filter_engine import filter_rows
from nicegrid.grid.sort_engine import SortSpec, sort_rows
from nicegrid.utils.logging import get_logger

logger = get_logger(__name__)

Row = Sequence[str]


@dataclass(frozen=True)
class RowRecord:
    """A loaded row (or pending placeholder) with its key and position in the raw data."""
    key: Optional[str]
    cells: Sequence[str]
    data_index: int
    pending: bool = False


@dataclass(frozen=True)
class LoadResult:
    """What changed in a ``DataView.load`` call."""
    unchanged: bool = False
    structural: bool = False
    added_keys: tuple[str, ...] = ()
    retired_keys: tuple[str, ...] = field(default_factory=tuple)


class DataView:
    def __init__(self, row_id_column: Optional[int] = None) -> None:
        self._row_id_column = row_id_column
        self._columns: list[ColumnConfig] = []
        self._rows: list[Optional[Row]] = []
        self._total_rows: Optional[int] = None
        self._virtualized = False
        self._records: list[RowRecord] = []

        # id(row) -> (row, key); the row reference keeps the id valid
        self._identity_keys: dict[int, tuple[Row, str]] = {}
        self._live_keys: set[str] = set()

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def columns(self) -> list[ColumnConfig]:
        return list(self._columns)

    @property
    def column_count(self) -> int:
        return len(self._columns)

    @property
    def records(self) -> list[RowRecord]:
        """Loaded rows in data order, followed by pending placeholders."""
        return list(self._records)

    @property
    def loaded_row_count(self) -> int:
        return sum(1 for r in self._records if not r.pending)

    @property
    def total_rows(self) -> int:
        """Server-known total if one was supplied, else the number of records."""
        if self._total_rows is not None:
            return max(self._total_rows, len(self._records))
        return len(self._records)

    def keys(self) -> list[str]:
        return [r.key for r in self._records if r.key is not None]

    def has_key(self, key: str) -> bool:
        return key in self._live_keys

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(
        self,
        columns: Sequence[ColumnConfig],
        rows: Sequence[Optional[Row]],
        *,
        total_rows: Optional[int] = None,
        virtualized: bool = False,
    ) -> LoadResult:
        """Replace the data set.

        Raises:
            ValueError: If a row's length differs from the column count, a
                placeholder row is given outside virtualized mode, the same
                row object or row id appears twice, or ``row_id_column`` is
                out of range. Nothing is modified in that case.
        """
        columns = list(columns)
        rows = list(rows)
        self._validate(columns, rows, virtualized)

        unchanged = (
            columns == self._columns
            and len(rows) == len(self._rows)
            and all(a is b for a, b in zip(rows, self._rows))
            and total_rows == self._total_rows
            and virtualized == self._virtualized
        )
        if unchanged:
            return LoadResult(unchanged=True)

        structural = len(columns) != len(self._columns)

        new_identity: dict[int, tuple[Row, str]] = {}
        records: list[RowRecord] = []
        added: list[str] = []
        taken: set[str] = set()

        for i, row in enumerate(rows):
            if row is None:
                records.append(RowRecord(None, ("",) * len(columns), i, pending=True))
                continue
            if self._row_id_column is not None:
                key = str(row[self._row_id_column])
            else:
                known = self._identity_keys.get(id(row))
                key = known[1] if known is not None and known[0] is row else self._new_key(taken)
                new_identity[id(row)] = (row, key)
                taken.add(key)
            if key not in self._live_keys:
                added.append(key)
            records.append(RowRecord(key, row, i))

        if virtualized and total_rows is not None:
            for i in range(len(rows), total_rows):
                records.append(RowRecord(None, ("",) * len(columns), i, pending=True))

        new_live = {r.key for r in records if r.key is not None}
        retired = tuple(k for k in self._live_keys if k not in new_live)

        self._columns = columns
        self._rows = rows
        self._total_rows = total_rows
        self._virtualized = virtualized
        self._records = records
        self._identity_keys = new_identity
        self._live_keys = new_live

        logger.debug(
            "load rows=%s pending=%s added=%s retired=%s structural=%s",
            len(rows),
            len(records) - len(new_live),
            len(added),
            len(retired),
            structural,
        )
        return LoadResult(
            unchanged=False,
            structural=structural,
            added_keys=tuple(added),
            retired_keys=retired,
        )

    def _new_key(self, taken: set[str]) -> str:
        key = secrets.token_hex(4)
        while key in self._live_keys or key in taken:
            key = secrets.token_hex(4)
        return key

    def _validate(self, columns: list[ColumnConfig], rows: list[Optional[Row]], virtualized: bool) -> None:
        n = len(columns)
        if self._row_id_column is not None and rows and not 0 <= self._row_id_column < n:
            raise ValueError(f"row_id_column {self._row_id_column} is out of range for {n} columns")
        seen_ids: set[int] = set()
        seen_values: set[str] = set()
        for i, row in enumerate(rows):
            if row is None:
                if not virtualized:
                    raise ValueError(f"Row {i} is None; placeholder rows require virtualized=True")
                continue
            if isinstance(row, (str, bytes)) or len(row) != n:
                length = len(row) if not isinstance(row, (str, bytes)) else "a string"
                raise ValueError(f"Row {i} has {length} cells, expected {n} (one per column)")
            if self._row_id_column is not None:
                value = str(row[self._row_id_column])
                if value in seen_values:
                    raise ValueError(f"Duplicate row id {value!r} in column {self._row_id_column} (row {i})")
                seen_values.add(value)
            else:
                if id(row) in seen_ids:
                    raise ValueError(f"Row {i} is the same object as an earlier row; rows must be distinct objects")
                seen_ids.add(id(row))

    # ------------------------------------------------------------------
    # Projection
    # ------------------------------------------------------------------

    def project(
        self,
        sort: SortSpec,
        filters: Mapping[int, str],
        *,
        apply_sort: bool = True,
        apply_filter: bool = True,
    ) -> list[RowRecord]:
        """Sorted-then-filtered records. Pure: recomputed from current data each call."""
        records = self._records
        if apply_filter and filters:
            records = filter_rows(records, filters, cells=lambda r: r.cells)
        if apply_sort and sort.active:
            records = sort_rows(records, sort.column_index, sort.direction, cells=lambda r: r.cells)
        return list(records)
