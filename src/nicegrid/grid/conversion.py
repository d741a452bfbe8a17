# src/nicegrid/grid/conversion.py
"""Normalize host data into grid columns and rows.

Accepted row containers:
    - a list of cell sequences (kept as-is, so row identity is preserved)
    - a list of dicts (one row per dict, cells taken in column order)
    - a pandas DataFrame
    - a polars DataFrame (if polars is installed)

Dict and DataFrame input produces fresh row lists on every call; use
``GridConfig.row_id_column`` to keep row keys (and selection) stable across
reloads of such data.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Optional, TYPE_CHECKING, Union

from nicegrid.grid.config import ColumnConfig

# Optional pandas
try:  # pragma: no cover
    import pandas as _pd  # type: ignore[import]
    HAS_PANDAS = True
except Exception:  # pragma: no cover
    _pd = None  # type: ignore[assignment]
    HAS_PANDAS = False

# Optional polars
try:  # pragma: no cover
    import polars as _pl  # type: ignore[import]
    HAS_POLARS = True
except Exception:  # pragma: no cover
    _pl = None  # type: ignore[assignment]
    HAS_POLARS = False

if TYPE_CHECKING:
    import pandas as pd
    import polars as pl
else:
    pd = _pd  # type: ignore[assignment]
    pl = _pl  # type: ignore[assignment]

Row = Sequence[str]
ColumnLike = Union[ColumnConfig, Mapping[str, Any], str]
DataLike = Union[Sequence[Optional[Row]], Sequence[Mapping[str, Any]], "pd.DataFrame", "pl.DataFrame"]  # type: ignore[name-defined]


def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    if HAS_PANDAS and pd is not None and not isinstance(value, (str, list, tuple, dict)):
        try:
            if pd.isna(value):
                return ""
        except (TypeError, ValueError):
            pass
    return str(value)


def normalize_columns(columns: Sequence[ColumnLike]) -> list[ColumnConfig]:
    """Coerce column definitions (ColumnConfig, dict or plain name) to ColumnConfig."""
    result: list[ColumnConfig] = []
    for col in columns:
        if isinstance(col, ColumnConfig):
            result.append(col)
        elif isinstance(col, Mapping):
            result.append(ColumnConfig.from_dict(dict(col)))
        elif isinstance(col, str):
            result.append(ColumnConfig(name=col))
        else:
            raise TypeError(f"Unsupported column definition {col!r}: expected ColumnConfig, dict or str.")
    return result


def _merge_columns(names: list[str], columns: Optional[Sequence[ColumnLike]]) -> list[ColumnConfig]:
    if columns is None:
        return [ColumnConfig(name=str(n)) for n in names]
    return normalize_columns(columns)


def to_columns_and_rows(
    data: DataLike,
    columns: Optional[Sequence[ColumnLike]] = None,
) -> tuple[list[ColumnConfig], list[Optional[Row]]]:
    """Split ``data`` into column definitions and row cell sequences.

    Args:
        data: Row container (see module docstring).
        columns: Column definitions. Required for a list of sequences;
            inferred from keys / DataFrame columns otherwise. When given for
            dict or DataFrame input, cells are looked up by column name.

    Returns:
        ``(columns, rows)``. Sequence rows are returned unchanged (same
        objects); other inputs produce lists of strings.

    Raises:
        TypeError: If ``data`` is not a supported container.
        ValueError: If sequence rows are given without column definitions.
    """
    if HAS_PANDAS and pd is not None and isinstance(data, pd.DataFrame):
        cols = _merge_columns([str(c) for c in data.columns], columns)
        names = [c.name for c in cols] if columns is not None else list(data.columns)
        records = data.to_dict(orient="records")
        return cols, [[_cell_text(rec.get(n)) for n in names] for rec in records]

    if HAS_POLARS and pl is not None and isinstance(data, pl.DataFrame):
        cols = _merge_columns([str(c) for c in data.columns], columns)
        names = [c.name for c in cols]
        return cols, [[_cell_text(rec.get(n)) for n in names] for rec in data.to_dicts()]

    if isinstance(data, (str, bytes)) or not isinstance(data, Sequence):
        raise TypeError(
            "Unsupported data type: expected a list of rows, list[dict], "
            "pandas.DataFrame, or polars.DataFrame."
        )

    rows = list(data)
    present = [r for r in rows if r is not None]
    if present and all(isinstance(r, Mapping) for r in present):
        first = present[0]
        cols = _merge_columns([str(k) for k in first.keys()], columns)
        names = [c.name for c in cols]
        return cols, [None if r is None else [_cell_text(r.get(n)) for n in names] for r in rows]

    if columns is None:
        raise ValueError("Column definitions are required when rows are plain cell sequences.")
    return normalize_columns(columns), rows
