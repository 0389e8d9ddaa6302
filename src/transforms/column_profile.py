"""Column profiling for manual data inspection.

This module summarizes null, blank, and distinct values per column,
mirroring the inspection queries run before each cleaning decision.
"""

from __future__ import annotations

from typing import Sequence

from core.errors import ScrubTransformError
from core.types import ColumnProfile


def profile_columns(rows: Sequence[object], columns: Sequence[str]) -> list[ColumnProfile]:
    """Profile each requested column.

    Args:
        rows: Rows to inspect.
        columns: Column names to summarize.

    Returns:
        One profile per column, in request order.

    Raises:
        ScrubTransformError: If a column is not defined on the rows.
    """
    if rows:
        missing = [column for column in columns if not hasattr(rows[0], column)]
        if missing:
            raise ScrubTransformError(
                f"Cannot profile unknown columns: {', '.join(missing)}. "
                f"Use fields defined on {type(rows[0]).__name__}."
            )
    return [_profile_column(rows, column) for column in columns]


def _profile_column(rows: Sequence[object], column: str) -> ColumnProfile:
    null_count = 0
    blank_count = 0
    distinct: dict[str, object] = {}
    for row in rows:
        value = getattr(row, column)
        if value is None:
            null_count += 1
            continue
        if isinstance(value, str) and not value.strip():
            blank_count += 1
        distinct[_render_value(value)] = value
    return ColumnProfile(
        column=column,
        row_count=len(rows),
        null_count=null_count,
        blank_count=blank_count,
        distinct_values=tuple(sorted(distinct, key=lambda text: _sort_key(distinct[text]))),
    )


def _sort_key(value: object) -> tuple[int, float, str]:
    if isinstance(value, (int, float)):
        return (0, float(value), "")
    return (1, 0.0, _render_value(value))


def _render_value(value: object) -> str:
    if hasattr(value, "isoformat"):
        return str(value.isoformat())  # type: ignore[attr-defined]
    return str(value)
