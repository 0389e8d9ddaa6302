"""Whitespace normalization for text fields."""

from __future__ import annotations

from dataclasses import replace
from typing import Sequence, TypeVar

from core.constants import TEXT_COLUMNS

RowT = TypeVar("RowT")


def trim_text_fields(
    records: Sequence[RowT],
    columns: Sequence[str] = TEXT_COLUMNS,
) -> list[RowT]:
    """Strip leading and trailing whitespace from text fields.

    Args:
        records: Rows to normalize.
        columns: Text columns to trim; non-string values are left as-is.

    Returns:
        Rows with trimmed text values, in input order.
    """
    trimmed_records: list[RowT] = []
    for record in records:
        updates = _trimmed_updates(record, columns)
        if updates:
            trimmed_records.append(replace(record, **updates))  # type: ignore[type-var]
            continue
        trimmed_records.append(record)
    return trimmed_records


def _trimmed_updates(record: object, columns: Sequence[str]) -> dict[str, str]:
    """Collect changed field values for one row."""
    updates: dict[str, str] = {}
    for column in columns:
        value = getattr(record, column, None)
        if isinstance(value, str) and value != value.strip():
            updates[column] = value.strip()
    return updates
