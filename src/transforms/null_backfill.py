"""Sibling-row null backfill transform.

This module fills missing values in one column using a known value from
another row that shares the same join key. Donors are chosen through an
explicit join index so the first non-null value in input order wins.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Generic, Hashable, Sequence, TypeVar

from core.errors import ScrubTransformError
from core.logging_config import get_logger

RowT = TypeVar("RowT")

_LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class BackfillResult(Generic[RowT]):
    """Backfill output.

    Attributes:
        records: Rows after backfill, in input order.
        filled_count: Number of null values replaced.
        passes: Number of passes run until no value changed.
    """

    records: list[RowT]
    filled_count: int
    passes: int


def blank_to_null(records: Sequence[RowT], column: str) -> list[RowT]:
    """Replace empty-string sentinels with ``None`` in one column.

    Args:
        records: Rows to normalize.
        column: Target column name.

    Returns:
        Rows where blank values of ``column`` are ``None``.
    """
    _validate_columns(records, (column,))
    normalized: list[RowT] = []
    for record in records:
        value = getattr(record, column)
        if isinstance(value, str) and not value.strip():
            normalized.append(_with_value(record, column, None))
            continue
        normalized.append(record)
    return normalized


def backfill(
    records: Sequence[RowT],
    target_column: str,
    join_key: str,
) -> BackfillResult[RowT]:
    """Fill null target values from sibling rows sharing the join key.

    Passes repeat until one fills nothing.

    Args:
        records: Rows to backfill.
        target_column: Column whose nulls should be filled.
        join_key: Column used to correlate a row with its donors.

    Returns:
        Backfill result with filled rows and counters.

    Raises:
        ScrubTransformError: If either column is unknown.
    """
    _validate_columns(records, (target_column, join_key))
    current = list(records)
    filled_total = 0
    passes = 0
    while True:
        passes += 1
        join_index = build_join_index(
            current, target_column, join_key, log_conflicts=passes == 1
        )
        current, filled = _fill_from_index(current, join_index, target_column, join_key)
        filled_total += filled
        if filled == 0:
            break
    return BackfillResult(records=current, filled_count=filled_total, passes=passes)


def build_join_index(
    records: Sequence[object],
    target_column: str,
    join_key: str,
    log_conflicts: bool = True,
) -> dict[Hashable, Any]:
    """Map each join value to its first non-null target value.

    Conflicting donors are logged; the first value in input order wins.

    Args:
        records: Rows to index.
        target_column: Column providing donor values.
        join_key: Column providing join values.
        log_conflicts: Whether to warn about conflicting donors.

    Returns:
        Join value to donor value mapping.
    """
    join_index: dict[Hashable, Any] = {}
    conflicts: dict[Hashable, set[str]] = {}
    for record in records:
        join_value = getattr(record, join_key)
        donor_value = getattr(record, target_column)
        if join_value is None or donor_value is None:
            continue
        if join_value not in join_index:
            join_index[join_value] = donor_value
            continue
        if join_index[join_value] != donor_value:
            conflicts.setdefault(join_value, {str(join_index[join_value])}).add(str(donor_value))
    if not log_conflicts:
        return join_index
    for join_value, values in conflicts.items():
        _LOGGER.warning(
            "backfill_conflict",
            join_key=join_key,
            join_value=str(join_value),
            target_column=target_column,
            values=sorted(values),
            chosen=str(join_index[join_value]),
        )
    return join_index


def _fill_from_index(
    records: list[RowT],
    join_index: dict[Hashable, Any],
    target_column: str,
    join_key: str,
) -> tuple[list[RowT], int]:
    """Fill null targets whose join value has a donor."""
    filled_records: list[RowT] = []
    filled = 0
    for record in records:
        if getattr(record, target_column) is not None:
            filled_records.append(record)
            continue
        join_value = getattr(record, join_key)
        if join_value is None or join_value not in join_index:
            filled_records.append(record)
            continue
        filled_records.append(_with_value(record, target_column, join_index[join_value]))
        filled += 1
    return filled_records, filled


def _with_value(record: RowT, column: str, value: object) -> RowT:
    """Return a copy of a frozen dataclass row with one field updated."""
    return replace(record, **{column: value})  # type: ignore[type-var]


def _validate_columns(records: Sequence[object], columns: Sequence[str]) -> None:
    if not records:
        return
    missing = [name for name in columns if not hasattr(records[0], name)]
    if missing:
        raise ScrubTransformError(
            f"Unknown backfill columns: {', '.join(missing)}. "
            f"Use fields defined on {type(records[0]).__name__}."
        )
