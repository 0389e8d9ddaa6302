"""Key-tuple row deduplication transform.

This module ranks rows inside groups that share identical values across
a chosen set of key fields and keeps the first row of each group.
It is the first transform stage in the cleaning pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Hashable, Sequence, TypeVar

from core.errors import ScrubTransformError

RowT = TypeVar("RowT")


@dataclass(frozen=True)
class RankedRow(Generic[RowT]):
    """A row paired with its transient duplicate rank.

    Attributes:
        record: Original row.
        row_num: One-based rank among rows sharing the same key tuple.
    """

    record: RowT
    row_num: int


def rank_rows(records: Sequence[RowT], key_fields: Sequence[str]) -> list[int]:
    """Rank each row within its duplicate group.

    Ranks are assigned 1..N in input order inside every group, so
    repeated runs over the same input produce identical ranks. ``None``
    compares equal to ``None`` in the key tuple.

    Args:
        records: Rows to rank.
        key_fields: Ordered field names defining a duplicate group.

    Returns:
        Ranks aligned positionally with ``records``.

    Raises:
        ScrubTransformError: If a key field is missing on the rows.
    """
    _validate_key_fields(records, key_fields)
    group_sizes: dict[tuple[Hashable, ...], int] = {}
    ranks: list[int] = []
    for record in records:
        group_key = build_group_key(record, key_fields)
        rank = group_sizes.get(group_key, 0) + 1
        group_sizes[group_key] = rank
        ranks.append(rank)
    return ranks


def attach_row_numbers(
    records: Sequence[RowT],
    key_fields: Sequence[str],
) -> list[RankedRow[RowT]]:
    """Pair every row with its duplicate rank.

    Args:
        records: Rows to rank.
        key_fields: Ordered field names defining a duplicate group.

    Returns:
        Ranked rows in input order.
    """
    ranks = rank_rows(records, key_fields)
    return [RankedRow(record=record, row_num=rank) for record, rank in zip(records, ranks)]


def remove_duplicate_rows(records: Sequence[RowT], key_fields: Sequence[str]) -> list[RowT]:
    """Keep only the first row of every duplicate group.

    Args:
        records: Rows to deduplicate.
        key_fields: Ordered field names defining a duplicate group.

    Returns:
        Rank-1 rows in input order.
    """
    ranked_rows = attach_row_numbers(records, key_fields)
    return [ranked.record for ranked in ranked_rows if ranked.row_num == 1]


def find_duplicate_groups(
    records: Sequence[RowT],
    key_fields: Sequence[str],
) -> dict[tuple[Hashable, ...], int]:
    """Return key tuples occurring more than once with their counts.

    Args:
        records: Rows to inspect.
        key_fields: Ordered field names defining a duplicate group.

    Returns:
        Mapping of duplicated key tuple to occurrence count.
    """
    _validate_key_fields(records, key_fields)
    counts: dict[tuple[Hashable, ...], int] = {}
    for record in records:
        group_key = build_group_key(record, key_fields)
        counts[group_key] = counts.get(group_key, 0) + 1
    return {group_key: count for group_key, count in counts.items() if count > 1}


def build_group_key(record: object, key_fields: Sequence[str]) -> tuple[Hashable, ...]:
    """Build the hashable key tuple for one row."""
    return tuple(getattr(record, field_name) for field_name in key_fields)


def _validate_key_fields(records: Sequence[object], key_fields: Sequence[str]) -> None:
    """Check key fields are non-empty and present on the row type.

    Args:
        records: Rows to inspect.
        key_fields: Ordered field names defining a duplicate group.

    Raises:
        ScrubTransformError: If key fields are empty or unknown.
    """
    if not key_fields:
        raise ScrubTransformError(
            "Deduplication requires at least one key field. Pass the duplicate key tuple."
        )
    if not records:
        return
    missing = [name for name in key_fields if not hasattr(records[0], name)]
    if missing:
        raise ScrubTransformError(
            f"Unknown deduplication key fields: {', '.join(missing)}. "
            f"Use fields defined on {type(records[0]).__name__}."
        )
