"""Row pruning for records without usable layoff figures."""

from __future__ import annotations

from typing import Iterable

from core.types import LayoffRecord


def drop_unreported_rows(records: Iterable[LayoffRecord]) -> list[LayoffRecord]:
    """Drop records where both layoff figures are missing.

    Args:
        records: Records to prune.

    Returns:
        Records with at least one of ``total_laid_off`` or
        ``percentage_laid_off`` present.
    """
    return [record for record in records if has_reported_layoffs(record)]


def has_reported_layoffs(record: LayoffRecord) -> bool:
    """Return whether a record carries any layoff figure."""
    return record.total_laid_off is not None or record.percentage_laid_off is not None
