"""Unit tests for unreported row pruning."""

from __future__ import annotations

from datetime import date

from core.types import LayoffRecord
from transforms.row_pruning import drop_unreported_rows


def _record(company: str, total: int | None, percentage: str | None) -> LayoffRecord:
    return LayoffRecord(
        company=company,
        location="SF Bay Area",
        industry="Retail",
        total_laid_off=total,
        percentage_laid_off=percentage,
        event_date=date(2023, 1, 4),
        stage="Series B",
        country="United States",
        funds_raised_millions=None,
    )


def test_drop_unreported_rows_keeps_rows_with_any_figure() -> None:
    """Only the row missing both layoff figures should be dropped."""
    records = [
        _record("A", 10, None),
        _record("B", None, "0.1"),
        _record("C", None, None),
    ]

    pruned = drop_unreported_rows(records)

    assert [record.company for record in pruned] == ["A", "B"]


def test_drop_unreported_rows_treats_zero_as_reported() -> None:
    """Zero is a reported figure, not a missing one."""
    pruned = drop_unreported_rows([_record("A", 0, None)])

    assert len(pruned) == 1


def test_drop_unreported_rows_is_idempotent() -> None:
    """Pruning already-pruned records should change nothing."""
    records = [_record("A", 10, None), _record("C", None, None)]

    once = drop_unreported_rows(records)

    assert drop_unreported_rows(once) == once
