"""Unit tests for column profiling."""

from __future__ import annotations

from datetime import date

import pytest

from core.errors import ScrubTransformError
from core.types import LayoffRecord
from transforms.column_profile import profile_columns


def _record(industry: str | None, total: int | None, event_date: date | None) -> LayoffRecord:
    return LayoffRecord(
        company="Acme",
        location="SF Bay Area",
        industry=industry,
        total_laid_off=total,
        percentage_laid_off=None,
        event_date=event_date,
        stage="Series B",
        country="United States",
        funds_raised_millions=None,
    )


def test_profile_columns_counts_nulls_and_blanks() -> None:
    """Null and blank values should be counted separately."""
    rows = [
        _record("Retail", 1, None),
        _record(None, 2, None),
        _record("", 3, None),
    ]

    profile = profile_columns(rows, ["industry"])[0]

    assert (profile.row_count, profile.null_count, profile.blank_count) == (3, 1, 1)


def test_profile_columns_sorts_numbers_numerically() -> None:
    """Integer distinct values should order by magnitude, not text."""
    rows = [_record("Retail", 100, None), _record("Retail", 20, None), _record("Retail", 20, None)]

    profile = profile_columns(rows, ["total_laid_off"])[0]

    assert profile.distinct_values == ("20", "100")


def test_profile_columns_renders_dates_as_iso_text() -> None:
    """Dates should be reported in ISO form."""
    rows = [_record("Retail", 1, date(2023, 3, 6))]

    profile = profile_columns(rows, ["event_date"])[0]

    assert profile.distinct_values == ("2023-03-06",)


def test_profile_columns_raises_for_unknown_column() -> None:
    """Unknown columns should fail with a clear message."""
    with pytest.raises(ScrubTransformError):
        profile_columns([_record("Retail", 1, None)], ["sector"])
