"""Unit tests for strict event date parsing."""

from __future__ import annotations

from datetime import date

import pytest

from core.errors import MalformedDateError
from core.types import SourceLayoffRow
from transforms.date_parsing import parse_event_date, parse_event_dates


def _row(event_date: str | None, source_line: int = 2) -> SourceLayoffRow:
    return SourceLayoffRow(
        company="Zillow",
        location="Seattle",
        industry="Real Estate",
        total_laid_off=300,
        percentage_laid_off="0.05",
        event_date=event_date,
        stage="Post-IPO",
        country="United States",
        funds_raised_millions=97,
        source_line=source_line,
    )


def test_parse_event_date_reads_month_first_text() -> None:
    """Dates are month first with four-digit years."""
    assert parse_event_date("3/6/2023") == date(2023, 3, 6)


def test_parse_event_date_accepts_zero_padded_parts() -> None:
    """Zero-padded month and day values should parse too."""
    assert parse_event_date("03/06/2023") == date(2023, 3, 6)


def test_parse_event_date_keeps_missing_dates_null() -> None:
    """A null date should stay null rather than fail."""
    assert parse_event_date(None) is None


def test_parse_event_dates_carries_every_other_field() -> None:
    """Typed records should keep the non-date fields of the source row."""
    records = parse_event_dates([_row("2/10/2023")])

    assert (records[0].company, records[0].funds_raised_millions, records[0].source_line) == (
        "Zillow",
        97,
        2,
    )


def test_parse_event_dates_raises_for_iso_dates() -> None:
    """Dates in another layout should abort the run."""
    with pytest.raises(MalformedDateError, match="source line 7"):
        parse_event_dates([_row("2023-02-10", source_line=7)])


def test_parse_event_dates_raises_for_impossible_dates() -> None:
    """Calendar-invalid values should not parse."""
    with pytest.raises(MalformedDateError):
        parse_event_dates([_row("2/30/2023")])
