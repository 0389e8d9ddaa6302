"""Unit tests for text field trimming."""

from __future__ import annotations

from core.types import SourceLayoffRow
from transforms.text_normalization import trim_text_fields


def _row(company: str, country: str | None = "United States") -> SourceLayoffRow:
    return SourceLayoffRow(
        company=company,
        location="SF Bay Area",
        industry="Healthcare",
        total_laid_off=10,
        percentage_laid_off=None,
        event_date="3/6/2023",
        stage="Series E",
        country=country,
        funds_raised_millions=None,
    )


def test_trim_text_fields_strips_surrounding_whitespace() -> None:
    """Leading and trailing spaces should be removed from company names."""
    trimmed = trim_text_fields([_row(" Included Health ")])

    assert trimmed[0].company == "Included Health"


def test_trim_text_fields_preserves_null_values() -> None:
    """Null text fields should stay null."""
    trimmed = trim_text_fields([_row("Acme", country=None)])

    assert trimmed[0].country is None


def test_trim_text_fields_returns_unchanged_rows_as_is() -> None:
    """Rows with nothing to trim should pass through untouched."""
    row = _row("Acme")

    trimmed = trim_text_fields([row])

    assert trimmed[0] is row


def test_trim_text_fields_only_touches_requested_columns() -> None:
    """Columns outside the requested set should keep their whitespace."""
    trimmed = trim_text_fields([_row(" Acme ", country=" Canada ")], columns=("country",))

    assert (trimmed[0].company, trimmed[0].country) == (" Acme ", "Canada")
