"""Unit tests for sibling-row null backfill."""

from __future__ import annotations

from datetime import date

import pytest

from core.errors import ScrubTransformError
from core.types import LayoffRecord
from transforms.null_backfill import backfill, blank_to_null, build_join_index


def _record(company: str, industry: str | None) -> LayoffRecord:
    return LayoffRecord(
        company=company,
        location="SF Bay Area",
        industry=industry,
        total_laid_off=10,
        percentage_laid_off=None,
        event_date=date(2023, 3, 6),
        stage="Post-IPO",
        country="United States",
        funds_raised_millions=None,
    )


def test_backfill_fills_from_sibling_and_leaves_lonely_nulls() -> None:
    """Acme nulls should take Retail; Beta has no donor and stays null."""
    records = [_record("Acme", None), _record("Acme", "Retail"), _record("Beta", None)]

    result = backfill(records, "industry", "company")

    assert [record.industry for record in result.records] == ["Retail", "Retail", None]


def test_backfill_never_overwrites_non_null_values() -> None:
    """Existing values should survive even when siblings disagree."""
    records = [_record("Acme", "Retail"), _record("Acme", "Travel")]

    result = backfill(records, "industry", "company")

    assert [record.industry for record in result.records] == ["Retail", "Travel"]


def test_backfill_prefers_first_non_null_donor_in_input_order() -> None:
    """Conflicting donors should resolve to the first value encountered."""
    records = [_record("Acme", None), _record("Acme", "Travel"), _record("Acme", "Retail")]

    result = backfill(records, "industry", "company")

    assert result.records[0].industry == "Travel"


def test_backfill_leaves_no_null_non_null_disagreement_in_donor_groups() -> None:
    """Every key group with a donor should end fully populated."""
    records = [
        _record("Acme", None),
        _record("Beta", "Media"),
        _record("Acme", "Retail"),
        _record("Beta", None),
        _record("Acme", None),
    ]

    result = backfill(records, "industry", "company")

    assert all(record.industry is not None for record in result.records)


def test_backfill_reports_filled_count_and_converges() -> None:
    """Backfill should count filled values and stop on an unchanged pass."""
    records = [_record("Acme", None), _record("Acme", "Retail"), _record("Acme", None)]

    result = backfill(records, "industry", "company")

    assert (result.filled_count, result.passes) == (2, 2)


def test_backfill_is_idempotent() -> None:
    """A second backfill over converged output should change nothing."""
    records = [_record("Acme", None), _record("Acme", "Retail"), _record("Beta", None)]

    once = backfill(records, "industry", "company")
    twice = backfill(once.records, "industry", "company")

    assert twice.records == once.records and twice.filled_count == 0


def test_backfill_ignores_empty_strings_until_normalized() -> None:
    """Only true nulls count as missing, so blanks must be normalized first."""
    records = [_record("Acme", ""), _record("Acme", "Retail")]

    untouched = backfill(records, "industry", "company")
    normalized = backfill(blank_to_null(records, "industry"), "industry", "company")

    assert untouched.records[0].industry == "" and normalized.records[0].industry == "Retail"


def test_blank_to_null_converts_whitespace_only_values() -> None:
    """Whitespace-only values are empty sentinels too."""
    records = [_record("Acme", "   "), _record("Beta", "Media")]

    normalized = blank_to_null(records, "industry")

    assert [record.industry for record in normalized] == [None, "Media"]


def test_build_join_index_skips_null_join_values() -> None:
    """Rows without a join value should neither donate nor receive."""
    records = [_record("Acme", "Retail")]

    join_index = build_join_index(records, "industry", "company")

    assert join_index == {"Acme": "Retail"}


def test_backfill_raises_for_unknown_column() -> None:
    """Unknown target columns should fail loudly."""
    with pytest.raises(ScrubTransformError):
        backfill([_record("Acme", None)], "sector", "company")
