"""Strict event date conversion.

This module converts source rows with ``MM/DD/YYYY`` date text into
typed layoff records. Unparseable dates abort the run.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Iterable

from core.constants import SOURCE_DATE_FORMAT
from core.errors import MalformedDateError
from core.types import LayoffRecord, SourceLayoffRow


def parse_event_dates(rows: Iterable[SourceLayoffRow]) -> list[LayoffRecord]:
    """Convert date text on every row into a calendar date.

    Args:
        rows: Source rows carrying date text.

    Returns:
        Typed records in input order.

    Raises:
        MalformedDateError: If any non-null date text does not parse.
    """
    return [_convert_row(row) for row in rows]


def parse_event_date(raw_value: str | None) -> date | None:
    """Parse one ``MM/DD/YYYY`` value.

    Args:
        raw_value: Date text or ``None``.

    Returns:
        Parsed date, or ``None`` for a missing value.

    Raises:
        ValueError: If the text does not match the fixed pattern.
    """
    if raw_value is None:
        return None
    return datetime.strptime(raw_value, SOURCE_DATE_FORMAT).date()


def _convert_row(row: SourceLayoffRow) -> LayoffRecord:
    try:
        event_date = parse_event_date(row.event_date)
    except ValueError as error:
        raise MalformedDateError(
            f"Malformed date '{row.event_date}' at source line {row.source_line} "
            f"(company '{row.company}'): expected MM/DD/YYYY. "
            "Fix the source value and rerun the cleaning job."
        ) from error
    return LayoffRecord(
        company=row.company,
        location=row.location,
        industry=row.industry,
        total_laid_off=row.total_laid_off,
        percentage_laid_off=row.percentage_laid_off,
        event_date=event_date,
        stage=row.stage,
        country=row.country,
        funds_raised_millions=row.funds_raised_millions,
        source_line=row.source_line,
    )
