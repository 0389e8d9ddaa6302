"""Dataset invariant checks run between cleaning stages.

Every check raises ``ConstraintViolationError`` naming the stage and the
first offending record so a failed run points at the data to fix.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Sequence

from core.constants import CANONICAL_COUNTRY, INTEGER_COLUMNS
from core.errors import ConstraintViolationError
from core.types import LayoffRecord, SourceLayoffRow
from transforms.row_deduplication import build_group_key, find_duplicate_groups
from transforms.row_pruning import has_reported_layoffs

_COUNTRY_TRAILING_PUNCTUATION = ".,;:"


def check_company_present(stage: str, rows: Sequence[SourceLayoffRow | LayoffRecord]) -> None:
    """Require a non-empty company name on every row."""
    for row in rows:
        if row.company is None or not row.company.strip():
            _raise_violation(stage, row, "company must be a non-empty string")


def check_non_negative(stage: str, rows: Sequence[SourceLayoffRow | LayoffRecord]) -> None:
    """Require non-negative layoff and funding figures.

    ``percentage_laid_off`` must be a non-negative decimal when present
    and not blank; a trailing ``%`` is accepted.
    """
    for row in rows:
        for column in INTEGER_COLUMNS:
            value = getattr(row, column)
            if value is not None and value < 0:
                _raise_violation(stage, row, f"{column} must be >= 0, got {value}")
        if row.percentage_laid_off is None or not row.percentage_laid_off.strip():
            continue
        percentage = _parse_percentage(row.percentage_laid_off)
        if percentage is None or percentage < 0:
            _raise_violation(
                stage,
                row,
                f"percentage_laid_off must be a decimal >= 0, got '{row.percentage_laid_off}'",
            )


def check_no_duplicates(
    stage: str,
    rows: Sequence[SourceLayoffRow | LayoffRecord],
    key_fields: Sequence[str],
) -> None:
    """Require key tuples to be unique after deduplication."""
    duplicates = find_duplicate_groups(rows, key_fields)
    if not duplicates:
        return
    for row in rows:
        if build_group_key(row, key_fields) in duplicates:
            _raise_violation(
                stage,
                row,
                f"{len(duplicates)} duplicate key groups remain across "
                f"({', '.join(key_fields)})",
            )


def check_no_blank_industry(stage: str, rows: Sequence[SourceLayoffRow | LayoffRecord]) -> None:
    """Require industry to be a non-empty string or ``None``."""
    for row in rows:
        if row.industry is not None and not row.industry.strip():
            _raise_violation(stage, row, "industry must be non-empty or null")


def check_canonical_country(stage: str, rows: Sequence[SourceLayoffRow | LayoffRecord]) -> None:
    """Reject country values with trailing punctuation or US spelling variants."""
    for row in rows:
        country = row.country
        if country is None:
            continue
        if country.endswith(tuple(_COUNTRY_TRAILING_PUNCTUATION)):
            _raise_violation(stage, row, f"country '{country}' has trailing punctuation")
        folded = country.casefold()
        if folded.startswith(CANONICAL_COUNTRY.casefold()) and country != CANONICAL_COUNTRY:
            _raise_violation(
                stage, row, f"country '{country}' is a variant of '{CANONICAL_COUNTRY}'"
            )


def check_reported_layoffs(stage: str, records: Sequence[LayoffRecord]) -> None:
    """Require at least one layoff figure on every record."""
    for record in records:
        if not has_reported_layoffs(record):
            _raise_violation(
                stage, record, "total_laid_off and percentage_laid_off are both null"
            )


def _parse_percentage(raw_value: str) -> Decimal | None:
    text = raw_value.strip().removesuffix("%").strip()
    try:
        value = Decimal(text)
    except InvalidOperation:
        return None
    return value if value.is_finite() else None


def _raise_violation(stage: str, row: SourceLayoffRow | LayoffRecord, detail: str) -> None:
    raise ConstraintViolationError(
        f"Constraint violated after stage '{stage}' at source line {row.source_line} "
        f"(company '{row.company}'): {detail}. "
        "Inspect the source data and rule table, then rerun the cleaning job."
    )
