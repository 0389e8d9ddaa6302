"""Shared typed models.

This module defines immutable data models used by ingest, transforms,
store, and SDK layers to keep interfaces explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Mapping


@dataclass(frozen=True)
class SourceLayoffRow:
    """Raw layoff row as read from the source table.

    Attributes:
        company: Company name.
        location: City or metro area.
        industry: Industry label, possibly blank or missing.
        total_laid_off: Headcount laid off when reported.
        percentage_laid_off: Fraction of staff laid off, kept as source text.
        event_date: Event date text in ``MM/DD/YYYY`` form.
        stage: Funding stage label.
        country: Country name.
        funds_raised_millions: Funds raised in millions when reported.
        source_line: One-based line in the source file, for diagnostics.
    """

    company: str
    location: str | None
    industry: str | None
    total_laid_off: int | None
    percentage_laid_off: str | None
    event_date: str | None
    stage: str | None
    country: str | None
    funds_raised_millions: int | None
    source_line: int = 0


@dataclass(frozen=True)
class LayoffRecord:
    """Layoff record after date conversion.

    Attributes:
        company: Company name.
        location: City or metro area.
        industry: Industry label or ``None``.
        total_laid_off: Headcount laid off when reported.
        percentage_laid_off: Fraction of staff laid off, kept as source text.
        event_date: Parsed calendar date.
        stage: Funding stage label.
        country: Country name.
        funds_raised_millions: Funds raised in millions when reported.
        source_line: One-based line in the source file, for diagnostics.
    """

    company: str
    location: str | None
    industry: str | None
    total_laid_off: int | None
    percentage_laid_off: str | None
    event_date: date | None
    stage: str | None
    country: str | None
    funds_raised_millions: int | None
    source_line: int = 0


@dataclass(frozen=True)
class CanonicalRule:
    """One categorical substitution rule.

    Attributes:
        column: Text column the rule applies to.
        match: Match kind, one of ``exact``, ``prefix``, ``strip_trailing``.
        pattern: Value, prefix, or trailing characters to match.
        replacement: Canonical value; unused for ``strip_trailing``.
    """

    column: str
    match: str
    pattern: str
    replacement: str = ""


@dataclass(frozen=True)
class CleanOptions:
    """Clean command options.

    Attributes:
        dataset_name: Dataset name to create a version for.
        source_uri: Source CSV path or ``s3://bucket/key`` URI.
        rules_path: Optional YAML file replacing default canonical rules.
        output_csv: Optional local CSV path for the cleaned table.
        output_uri: Optional object-store URI for snapshot export.
    """

    dataset_name: str
    source_uri: str
    rules_path: str | None = None
    output_csv: str | None = None
    output_uri: str | None = None


@dataclass(frozen=True)
class SnapshotManifest:
    """Immutable snapshot metadata for versioning.

    Attributes:
        dataset_name: Logical dataset identifier.
        version_id: Immutable snapshot id.
        created_at: UTC creation timestamp.
        source_uri: Source the snapshot was cleaned from.
        recipe_steps: Ordered stages used to create the snapshot.
        input_count: Number of source rows read.
        record_count: Number of records in snapshot.
        stage_counts: Record count after each stage.
    """

    dataset_name: str
    version_id: str
    created_at: datetime
    source_uri: str
    recipe_steps: tuple[str, ...]
    input_count: int
    record_count: int
    stage_counts: Mapping[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class SnapshotWriteRequest:
    """Request payload for snapshot persistence.

    Attributes:
        dataset_name: Logical dataset identifier.
        source_uri: Source the records were cleaned from.
        records: Final cleaned records to persist.
        recipe_steps: Ordered list of stage names.
        input_count: Number of source rows read.
        stage_counts: Record count after each stage.
    """

    dataset_name: str
    source_uri: str
    records: tuple[LayoffRecord, ...]
    recipe_steps: tuple[str, ...]
    input_count: int
    stage_counts: Mapping[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class VersionExportRequest:
    """Request payload for exporting a version.

    Attributes:
        dataset_name: Dataset identifier.
        version_id: Version to export.
        output_uri: Destination URI (currently s3:// only).
    """

    dataset_name: str
    version_id: str
    output_uri: str


@dataclass(frozen=True)
class ColumnProfile:
    """Null and distinct-value summary for one column.

    Attributes:
        column: Column name.
        row_count: Number of rows inspected.
        null_count: Rows where the value is ``None``.
        blank_count: Rows where the value is an empty or whitespace string.
        distinct_values: Sorted distinct non-null values as text.
    """

    column: str
    row_count: int
    null_count: int
    blank_count: int
    distinct_values: tuple[str, ...]
