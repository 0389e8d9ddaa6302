"""Source table readers for the cleaning pipeline.

This module loads layoff rows from a local CSV file or an S3 object.
It normalizes cells into typed source rows without changing values.
"""

from __future__ import annotations

import csv
import io
from pathlib import Path
from typing import Iterable, Mapping

from core.config import ScrubConfig
from core.constants import SOURCE_COLUMNS, SOURCE_DATE_COLUMN, SOURCE_NULL_TOKENS
from core.errors import ScrubIngestError
from core.s3_uri import create_s3_client, is_s3_uri, parse_s3_uri
from core.types import SourceLayoffRow


def read_source_rows(source_uri: str, config: ScrubConfig) -> list[SourceLayoffRow]:
    """Bulk-read all rows from the source table.

    Args:
        source_uri: Local CSV path or ``s3://bucket/key`` URI.
        config: Runtime configuration for S3 session defaults.

    Returns:
        Ordered list of source rows.

    Raises:
        ScrubIngestError: If the source cannot be read or parsed.
    """
    if is_s3_uri(source_uri):
        return _read_s3_rows(source_uri, config)
    return _read_local_rows(Path(source_uri).expanduser())


def parse_csv_text(text: str, source_label: str) -> list[SourceLayoffRow]:
    """Parse CSV text with a layoffs header into source rows.

    Args:
        text: Full CSV document.
        source_label: Source path or URI for error context.

    Returns:
        Parsed rows; ``source_line`` holds the one-based CSV line.

    Raises:
        ScrubIngestError: If the header or a cell is invalid.
    """
    reader = csv.DictReader(io.StringIO(text))
    _validate_header(reader.fieldnames, source_label)
    rows: list[SourceLayoffRow] = []
    for cells in reader:
        rows.append(_row_from_cells(cells, source_label, reader.line_num))
    return rows


def _read_local_rows(source_path: Path) -> list[SourceLayoffRow]:
    """Read rows from a local CSV file.

    Args:
        source_path: Input CSV path.

    Returns:
        Parsed source rows.

    Raises:
        ScrubIngestError: If path is missing or unreadable.
    """
    if not source_path.is_file():
        raise ScrubIngestError(
            f"Failed to read source at {source_path}: file does not exist. "
            "Provide an existing CSV file."
        )
    try:
        text = source_path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as error:
        raise ScrubIngestError(
            f"Failed to read source at {source_path}: {error}. "
            "Check file permissions and that the file is UTF-8 encoded."
        ) from error
    return parse_csv_text(text, str(source_path))


def _read_s3_rows(source_uri: str, config: ScrubConfig) -> list[SourceLayoffRow]:
    """Read rows from one S3 CSV object.

    Args:
        source_uri: S3 object URI.
        config: Runtime configuration for region/profile.

    Returns:
        Parsed source rows.

    Raises:
        ScrubIngestError: If the object cannot be downloaded.
    """
    location = parse_s3_uri(source_uri, domain="ingest")
    s3_client = create_s3_client(config)
    try:
        response = s3_client.get_object(Bucket=location.bucket, Key=location.key)
        body = response["Body"].read().decode("utf-8-sig")
    except Exception as error:
        raise ScrubIngestError(
            f"Failed to download source {source_uri}: {error}. "
            "Check AWS credentials and the object key."
        ) from error
    return parse_csv_text(body, source_uri)


def _validate_header(fieldnames: Iterable[str] | None, source_label: str) -> None:
    present = {name.strip() for name in fieldnames or ()}
    missing = [column for column in SOURCE_COLUMNS if column not in present]
    if missing:
        raise ScrubIngestError(
            f"Invalid source header in {source_label}: missing columns {', '.join(missing)}. "
            f"Expected: {', '.join(SOURCE_COLUMNS)}."
        )


def _row_from_cells(
    cells: Mapping[str | None, str | None],
    source_label: str,
    line_number: int,
) -> SourceLayoffRow:
    values = {str(key).strip(): value for key, value in cells.items() if key is not None}
    return SourceLayoffRow(
        company=_text_cell(values, "company") or "",
        location=_text_cell(values, "location"),
        industry=_text_cell(values, "industry"),
        total_laid_off=_integer_cell(values, "total_laid_off", source_label, line_number),
        percentage_laid_off=_text_cell(values, "percentage_laid_off"),
        event_date=_nullable_cell(values, SOURCE_DATE_COLUMN),
        stage=_text_cell(values, "stage"),
        country=_text_cell(values, "country"),
        funds_raised_millions=_integer_cell(
            values, "funds_raised_millions", source_label, line_number
        ),
        source_line=line_number,
    )


def _text_cell(values: Mapping[str, str | None], column: str) -> str | None:
    """Return raw cell text; only the NULL token maps to ``None``."""
    raw_value = values.get(column)
    if raw_value is None or raw_value.strip() in SOURCE_NULL_TOKENS:
        return None
    return raw_value


def _nullable_cell(values: Mapping[str, str | None], column: str) -> str | None:
    """Return cell text, mapping empty cells and NULL tokens to ``None``."""
    raw_value = _text_cell(values, column)
    if raw_value is None or not raw_value.strip():
        return None
    return raw_value


def _integer_cell(
    values: Mapping[str, str | None],
    column: str,
    source_label: str,
    line_number: int,
) -> int | None:
    raw_value = _nullable_cell(values, column)
    if raw_value is None:
        return None
    try:
        return int(raw_value.strip())
    except ValueError as error:
        raise ScrubIngestError(
            f"Invalid integer '{raw_value}' for {column} at {source_label}:{line_number}. "
            "Fix the source value and rerun the cleaning job."
        ) from error

