"""Unit tests for input reader module."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.config import ScrubConfig
from core.errors import ScrubIngestError
from ingest.input_reader import parse_csv_text, read_source_rows
from tests.fixture_paths import raw_source

_HEADER = "company,location,industry,total_laid_off,percentage_laid_off,date,stage,country,funds_raised_millions\n"


def test_read_source_rows_reads_every_data_row() -> None:
    """Reader should return one row per CSV data line."""
    rows = read_source_rows(raw_source("layoffs_sample.csv"), ScrubConfig.from_env())

    assert len(rows) == 11


def test_read_source_rows_records_one_based_csv_lines() -> None:
    """Rows should remember the CSV line they came from."""
    rows = read_source_rows(raw_source("layoffs_sample.csv"), ScrubConfig.from_env())

    assert [row.source_line for row in rows[:3]] == [2, 3, 4]


def test_read_source_rows_keeps_values_untrimmed() -> None:
    """Reading should not normalize cell text."""
    rows = read_source_rows(raw_source("layoffs_sample.csv"), ScrubConfig.from_env())

    assert rows[5].company == " Included Health"


def test_parse_csv_text_maps_null_token_to_none() -> None:
    """The literal NULL token marks a missing value."""
    rows = parse_csv_text(_HEADER + "Acme,NYC,NULL,NULL,0.1,1/4/2023,NULL,NULL,NULL\n", "inline")

    assert (rows[0].industry, rows[0].total_laid_off, rows[0].stage) == (None, None, None)


def test_parse_csv_text_keeps_empty_text_cells_as_empty_strings() -> None:
    """Empty text cells are blanks, not nulls, until the backfill stage."""
    rows = parse_csv_text(_HEADER + "Acme,NYC,,10,0.1,1/4/2023,Seed,Canada,5\n", "inline")

    assert rows[0].industry == ""


def test_parse_csv_text_maps_empty_integer_cells_to_none() -> None:
    """Empty numeric cells have no value."""
    rows = parse_csv_text(_HEADER + "Acme,NYC,Retail,,0.1,1/4/2023,Seed,Canada,\n", "inline")

    assert (rows[0].total_laid_off, rows[0].funds_raised_millions) == (None, None)


def test_read_source_rows_raises_for_missing_path(tmp_path: Path) -> None:
    """Reader should fail when source path is missing."""
    with pytest.raises(ScrubIngestError, match="does not exist"):
        read_source_rows(str(tmp_path / "missing.csv"), ScrubConfig.from_env())


def test_read_source_rows_raises_for_missing_column() -> None:
    """Reader should name the header columns that are missing."""
    with pytest.raises(ScrubIngestError, match="missing columns date"):
        read_source_rows(raw_source("missing_column.csv"), ScrubConfig.from_env())


def test_read_source_rows_raises_for_invalid_integer() -> None:
    """Non-numeric counts should fail with the offending line."""
    with pytest.raises(ScrubIngestError, match="'many' for total_laid_off"):
        read_source_rows(raw_source("bad_integer.csv"), ScrubConfig.from_env())
