"""Record files inside a version directory.

``records.jsonl`` is always written and is what reads use. When pyarrow
and lance are installed, the same rows are also stored as a typed Lance
table for analytical readers.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from core.constants import INTEGER_COLUMNS, LANCE_DIR_NAME, OUTPUT_COLUMNS, RECORDS_FILE_NAME
from core.errors import ScrubStoreError
from core.types import LayoffRecord
from store.record_payload import read_layoff_records_jsonl, write_layoff_records_jsonl


def write_version_payload(version_dir: Path, records: list[LayoffRecord]) -> bool:
    """Write the JSONL mirror and, when possible, the Lance table.

    Args:
        version_dir: Directory of the new version.
        records: Cleaned records in output order.

    Returns:
        Whether a Lance table was written.

    Raises:
        ScrubStoreError: If either file cannot be written.
    """
    records_path = version_dir / RECORDS_FILE_NAME
    try:
        write_layoff_records_jsonl(records_path, records)
    except OSError as error:
        raise ScrubStoreError(
            f"Failed to write cleaned records to {records_path}: {error}. "
            "Check write permissions and free disk space under the data root."
        ) from error
    return _write_lance_table(version_dir / LANCE_DIR_NAME, records)


def read_version_payload(version_dir: Path) -> list[LayoffRecord]:
    """Read the cleaned records of a version from its JSONL mirror.

    Raises:
        ScrubStoreError: If the mirror is missing or corrupt.
    """
    records_path = version_dir / RECORDS_FILE_NAME
    if not records_path.is_file():
        raise ScrubStoreError(
            f"Version directory {version_dir} has no {RECORDS_FILE_NAME}. "
            "Rerun the cleaning job to recreate the version."
        )
    try:
        return read_layoff_records_jsonl(records_path)
    except (OSError, ValueError) as error:
        raise ScrubStoreError(
            f"Cannot read cleaned records from {records_path}: {error}. "
            "Rerun the cleaning job to recreate the version."
        ) from error


def _write_lance_table(lance_path: Path, records: list[LayoffRecord]) -> bool:
    if not records:
        return False
    try:
        import lance
        import pyarrow as pa
    except ImportError:
        return False

    table = pa.table(
        {column: _arrow_column(pa, records, column) for column in OUTPUT_COLUMNS}
    )
    try:
        lance.write_dataset(table, str(lance_path), mode="overwrite")
    except Exception as error:
        raise ScrubStoreError(
            f"Failed to write Lance table at {lance_path}: {error}. "
            "Check that the installed pylance and pyarrow versions match."
        ) from error
    return True


def _arrow_column(pa: Any, records: list[LayoffRecord], column: str) -> Any:
    values = [getattr(record, column) for record in records]
    if column in INTEGER_COLUMNS:
        return pa.array(values, type=pa.int64())
    if column == "event_date":
        return pa.array(values, type=pa.date32())
    return pa.array(values, type=pa.string())
