"""CSV export of cleaned layoff records."""

from __future__ import annotations

import csv
from pathlib import Path

from core.constants import OUTPUT_COLUMNS
from core.errors import ScrubStoreError
from core.types import LayoffRecord
from store.record_payload import layoff_record_to_payload


def write_records_csv(output_path: Path, records: list[LayoffRecord]) -> Path:
    """Write records to a CSV file with the output column layout.

    Missing values are written as empty cells and dates in ISO format.

    Args:
        output_path: Destination CSV path.
        records: Records to export.

    Returns:
        Resolved output path.

    Raises:
        ScrubStoreError: If the file cannot be written.
    """
    resolved_path = output_path.expanduser().resolve()
    try:
        resolved_path.parent.mkdir(parents=True, exist_ok=True)
        with resolved_path.open("w", encoding="utf-8", newline="") as handle:
            writer = csv.DictWriter(handle, fieldnames=list(OUTPUT_COLUMNS))
            writer.writeheader()
            for record in records:
                payload = layoff_record_to_payload(record)
                writer.writerow({column: payload[column] for column in OUTPUT_COLUMNS})
    except OSError as error:
        raise ScrubStoreError(
            f"Failed to write CSV export at {resolved_path}: {error}. "
            "Check write permissions and available disk space."
        ) from error
    return resolved_path
