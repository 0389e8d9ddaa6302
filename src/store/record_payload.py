"""Shared JSONL serialization for LayoffRecord payloads.

This module centralizes LayoffRecord JSON serialization logic.
It is reused by snapshot persistence and CSV export flows.
"""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path
from typing import Any

from core.constants import OUTPUT_COLUMNS
from core.types import LayoffRecord


def layoff_record_to_payload(record: LayoffRecord) -> dict[str, object]:
    """Serialize LayoffRecord into JSON-safe payload.

    Args:
        record: Layoff record instance.

    Returns:
        Dictionary payload keyed by output column, plus ``source_line``.
    """
    return {
        "company": record.company,
        "location": record.location,
        "industry": record.industry,
        "total_laid_off": record.total_laid_off,
        "percentage_laid_off": record.percentage_laid_off,
        "event_date": record.event_date.isoformat() if record.event_date else None,
        "stage": record.stage,
        "country": record.country,
        "funds_raised_millions": record.funds_raised_millions,
        "source_line": record.source_line,
    }


def layoff_record_from_payload(payload: dict[str, Any]) -> LayoffRecord:
    """Deserialize JSON payload into LayoffRecord.

    Args:
        payload: Serialized record payload.

    Returns:
        Parsed LayoffRecord.

    Raises:
        ValueError: If a field has an invalid type or value.
    """
    missing = [column for column in OUTPUT_COLUMNS if column not in payload]
    if missing:
        raise ValueError(f"missing fields {', '.join(missing)}")
    raw_date = payload["event_date"]
    return LayoffRecord(
        company=str(payload["company"]),
        location=_optional_text(payload["location"]),
        industry=_optional_text(payload["industry"]),
        total_laid_off=_optional_int(payload["total_laid_off"]),
        percentage_laid_off=_optional_text(payload["percentage_laid_off"]),
        event_date=date.fromisoformat(str(raw_date)) if raw_date else None,
        stage=_optional_text(payload["stage"]),
        country=_optional_text(payload["country"]),
        funds_raised_millions=_optional_int(payload["funds_raised_millions"]),
        source_line=int(payload.get("source_line", 0)),
    )


def write_layoff_records_jsonl(records_path: Path, records: list[LayoffRecord]) -> None:
    """Write LayoffRecord list to JSONL file.

    Args:
        records_path: Output JSONL file path.
        records: Records to serialize.
    """
    lines = [
        json.dumps(layoff_record_to_payload(record), sort_keys=True, ensure_ascii=False)
        for record in records
    ]
    body = "\n".join(lines) + "\n" if lines else ""
    records_path.write_text(body, encoding="utf-8")


def read_layoff_records_jsonl(records_path: Path) -> list[LayoffRecord]:
    """Read LayoffRecord list from JSONL file.

    Args:
        records_path: Input JSONL file path.

    Returns:
        Parsed records.

    Raises:
        ValueError: If JSONL rows are invalid.
    """
    parsed_records: list[LayoffRecord] = []
    for line_number, line in enumerate(records_path.read_text(encoding="utf-8").splitlines(), 1):
        if not line.strip():
            continue
        payload = _parse_payload_line(line, line_number)
        try:
            parsed_records.append(layoff_record_from_payload(payload))
        except (TypeError, ValueError) as error:
            raise ValueError(f"Invalid record at line {line_number}: {error}") from error
    return parsed_records


def _optional_text(value: object) -> str | None:
    return None if value is None else str(value)


def _optional_int(value: object) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"expected integer, got {value!r}")
    return value


def _parse_payload_line(line: str, line_number: int) -> dict[str, Any]:
    """Parse and validate one JSONL payload row.

    Args:
        line: Raw JSONL line.
        line_number: One-based line number.

    Returns:
        Parsed payload dictionary.

    Raises:
        ValueError: If JSON row is invalid.
    """
    try:
        payload = json.loads(line)
    except json.JSONDecodeError as error:
        raise ValueError(
            f"Invalid JSON at line {line_number}: {error.msg}"
        ) from error
    if not isinstance(payload, dict):
        raise ValueError(f"Invalid payload at line {line_number}: expected JSON object")
    return payload
