"""Unit tests for snapshot store persistence."""

from __future__ import annotations

import csv
from dataclasses import replace
from datetime import date
from pathlib import Path

import pytest

from core.config import ScrubConfig
from core.errors import ScrubStoreError
from core.types import LayoffRecord, SnapshotWriteRequest, VersionExportRequest
from store.snapshot_store import SnapshotStore


def _sample_record() -> LayoffRecord:
    return LayoffRecord(
        company="Trivago",
        location="Düsseldorf",
        industry="Travel",
        total_laid_off=None,
        percentage_laid_off="0.1",
        event_date=date(2020, 8, 8),
        stage="Acquired",
        country="Germany",
        funds_raised_millions=None,
        source_line=11,
    )


def _write_request(records: tuple[LayoffRecord, ...] | None = None) -> SnapshotWriteRequest:
    return SnapshotWriteRequest(
        dataset_name="demo",
        source_uri="layoffs.csv",
        records=(_sample_record(),) if records is None else records,
        recipe_steps=("load",),
        input_count=1,
        stage_counts={"load": 1},
    )


def _store(tmp_path: Path) -> SnapshotStore:
    return SnapshotStore(replace(ScrubConfig.from_env(), data_root=tmp_path))


def test_create_snapshot_persists_manifest(tmp_path: Path) -> None:
    """Store should create a version with lineage metadata."""
    manifest = _store(tmp_path).create_snapshot(_write_request())

    assert (manifest.dataset_name, manifest.record_count) == ("demo", 1)


def test_load_records_returns_written_payload(tmp_path: Path) -> None:
    """Store should return records exactly as written into a snapshot."""
    store = _store(tmp_path)
    store.create_snapshot(_write_request())

    _, records = store.load_records("demo")

    assert records == [_sample_record()]


def test_create_snapshot_accepts_empty_record_set(tmp_path: Path) -> None:
    """A run that prunes every row still produces a version."""
    store = _store(tmp_path)
    store.create_snapshot(_write_request(records=()))

    _, records = store.load_records("demo")

    assert records == []


def test_list_versions_keeps_every_snapshot(tmp_path: Path) -> None:
    """Versions are appended, never replaced."""
    store = _store(tmp_path)
    first = store.create_snapshot(_write_request())
    second = store.create_snapshot(_write_request())

    versions = store.list_versions("demo")

    assert [item.version_id for item in versions] == [first.version_id, second.version_id]


def test_load_records_reads_requested_version(tmp_path: Path) -> None:
    """Loading by id should return that version, not the latest."""
    store = _store(tmp_path)
    first = store.create_snapshot(_write_request())
    store.create_snapshot(_write_request(records=()))

    manifest, _ = store.load_records("demo", first.version_id)

    assert manifest.version_id == first.version_id


def test_export_version_csv_writes_output_layout(tmp_path: Path) -> None:
    """CSV export should use the output header and ISO dates."""
    store = _store(tmp_path)
    store.create_snapshot(_write_request())

    output_path = store.export_version_csv("demo", tmp_path / "export" / "clean.csv")

    with output_path.open(encoding="utf-8", newline="") as handle:
        rows = list(csv.DictReader(handle))
    assert (rows[0]["event_date"], rows[0]["total_laid_off"]) == ("2020-08-08", "")


def test_load_records_raises_for_unknown_dataset(tmp_path: Path) -> None:
    """Loading should fail when dataset catalog is missing."""
    with pytest.raises(ScrubStoreError, match="catalog not found"):
        _store(tmp_path).load_records("missing")


def test_load_records_raises_for_unknown_version(tmp_path: Path) -> None:
    """Loading an unknown version id should fail."""
    store = _store(tmp_path)
    store.create_snapshot(_write_request())

    with pytest.raises(ScrubStoreError, match="not found"):
        store.load_records("demo", "demo-unknown")


def test_export_version_to_s3_rejects_non_s3_uri(tmp_path: Path) -> None:
    """Export destinations must be S3 URIs."""
    store = _store(tmp_path)
    manifest = store.create_snapshot(_write_request())

    with pytest.raises(ScrubStoreError):
        store.export_version_to_s3(
            VersionExportRequest("demo", manifest.version_id, str(tmp_path / "out"))
        )
