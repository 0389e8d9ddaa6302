"""Integration tests for the end-to-end cleaning workflow."""

from __future__ import annotations

import csv
from dataclasses import replace
from pathlib import Path

from core.config import ScrubConfig
from core.types import CleanOptions
from store.dataset_sdk import ScrubClient
from tests.fixture_paths import raw_source


def test_clean_export_and_reload_flow(tmp_path: Path) -> None:
    """Cleaning, exporting, and reloading should agree on the cleaned rows."""
    config = replace(ScrubConfig.from_env(), data_root=tmp_path / "data")
    client = ScrubClient(config)
    output_csv = tmp_path / "layoffs_staging2.csv"
    version_id = client.clean(
        CleanOptions(
            dataset_name="integration-demo",
            source_uri=raw_source("layoffs_sample.csv"),
            output_csv=str(output_csv),
        )
    )

    manifest, records = client.dataset("integration-demo").load_records(version_id)
    with output_csv.open(encoding="utf-8", newline="") as handle:
        exported_companies = [row["company"] for row in csv.DictReader(handle)]

    assert exported_companies == [record.company for record in records] == [
        "Atlassian",
        "Airbnb",
        "Airbnb",
        "Included Health",
        "Coinbase",
        "BlockFi",
        "Bally's Interactive",
        "Trivago",
    ] and manifest.record_count == 8


def test_second_run_creates_new_version_with_same_records(tmp_path: Path) -> None:
    """Re-running on unchanged input should add a version with identical rows."""
    client = ScrubClient(replace(ScrubConfig.from_env(), data_root=tmp_path / "data"))
    options = CleanOptions(dataset_name="rerun", source_uri=raw_source("layoffs_sample.csv"))
    first_id = client.clean(options)
    second_id = client.clean(options)
    dataset = client.dataset("rerun")

    _, first_records = dataset.load_records(first_id)
    _, second_records = dataset.load_records(second_id)

    assert first_id != second_id and first_records == second_records
