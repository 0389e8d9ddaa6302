"""Python SDK for cleaning runs and cleaned versions.

``ScrubClient`` runs the pipeline and profiles raw tables; ``Dataset``
reads, profiles and exports the versions of one cleaned dataset.
"""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Sequence

from core.config import ScrubConfig
from core.constants import OUTPUT_COLUMNS, SOURCE_COLUMNS, SOURCE_DATE_COLUMN
from core.types import (
    CleanOptions,
    ColumnProfile,
    LayoffRecord,
    SnapshotManifest,
    VersionExportRequest,
)
from ingest.input_reader import read_source_rows
from ingest.pipeline import clean_dataset
from store.snapshot_store import SnapshotStore
from transforms.column_profile import profile_columns


class ScrubClient:
    """Entry point for cleaning layoff tables from Python code."""

    def __init__(self, config: ScrubConfig | None = None) -> None:
        self._config = config or ScrubConfig.from_env()
        self._store = SnapshotStore(self._config)

    @property
    def config(self) -> ScrubConfig:
        """Return runtime configuration."""
        return self._config

    def clean(self, options: CleanOptions) -> str:
        """Run the cleaning pipeline and return the new version id.

        Raises:
            ScrubError: If reading, any stage, or the snapshot write fails.
        """
        return clean_dataset(options, self._config).version_id

    def dataset(self, dataset_name: str) -> "Dataset":
        """Return a handle on the versions of ``dataset_name``."""
        return Dataset(dataset_name, self._store)

    def inspect_source(
        self,
        source_uri: str,
        columns: Sequence[str] | None = None,
    ) -> list[ColumnProfile]:
        """Profile columns of a raw source table before cleaning.

        Args:
            source_uri: Source CSV path or S3 URI.
            columns: Header names to profile; every source column when omitted.

        Returns:
            One profile per requested column.
        """
        rows = read_source_rows(source_uri, self._config)
        return profile_columns(rows, _source_fields(columns))

    def with_data_root(self, data_root: str) -> "ScrubClient":
        """Return a client that stores versions under ``data_root``."""
        resolved_root = Path(data_root).expanduser().resolve()
        return ScrubClient(replace(self._config, data_root=resolved_root))


class Dataset:
    """Read and export handle for one cleaned dataset."""

    def __init__(self, dataset_name: str, store: SnapshotStore) -> None:
        self._dataset_name = dataset_name
        self._store = store

    @property
    def name(self) -> str:
        """Return dataset name."""
        return self._dataset_name

    def list_versions(self) -> list[SnapshotManifest]:
        """Return version manifests, oldest first."""
        return self._store.list_versions(self._dataset_name)

    def load_records(
        self,
        version_id: str | None = None,
    ) -> tuple[SnapshotManifest, list[LayoffRecord]]:
        """Return the manifest and cleaned records of a version.

        Args:
            version_id: Version to read; the latest version when omitted.
        """
        return self._store.load_records(self._dataset_name, version_id)

    def profile(
        self,
        version_id: str | None = None,
        columns: Sequence[str] | None = None,
    ) -> list[ColumnProfile]:
        """Profile columns of a cleaned version.

        Args:
            version_id: Version to profile; the latest version when omitted.
            columns: Output columns to profile; all of them when omitted.

        Returns:
            One profile per requested column.
        """
        _, records = self.load_records(version_id)
        return profile_columns(records, tuple(columns or OUTPUT_COLUMNS))

    def export_csv(self, output_path: str, version_id: str | None = None) -> str:
        """Write a version to ``output_path`` as CSV and return the written path."""
        written = self._store.export_version_csv(self._dataset_name, Path(output_path), version_id)
        return str(written)

    def export(self, version_id: str, output_uri: str) -> None:
        """Upload the files of a version under an ``s3://bucket/prefix`` URI."""
        self._store.export_version_to_s3(
            VersionExportRequest(
                dataset_name=self._dataset_name,
                version_id=version_id,
                output_uri=output_uri,
            )
        )


def _source_fields(columns: Sequence[str] | None) -> tuple[str, ...]:
    """Map source header names onto row field names."""
    requested = tuple(columns or SOURCE_COLUMNS)
    return tuple("event_date" if column == SOURCE_DATE_COLUMN else column for column in requested)
