"""Versioned storage for cleaned layoff tables.

Each cleaning run lands in its own version directory under the data root
and is appended to the dataset catalog. Versions are never rewritten.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from core.config import ScrubConfig
from core.constants import CATALOG_FILE_NAME, DATASETS_DIR_NAME, VERSIONS_DIR_NAME
from core.errors import ScrubStoreError
from core.logging_config import get_logger
from core.s3_uri import create_s3_client, parse_s3_uri
from core.types import (
    LayoffRecord,
    SnapshotManifest,
    SnapshotWriteRequest,
    VersionExportRequest,
)
from store.catalog_io import (
    build_version_id,
    read_catalog_file,
    read_catalog_manifests,
    update_catalog,
    write_manifest_file,
)
from store.csv_export import write_records_csv
from store.lance_dataset import read_version_payload, write_version_payload

_LOGGER = get_logger(__name__)


class SnapshotStore:
    """Catalog-backed store of cleaned layoff snapshots.

    A dataset owns ``catalog.json`` plus one directory per version holding
    the records mirror, an optional Lance table and the manifest.
    """

    def __init__(self, config: ScrubConfig) -> None:
        self._config = config
        self._datasets_root = config.data_root / DATASETS_DIR_NAME
        self._datasets_root.mkdir(parents=True, exist_ok=True)

    def create_snapshot(self, request: SnapshotWriteRequest) -> SnapshotManifest:
        """Persist cleaned records as a new version.

        Args:
            request: Records and lineage for the new version.

        Returns:
            Manifest of the written version.

        Raises:
            ScrubStoreError: If the version directory or files cannot be written.
        """
        version_id = build_version_id(request.dataset_name, request.records)
        version_dir = self._versions_root(request.dataset_name) / version_id
        try:
            version_dir.mkdir(parents=True, exist_ok=False)
        except OSError as error:
            raise ScrubStoreError(
                f"Failed to create snapshot directory {version_dir}: {error}. "
                "Check write permissions under the data root."
            ) from error
        lance_written = write_version_payload(version_dir, list(request.records))
        manifest = SnapshotManifest(
            dataset_name=request.dataset_name,
            version_id=version_id,
            created_at=datetime.now(timezone.utc),
            source_uri=request.source_uri,
            recipe_steps=request.recipe_steps,
            input_count=request.input_count,
            record_count=len(request.records),
            stage_counts=dict(request.stage_counts),
        )
        write_manifest_file(version_dir, manifest, lance_written)
        update_catalog(self._catalog_path(request.dataset_name), manifest)
        _LOGGER.info(
            "snapshot_created",
            dataset_name=request.dataset_name,
            version_id=version_id,
            input_count=request.input_count,
            record_count=manifest.record_count,
            lance_written=lance_written,
        )
        return manifest

    def list_versions(self, dataset_name: str) -> list[SnapshotManifest]:
        """Return every version of a dataset, oldest first.

        Raises:
            ScrubStoreError: If the dataset has never been cleaned.
        """
        return read_catalog_manifests(self._catalog_path(dataset_name))

    def load_records(
        self,
        dataset_name: str,
        version_id: str | None = None,
    ) -> tuple[SnapshotManifest, list[LayoffRecord]]:
        """Read the cleaned records of one version.

        Args:
            dataset_name: Dataset name.
            version_id: Version to read; the latest version when omitted.

        Returns:
            The version manifest and its records in stored order.

        Raises:
            ScrubStoreError: If the dataset or version does not exist.
        """
        manifest = self._find_manifest(dataset_name, version_id)
        records = read_version_payload(self._existing_version_dir(manifest))
        return manifest, records

    def export_version_csv(
        self,
        dataset_name: str,
        output_path: Path,
        version_id: str | None = None,
    ) -> Path:
        """Write one version as a CSV table.

        Args:
            dataset_name: Dataset name.
            output_path: Destination file.
            version_id: Version to export; the latest version when omitted.

        Returns:
            Resolved path of the written file.
        """
        manifest, records = self.load_records(dataset_name, version_id)
        written_path = write_records_csv(output_path, records)
        _LOGGER.info(
            "snapshot_csv_exported",
            dataset_name=dataset_name,
            version_id=manifest.version_id,
            output_path=str(written_path),
            record_count=len(records),
        )
        return written_path

    def export_version_to_s3(self, request: VersionExportRequest) -> None:
        """Copy every file of a version directory under an S3 prefix.

        Raises:
            ScrubStoreError: If the URI is invalid or an upload fails.
        """
        location = parse_s3_uri(request.output_uri, domain="store")
        manifest = self._find_manifest(request.dataset_name, request.version_id)
        version_dir = self._existing_version_dir(manifest)
        s3_client = create_s3_client(self._config)
        uploaded = _upload_version_files(s3_client, version_dir, location.bucket, location.key)
        _LOGGER.info(
            "snapshot_exported",
            dataset_name=request.dataset_name,
            version_id=request.version_id,
            output_uri=request.output_uri,
            file_count=uploaded,
        )

    def _catalog_path(self, dataset_name: str) -> Path:
        return self._datasets_root / dataset_name / CATALOG_FILE_NAME

    def _versions_root(self, dataset_name: str) -> Path:
        return self._datasets_root / dataset_name / VERSIONS_DIR_NAME

    def _find_manifest(self, dataset_name: str, version_id: str | None) -> SnapshotManifest:
        catalog = read_catalog_file(self._catalog_path(dataset_name))
        target_id = version_id or catalog.get("latest_version")
        if target_id is None:
            raise ScrubStoreError(
                f"Dataset '{dataset_name}' has no versions. Run clean to create one."
            )
        for manifest in read_catalog_manifests(self._catalog_path(dataset_name)):
            if manifest.version_id == target_id:
                return manifest
        raise ScrubStoreError(
            f"Version '{target_id}' not found for dataset '{dataset_name}'. "
            "Run 'scrub versions' to list valid version ids."
        )

    def _existing_version_dir(self, manifest: SnapshotManifest) -> Path:
        version_dir = self._versions_root(manifest.dataset_name) / manifest.version_id
        if not version_dir.is_dir():
            raise ScrubStoreError(
                f"Catalog lists {manifest.version_id} but {version_dir} is missing. "
                "Rerun the cleaning job to recreate the version."
            )
        return version_dir


def _upload_version_files(s3_client: Any, version_dir: Path, bucket: str, prefix: str) -> int:
    """Upload version files in path order and return how many were sent."""
    key_prefix = prefix.rstrip("/")
    files = [path for path in sorted(version_dir.rglob("*")) if path.is_file()]
    for local_file in files:
        object_key = f"{key_prefix}/{local_file.relative_to(version_dir).as_posix()}"
        try:
            s3_client.upload_file(str(local_file), bucket, object_key)
        except Exception as error:
            raise ScrubStoreError(
                f"Failed to upload {local_file} to s3://{bucket}/{object_key}: {error}. "
                "Check AWS credentials, then rerun the export."
            ) from error
    return len(files)
