"""Dataset catalog and version manifest files.

The catalog is one JSON document per dataset listing every version in
creation order; each version directory also carries its own manifest.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from core.constants import MANIFEST_FILE_NAME
from core.errors import ScrubStoreError
from core.types import LayoffRecord, SnapshotManifest
from store.record_payload import layoff_record_to_payload


def build_version_id(dataset_name: str, records: tuple[LayoffRecord, ...]) -> str:
    """Build ``<dataset>-<utc timestamp>-<content digest>``.

    Identical cleaned output yields the same digest suffix, so reruns on
    unchanged input are easy to spot in ``scrub versions``.
    """
    created = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%fZ")
    digest = hashlib.sha256()
    for record in records:
        row_bytes = json.dumps(layoff_record_to_payload(record), sort_keys=True).encode("utf-8")
        digest.update(row_bytes)
    return f"{dataset_name}-{created}-{digest.hexdigest()[:10]}"


def write_manifest_file(
    version_dir: Path,
    manifest: SnapshotManifest,
    lance_written: bool,
) -> None:
    """Write ``manifest.json`` into a version directory.

    Args:
        version_dir: Directory of the new version.
        manifest: Lineage and counts of the version.
        lance_written: Whether a Lance table sits beside the JSONL mirror.

    Raises:
        ScrubStoreError: If the file cannot be written.
    """
    payload = manifest_to_dict(manifest)
    payload["lance_written"] = lance_written
    _write_json(version_dir / MANIFEST_FILE_NAME, payload)


def update_catalog(catalog_path: Path, manifest: SnapshotManifest) -> None:
    """Append a version to the dataset catalog, creating it on first use.

    Args:
        catalog_path: Path of ``catalog.json``.
        manifest: Manifest of the version being registered.

    Raises:
        ScrubStoreError: If the existing catalog is unreadable or the write fails.
    """
    catalog = read_catalog_file(catalog_path) if catalog_path.exists() else {"versions": []}
    catalog["versions"].append(manifest_to_dict(manifest))
    catalog["latest_version"] = manifest.version_id
    _write_json(catalog_path, catalog)


def read_catalog_file(catalog_path: Path) -> dict[str, Any]:
    """Load the catalog document of one dataset.

    Raises:
        ScrubStoreError: If the catalog is missing or malformed.
    """
    if not catalog_path.exists():
        raise ScrubStoreError(
            f"Dataset catalog not found at {catalog_path}. "
            "Run clean for this dataset before reading versions."
        )
    try:
        payload = json.loads(catalog_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as error:
        raise ScrubStoreError(
            f"Failed to read dataset catalog at {catalog_path}: {error}. "
            "Restore the catalog from the per-version manifest files."
        ) from error
    if not isinstance(payload, dict) or not isinstance(payload.get("versions"), list):
        raise ScrubStoreError(
            f"Dataset catalog at {catalog_path} has no 'versions' list. "
            "Restore the catalog from the per-version manifest files."
        )
    return payload


def read_catalog_manifests(catalog_path: Path) -> list[SnapshotManifest]:
    """Return catalog versions as manifests, oldest first."""
    catalog = read_catalog_file(catalog_path)
    return [manifest_from_dict(entry) for entry in catalog["versions"]]


def manifest_to_dict(manifest: SnapshotManifest) -> dict[str, Any]:
    """Serialize manifest into a JSON-safe dictionary."""
    payload = asdict(manifest)
    payload["created_at"] = manifest.created_at.isoformat()
    payload["recipe_steps"] = list(manifest.recipe_steps)
    return payload


def manifest_from_dict(payload: dict[str, Any]) -> SnapshotManifest:
    """Rebuild a manifest from its catalog entry.

    Raises:
        ScrubStoreError: If a required field is missing or mistyped.
    """
    try:
        return SnapshotManifest(
            dataset_name=str(payload["dataset_name"]),
            version_id=str(payload["version_id"]),
            created_at=datetime.fromisoformat(str(payload["created_at"])),
            source_uri=str(payload["source_uri"]),
            recipe_steps=tuple(str(step) for step in payload["recipe_steps"]),
            input_count=int(payload["input_count"]),
            record_count=int(payload["record_count"]),
            stage_counts={
                str(stage): int(count)
                for stage, count in dict(payload.get("stage_counts", {})).items()
            },
        )
    except (KeyError, TypeError, ValueError) as error:
        raise ScrubStoreError(
            f"Invalid version entry {payload.get('version_id', '<unknown>')!r}: {error}. "
            "Restore the catalog from the per-version manifest files."
        ) from error


def _write_json(path: Path, payload: dict[str, Any]) -> None:
    try:
        path.write_text(json.dumps(payload, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
    except OSError as error:
        raise ScrubStoreError(
            f"Failed to write {path}: {error}. Check write permissions under the data root."
        ) from error
