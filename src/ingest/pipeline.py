"""Cleaning orchestration for the layoffs dataset.

This module runs the fixed stage sequence over a run-owned working copy:
load, deduplicate, trim, canonicalize, parse dates, backfill, prune,
and snapshot write. Any stage error aborts the whole run.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Sequence, TypeVar

from core.cleaning_rules import load_canonical_rules
from core.config import ScrubConfig
from core.constants import BACKFILL_JOIN_KEY, BACKFILL_TARGET_COLUMN, DUPLICATE_KEY_FIELDS
from core.errors import ScrubConfigError, ScrubError
from core.logging_config import configure_logging, get_logger
from core.s3_uri import is_s3_uri
from core.types import (
    CleanOptions,
    LayoffRecord,
    SnapshotManifest,
    SnapshotWriteRequest,
    SourceLayoffRow,
    VersionExportRequest,
)
from ingest.input_reader import read_source_rows
from store.csv_export import write_records_csv
from store.snapshot_store import SnapshotStore
from transforms.constraint_checks import (
    check_canonical_country,
    check_company_present,
    check_no_blank_industry,
    check_no_duplicates,
    check_non_negative,
    check_reported_layoffs,
)
from transforms.date_parsing import parse_event_dates
from transforms.null_backfill import backfill, blank_to_null
from transforms.row_deduplication import attach_row_numbers
from transforms.row_pruning import drop_unreported_rows
from transforms.text_normalization import trim_text_fields
from transforms.value_canonicalization import canonicalize_values

_LOGGER = get_logger(__name__)

StageOutput = TypeVar("StageOutput")

RECIPE_STEPS = (
    "load",
    "deduplicate",
    "trim_text",
    "canonicalize",
    "parse_dates",
    "backfill_industry",
    "prune_rows",
)


class CleaningPipelineRunner:
    """Single-use runner owning the working copy of one cleaning run."""

    def __init__(self, options: CleanOptions, config: ScrubConfig) -> None:
        configure_logging(config.log_level)
        _validate_output_target(options)
        self._options = options
        self._config = config
        self._store = SnapshotStore(config)
        self._rules = load_canonical_rules(options.rules_path)
        self._stage_counts: dict[str, int] = {}

    def run(self) -> SnapshotManifest:
        """Execute every stage and persist the cleaned snapshot."""
        source_rows = self._run_stage("load", self._load)
        deduplicated = self._run_stage("deduplicate", lambda: self._deduplicate(source_rows))
        trimmed = self._run_stage("trim_text", lambda: self._trim(deduplicated))
        canonical = self._run_stage("canonicalize", lambda: self._canonicalize(trimmed))
        dated = self._run_stage("parse_dates", lambda: self._parse_dates(canonical))
        backfilled = self._run_stage("backfill_industry", lambda: self._backfill(dated))
        pruned = self._run_stage("prune_rows", lambda: self._prune(backfilled))
        manifest = self._create_snapshot(pruned, len(source_rows))
        self._write_outputs(manifest, pruned)
        _log_clean_completion(self._options, len(source_rows), manifest)
        return manifest

    def _run_stage(self, stage: str, action: Callable[[], list[StageOutput]]) -> list[StageOutput]:
        try:
            output = action()
        except ScrubError as error:
            _LOGGER.error(
                "stage_failed",
                stage=stage,
                dataset_name=self._options.dataset_name,
                error_type=type(error).__name__,
                error=str(error),
            )
            raise
        self._stage_counts[stage] = len(output)
        _LOGGER.info(
            "stage_completed",
            stage=stage,
            dataset_name=self._options.dataset_name,
            record_count=len(output),
        )
        return output

    def _load(self) -> list[SourceLayoffRow]:
        source_rows = read_source_rows(self._options.source_uri, self._config)
        check_non_negative("load", source_rows)
        return source_rows

    def _deduplicate(self, rows: list[SourceLayoffRow]) -> list[SourceLayoffRow]:
        ranked_rows = attach_row_numbers(rows, DUPLICATE_KEY_FIELDS)
        duplicates = [ranked for ranked in ranked_rows if ranked.row_num > 1]
        for ranked in duplicates:
            _LOGGER.debug(
                "duplicate_row_removed",
                source_line=ranked.record.source_line,
                company=ranked.record.company,
                row_num=ranked.row_num,
            )
        kept_rows = [ranked.record for ranked in ranked_rows if ranked.row_num == 1]
        check_no_duplicates("deduplicate", kept_rows, DUPLICATE_KEY_FIELDS)
        return kept_rows

    def _trim(self, rows: list[SourceLayoffRow]) -> list[SourceLayoffRow]:
        trimmed_rows = trim_text_fields(rows)
        check_company_present("trim_text", trimmed_rows)
        check_no_duplicates("trim_text", trimmed_rows, DUPLICATE_KEY_FIELDS)
        return trimmed_rows

    def _canonicalize(self, rows: list[SourceLayoffRow]) -> list[SourceLayoffRow]:
        canonical_rows = canonicalize_values(rows, self._rules)
        check_canonical_country("canonicalize", canonical_rows)
        check_no_duplicates("canonicalize", canonical_rows, DUPLICATE_KEY_FIELDS)
        return canonical_rows

    def _parse_dates(self, rows: list[SourceLayoffRow]) -> list[LayoffRecord]:
        records = parse_event_dates(rows)
        check_no_duplicates("parse_dates", records, DUPLICATE_KEY_FIELDS)
        return records

    def _backfill(self, records: list[LayoffRecord]) -> list[LayoffRecord]:
        normalized = blank_to_null(records, BACKFILL_TARGET_COLUMN)
        result = backfill(normalized, BACKFILL_TARGET_COLUMN, BACKFILL_JOIN_KEY)
        check_no_blank_industry("backfill_industry", result.records)
        check_no_duplicates("backfill_industry", result.records, DUPLICATE_KEY_FIELDS)
        _LOGGER.info(
            "backfill_applied",
            target_column=BACKFILL_TARGET_COLUMN,
            join_key=BACKFILL_JOIN_KEY,
            filled_count=result.filled_count,
            passes=result.passes,
            remaining_nulls=_count_nulls(result.records, BACKFILL_TARGET_COLUMN),
        )
        return result.records

    def _prune(self, records: list[LayoffRecord]) -> list[LayoffRecord]:
        pruned = drop_unreported_rows(records)
        check_reported_layoffs("prune_rows", pruned)
        check_no_duplicates("prune_rows", pruned, DUPLICATE_KEY_FIELDS)
        return pruned

    def _create_snapshot(
        self,
        records: list[LayoffRecord],
        input_count: int,
    ) -> SnapshotManifest:
        write_request = SnapshotWriteRequest(
            dataset_name=self._options.dataset_name,
            source_uri=self._options.source_uri,
            records=tuple(records),
            recipe_steps=RECIPE_STEPS,
            input_count=input_count,
            stage_counts=dict(self._stage_counts),
        )
        return self._store.create_snapshot(write_request)

    def _write_outputs(self, manifest: SnapshotManifest, records: list[LayoffRecord]) -> None:
        if self._options.output_csv:
            write_records_csv(Path(self._options.output_csv), records)
        if self._options.output_uri:
            self._store.export_version_to_s3(
                VersionExportRequest(
                    dataset_name=self._options.dataset_name,
                    version_id=manifest.version_id,
                    output_uri=self._options.output_uri,
                )
            )


def clean_dataset(options: CleanOptions, config: ScrubConfig) -> SnapshotManifest:
    """Run the cleaning pipeline and persist a snapshot.

    Args:
        options: Clean request options.
        config: Runtime configuration.

    Returns:
        Manifest of the created snapshot version.

    Raises:
        ScrubIngestError: If the source cannot be read.
        MalformedDateError: If a date does not match ``MM/DD/YYYY``.
        ConstraintViolationError: If an invariant fails after a stage.
        ScrubStoreError: If snapshot persistence fails.
    """
    runner = CleaningPipelineRunner(options, config)
    return runner.run()


def _validate_output_target(options: CleanOptions) -> None:
    """Reject a CSV output path that would overwrite the source."""
    if not options.output_csv or is_s3_uri(options.source_uri):
        return
    source_path = Path(options.source_uri).expanduser().resolve()
    output_path = Path(options.output_csv).expanduser().resolve()
    if source_path == output_path:
        raise ScrubConfigError(
            f"Output CSV {output_path} is the source file. "
            "Choose a different output path; the source table is never modified."
        )


def _count_nulls(records: Sequence[object], column: str) -> int:
    return sum(1 for record in records if getattr(record, column) is None)


def _log_clean_completion(
    options: CleanOptions,
    input_count: int,
    manifest: SnapshotManifest,
) -> None:
    """Log pipeline completion with contextual metadata."""
    _LOGGER.info(
        "clean_completed",
        dataset_name=options.dataset_name,
        source_uri=options.source_uri,
        input_count=input_count,
        output_count=manifest.record_count,
        version_id=manifest.version_id,
        output_csv=options.output_csv,
        output_uri=options.output_uri,
    )
