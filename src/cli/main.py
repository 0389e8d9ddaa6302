"""Scrub CLI entry points.

This module exposes commands for cleaning and dataset operations.
It maps argparse commands onto SDK calls.
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Sequence

from core.config import ScrubConfig
from core.errors import ScrubError
from core.types import CleanOptions, ColumnProfile
from store.dataset_sdk import ScrubClient


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="scrub", description="Layoffs dataset cleaning CLI")
    parser.add_argument("--data-root", help="Override SCRUB_DATA_ROOT for this command")
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_clean_command(subparsers)
    _add_versions_command(subparsers)
    _add_export_csv_command(subparsers)
    _add_export_command(subparsers)
    _add_inspect_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the Scrub CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        client = _build_client(args.data_root)
        return _dispatch(parser, client, args)
    except ScrubError as error:
        print(f"error={type(error).__name__}: {error}", file=sys.stderr)
        return 1


def _dispatch(parser: argparse.ArgumentParser, client: ScrubClient, args: argparse.Namespace) -> int:
    if args.command == "clean":
        return _run_clean_command(client, args)
    if args.command == "versions":
        return _run_versions_command(client, args)
    if args.command == "export-csv":
        return _run_export_csv_command(client, args)
    if args.command == "export":
        return _run_export_command(client, args)
    if args.command == "inspect":
        return _run_inspect_command(client, args)
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_client(data_root: str | None) -> ScrubClient:
    """Build SDK client with optional data-root override.

    Args:
        data_root: Optional override path.

    Returns:
        Configured SDK client.
    """
    config = ScrubConfig.from_env()
    if data_root:
        config = replace(config, data_root=Path(data_root).expanduser().resolve())
    return ScrubClient(config)


def _run_clean_command(client: ScrubClient, args: argparse.Namespace) -> int:
    """Handle clean command."""
    options = CleanOptions(
        dataset_name=args.dataset,
        source_uri=args.source,
        rules_path=args.rules,
        output_csv=args.output_csv,
        output_uri=args.output_uri,
    )
    version_id = client.clean(options)
    print(version_id)
    return 0


def _run_versions_command(client: ScrubClient, args: argparse.Namespace) -> int:
    """Handle versions command."""
    dataset = client.dataset(args.dataset)
    for manifest in dataset.list_versions():
        print(
            f"{manifest.version_id}\t"
            f"{manifest.input_count}\t"
            f"{manifest.record_count}\t"
            f"{manifest.created_at.isoformat()}\t"
            f"{manifest.source_uri}"
        )
    return 0


def _run_export_csv_command(client: ScrubClient, args: argparse.Namespace) -> int:
    """Handle export-csv command."""
    dataset = client.dataset(args.dataset)
    print(dataset.export_csv(args.output, version_id=args.version_id))
    return 0


def _run_export_command(client: ScrubClient, args: argparse.Namespace) -> int:
    """Handle export command."""
    dataset = client.dataset(args.dataset)
    dataset.export(args.version_id, args.output_uri)
    print(args.output_uri)
    return 0


def _run_inspect_command(client: ScrubClient, args: argparse.Namespace) -> int:
    """Handle inspect command for a source table or a cleaned version."""
    columns = args.column or None
    if args.source:
        profiles = client.inspect_source(args.source, columns)
    elif args.dataset:
        profiles = client.dataset(args.dataset).profile(args.version_id, columns)
    else:
        print("error=inspect requires a source path or --dataset", file=sys.stderr)
        return 2
    for profile in profiles:
        _print_profile(profile, args.values)
    return 0


def _print_profile(profile: ColumnProfile, show_values: bool) -> None:
    print(
        f"{profile.column}\t"
        f"rows={profile.row_count}\t"
        f"nulls={profile.null_count}\t"
        f"blanks={profile.blank_count}\t"
        f"distinct={len(profile.distinct_values)}"
    )
    if show_values:
        for value in profile.distinct_values:
            print(f"  {value}")


def _add_clean_command(subparsers: Any) -> None:
    """Register clean subcommand."""
    parser = subparsers.add_parser("clean", help="Clean a layoffs CSV into a new version")
    parser.add_argument("source", help="Source CSV file or s3://bucket/key")
    parser.add_argument("--dataset", required=True, help="Dataset name")
    parser.add_argument("--rules", help="Optional YAML file replacing default canonical rules")
    parser.add_argument("--output-csv", help="Optional CSV path for the cleaned table")
    parser.add_argument("--output-uri", help="Optional s3:// export destination")


def _add_versions_command(subparsers: Any) -> None:
    """Register versions subcommand."""
    parser = subparsers.add_parser("versions", help="List dataset versions")
    parser.add_argument("--dataset", required=True, help="Dataset name")


def _add_export_csv_command(subparsers: Any) -> None:
    """Register export-csv subcommand."""
    parser = subparsers.add_parser(
        "export-csv",
        help="Export a version as CSV with an event_date header and ISO dates",
        description=(
            "Export a cleaned version as CSV. The file uses the event_date header with "
            "ISO YYYY-MM-DD dates, not the source date header in MM/DD/YYYY, so it "
            "cannot be fed back into scrub clean."
        ),
    )
    parser.add_argument("--dataset", required=True, help="Dataset name")
    parser.add_argument("--output", required=True, help="Destination CSV path")
    parser.add_argument("--version-id", help="Optional specific version id")


def _add_export_command(subparsers: Any) -> None:
    """Register export subcommand."""
    parser = subparsers.add_parser("export", help="Export a version directory to S3")
    parser.add_argument("--dataset", required=True, help="Dataset name")
    parser.add_argument("--version-id", required=True, help="Version id to export")
    parser.add_argument("--output-uri", required=True, help="Destination s3://bucket/prefix")


def _add_inspect_command(subparsers: Any) -> None:
    """Register inspect subcommand."""
    parser = subparsers.add_parser(
        "inspect",
        help="Summarize nulls, blanks, and distinct values per column",
    )
    parser.add_argument("source", nargs="?", help="Source CSV file or s3://bucket/key")
    parser.add_argument("--dataset", help="Inspect a cleaned dataset version instead")
    parser.add_argument("--version-id", help="Optional specific version id")
    parser.add_argument(
        "--column",
        action="append",
        help="Column to inspect; repeat for several, all columns when omitted",
    )
    parser.add_argument(
        "--values",
        action="store_true",
        help="Print sorted distinct values under each column",
    )
