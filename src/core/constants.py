"""Core constants used across Scrub modules.

This module centralizes column names, file names, and parsing formats.
Column layouts here are shared by the reader, transforms and store.
"""

from __future__ import annotations

from pathlib import Path

DEFAULT_DATA_ROOT = Path(".scrub")
DATASETS_DIR_NAME = "datasets"
VERSIONS_DIR_NAME = "versions"
CATALOG_FILE_NAME = "catalog.json"
MANIFEST_FILE_NAME = "manifest.json"
RECORDS_FILE_NAME = "records.jsonl"
LANCE_DIR_NAME = "data.lance"
DEFAULT_LOG_LEVEL = "INFO"
SUPPORTED_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")
SOURCE_DATE_FORMAT = "%m/%d/%Y"
SOURCE_NULL_TOKENS = ("NULL",)
SOURCE_DATE_COLUMN = "date"
SOURCE_COLUMNS = (
    "company",
    "location",
    "industry",
    "total_laid_off",
    "percentage_laid_off",
    "date",
    "stage",
    "country",
    "funds_raised_millions",
)
OUTPUT_COLUMNS = (
    "company",
    "location",
    "industry",
    "total_laid_off",
    "percentage_laid_off",
    "event_date",
    "stage",
    "country",
    "funds_raised_millions",
)
TEXT_COLUMNS = (
    "company",
    "location",
    "industry",
    "percentage_laid_off",
    "event_date",
    "stage",
    "country",
)
INTEGER_COLUMNS = ("total_laid_off", "funds_raised_millions")
DUPLICATE_KEY_FIELDS = (
    "company",
    "location",
    "industry",
    "total_laid_off",
    "event_date",
    "stage",
    "country",
    "funds_raised_millions",
)
BACKFILL_TARGET_COLUMN = "industry"
BACKFILL_JOIN_KEY = "company"
CANONICAL_COUNTRY = "United States"
SUPPORTED_RULE_MATCHES = ("exact", "prefix", "strip_trailing")
