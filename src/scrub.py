"""Public SDK surface for Scrub.

This module provides a stable import path for SDK users.
It re-exports the primary client, typed models, and core transforms.
"""

from __future__ import annotations

from core.config import ScrubConfig
from core.types import CanonicalRule, CleanOptions, ColumnProfile, LayoffRecord, SourceLayoffRow
from store.dataset_sdk import Dataset, ScrubClient
from transforms.null_backfill import backfill, blank_to_null
from transforms.row_deduplication import rank_rows, remove_duplicate_rows

__all__ = [
    "CanonicalRule",
    "CleanOptions",
    "ColumnProfile",
    "Dataset",
    "LayoffRecord",
    "ScrubClient",
    "ScrubConfig",
    "SourceLayoffRow",
    "backfill",
    "blank_to_null",
    "rank_rows",
    "remove_duplicate_rows",
]
