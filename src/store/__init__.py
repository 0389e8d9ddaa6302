"""Storage and versioning layer.

This module persists immutable cleaned snapshots and catalog indexes.
It powers dataset loading, inspection, and export for the SDK.
"""
