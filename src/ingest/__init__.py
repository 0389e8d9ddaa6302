"""Source ingestion and cleaning pipeline.

This module reads the raw layoffs table and runs the cleaning stages.
It prepares immutable snapshot records for the store layer.
"""
