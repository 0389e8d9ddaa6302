"""Scrub exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Every error is fatal to a cleaning run; none is retried.
"""

from __future__ import annotations


class ScrubError(Exception):
    """Base exception for all Scrub failures."""


class ScrubConfigError(ScrubError):
    """Raised for invalid runtime configuration or rules files."""


class ScrubIOError(ScrubError):
    """Raised when a backing store read or write did not complete."""


class ScrubIngestError(ScrubIOError):
    """Raised for source reading and parsing failures."""


class ScrubStoreError(ScrubIOError):
    """Raised for snapshot store and export failures."""


class ScrubTransformError(ScrubError):
    """Raised for cleaning stage failures."""


class MalformedDateError(ScrubTransformError):
    """Raised when a date field cannot be parsed under the fixed pattern."""


class ConstraintViolationError(ScrubTransformError):
    """Raised when a dataset invariant is unmet after a stage completes."""


class ScrubDependencyError(ScrubError):
    """Raised when an optional runtime dependency is missing."""
