"""Runtime configuration model for Scrub.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from core.constants import DEFAULT_DATA_ROOT, DEFAULT_LOG_LEVEL, SUPPORTED_LOG_LEVELS
from core.errors import ScrubConfigError


@dataclass(frozen=True)
class ScrubConfig:
    """Validated runtime configuration.

    Attributes:
        data_root: Local root directory for catalogs and snapshots.
        s3_region: Optional default AWS region for S3 operations.
        s3_profile: Optional AWS profile for boto3 session initialization.
        log_level: Minimum level emitted by structured loggers.
    """

    data_root: Path
    s3_region: str | None
    s3_profile: str | None
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls) -> "ScrubConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            ScrubConfigError: If environment values are invalid.
        """
        data_root_value = os.getenv("SCRUB_DATA_ROOT", str(DEFAULT_DATA_ROOT))
        s3_region = os.getenv("SCRUB_S3_REGION")
        s3_profile = os.getenv("SCRUB_S3_PROFILE")
        log_level = _parse_log_level(os.getenv("SCRUB_LOG_LEVEL", DEFAULT_LOG_LEVEL))
        return cls(
            data_root=Path(data_root_value).expanduser().resolve(),
            s3_region=s3_region,
            s3_profile=s3_profile,
            log_level=log_level,
        )


def _parse_log_level(raw_value: str) -> str:
    """Parse the log level environment value.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Upper-cased supported level name.

    Raises:
        ScrubConfigError: If value is not a supported level.
    """
    level = raw_value.strip().upper()
    if level not in SUPPORTED_LOG_LEVELS:
        supported = ", ".join(SUPPORTED_LOG_LEVELS)
        raise ScrubConfigError(
            f"Invalid SCRUB_LOG_LEVEL value: got '{raw_value}'. "
            f"Set SCRUB_LOG_LEVEL to one of: {supported}."
        )
    return level
