"""S3 URI parsing helpers.

This module centralizes S3 URI parsing for ingest and store layers.
It also builds boto3 clients from the shared runtime config.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from core.config import ScrubConfig
from core.errors import ScrubDependencyError, ScrubIngestError, ScrubStoreError


@dataclass(frozen=True)
class S3Location:
    """Parsed S3 location model."""

    bucket: str
    key: str


def is_s3_uri(uri: str) -> bool:
    """Return whether a URI points at S3."""
    return uri.startswith("s3://")


def parse_s3_uri(uri: str, domain: str) -> S3Location:
    """Parse and validate an S3 URI.

    Args:
        uri: URI in format ``s3://bucket/key``.
        domain: Error domain string ("ingest" or "store").

    Returns:
        Parsed bucket and key pair.

    Raises:
        ScrubIngestError: For ingest-domain parse failures.
        ScrubStoreError: For store-domain parse failures.
    """
    stripped_uri = uri.removeprefix("s3://")
    if "/" not in stripped_uri:
        _raise_uri_error(uri, domain)
    bucket, key = stripped_uri.split("/", 1)
    if not bucket or not key:
        _raise_uri_error(uri, domain)
    return S3Location(bucket=bucket, key=key)


def create_s3_client(config: ScrubConfig) -> Any:
    """Create a boto3 S3 client.

    Args:
        config: Runtime config containing optional profile/region.

    Returns:
        Boto3 S3 client.

    Raises:
        ScrubDependencyError: If boto3 is missing.
    """
    try:
        import boto3
    except ImportError as error:
        raise ScrubDependencyError(
            "S3 support requires boto3, but it is not installed. "
            "Install the 's3' extra to read or export s3:// locations."
        ) from error
    session_kwargs: dict[str, str] = {}
    if config.s3_profile:
        session_kwargs["profile_name"] = config.s3_profile
    if config.s3_region:
        session_kwargs["region_name"] = config.s3_region
    session = boto3.session.Session(**session_kwargs)
    return session.client("s3")


def _raise_uri_error(uri: str, domain: str) -> None:
    """Raise a domain-specific invalid URI error.

    Args:
        uri: Invalid URI value.
        domain: Error domain string.

    Raises:
        ScrubIngestError: For ingest domain.
        ScrubStoreError: For store domain.
    """
    message = (
        f"Invalid S3 URI '{uri}': expected s3://bucket/key. "
        "Provide both bucket and key."
    )
    if domain == "ingest":
        raise ScrubIngestError(message)
    raise ScrubStoreError(message)
