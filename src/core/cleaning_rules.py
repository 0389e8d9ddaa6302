"""Canonical value rules for categorical cleanup.

This module owns the default substitution table and loads replacement
tables from YAML rules files with strict schema validation.
"""

from __future__ import annotations

from pathlib import Path
from typing import Mapping, Sequence, cast

from core.constants import SUPPORTED_RULE_MATCHES, TEXT_COLUMNS
from core.errors import ScrubConfigError, ScrubDependencyError
from core.types import CanonicalRule

DEFAULT_CANONICAL_RULES: tuple[CanonicalRule, ...] = (
    CanonicalRule(column="location", match="exact", pattern="DÃ¼sseldorf", replacement="Düsseldorf"),
    CanonicalRule(
        column="location", match="exact", pattern="FlorianÃ³polis", replacement="Florianópolis"
    ),
    CanonicalRule(column="location", match="exact", pattern="MalmÃ¶", replacement="Malmö"),
    CanonicalRule(column="industry", match="prefix", pattern="Crypto", replacement="Crypto"),
    CanonicalRule(
        column="country", match="prefix", pattern="United States", replacement="United States"
    ),
    CanonicalRule(column="country", match="strip_trailing", pattern="."),
)


def load_canonical_rules(rules_path: str | None) -> tuple[CanonicalRule, ...]:
    """Load canonical rules from YAML, or return the defaults.

    Args:
        rules_path: Optional path to a YAML rules file.

    Returns:
        Ordered rule table.

    Raises:
        ScrubDependencyError: If PyYAML is unavailable.
        ScrubConfigError: If the file is missing, malformed, or invalid.
    """
    if rules_path is None:
        return DEFAULT_CANONICAL_RULES
    payload = _load_yaml_payload(rules_path)
    root_mapping = _expect_mapping(payload, "rules file root")
    _validate_root_keys(root_mapping)
    raw_rules = root_mapping.get("rules")
    if raw_rules is None:
        raise ScrubConfigError(
            f"Rules file {rules_path} is missing field 'rules'. Add a list of rule mappings."
        )
    rule_rows = _expect_sequence(raw_rules, "rules list")
    return tuple(_parse_rule(rule_value, index) for index, rule_value in enumerate(rule_rows))


def _load_yaml_payload(rules_path: str) -> object:
    try:
        import yaml  # type: ignore[import-untyped]
    except ImportError as error:  # pragma: no cover - dependency failure
        raise ScrubDependencyError(
            "YAML rules files require PyYAML. Install with 'pip install pyyaml'."
        ) from error
    rules_file = Path(rules_path).expanduser().resolve()
    if not rules_file.exists():
        raise ScrubConfigError(
            f"Rules file does not exist at {rules_file}. Provide a valid YAML file path."
        )
    try:
        payload = cast(object, yaml.safe_load(rules_file.read_text(encoding="utf-8")))
    except OSError as error:
        raise ScrubConfigError(
            f"Failed to read rules file at {rules_file}: {error}. Check file permissions."
        ) from error
    except yaml.YAMLError as error:
        raise ScrubConfigError(
            f"Failed to parse YAML rules file at {rules_file}: {error}. Fix YAML syntax."
        ) from error
    if payload is None:
        raise ScrubConfigError(f"Rules file at {rules_file} is empty. Define a 'rules' list.")
    return payload


def _parse_rule(rule_value: object, rule_index: int) -> CanonicalRule:
    context = f"rule #{rule_index + 1}"
    rule_mapping = _expect_mapping(rule_value, context)
    unknown_keys = sorted(set(rule_mapping) - {"column", "match", "pattern", "replacement"})
    if unknown_keys:
        raise ScrubConfigError(f"Invalid {context}: unknown fields {', '.join(unknown_keys)}.")
    column = _required_string(rule_mapping, "column", context)
    if column not in TEXT_COLUMNS:
        raise ScrubConfigError(
            f"Invalid {context}: column '{column}' is not a text column. "
            f"Use one of: {', '.join(TEXT_COLUMNS)}."
        )
    match = _required_string(rule_mapping, "match", context)
    if match not in SUPPORTED_RULE_MATCHES:
        raise ScrubConfigError(
            f"Invalid {context}: match '{match}' is unsupported. "
            f"Use one of: {', '.join(SUPPORTED_RULE_MATCHES)}."
        )
    pattern = _required_string(rule_mapping, "pattern", context)
    replacement = rule_mapping.get("replacement", "")
    if not isinstance(replacement, str):
        raise ScrubConfigError(f"Invalid {context}: field 'replacement' must be a string.")
    if match != "strip_trailing" and not replacement:
        raise ScrubConfigError(
            f"Invalid {context}: match '{match}' requires a non-empty 'replacement'."
        )
    return CanonicalRule(column=column, match=match, pattern=pattern, replacement=replacement)


def _expect_mapping(value: object, context: str) -> Mapping[str, object]:
    if isinstance(value, Mapping):
        normalized_mapping = {}
        for key, payload in value.items():
            if not isinstance(key, str):
                raise ScrubConfigError(
                    f"Invalid {context}: expected string keys, got {type(key).__name__}."
                )
            normalized_mapping[key] = payload
        return normalized_mapping
    raise ScrubConfigError(
        f"Invalid {context}: expected object mapping, got {type(value).__name__}."
    )


def _expect_sequence(value: object, context: str) -> Sequence[object]:
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return value
    raise ScrubConfigError(f"Invalid {context}: expected list, got {type(value).__name__}.")


def _required_string(mapping: Mapping[str, object], field_name: str, context: str) -> str:
    raw_value = mapping.get(field_name)
    if isinstance(raw_value, str) and raw_value:
        return raw_value
    raise ScrubConfigError(f"Invalid {context}: field '{field_name}' must be a non-empty string.")


def _validate_root_keys(root_mapping: Mapping[str, object]) -> None:
    unknown_keys = sorted(set(root_mapping) - {"rules"})
    if unknown_keys:
        raise ScrubConfigError(
            f"Rules file contains unknown root fields: {', '.join(unknown_keys)}."
        )
