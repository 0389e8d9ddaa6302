"""Unit tests for canonical rule loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.cleaning_rules import DEFAULT_CANONICAL_RULES, load_canonical_rules
from core.errors import ScrubConfigError
from core.types import CanonicalRule
from tests.fixture_paths import fixture_path


def test_load_canonical_rules_returns_defaults_without_path() -> None:
    """No rules path should select the built-in table."""
    assert load_canonical_rules(None) == DEFAULT_CANONICAL_RULES


def test_load_canonical_rules_reads_yaml_in_order() -> None:
    """Rules should load from YAML preserving file order."""
    rules = load_canonical_rules(str(fixture_path("rules/custom_rules.yaml")))

    assert rules[-1] == CanonicalRule(
        column="stage", match="exact", pattern="Unknown", replacement="Undisclosed"
    )


def test_load_canonical_rules_raises_for_unknown_match() -> None:
    """Unsupported match modes should be rejected at load time."""
    with pytest.raises(ScrubConfigError, match="regex"):
        load_canonical_rules(str(fixture_path("rules/unknown_match.yaml")))


def test_load_canonical_rules_raises_when_rules_is_not_a_list() -> None:
    """The rules field must be a list of mappings."""
    with pytest.raises(ScrubConfigError, match="expected list"):
        load_canonical_rules(str(fixture_path("rules/not_a_list.yaml")))


def test_load_canonical_rules_raises_for_missing_file(tmp_path: Path) -> None:
    """Missing rules files should fail with the resolved path."""
    with pytest.raises(ScrubConfigError, match="does not exist"):
        load_canonical_rules(str(tmp_path / "missing.yaml"))


def test_load_canonical_rules_raises_for_non_text_column(tmp_path: Path) -> None:
    """Rules may only target text columns."""
    rules_file = tmp_path / "rules.yaml"
    rules_file.write_text(
        "rules:\n  - column: total_laid_off\n    match: exact\n    pattern: '0'\n"
        "    replacement: '1'\n",
        encoding="utf-8",
    )

    with pytest.raises(ScrubConfigError, match="not a text column"):
        load_canonical_rules(str(rules_file))


def test_load_canonical_rules_raises_for_missing_replacement(tmp_path: Path) -> None:
    """Exact and prefix rules need a replacement value."""
    rules_file = tmp_path / "rules.yaml"
    rules_file.write_text(
        "rules:\n  - column: industry\n    match: prefix\n    pattern: Crypto\n",
        encoding="utf-8",
    )

    with pytest.raises(ScrubConfigError, match="replacement"):
        load_canonical_rules(str(rules_file))
