"""Categorical value canonicalization transform.

This module applies an ordered substitution table to text columns.
It fixes known typos and folds spelling variants onto one value.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Sequence, TypeVar

from core.errors import ScrubTransformError
from core.types import CanonicalRule

RowT = TypeVar("RowT")


def canonicalize_values(
    records: Sequence[RowT],
    rules: Sequence[CanonicalRule],
) -> list[RowT]:
    """Apply canonical rules to every row in table order.

    Args:
        records: Rows to canonicalize.
        rules: Ordered substitution rules.

    Returns:
        Rows with canonical values, in input order.

    Raises:
        ScrubTransformError: If a rule references an unknown column.
    """
    if records:
        _validate_rule_columns(records[0], rules)
    canonical_records: list[RowT] = []
    for record in records:
        updates: dict[str, str] = {}
        for rule in rules:
            current = updates.get(rule.column, getattr(record, rule.column))
            if not isinstance(current, str):
                continue
            replaced = apply_rule(rule, current)
            if replaced != current:
                updates[rule.column] = replaced
        if updates:
            canonical_records.append(replace(record, **updates))  # type: ignore[type-var]
            continue
        canonical_records.append(record)
    return canonical_records


def apply_rule(rule: CanonicalRule, value: str) -> str:
    """Apply one rule to a single value.

    Args:
        rule: Substitution rule.
        value: Current column value.

    Returns:
        Canonical value, or the input when the rule does not match.
    """
    if rule.match == "exact":
        return rule.replacement if value == rule.pattern else value
    if rule.match == "prefix":
        if value.casefold().startswith(rule.pattern.casefold()):
            return rule.replacement
        return value
    if rule.match == "strip_trailing":
        return value.rstrip(rule.pattern)
    raise ScrubTransformError(
        f"Unsupported canonical rule match '{rule.match}' for column '{rule.column}'. "
        "Use exact, prefix, or strip_trailing."
    )


def _validate_rule_columns(record: object, rules: Sequence[CanonicalRule]) -> None:
    missing = sorted({rule.column for rule in rules if not hasattr(record, rule.column)})
    if missing:
        raise ScrubTransformError(
            f"Canonical rules reference unknown columns: {', '.join(missing)}. "
            f"Use fields defined on {type(record).__name__}."
        )
