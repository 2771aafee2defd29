"""Condition normalization and evaluation."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from entitydriver.core.query.models import Condition, Conjunction, Operator

_CONDITION_ARITY = 4


def normalize_condition(raw: Condition | Sequence[Any]) -> Condition:
    """Convert a condition given as a plain sequence to a Condition.

    Sequences hold (field, value, operator, langcode); missing trailing
    elements are padded with None.

    Args:
        raw: Condition instance or sequence of one to four elements.

    Returns:
        Normalized Condition.

    Raises:
        ValueError: If the sequence is empty or longer than four elements.
        TypeError: If raw is a string or not a sequence.
    """
    if isinstance(raw, Condition):
        return raw
    if isinstance(raw, str | bytes) or not isinstance(raw, Sequence):
        raise TypeError(f"Condition must be a sequence, got {type(raw).__name__}")
    if not 1 <= len(raw) <= _CONDITION_ARITY:
        raise ValueError(
            f"Condition needs 1 to {_CONDITION_ARITY} elements "
            f"(field, value, operator, langcode), got {len(raw)}"
        )
    padded = list(raw) + [None] * (_CONDITION_ARITY - len(raw))
    field, value, operator, langcode = padded
    return Condition(field=field, value=value, operator=operator, langcode=langcode)


def normalize_conditions(raw: Iterable[Condition | Sequence[Any]]) -> list[Condition]:
    """Normalize every condition, keeping order."""
    return [normalize_condition(condition) for condition in raw]


def _as_list(value: Any) -> list[Any]:
    if isinstance(value, list | tuple | set | frozenset):
        return list(value)
    return [value]


def _compare_one(operator: Operator, actual: Any, expected: Any) -> bool:
    """Compare a single non-null item. Incomparable types never match."""
    try:
        if operator is Operator.EQ:
            return bool(actual == expected)
        if operator is Operator.NE:
            return bool(actual != expected)
        if operator is Operator.GT:
            return bool(actual > expected)
        if operator is Operator.GTE:
            return bool(actual >= expected)
        if operator is Operator.LT:
            return bool(actual < expected)
        if operator is Operator.LTE:
            return bool(actual <= expected)
        if operator is Operator.IN:
            return actual in _as_list(expected)
        if operator is Operator.NOT_IN:
            return actual not in _as_list(expected)
        if operator is Operator.STARTS_WITH:
            return str(actual).startswith(str(expected))
        if operator is Operator.ENDS_WITH:
            return str(actual).endswith(str(expected))
        if operator is Operator.CONTAINS:
            return str(expected) in str(actual)
        if operator in (Operator.BETWEEN, Operator.NOT_BETWEEN):
            low, high = _as_list(expected)
            inside = bool(low <= actual <= high)
            return inside if operator is Operator.BETWEEN else not inside
    except TypeError:
        return False
    raise ValueError(f"Operator {operator.value} does not compare values")


def matches(operator: Operator, actual_values: Sequence[Any], expected: Any) -> bool:
    """Evaluate a condition against all items of a field.

    Multi-valued fields match when any item matches. IS NULL matches a field
    without items, IS NOT NULL a field with at least one.

    Raises:
        ValueError: If BETWEEN receives something other than two bounds.
    """
    present = [value for value in actual_values if value is not None]
    if operator is Operator.IS_NULL:
        return not present
    if operator is Operator.IS_NOT_NULL:
        return bool(present)
    if operator in (Operator.BETWEEN, Operator.NOT_BETWEEN) and len(_as_list(expected)) != 2:
        raise ValueError(f"{operator.value} needs exactly two bounds, got {expected!r}")
    return any(_compare_one(operator, actual, expected) for actual in present)


def combine(conjunction: Conjunction, results: Iterable[bool]) -> bool:
    """Fold per-condition results with AND (all) or OR (any).

    An empty condition list matches everything under either conjunction.
    """
    results = list(results)
    if not results:
        return True
    if conjunction is Conjunction.AND:
        return all(results)
    return any(results)
