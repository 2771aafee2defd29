"""Query condition models.

Usage:
    Condition("status", 1)
    Condition("title", "Hello", Operator.STARTS_WITH)
    Condition("title", "Bonjour", langcode="fr")

    conjunction = Conjunction.parse("or")
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class Conjunction(Enum):
    """Logical combinator applied across all conditions of a query."""

    AND = "AND"
    OR = "OR"

    @classmethod
    def parse(cls, value: str | Conjunction) -> Conjunction:
        """Accept an enum member or a case-insensitive name.

        Raises:
            ValueError: If value is neither AND nor OR.
        """
        if isinstance(value, Conjunction):
            return value
        try:
            return cls(str(value).upper())
        except ValueError:
            raise ValueError(f"Invalid conjunction: {value!r}. Use 'AND' or 'OR'.") from None


class Operator(Enum):
    """Comparison operators understood by entity queries."""

    EQ = "="
    NE = "<>"
    GT = ">"
    GTE = ">="
    LT = "<"
    LTE = "<="
    IN = "IN"
    NOT_IN = "NOT IN"
    STARTS_WITH = "STARTS_WITH"
    CONTAINS = "CONTAINS"
    ENDS_WITH = "ENDS_WITH"
    BETWEEN = "BETWEEN"
    NOT_BETWEEN = "NOT BETWEEN"
    IS_NULL = "IS NULL"
    IS_NOT_NULL = "IS NOT NULL"

    @classmethod
    def parse(cls, operator: str | Operator | None, value: Any = None) -> Operator:
        """Resolve an operator, defaulting on the shape of value.

        A missing operator means IN for list/tuple values and = otherwise.

        Raises:
            ValueError: If operator is not a known operator string.
        """
        if isinstance(operator, Operator):
            return operator
        if operator is None:
            return cls.IN if isinstance(value, list | tuple) else cls.EQ
        normalized = " ".join(str(operator).upper().split())
        if normalized == "!=":
            return cls.NE
        try:
            return cls(normalized)
        except ValueError:
            raise ValueError(f"Unknown query operator: {operator!r}") from None


@dataclass(frozen=True, slots=True)
class Condition:
    """A single query condition.

    Attributes:
        field: Field name, optionally with a property ("uid.target_id").
        value: Value to compare against.
        operator: Comparison operator; None lets the backend pick a default.
        langcode: Restrict the match to entities in this language.
    """

    field: str
    value: Any = None
    operator: str | Operator | None = None
    langcode: str | None = None

    def as_tuple(self) -> tuple[str, Any, str | Operator | None, str | None]:
        return (self.field, self.value, self.operator, self.langcode)
