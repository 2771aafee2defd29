"""Query functionality: conditions, operators and their evaluation."""

from entitydriver.core.query.models import Condition, Conjunction, Operator
from entitydriver.core.query.operations import (
    combine,
    matches,
    normalize_condition,
    normalize_conditions,
)

__all__ = [
    # Models
    "Condition",
    "Conjunction",
    "Operator",
    # Operations
    "normalize_condition",
    "normalize_conditions",
    "matches",
    "combine",
]
