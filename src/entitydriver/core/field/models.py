"""Field models.

Usage:
    title = FieldDefinition("title", required=True)
    tags = FieldDefinition.reference("tags", "taxonomy_term", cardinality=UNLIMITED)

    items = entity.get("tags")
    if isinstance(items, ReferenceItems):
        ...
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

UNLIMITED = -1
"""Cardinality value for fields that accept any number of items."""


class FieldKind(Enum):
    """Kind of a field, deciding how projection treats its value."""

    SCALAR = "scalar"
    ENTITY_REFERENCE = "entity_reference"


@dataclass(frozen=True, slots=True)
class FieldDefinition:
    """Schema entry for a single named field.

    Attributes:
        name: Machine name of the field.
        kind: Scalar or entity-reference.
        target_type: Entity type id the field points at (reference fields only).
        cardinality: Maximum number of items, or UNLIMITED.
        required: Whether the field must have a value on create.
        default: Value used when create() receives none.
    """

    name: str
    kind: FieldKind = FieldKind.SCALAR
    target_type: str | None = None
    cardinality: int = 1
    required: bool = False
    default: Any = None

    def __post_init__(self) -> None:
        if self.kind is FieldKind.ENTITY_REFERENCE and not self.target_type:
            raise ValueError(f"Reference field '{self.name}' needs a target_type")
        if self.cardinality == 0 or self.cardinality < UNLIMITED:
            raise ValueError(f"Invalid cardinality {self.cardinality} for '{self.name}'")

    @classmethod
    def reference(cls, name: str, target_type: str, cardinality: int = 1) -> FieldDefinition:
        """Shortcut for an entity-reference field."""
        return cls(
            name,
            kind=FieldKind.ENTITY_REFERENCE,
            target_type=target_type,
            cardinality=cardinality,
        )

    @property
    def is_reference(self) -> bool:
        return self.kind is FieldKind.ENTITY_REFERENCE

    @property
    def is_multiple(self) -> bool:
        return self.cardinality == UNLIMITED or self.cardinality > 1

    def accepts(self, count: int) -> bool:
        """Check if the field can hold this many items."""
        return self.cardinality == UNLIMITED or count <= self.cardinality


@dataclass(frozen=True, slots=True)
class ScalarItems:
    """Items of a plain value field."""

    name: str
    values: tuple[Any, ...] = ()


@dataclass(frozen=True, slots=True)
class ReferenceItems:
    """Items of an entity-reference field: target ids only, resolved on demand."""

    name: str
    target_type: str
    target_ids: tuple[Any, ...] = ()


FieldItems = ScalarItems | ReferenceItems
