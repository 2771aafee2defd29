"""Field functionality: field definitions and the field-items tagged union."""

from entitydriver.core.field.models import (
    UNLIMITED,
    FieldDefinition,
    FieldItems,
    FieldKind,
    ReferenceItems,
    ScalarItems,
)

__all__ = [
    "UNLIMITED",
    "FieldKind",
    "FieldDefinition",
    "FieldItems",
    "ScalarItems",
    "ReferenceItems",
]
