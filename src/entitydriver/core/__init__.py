"""Core functionalities: stateless models and pure operations.

Architecture Note:
    core/ contains the entity contract, field and query models, and the
    projection routine. Nothing here holds runtime state or talks to a
    backend directly. For stateful services, see storage/ and driver/.
"""

from entitydriver.core.entity import Capability, Entity
from entitydriver.core.field import (
    UNLIMITED,
    FieldDefinition,
    FieldItems,
    FieldKind,
    ReferenceItems,
    ScalarItems,
)
from entitydriver.core.projection import (
    META_KEY,
    EntityMeta,
    LinkResult,
    derive_meta,
    expand_references,
    project,
    resolve_link,
)
from entitydriver.core.query import (
    Condition,
    Conjunction,
    Operator,
    combine,
    matches,
    normalize_condition,
    normalize_conditions,
)

__all__ = [
    # Entity
    "Entity",
    "Capability",
    # Field
    "UNLIMITED",
    "FieldKind",
    "FieldDefinition",
    "FieldItems",
    "ScalarItems",
    "ReferenceItems",
    # Query
    "Condition",
    "Conjunction",
    "Operator",
    "normalize_condition",
    "normalize_conditions",
    "matches",
    "combine",
    # Projection
    "META_KEY",
    "EntityMeta",
    "LinkResult",
    "project",
    "derive_meta",
    "expand_references",
    "resolve_link",
]
