"""Entity protocol.

Backends hand out objects satisfying Entity. Optional behavior (revisions,
accounts, fields) is advertised through capabilities() instead of being
discovered by inspecting the object's class.

Usage:
    if Capability.REVISIONABLE in entity.capabilities():
        revision = entity.revision_id()
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any, Protocol, runtime_checkable

from entitydriver.core.field import FieldDefinition, FieldItems


class Capability(Enum):
    """Optional entity behavior."""

    FIELDABLE = "fieldable"
    REVISIONABLE = "revisionable"
    ACCOUNT = "account"


@runtime_checkable
class Entity(Protocol):
    """A backend-managed record of some entity type and bundle."""

    def id(self) -> Any:
        """Unique identifier, None until saved."""
        ...

    def label(self) -> Any:
        """Human-readable label (may be any object with a str() form)."""
        ...

    def entity_type_id(self) -> str:
        ...

    def bundle(self) -> str:
        ...

    def capabilities(self) -> frozenset[Capability]:
        """Optional behavior this entity supports."""
        ...

    def revision_id(self) -> Any:
        """Current revision id. Only meaningful with REVISIONABLE."""
        ...

    def display_name(self) -> Any:
        """Account display name. Only meaningful with ACCOUNT."""
        ...

    def link_templates(self) -> Mapping[str, str]:
        """Link template name -> path pattern declared by the entity type."""
        ...

    def to_url(self, rel: str) -> str:
        """Generate the URL for a link template. May raise."""
        ...

    def field_definitions(self) -> Mapping[str, FieldDefinition]:
        """Field name -> definition. Only meaningful with FIELDABLE."""
        ...

    def get(self, field_name: str) -> FieldItems:
        """Items of one field, tagged by field kind."""
        ...

    def referenced_entities(self, field_name: str) -> list[Entity]:
        """Entities a reference field currently resolves to, skipping broken targets."""
        ...

    def to_dict(self) -> dict[str, Any]:
        """Backend-native flat field/value mapping."""
        ...
