"""Projection models.

These models are plain data and serialize to JSON-compatible dicts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

META_KEY = "_meta"
"""Reserved record key holding the entity's own metadata."""


@dataclass(frozen=True, slots=True)
class LinkResult:
    """Outcome of generating the URL for one link template.

    Attributes:
        rel: Link template name.
        url: Generated URL, or None when generation failed.
        error: The exception raised by URL generation, if any.
    """

    rel: str
    url: str | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(slots=True)
class EntityMeta:
    """Metadata describing one entity.

    revision_id and display_name are tagged optionals: the has_* flags say
    whether the entity supports them, independent of the value (a revisionable
    entity may still report a None revision id).

    Example:
        meta = EntityMeta(id=1, label="Hello", entity_type="node", bundle="article")
        meta.to_dict()
        # {"id": 1, "label": "Hello", "entity_type": "node", "bundle": "article", "links": {}}
    """

    id: Any
    label: str
    entity_type: str
    bundle: str
    revision_id: Any = None
    has_revision: bool = False
    display_name: str | None = None
    has_display_name: bool = False
    links: dict[str, str | None] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dictionary."""
        result: dict[str, Any] = {
            "id": self.id,
            "label": self.label,
            "entity_type": self.entity_type,
            "bundle": self.bundle,
        }
        if self.has_revision:
            result["revision_id"] = self.revision_id
        if self.has_display_name:
            result["display_name"] = self.display_name
        result["links"] = dict(self.links)
        return result
