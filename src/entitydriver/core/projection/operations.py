"""Projection of entities into plain records.

project() is the single entry point used by the driver; derive_meta() and
expand_references() are exposed for callers that only need part of it.
"""

from __future__ import annotations

import logging
from typing import Any

from entitydriver.core.entity import Capability, Entity
from entitydriver.core.field import ReferenceItems
from entitydriver.core.projection.models import META_KEY, EntityMeta, LinkResult

logger = logging.getLogger(__name__)


def _as_text(value: Any) -> str:
    return "" if value is None else str(value)


def resolve_link(entity: Entity, rel: str) -> LinkResult:
    """Generate one link, capturing any failure in the result.

    Args:
        entity: Entity to generate the link for.
        rel: Link template name.

    Returns:
        LinkResult with either url or error set.
    """
    try:
        return LinkResult(rel=rel, url=entity.to_url(rel))
    except Exception as e:
        logger.debug(
            "Link '%s' unavailable for %s %s: %s", rel, entity.entity_type_id(), entity.id(), e
        )
        return LinkResult(rel=rel, error=e)


def derive_meta(entity: Entity) -> EntityMeta:
    """Build the metadata block for an entity.

    Revision id and display name are included only when the entity advertises
    the matching capability. Every declared link template gets an entry; a
    template whose URL cannot be generated maps to None.
    """
    capabilities = entity.capabilities()
    meta = EntityMeta(
        id=entity.id(),
        label=_as_text(entity.label()),
        entity_type=entity.entity_type_id(),
        bundle=entity.bundle(),
    )
    if Capability.REVISIONABLE in capabilities:
        meta.has_revision = True
        meta.revision_id = entity.revision_id()
    if Capability.ACCOUNT in capabilities:
        meta.has_display_name = True
        meta.display_name = _as_text(entity.display_name())

    for rel in entity.link_templates():
        meta.links[rel] = resolve_link(entity, rel).url
    return meta


def expand_references(entity: Entity, record: dict[str, Any]) -> dict[str, Any]:
    """Replace entity-reference field values with the referenced entities' metadata.

    Non-reference fields keep the value from the flat conversion. Broken
    references are left out of the list. Non-fieldable entities are returned
    unchanged.

    Args:
        entity: Entity the record was produced from.
        record: Flat record of the entity.

    Returns:
        New record; the input is not modified.
    """
    if Capability.FIELDABLE not in entity.capabilities():
        return record

    expanded = dict(record)
    for name in entity.field_definitions():
        items = entity.get(name)
        if isinstance(items, ReferenceItems):
            expanded[name] = [
                derive_meta(ref).to_dict() for ref in entity.referenced_entities(name)
            ]
    return expanded


def project(entity: Entity) -> dict[str, Any]:
    """Flatten an entity into a record with a _meta block and expanded references."""
    record = entity.to_dict()
    record[META_KEY] = derive_meta(entity).to_dict()
    return expand_references(entity, record)
