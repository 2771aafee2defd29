"""Projection functionality: entity -> plain record with metadata."""

from entitydriver.core.projection.models import META_KEY, EntityMeta, LinkResult
from entitydriver.core.projection.operations import (
    derive_meta,
    expand_references,
    project,
    resolve_link,
)

__all__ = [
    # Models
    "META_KEY",
    "EntityMeta",
    "LinkResult",
    # Operations
    "project",
    "derive_meta",
    "expand_references",
    "resolve_link",
]
