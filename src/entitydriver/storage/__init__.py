"""Entity backends: the host contract and the in-memory implementation."""

from entitydriver.storage.local import LocalBackend, LocalEntity, LocalEntityQuery
from entitydriver.storage.models import (
    EntityKeys,
    EntityStorageError,
    EntityTypeDefinition,
    InvalidEntityValuesError,
    InvalidQueryError,
    LinkGenerationError,
    UnknownEntityTypeError,
)
from entitydriver.storage.protocol import EntityBackend, EntityQuery

__all__ = [
    # Protocols
    "EntityBackend",
    "EntityQuery",
    # Local implementation
    "LocalBackend",
    "LocalEntity",
    "LocalEntityQuery",
    # Schema
    "EntityKeys",
    "EntityTypeDefinition",
    # Errors
    "EntityStorageError",
    "UnknownEntityTypeError",
    "InvalidEntityValuesError",
    "InvalidQueryError",
    "LinkGenerationError",
]
