"""entitydriver: create, load and query CMS-style entities as plain data.

Usage:
    from entitydriver import EntityDriver, LocalBackend

    backend = LocalBackend([node_type])
    driver = EntityDriver(backend)

    record = driver.create_entity("node", {"type": "article", "title": "Hello"})
    record["_meta"]["label"]  # "Hello"

    published = driver.query_entities("node", [["status", 1]])
"""

__version__ = "0.1.0"

# Configuration
from entitydriver.config import DriverSettings, LocalBackendSettings

# Core primitives
from entitydriver.core import (
    META_KEY,
    UNLIMITED,
    Capability,
    Condition,
    Conjunction,
    Entity,
    EntityMeta,
    FieldDefinition,
    FieldKind,
    Operator,
    derive_meta,
    project,
)

# Driver
from entitydriver.driver import EntityDriver, EntityDriverMixin

# Storage
from entitydriver.storage import (
    EntityBackend,
    EntityKeys,
    EntityQuery,
    EntityStorageError,
    EntityTypeDefinition,
    InvalidEntityValuesError,
    InvalidQueryError,
    LinkGenerationError,
    LocalBackend,
    UnknownEntityTypeError,
)

__all__ = [
    # Version
    "__version__",
    # Core
    "Entity",
    "Capability",
    "FieldDefinition",
    "FieldKind",
    "UNLIMITED",
    "Condition",
    "Conjunction",
    "Operator",
    "META_KEY",
    "EntityMeta",
    "project",
    "derive_meta",
    # Driver
    "EntityDriver",
    "EntityDriverMixin",
    # Storage
    "EntityBackend",
    "EntityQuery",
    "LocalBackend",
    "EntityKeys",
    "EntityTypeDefinition",
    "EntityStorageError",
    "UnknownEntityTypeError",
    "InvalidEntityValuesError",
    "InvalidQueryError",
    "LinkGenerationError",
    # Config
    "DriverSettings",
    "LocalBackendSettings",
]
