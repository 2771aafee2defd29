"""Entity type definitions and backend errors.

Usage:
    node = EntityTypeDefinition(
        id="node",
        label="Content",
        keys=EntityKeys(id="nid", revision="vid", bundle="type", label="title"),
        bundles=("article", "page"),
        revisionable=True,
        link_templates={"canonical": "/node/{node}", "edit-form": "/node/{node}/edit"},
        base_fields=(FieldDefinition("title", required=True), FieldDefinition("status")),
    )
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from entitydriver.core.field import FieldDefinition


class EntityStorageError(Exception):
    """Base class for errors raised by the in-memory backend."""


class UnknownEntityTypeError(EntityStorageError, KeyError):
    """Raised when an entity type id is not registered."""

    def __init__(self, entity_type_id: str):
        super().__init__(entity_type_id)
        self.entity_type_id = entity_type_id

    def __str__(self) -> str:
        return f"The '{self.entity_type_id}' entity type does not exist."


class InvalidEntityValuesError(EntityStorageError, ValueError):
    """Raised when values passed to create() do not fit the type's schema."""


class InvalidQueryError(EntityStorageError, ValueError):
    """Raised when a query names a field the entity type does not have."""


class LinkGenerationError(EntityStorageError):
    """Raised when a link template cannot be turned into a URL."""


@dataclass(frozen=True, slots=True)
class EntityKeys:
    """Names of the special keys of an entity type.

    Attributes:
        id: Key the entity id is exposed under.
        revision: Key the revision id is exposed under (revisionable types).
        bundle: Value key holding the bundle, None for single-bundle types.
        label: Field used as the entity label, None if the type has none.
        langcode: Value key holding the entity language.
    """

    id: str = "id"
    revision: str = "revision_id"
    bundle: str | None = None
    label: str | None = None
    langcode: str = "langcode"


@dataclass(frozen=True)
class EntityTypeDefinition:
    """Schema and behavior of one entity type.

    Attributes:
        id: Entity type id, e.g. "node".
        label: Human-readable name of the type.
        keys: Special key names.
        bundles: Allowed bundles; empty means the single bundle equal to id.
        revisionable: Whether saves create revisions.
        account: Whether entities are principals with a display name.
        fieldable: Whether entities use the field system.
        display_name_field: Field holding an account's display name.
        link_templates: Link name -> path pattern with {placeholders}.
        base_fields: Fields every bundle has.
        bundle_fields: Extra fields per bundle.
    """

    id: str
    label: str = ""
    keys: EntityKeys = field(default_factory=EntityKeys)
    bundles: tuple[str, ...] = ()
    revisionable: bool = False
    account: bool = False
    fieldable: bool = True
    display_name_field: str | None = None
    link_templates: Mapping[str, str] = field(default_factory=dict)
    base_fields: tuple[FieldDefinition, ...] = ()
    bundle_fields: Mapping[str, tuple[FieldDefinition, ...]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for bundle in self.bundle_fields:
            if bundle not in self.bundle_names():
                raise ValueError(f"Fields declared for unknown bundle '{bundle}' of '{self.id}'")
        if not self.fieldable:
            references = [f.name for f in self.base_fields if f.is_reference] + [
                f.name for fields in self.bundle_fields.values() for f in fields if f.is_reference
            ]
            if references:
                raise ValueError(
                    f"Non-fieldable entity type '{self.id}' cannot have reference fields: "
                    f"{', '.join(references)}"
                )
        object.__setattr__(self, "link_templates", MappingProxyType(dict(self.link_templates)))

    def bundle_names(self) -> tuple[str, ...]:
        return self.bundles or (self.id,)

    def field_definitions(self, bundle: str) -> dict[str, FieldDefinition]:
        """All fields of a bundle, base fields first.

        Raises:
            InvalidEntityValuesError: If bundle is not one of the type's bundles.
        """
        if bundle not in self.bundle_names():
            raise InvalidEntityValuesError(
                f"Bundle '{bundle}' does not exist for entity type '{self.id}'"
            )
        definitions = {definition.name: definition for definition in self.base_fields}
        for definition in self.bundle_fields.get(bundle, ()):
            definitions[definition.name] = definition
        return definitions
