"""Local in-memory entity backend.

Simple dict-based backend suitable for single-process use and testing. It
plays the host entity system's role: schema-checked creation, id and
revision assignment, multi-load, condition queries, link generation and
reference resolution.

Usage:
    backend = LocalBackend([node_type, user_type])
    entity = backend.create("node", {"type": "article", "title": "Hello"})
    backend.save(entity)
    ids = backend.get_query("node").condition("status", 1).execute()
"""

from __future__ import annotations

import copy as cp
import logging
import re
from collections.abc import Callable, Iterable, Iterator, Mapping, Sequence
from typing import Any, Self, cast

from entitydriver.config import LocalBackendSettings
from entitydriver.core.entity import Capability, Entity
from entitydriver.core.field import FieldDefinition, FieldItems, ReferenceItems, ScalarItems
from entitydriver.core.query import Condition, Conjunction, Operator, combine, matches
from entitydriver.storage.allocator import IdSequence
from entitydriver.storage.models import (
    EntityTypeDefinition,
    InvalidEntityValuesError,
    InvalidQueryError,
    LinkGenerationError,
    UnknownEntityTypeError,
)

logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"\{(\w+)\}")

AccessPolicy = Callable[[Entity], bool]
"""Decides whether an entity is visible to access-checked queries."""


def _coerce_id(entity_id: Any) -> Any:
    """Integer-looking strings address the same entity as the integer."""
    if isinstance(entity_id, str) and entity_id.strip().isdigit():
        return int(entity_id)
    return entity_id


class LocalEntity:
    """Entity held by a LocalBackend.

    Field items are stored as lists: plain values for scalar fields and
    target ids for reference fields.
    """

    def __init__(
        self,
        backend: LocalBackend,
        definition: EntityTypeDefinition,
        bundle: str,
        langcode: str,
        items: dict[str, list[Any]],
        entity_id: Any = None,
        revision_id: Any = None,
    ):
        self._backend = backend
        self._definition = definition
        self._bundle = bundle
        self._langcode = langcode
        self._items = items
        self._id = entity_id
        self._revision_id = revision_id
        self._fields = definition.field_definitions(bundle)

    def __repr__(self) -> str:
        return f"LocalEntity({self._definition.id!r}, id={self._id!r}, bundle={self._bundle!r})"

    @property
    def definition(self) -> EntityTypeDefinition:
        return self._definition

    @property
    def langcode(self) -> str:
        return self._langcode

    def is_new(self) -> bool:
        return self._id is None

    def id(self) -> Any:
        return self._id

    def label(self) -> Any:
        label_field = self._definition.keys.label
        if label_field is None:
            return None
        values = self._items.get(label_field, [])
        return values[0] if values else None

    def entity_type_id(self) -> str:
        return self._definition.id

    def bundle(self) -> str:
        return self._bundle

    def capabilities(self) -> frozenset[Capability]:
        capabilities = set()
        if self._definition.fieldable:
            capabilities.add(Capability.FIELDABLE)
        if self._definition.revisionable:
            capabilities.add(Capability.REVISIONABLE)
        if self._definition.account:
            capabilities.add(Capability.ACCOUNT)
        return frozenset(capabilities)

    def revision_id(self) -> Any:
        return self._revision_id

    def display_name(self) -> Any:
        name_field = self._definition.display_name_field
        if name_field is None:
            return self.label()
        values = self._items.get(name_field, [])
        return values[0] if values else None

    def link_templates(self) -> Mapping[str, str]:
        return self._definition.link_templates

    def to_url(self, rel: str) -> str:
        """Fill a link template's placeholders and prefix the base URL.

        Raises:
            LinkGenerationError: If the template does not exist, the entity is
                unsaved, or a placeholder has no value.
        """
        template = self._definition.link_templates.get(rel)
        if template is None:
            raise LinkGenerationError(
                f"No link template '{rel}' found for the '{self._definition.id}' entity type"
            )
        if self.is_new():
            raise LinkGenerationError(f"Cannot generate '{rel}' link for an unsaved entity")

        def _fill(match: re.Match[str]) -> str:
            name = match.group(1)
            if name in (self._definition.id, self._definition.keys.id):
                return str(self._id)
            if name == self._definition.keys.bundle:
                return self._bundle
            values = self._items.get(name, [])
            if name in self._fields and len(values) == 1 and values[0] is not None:
                return str(values[0])
            raise LinkGenerationError(f"Missing parameter '{name}' for link '{rel}'")

        path = _PLACEHOLDER.sub(_fill, template)
        return self._backend.settings.base_url.rstrip("/") + path

    def field_definitions(self) -> Mapping[str, FieldDefinition]:
        return dict(self._fields)

    def get(self, field_name: str) -> FieldItems:
        """Items of a field, tagged by kind.

        Raises:
            KeyError: If the bundle has no such field.
        """
        definition = self._fields.get(field_name)
        if definition is None:
            raise KeyError(
                f"Field '{field_name}' is unknown on {self._definition.id}:{self._bundle}"
            )
        values = tuple(self._items.get(field_name, []))
        if definition.is_reference:
            return ReferenceItems(field_name, cast(str, definition.target_type), values)
        return ScalarItems(field_name, values)

    def referenced_entities(self, field_name: str) -> list[Entity]:
        """Targets of a reference field in item order. Missing targets are skipped."""
        items = self.get(field_name)
        if not isinstance(items, ReferenceItems):
            return []
        loaded = self._backend.load_multiple(items.target_type, list(items.target_ids))
        return [loaded[target] for target in map(_coerce_id, items.target_ids) if target in loaded]

    def values_for(self, path: str) -> list[Any]:
        """Values a query condition on "field" or "field.property" compares against.

        Raises:
            InvalidQueryError: If the field does not exist.
        """
        name, _, prop = path.partition(".")
        keys = self._definition.keys
        if name == keys.id:
            return [self._id]
        if name == keys.revision and self._definition.revisionable:
            return [self._revision_id]
        if name == keys.bundle:
            return [self._bundle]
        if name == keys.langcode:
            return [self._langcode]
        known = any(
            name in self._definition.field_definitions(bundle)
            for bundle in self._definition.bundle_names()
        )
        if not known or prop not in ("", "value", "target_id"):
            raise InvalidQueryError(f"'{path}' not found on entity type '{self._definition.id}'")
        # Fields of other bundles are simply empty here.
        return list(self._items.get(name, []))

    def to_dict(self) -> dict[str, Any]:
        """Flat field/value mapping.

        Single-valued scalar fields flatten to the bare value, multi-valued
        ones to a list, reference fields to a list of {"target_id": ...}.
        """
        keys = self._definition.keys
        result: dict[str, Any] = {keys.id: self._id}
        if self._definition.revisionable:
            result[keys.revision] = self._revision_id
        if keys.bundle is not None:
            result[keys.bundle] = self._bundle
        result[keys.langcode] = self._langcode
        for name, definition in self._fields.items():
            values = cp.deepcopy(self._items.get(name, []))
            if definition.is_reference:
                result[name] = [{"target_id": target} for target in values]
            elif definition.is_multiple:
                result[name] = values
            else:
                result[name] = values[0] if values else None
        return result


class LocalEntityQuery:
    """Condition query over one entity type of a LocalBackend.

    Access checking is on by default; while on, the backend's access policy
    (if any) hides entities from the result.
    """

    def __init__(self, backend: LocalBackend, entity_type_id: str, conjunction: Conjunction):
        self._backend = backend
        self._entity_type_id = entity_type_id
        self._conjunction = conjunction
        self._conditions: list[Condition] = []
        self._access_check = True

    @property
    def conjunction(self) -> Conjunction:
        return self._conjunction

    @property
    def conditions(self) -> tuple[Condition, ...]:
        return tuple(self._conditions)

    @property
    def checks_access(self) -> bool:
        return self._access_check

    def condition(
        self,
        field: str,
        value: Any = None,
        operator: str | Operator | None = None,
        langcode: str | None = None,
    ) -> Self:
        """Add a condition. Returns the query for chaining.

        Raises:
            ValueError: If operator is unknown.
        """
        resolved = Operator.parse(operator, value)
        self._conditions.append(Condition(field, value, resolved, langcode))
        return self

    def access_check(self, enabled: bool = True) -> Self:
        self._access_check = enabled
        return self

    def _matches(self, entity: LocalEntity, condition: Condition) -> bool:
        if condition.langcode is not None and entity.langcode != condition.langcode:
            return False
        operator = Operator.parse(condition.operator, condition.value)
        return matches(operator, entity.values_for(condition.field), condition.value)

    def execute(self) -> list[Any]:
        """Ids of matching entities in storage order."""
        policy = self._backend.access_policy if self._access_check else None
        result = []
        for entity in self._backend.iter_entities(self._entity_type_id):
            if policy is not None and not policy(entity):
                continue
            if combine(self._conjunction, (self._matches(entity, c) for c in self._conditions)):
                result.append(entity.id())
        logger.debug(
            "Query on %s (%s, %d conditions, access check %s) matched %d",
            self._entity_type_id,
            self._conjunction.value,
            len(self._conditions),
            "on" if self._access_check else "off",
            len(result),
        )
        return result


class LocalBackend:
    """In-memory entity backend using nested dicts.

    Structure:
        _records[entity_type_id][entity_id] = saved state of one entity

    Args:
        definitions: Entity types to register up front.
        settings: Backend settings (loaded from the environment if omitted).
        access_policy: Visibility rule applied by access-checked queries.
    """

    def __init__(
        self,
        definitions: Iterable[EntityTypeDefinition] = (),
        settings: LocalBackendSettings | None = None,
        access_policy: AccessPolicy | None = None,
    ):
        self.settings = settings or LocalBackendSettings()
        self.access_policy = access_policy
        self._definitions: dict[str, EntityTypeDefinition] = {}
        self._records: dict[str, dict[Any, dict[str, Any]]] = {}
        self._ids = IdSequence()
        for definition in definitions:
            self.register(definition)

    def register(self, definition: EntityTypeDefinition) -> None:
        """Add an entity type.

        Raises:
            ValueError: If the entity type id is already registered.
        """
        if definition.id in self._definitions:
            raise ValueError(f"Entity type '{definition.id}' is already registered")
        self._definitions[definition.id] = definition
        self._records[definition.id] = {}

    def get_definition(self, entity_type_id: str) -> EntityTypeDefinition:
        """Raises UnknownEntityTypeError if the type is not registered."""
        definition = self._definitions.get(entity_type_id)
        if definition is None:
            raise UnknownEntityTypeError(entity_type_id)
        return definition

    def _resolve_bundle(self, definition: EntityTypeDefinition, values: dict[str, Any]) -> str:
        bundle_key = definition.keys.bundle
        bundles = definition.bundle_names()
        if bundle_key is not None and bundle_key in values:
            return str(values.pop(bundle_key))
        if len(bundles) == 1:
            return bundles[0]
        raise InvalidEntityValuesError(
            f"Missing bundle for entity type '{definition.id}' (one of {', '.join(bundles)})"
        )

    def _normalize_items(self, definition: FieldDefinition, raw: Any) -> list[Any]:
        if raw is None:
            return []
        raw_items = list(raw) if isinstance(raw, list | tuple) else [raw]
        items = []
        for item in raw_items:
            if definition.is_reference:
                if isinstance(item, Entity):
                    if item.entity_type_id() != definition.target_type or item.id() is None:
                        raise InvalidEntityValuesError(
                            f"Field '{definition.name}' needs a saved "
                            f"{definition.target_type} entity"
                        )
                    item = item.id()
                elif isinstance(item, Mapping):
                    item = item.get("target_id")
                item = _coerce_id(item)
            elif isinstance(item, Mapping) and "value" in item:
                item = item["value"]
            if item is not None:
                items.append(item)
        if not definition.accepts(len(items)):
            raise InvalidEntityValuesError(
                f"Field '{definition.name}' accepts at most {definition.cardinality} "
                f"value(s), got {len(items)}"
            )
        # Entity objects are already reduced to ids here, so the copy stays plain data.
        return cp.deepcopy(items)

    def create(self, entity_type_id: str, values: Mapping[str, Any]) -> LocalEntity:
        """Instantiate a new, unsaved entity from field values.

        Raises:
            UnknownEntityTypeError: If the entity type is not registered.
            InvalidEntityValuesError: If the bundle, a field name, a field's
                number of values, or a required field does not fit the schema.
        """
        definition = self.get_definition(entity_type_id)
        remaining = dict(values)
        keys = definition.keys
        for reserved in (keys.id, keys.revision):
            if reserved in remaining:
                raise InvalidEntityValuesError(f"'{reserved}' is assigned on save")
        bundle = self._resolve_bundle(definition, remaining)
        fields = definition.field_definitions(bundle)
        langcode = str(remaining.pop(keys.langcode, None) or self.settings.default_langcode)

        unknown = sorted(set(remaining) - set(fields))
        if unknown:
            raise InvalidEntityValuesError(
                f"Unknown field(s) for {entity_type_id}:{bundle}: {', '.join(unknown)}"
            )

        items: dict[str, list[Any]] = {}
        for name, field_definition in fields.items():
            raw = remaining.get(name, field_definition.default)
            items[name] = self._normalize_items(field_definition, raw)
            if field_definition.required and not items[name]:
                raise InvalidEntityValuesError(f"Field '{name}' is required")
        return LocalEntity(self, definition, bundle, langcode, items)

    def save(self, entity: Entity) -> None:
        """Store an entity, assigning its id when new and a new revision if revisionable.

        Raises:
            TypeError: If the entity was not created by this backend.
        """
        if not isinstance(entity, LocalEntity) or entity._backend is not self:
            raise TypeError(f"{entity!r} does not belong to this backend")
        entity_type_id = entity.entity_type_id()
        if entity.is_new():
            entity._id = self._ids.next_id(entity_type_id)
        if entity.definition.revisionable:
            entity._revision_id = self._ids.next_revision(entity_type_id)
        self._records[entity_type_id][entity._id] = {
            "bundle": entity.bundle(),
            "langcode": entity.langcode,
            "items": cp.deepcopy(entity._items),
            "revision_id": entity._revision_id,
        }
        logger.debug(
            "Saved %s %s (revision %s)", entity_type_id, entity._id, entity._revision_id
        )

    def _hydrate(self, definition: EntityTypeDefinition, entity_id: Any) -> LocalEntity:
        record = self._records[definition.id][entity_id]
        return LocalEntity(
            self,
            definition,
            record["bundle"],
            record["langcode"],
            cp.deepcopy(record["items"]),
            entity_id=entity_id,
            revision_id=record["revision_id"],
        )

    def iter_entities(self, entity_type_id: str) -> Iterator[LocalEntity]:
        """Iterate fresh copies of all stored entities of a type in storage order."""
        definition = self.get_definition(entity_type_id)
        for entity_id in list(self._records[entity_type_id]):
            yield self._hydrate(definition, entity_id)

    def load_multiple(
        self, entity_type_id: str, entity_ids: Sequence[Any]
    ) -> dict[Any, LocalEntity]:
        """Load entities by id in storage order. Missing ids are absent.

        Raises:
            UnknownEntityTypeError: If the entity type is not registered.
        """
        definition = self.get_definition(entity_type_id)
        wanted = set()
        for entity_id in entity_ids:
            try:
                wanted.add(_coerce_id(entity_id))
            except TypeError:
                continue  # unhashable ids cannot match a stored entity
        return {
            entity_id: self._hydrate(definition, entity_id)
            for entity_id in self._records[entity_type_id]
            if entity_id in wanted
        }

    def get_query(
        self, entity_type_id: str, conjunction: str | Conjunction = "AND"
    ) -> LocalEntityQuery:
        """Start a query on an entity type.

        Raises:
            UnknownEntityTypeError: If the entity type is not registered.
            ValueError: If conjunction is neither AND nor OR.
        """
        self.get_definition(entity_type_id)
        return LocalEntityQuery(self, entity_type_id, Conjunction.parse(conjunction))
