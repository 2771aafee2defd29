"""Backend protocol for the host entity system.

The driver only talks to these interfaces, so any host (a real CMS bridge,
a remote API client, or the bundled LocalBackend) can be injected.

Usage:
    backend = LocalBackend()
    driver = EntityDriver(backend)
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Protocol, Self

from entitydriver.core.entity import Entity
from entitydriver.core.query import Conjunction, Operator


class EntityQuery(Protocol):
    """Query builder returned by EntityBackend.get_query()."""

    def condition(
        self,
        field: str,
        value: Any = None,
        operator: str | Operator | None = None,
        langcode: str | None = None,
    ) -> Self:
        """Add a condition. Returns the query for chaining."""
        ...

    def access_check(self, enabled: bool = True) -> Self:
        """Enable or disable access checking. Returns the query for chaining."""
        ...

    def execute(self) -> list[Any]:
        """Run the query and return matching entity ids."""
        ...


class EntityBackend(Protocol):
    """Abstract entity storage and query interface."""

    def create(self, entity_type_id: str, values: Mapping[str, Any]) -> Entity:
        """Instantiate a new, unsaved entity."""
        ...

    def save(self, entity: Entity) -> None:
        """Persist an entity, assigning its id if new."""
        ...

    def load_multiple(self, entity_type_id: str, entity_ids: Sequence[Any]) -> dict[Any, Entity]:
        """Load entities by id. Missing ids are absent from the result."""
        ...

    def get_query(self, entity_type_id: str, conjunction: str | Conjunction = "AND") -> EntityQuery:
        """Start a query combining its conditions with the given conjunction."""
        ...
