"""EntityDriver: create, load and query entities as plain records.

Usage:
    driver = EntityDriver(backend)

    record = driver.create_entity("node", {"type": "article", "title": "Hello"})
    record["_meta"]["label"]  # "Hello"

    driver.load_entity("node", record["_meta"]["id"])
    driver.load_entities("node", [1, 2, 999])
    driver.query_entities("node", [["status", 1], ["title", "Hel", "STARTS_WITH"]], "OR")
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from entitydriver.config import DriverSettings
from entitydriver.core.projection import project
from entitydriver.core.query import Condition, Conjunction, normalize_conditions
from entitydriver.storage.protocol import EntityBackend

logger = logging.getLogger(__name__)


class EntityDriver:
    """Facade over an entity backend returning serializable records.

    Every result is a plain dict (or list of dicts) with a "_meta" block and
    reference fields expanded to the referenced entities' metadata. Nothing
    is cached; each call goes to the backend.

    Queries always run with access checking disabled, so whoever can call
    this driver can read every entity of the backend.

    Args:
        backend: Host entity system to delegate to.
        settings: Driver settings (loaded from the environment if omitted).
    """

    def __init__(self, backend: EntityBackend, settings: DriverSettings | None = None):
        self._backend = backend
        self._settings = settings or DriverSettings()

    @property
    def backend(self) -> EntityBackend:
        return self._backend

    def create_entity(self, entity_type_id: str, values: Mapping[str, Any]) -> dict[str, Any]:
        """Create and save an entity.

        Args:
            entity_type_id: Entity type of the new entity.
            values: Initial field values, validated by the backend.

        Returns:
            Record of the saved entity.
        """
        entity = self._backend.create(entity_type_id, values)
        self._backend.save(entity)
        logger.debug("Created %s %s", entity_type_id, entity.id())
        return project(entity)

    def load_entity(self, entity_type_id: str, entity_id: Any) -> dict[str, Any] | None:
        """Load one entity.

        Returns:
            Record of the entity, or None if it does not exist.
        """
        records = self.load_entities(entity_type_id, [entity_id])
        return records[0] if records else None

    def load_entities(self, entity_type_id: str, entity_ids: Iterable[Any]) -> list[dict[str, Any]]:
        """Load a set of entities.

        Missing ids are skipped. Records come back in the order the backend
        returns them, which is not necessarily the order of entity_ids.
        """
        requested = list(entity_ids)
        entities = self._backend.load_multiple(entity_type_id, requested)
        logger.debug(
            "Loaded %d of %d %s entities", len(entities), len(requested), entity_type_id
        )
        return [project(entity) for entity in entities.values()]

    def query_entities(
        self,
        entity_type_id: str,
        conditions: Iterable[Condition | Sequence[Any]],
        conjunction: str | Conjunction | None = None,
    ) -> list[dict[str, Any]]:
        """Query entities and load the matches.

        Args:
            entity_type_id: Entity type to query.
            conditions: Condition objects or (field, value, operator, langcode)
                sequences; trailing elements may be omitted.
            conjunction: "AND" (all conditions must match) or "OR" (at least
                one must match). Defaults to the configured conjunction.

        Returns:
            Records of the matching entities, empty if nothing matched.
        """
        if conjunction is None:
            conjunction = self._settings.default_conjunction
        query = self._backend.get_query(entity_type_id, conjunction)
        for condition in normalize_conditions(conditions):
            query.condition(*condition.as_tuple())
        ids = query.access_check(False).execute()
        if not ids:
            return []
        return self.load_entities(entity_type_id, ids)
