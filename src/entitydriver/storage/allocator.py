"""Entity id allocation service.

IdSequence is a stateful service that hands out ids and revision ids per
entity type.
"""

from __future__ import annotations


class IdSequence:
    """Monotonic id sequences, one per entity type.

    Ids start at 1 and are never reused, even after an entity is deleted.
    Revision ids use a separate sequence per entity type.
    """

    def __init__(self) -> None:
        """Initialize empty id and revision sequences."""
        self._next_ids: dict[str, int] = {}
        self._next_revisions: dict[str, int] = {}

    def next_id(self, entity_type_id: str) -> int:
        """Allocate the next entity id for a type.

        Starts at 1 for a type that has not allocated any id yet.

        Args:
            entity_type_id: Entity type to allocate for.

        Returns:
            Newly allocated entity id.
        """
        value = self._next_ids.get(entity_type_id, 1)
        self._next_ids[entity_type_id] = value + 1
        return value

    def next_revision(self, entity_type_id: str) -> int:
        """Allocate the next revision id for a type.

        Revision ids are counted separately from entity ids, so allocating a
        revision never consumes an entity id.

        Args:
            entity_type_id: Entity type to allocate for.

        Returns:
            Newly allocated revision id.
        """
        value = self._next_revisions.get(entity_type_id, 1)
        self._next_revisions[entity_type_id] = value + 1
        return value
