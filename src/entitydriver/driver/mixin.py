"""Mixin giving host classes a lazily built EntityDriver.

Usage:
    class ContentSteps(EntityDriverMixin):
        def __init__(self, backend):
            self.entity_backend = backend

        def given_article(self, title):
            return self.get_entity_driver().create_entity(
                "node", {"type": "article", "title": title}
            )
"""

from __future__ import annotations

from entitydriver.driver.driver import EntityDriver
from entitydriver.storage.protocol import EntityBackend


class EntityDriverMixin:
    """Provides get_entity_driver() to classes exposing an entity_backend attribute."""

    entity_backend: EntityBackend | None = None
    _entity_driver: EntityDriver | None = None

    def get_entity_driver(self) -> EntityDriver:
        """Return the driver, building it on first use.

        Raises:
            RuntimeError: If no entity_backend has been set.
        """
        if self._entity_driver is None:
            if self.entity_backend is None:
                raise RuntimeError(
                    f"{type(self).__name__} needs an entity_backend before using the entity driver"
                )
            self._entity_driver = EntityDriver(self.entity_backend)
        return self._entity_driver
