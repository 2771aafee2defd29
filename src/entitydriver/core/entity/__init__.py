"""Entity contract: what projection needs to read from a backend's entity objects."""

from entitydriver.core.entity.protocol import Capability, Entity

__all__ = [
    "Capability",
    "Entity",
]
