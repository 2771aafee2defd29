"""Entity access facade.

Architecture Note:
    driver/ holds the public operations. It keeps a reference to the injected
    backend and nothing else; all entity state lives in the backend.
"""

from entitydriver.driver.driver import EntityDriver
from entitydriver.driver.mixin import EntityDriverMixin

__all__ = [
    "EntityDriver",
    "EntityDriverMixin",
]
