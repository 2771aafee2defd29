"""Configuration module using Pydantic Settings.

Usage:
    from entitydriver.config import DriverSettings, LocalBackendSettings

    settings = DriverSettings(default_conjunction="OR")
    backend_settings = LocalBackendSettings(base_url="https://example.com")
"""

from entitydriver.config.settings import DriverSettings, LocalBackendSettings

__all__ = [
    "DriverSettings",
    "LocalBackendSettings",
]
