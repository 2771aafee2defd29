"""Configuration settings using Pydantic Settings.

Provides typed configuration with environment variable support for the
driver and the in-memory backend.

Usage:
    from entitydriver.config import DriverSettings, LocalBackendSettings

    # Load from environment variables (ENTITY_DRIVER_*, ENTITY_BACKEND_*)
    driver_settings = DriverSettings()
    backend_settings = LocalBackendSettings()

    # Or override with explicit values
    driver_settings = DriverSettings(default_conjunction="OR")
"""

from __future__ import annotations

from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DriverSettings(BaseSettings):  # type: ignore[misc]
    """Configuration for EntityDriver.

    Attributes:
        default_conjunction: Conjunction used by query_entities() when the
            caller does not pass one.

    Environment Variables:
        ENTITY_DRIVER_DEFAULT_CONJUNCTION
    """

    model_config = SettingsConfigDict(
        env_prefix="ENTITY_DRIVER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    default_conjunction: Literal["AND", "OR"] = "AND"

    @field_validator("default_conjunction", mode="before")
    @classmethod
    def _upper(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value


class LocalBackendSettings(BaseSettings):  # type: ignore[misc]
    """Configuration for the in-memory LocalBackend.

    Attributes:
        base_url: Prefix for generated entity URLs ("" keeps them relative).
        default_langcode: Language assigned to entities created without one.

    Environment Variables:
        ENTITY_BACKEND_BASE_URL
        ENTITY_BACKEND_DEFAULT_LANGCODE
    """

    model_config = SettingsConfigDict(
        env_prefix="ENTITY_BACKEND_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    base_url: str = ""
    default_langcode: str = "en"
