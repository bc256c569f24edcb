"""
Centralized configuration for Rubylith.

Uses Pydantic BaseSettings for environment variable integration
and validation.  The compatibility checkers never read configuration
themselves; callers such as the CLI pass the relevant values in.

Configuration sources (in order of precedence):
1. Explicit constructor arguments
2. Environment variables (RUBYLITH_*)
3. .env file
4. Default values

Example:
    from rubylith.config import get_config

    config = get_config()
    print(config.min_environment_score)  # From RUBYLITH_MIN_ENVIRONMENT_SCORE or 80

    # Override at runtime
    config = get_config(log_format="json")
"""

from __future__ import annotations

from typing import Annotated, Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from rubylith.compatibility.types import WELL_SUPPORTED_COMPONENT_TYPES, ComponentType


class RegistryConfig(BaseSettings):
    """
    Central configuration for Rubylith.

    All settings can be overridden via environment variables
    prefixed with RUBYLITH_.

    Example:
        export RUBYLITH_LOG_LEVEL=debug
        export RUBYLITH_WELL_SUPPORTED_TYPES=ui-component,plugin
    """

    model_config = SettingsConfigDict(
        env_prefix="RUBYLITH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging
    log_level: Literal["debug", "info", "warning", "error"] = Field(
        default="info",
        description="Logging level for Rubylith",
    )
    log_format: Literal["json", "text"] = Field(
        default="text",
        description="Log output format (json for log shippers, text for console)",
    )

    # Matching
    min_environment_score: int = Field(
        default=80,
        ge=0,
        le=100,
        description="Default minimum score when ranking environments",
    )
    batch_max_workers: int = Field(
        default=1,
        ge=1,
        description="Worker threads for batch checks (1 = sequential)",
    )
    well_supported_types: Annotated[list[ComponentType], NoDecode] = Field(
        default_factory=lambda: sorted(WELL_SUPPORTED_COMPONENT_TYPES, key=lambda t: t.value),
        description="Component types the contract checker treats as fully supported",
    )

    # Telemetry
    emit_span_events: bool = Field(
        default=True,
        description="Add OTel span events for check results",
    )

    @field_validator("well_supported_types", mode="before")
    @classmethod
    def split_types(cls, v: object) -> object:
        """Accept a comma-separated string as well as a list."""
        if isinstance(v, str):
            return [part.strip() for part in v.split(",") if part.strip()]
        return v


# Global singleton
_config: Optional[RegistryConfig] = None


def get_config(**overrides) -> RegistryConfig:
    """
    Get the global configuration instance.

    Creates a singleton on first call. Subsequent calls return
    the same instance unless overrides are provided.

    Args:
        **overrides: Override any config values

    Returns:
        RegistryConfig instance
    """
    global _config

    if overrides or _config is None:
        _config = RegistryConfig(**overrides)

    return _config


def reset_config() -> None:
    """Reset the global configuration (for testing)."""
    global _config
    _config = None
