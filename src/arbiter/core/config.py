"""Core configuration - centralized config for the arbiter package.

All environment-based configuration should flow through this module.
This provides a single source of truth and consistent defaults.

Usage:
    from arbiter.core.config import get_config
    config = get_config()

    # Access settings
    log_level = config.log_level
    strategy = config.default_selection_strategy
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigException


class CoreSettings(BaseSettings):
    """Core configuration settings for Arbiter.

    Settings can be configured via environment variables with the
    ARBITER_ prefix, or from a .env file in the working directory.

    The look-back window and the arbitrator prefix length are fixed
    protocol values and have no setting here.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ==========================================================================
    # LOGGING SETTINGS
    # ==========================================================================

    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR)",
        validation_alias="ARBITER_LOG_LEVEL",
    )
    log_format: str = Field(
        default="",
        description="Log format: 'json', 'text', or '' (auto-detect)",
        validation_alias="ARBITER_LOG_FORMAT",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (optional)",
        validation_alias="ARBITER_LOG_FILE",
    )

    # ==========================================================================
    # SELECTION SETTINGS
    # ==========================================================================

    default_selection_strategy: Literal["least_used", "random"] = Field(
        default="least_used",
        description="Strategy used by DisputeAgentSelector.select(): 'least_used' or 'random'",
        validation_alias="ARBITER_SELECTION_STRATEGY",
    )


# ==========================================================================
# GLOBAL CONFIG INSTANCE (lazy loaded)
# ==========================================================================

_config: CoreSettings | None = None


def get_config() -> CoreSettings:
    """Get the global configuration instance.

    Returns:
        The singleton CoreSettings instance.

    Raises:
        ConfigException: If an environment variable holds an invalid value
    """
    global _config
    if _config is None:
        try:
            _config = CoreSettings()
        except ValidationError as e:
            invalid = [".".join(str(part) for part in err["loc"]) for err in e.errors()]
            raise ConfigException(
                f"Invalid configuration: {', '.join(invalid)}",
                invalid_vars=invalid,
            ) from e
    return _config


def clear_config_cache() -> None:
    """Clear the config cache. Useful for testing."""
    global _config
    _config = None
