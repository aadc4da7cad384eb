"""Arbiter Core - configuration, logging and error types shared by all packages."""

from .config import CoreSettings, clear_config_cache, get_config
from .exceptions import (
    ArbiterException,
    ConfigException,
    NotFoundError,
    SelectionInvariantError,
    ValidationException,
)
from .logging import (
    configure_logging,
    correlation_context,
    get_correlation_id,
    get_logger,
)

__all__ = [
    # Config
    "CoreSettings",
    "get_config",
    "clear_config_cache",
    # Exceptions
    "ArbiterException",
    "ValidationException",
    "ConfigException",
    "NotFoundError",
    "SelectionInvariantError",
    # Logging
    "configure_logging",
    "correlation_context",
    "get_correlation_id",
    "get_logger",
]
