# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Arbiter Contributors

"""Custom exception hierarchy for Arbiter.

Provides specific exception types for different error categories,
enabling better error handling and clearer error messages.
"""

from __future__ import annotations

from typing import Any


class ArbiterException(Exception):  # noqa: N818
    """Base exception for all Arbiter errors.

    All Arbiter-specific exceptions should inherit from this class.
    """

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(ArbiterException):
    """Exception for validation errors.

    Raised when:
    - A node address cannot be parsed
    - A trade statistics record carries a malformed arbitrator prefix
    - An unknown selection strategy is requested
    """

    def __init__(self, message: str, field: str | None = None, value: Any = None):
        details = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = str(value)
        super().__init__(message, details)
        self.field = field
        self.value = value


class ConfigException(ArbiterException):
    """Exception for configuration errors.

    Raised when:
    - An ARBITER_ environment variable fails validation when settings load
    """

    def __init__(self, message: str, invalid_vars: list[str] | None = None):
        details = {}
        if invalid_vars:
            details["invalid_vars"] = invalid_vars
        super().__init__(message, details)
        self.invalid_vars = invalid_vars or []


class NotFoundError(ArbiterException):
    """Exception for resource not found errors.

    Raised when:
    - A dispute agent is looked up by an address the registry does not hold
    """

    def __init__(self, resource_type: str, resource_id: str):
        message = f"{resource_type} not found: {resource_id}"
        details = {
            "resource_type": resource_type,
            "resource_id": resource_id,
        }
        super().__init__(message, details)
        self.resource_type = resource_type
        self.resource_id = resource_id


class SelectionInvariantError(ArbiterException, AssertionError):
    """A selected address could not be resolved in the snapshot it came from.

    This is a logic defect, not a recoverable condition: the snapshot is held
    for the whole selection call, so the winner must always be present.
    Callers should not catch this to fall back to "no agent".
    """

    def __init__(self, message: str, address: str | None = None):
        details = {}
        if address is not None:
            details["address"] = address
        super().__init__(message, details)
        self.address = address
