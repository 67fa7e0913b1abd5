"""
Provisioning Exception Hierarchy

Error types raised when the broker's management plane rejects a provisioning
call. Benign outcomes (already exists, rule not found) never reach this
module; the orchestrator decides which outcomes become errors.

Author: asb-transport Contributors
Date: 2026-10-18
"""

from typing import Optional, Dict, Any


class ProvisionError(Exception):
    """
    Base exception for all provisioning errors.

    Attributes:
        message: Human-readable error message
        error_code: Machine-readable error code (e.g., 'EntityNotFound')
        details: Additional context (entity_type, entity_name, operation, etc.)
    """

    error_code: str = "ProvisionError"

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.error_code
        self.details = details or {}


class ConfigurationError(ProvisionError):
    """Raised when the management client cannot be configured (e.g. no connection string)."""
    error_code = "ConfigurationError"


# ========== Entity Errors ==========

class EntityError(ProvisionError):
    """Base class for entity-related errors."""
    error_code = "EntityError"


class EntityNotFoundError(EntityError):
    """Raised when an entity (queue, topic, subscription, rule) is not found."""
    error_code = "EntityNotFound"

    def __init__(
        self,
        entity_type: str,
        entity_name: str,
        message: Optional[str] = None
    ):
        message = message or f"{entity_type.capitalize()} '{entity_name}' not found"
        details = {"entity_type": entity_type, "entity_name": entity_name}
        super().__init__(message, details=details)


class RemoteOperationError(EntityError):
    """
    Raised when the broker fails a call for any reason other than
    existence (quota exceeded, authorization denied, transport failure).
    """
    error_code = "RemoteOperationFailed"

    def __init__(
        self,
        operation: str,
        entity_type: str,
        entity_name: str,
        detail: str,
        message: Optional[str] = None
    ):
        message = message or f"Failed to {operation} {entity_type} '{entity_name}': {detail}"
        details = {
            "operation": operation,
            "entity_type": entity_type,
            "entity_name": entity_name,
            "detail": detail,
        }
        super().__init__(message, details=details)
