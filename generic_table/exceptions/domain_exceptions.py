"""
Domain-Specific Exceptions for Generic Table

This module holds every exception raised by the generic table service. All of
them extend GenericTableError and carry an ``http_status`` used when the
strict error status policy is active.

Organized by category:
1. Request and Item Errors
2. Wiring and Configuration Errors
3. Backing Store Errors
"""

from typing import Any, Dict, Optional

from .base import GenericTableError


# =============================================================================
# Request and Item Errors
# =============================================================================

class ValidationError(GenericTableError):
    """Raised when an item fails the required-field check before a write.

    Used for:
    - Missing required fields
    - Required fields present with an unusable value
    - Patch bodies rejected by the single-field update policy
    """

    http_status = 400

    def __init__(self, message: str, errors: Optional[Dict[str, Any]] = None, original_error: Optional[Exception] = None):
        """Initialize validation error.

        Args:
            message: Human-readable error message
            errors: Dictionary of field-level validation errors
            original_error: The original exception that caused this error
        """
        self.errors = errors or {}
        context = {}
        if self.errors:
            context['validation_errors'] = self.errors
        super().__init__(message, original_error, context)


class MalformedRequestError(GenericTableError):
    """Raised when a request body cannot be parsed into an item."""

    http_status = 400

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        super().__init__(message, original_error)


class UnknownIndexError(GenericTableError):
    """Raised at plan time when a query names an undeclared secondary index.

    Only raised under IndexPolicy.STRICT; the default policy leaves the
    rejection to the backing store.
    """

    http_status = 400

    def __init__(self, index_name: str, declared_indexes: Optional[list] = None):
        self.index_name = index_name
        self.declared_indexes = sorted(declared_indexes or [])
        message = f"The table does not have the specified index: {index_name}"
        context = {'declared_indexes': self.declared_indexes}
        super().__init__(message, None, context)


# =============================================================================
# Wiring and Configuration Errors
# =============================================================================

class OperationNotEnabledError(GenericTableError):
    """Raised when an operation is requested that the collection does not expose."""

    http_status = 405

    def __init__(self, collection: str, operation: str):
        self.collection = collection
        self.operation = operation
        message = f"Operation '{operation}' is not enabled for collection '{collection}'"
        super().__init__(message)


class ConfigurationError(GenericTableError):
    """Raised when table settings are missing or inconsistent."""

    http_status = 500


# =============================================================================
# Backing Store Errors
# =============================================================================

class StoreError(GenericTableError):
    """Raised when the backing keyed store rejects or fails an operation.

    Used for:
    - Unknown index names
    - Conditional check failures
    - Throttling and connectivity failures
    """

    http_status = 502

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        table_name: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        """Initialize store error.

        Args:
            message: Human-readable error message, including the store's own text
            operation: Store operation that failed (e.g., "Query", "UpdateItem")
            table_name: Name of the backing table
            original_error: The original exception that caused this error
        """
        self.operation = operation
        self.table_name = table_name
        context = {}
        if operation:
            context['operation'] = operation
        if table_name:
            context['table_name'] = table_name
        super().__init__(message, original_error, context)


class ConflictError(StoreError):
    """Raised when a conditional write fails.

    Used for:
    - ConditionalCheckFailedException (e.g., update of a key that does not exist)
    - Transaction conflicts
    """

    http_status = 409


class StoreValidationError(StoreError):
    """Raised when the store rejects the shape of a request.

    Used for:
    - Queries against an index the table does not have
    - Updates that touch key attributes
    - Item size and collection limits
    """

    http_status = 400


class RetryableError(StoreError):
    """Raised when an operation fails for temporary or throttling reasons."""

    http_status = 503


class ConnectionError(StoreError):
    """Raised when the store cannot be reached or the caller is not authorized.

    Used for:
    - Network connectivity issues
    - Authentication/authorization failures
    - Missing tables
    - Unrecognized store error codes
    """

    http_status = 502
