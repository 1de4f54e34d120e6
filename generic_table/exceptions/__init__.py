# Base exception class
from .base import GenericTableError

# Domain-specific exceptions
from .domain_exceptions import (
    ConfigurationError,
    ConflictError,
    ConnectionError,
    MalformedRequestError,
    OperationNotEnabledError,
    RetryableError,
    StoreError,
    StoreValidationError,
    UnknownIndexError,
    ValidationError,
)

__all__ = [
    # Base exception
    "GenericTableError",

    # Domain exceptions (alphabetically ordered)
    "ConfigurationError",
    "ConflictError",
    "ConnectionError",
    "MalformedRequestError",
    "OperationNotEnabledError",
    "RetryableError",
    "StoreError",
    "StoreValidationError",
    "UnknownIndexError",
    "ValidationError",
]
