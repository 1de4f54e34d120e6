"""
Enumerations shared across the generic table service.

Operation names the four request handlers a collection may expose. The policy
enums select between the historical behavior of the service and its stricter
alternatives; every default preserves the historical behavior.
"""

from enum import Enum


class Operation(str, Enum):
    """CRUD operations a collection can expose."""
    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"


class ErrorStatusPolicy(str, Enum):
    """How handler failures are reflected in the response status.

    LEGACY keeps the success status and reports the failure in the body only.
    STRICT uses the status class declared by the raised exception.
    """
    LEGACY = "legacy"
    STRICT = "strict"


class UpdateFieldPolicy(str, Enum):
    """How an update treats patch bodies with more than one field.

    FIRST_FIELD applies the first field and ignores the rest.
    SINGLE_FIELD_ONLY rejects the patch with a validation error.
    """
    FIRST_FIELD = "first_field"
    SINGLE_FIELD_ONLY = "single_field_only"


class IndexPolicy(str, Enum):
    """Who rejects a query against an undeclared secondary index.

    DEFER_TO_STORE lets the backing store reject it at call time.
    STRICT rejects it while planning, before any store call.
    """
    DEFER_TO_STORE = "defer_to_store"
    STRICT = "strict"
