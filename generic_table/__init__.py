"""
Generic Table

CRUD over keyed DynamoDB collections: a table abstraction with a primary key
and optional secondary indexes, fronted by create/read/update/delete handlers
reachable as Lambda-style callables or over HTTP.
"""

from .config import DynamoDBConfig, TableSettings
from .exceptions import (
    ConfigurationError,
    ConflictError,
    ConnectionError,
    GenericTableError,
    MalformedRequestError,
    OperationNotEnabledError,
    RetryableError,
    StoreError,
    StoreValidationError,
    UnknownIndexError,
    ValidationError,
)
from .models import (
    ErrorStatusPolicy,
    FullScan,
    IndexLookup,
    IndexPolicy,
    Operation,
    OperationResult,
    PrimaryLookup,
    TableSchema,
    UpdateFieldPolicy,
)
from .core import (
    ItemValidator,
    KeyedStoreClient,
    QueryPlanner,
    TableGateway,
    create_table_gateway,
)
from .handlers import (
    CreateHandler,
    DeleteHandler,
    ReadHandler,
    UpdateHandler,
)
from .table import GenericTable

__version__ = "1.0.0"
__all__ = [
    # Configuration
    "DynamoDBConfig",
    "TableSettings",

    # Exceptions
    "ConfigurationError",
    "ConflictError",
    "ConnectionError",
    "GenericTableError",
    "MalformedRequestError",
    "OperationNotEnabledError",
    "RetryableError",
    "StoreError",
    "StoreValidationError",
    "UnknownIndexError",
    "ValidationError",

    # Models
    "ErrorStatusPolicy",
    "FullScan",
    "IndexLookup",
    "IndexPolicy",
    "Operation",
    "OperationResult",
    "PrimaryLookup",
    "TableSchema",
    "UpdateFieldPolicy",

    # Core
    "ItemValidator",
    "KeyedStoreClient",
    "QueryPlanner",
    "TableGateway",
    "create_table_gateway",

    # Handlers
    "CreateHandler",
    "DeleteHandler",
    "ReadHandler",
    "UpdateHandler",

    # Wiring
    "GenericTable",
]
