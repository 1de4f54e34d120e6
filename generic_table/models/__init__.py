from .enums import (
    ErrorStatusPolicy,
    IndexPolicy,
    Operation,
    UpdateFieldPolicy,
)
from .plans import (
    FullScan,
    IndexLookup,
    PrimaryLookup,
    QueryPlan,
)
from .results import DEFAULT_BODY, OperationResult
from .schema import TableSchema

__all__ = [
    # Enums
    "ErrorStatusPolicy",
    "IndexPolicy",
    "Operation",
    "UpdateFieldPolicy",

    # Query plans
    "FullScan",
    "IndexLookup",
    "PrimaryLookup",
    "QueryPlan",

    # Schema and results
    "DEFAULT_BODY",
    "OperationResult",
    "TableSchema",
]
