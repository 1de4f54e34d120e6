"""
Core components for keyed store access and request planning.

- KeyedStoreClient: capability interface the handlers depend on
- TableGateway: boto3-backed KeyedStoreClient for one DynamoDB table
- QueryPlanner: chooses primary lookup, index lookup or full scan for a read
- ItemValidator: required-field check run before writes
"""

from .item_validator import ItemValidator
from .query_planner import QueryPlanner
from .store import KeyedStoreClient
from .table_gateway import TableGateway, create_table_gateway, map_dynamodb_error

__all__ = [
    "ItemValidator",
    "KeyedStoreClient",
    "QueryPlanner",
    "TableGateway",
    "create_table_gateway",
    "map_dynamodb_error",
]
