"""
Handler Layer for Generic Table

Request handlers for the CRUD operations on a keyed collection, split the
CQRS way:

- commands.py: CreateHandler, UpdateHandler, DeleteHandler (writes)
- queries.py: ReadHandler (reads, routed by the QueryPlanner)

Architecture:
handlers/ (this layer) -> core/ (planner, validator, gateway) -> DynamoDB
"""

from .base import BaseHandler
from .commands import CreateHandler, DeleteHandler, UpdateHandler, new_item_id
from .queries import ReadHandler

__all__ = [
    'BaseHandler',
    'CreateHandler',
    'DeleteHandler',
    'ReadHandler',
    'UpdateHandler',
    'new_item_id',
]
