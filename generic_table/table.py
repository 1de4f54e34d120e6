"""
Generic Table wiring

GenericTable binds one collection's settings to a keyed store client and
builds the handlers for exactly the operations the settings enable. Asking for
an operation that is not enabled raises OperationNotEnabledError instead of
returning a handler that does nothing.

Usage:
    settings = TableSettings(table_name="SpacesTable", primary_key="spaceId",
                             secondary_indexes=["location"], collection="spaces")
    spaces = GenericTable(settings, DynamoDBConfig.from_env())
    result = spaces.handler(Operation.READ).read({"location": "London"})
"""

import logging
from typing import Dict, Optional

from .config import DynamoDBConfig, TableSettings
from .core import ItemValidator, KeyedStoreClient, QueryPlanner, create_table_gateway
from .exceptions import OperationNotEnabledError
from .handlers import BaseHandler, CreateHandler, DeleteHandler, ReadHandler, UpdateHandler
from .models import Operation, TableSchema

logger = logging.getLogger(__name__)


class GenericTable:
    """One keyed collection with its enabled CRUD handlers."""

    def __init__(
        self,
        settings: TableSettings,
        config: Optional[DynamoDBConfig] = None,
        store: Optional[KeyedStoreClient] = None
    ):
        """Wire the collection.

        Args:
            settings: Table name, key layout, enabled operations and policies
            config: Connection configuration, used when no store is given
            store: Keyed store client to use instead of a new TableGateway
        """
        self.settings = settings
        self.schema: TableSchema = settings.to_schema()
        if store is None:
            store = create_table_gateway(config or DynamoDBConfig.from_env(), settings.table_name, settings.primary_key)
        self.store = store
        self._handlers: Dict[Operation, BaseHandler] = self._build_handlers()

        logger.info(
            f"Wired collection '{self.collection}' on table {self.store.table_name} "
            f"with operations {sorted(op.value for op in self._handlers)}"
        )

    def _build_handlers(self) -> Dict[Operation, BaseHandler]:
        settings = self.settings
        policy = settings.error_status_policy
        handlers: Dict[Operation, BaseHandler] = {}

        if settings.exposes(Operation.CREATE):
            handlers[Operation.CREATE] = CreateHandler(
                self.schema, self.store,
                validator=ItemValidator(settings.required_fields),
                error_status_policy=policy
            )
        if settings.exposes(Operation.READ):
            handlers[Operation.READ] = ReadHandler(
                self.schema, self.store,
                planner=QueryPlanner(settings.index_policy),
                error_status_policy=policy
            )
        if settings.exposes(Operation.UPDATE):
            handlers[Operation.UPDATE] = UpdateHandler(
                self.schema, self.store,
                update_field_policy=settings.update_field_policy,
                error_status_policy=policy
            )
        if settings.exposes(Operation.DELETE):
            handlers[Operation.DELETE] = DeleteHandler(self.schema, self.store, error_status_policy=policy)

        return handlers

    @property
    def collection(self) -> str:
        return self.settings.collection_name

    @property
    def operations(self):
        return frozenset(self._handlers)

    def handler(self, operation: Operation) -> BaseHandler:
        """
        Get the handler for an operation.

        Raises:
            OperationNotEnabledError: If the collection does not expose the operation
        """
        try:
            return self._handlers[operation]
        except KeyError:
            raise OperationNotEnabledError(self.collection, operation.value) from None

    @classmethod
    def from_env(cls, config: Optional[DynamoDBConfig] = None) -> 'GenericTable':
        """Wire a collection from TableSettings.from_env()."""
        return cls(TableSettings.from_env(), config)
