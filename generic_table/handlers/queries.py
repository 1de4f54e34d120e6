"""
Read handler

Serves GET requests by planning the query (see QueryPlanner) and executing the
chosen strategy against the store:

- PrimaryLookup: Query with KeyConditionExpression on the primary key
- IndexLookup:   Query on IndexName=<parameter> with KeyConditionExpression on that field
- FullScan:      Scan of the whole table

Every strategy drains all result pages; the body is
{"Items": [...], "Count": n, "ScannedCount": m}. A primary key with no item
yields an empty Items list, not an error.
"""

import logging
from typing import Any, Dict, Mapping, Optional

from ..core import KeyedStoreClient, QueryPlanner
from ..exceptions import GenericTableError
from ..models import (
    ErrorStatusPolicy,
    FullScan,
    IndexLookup,
    Operation,
    OperationResult,
    PrimaryLookup,
    QueryPlan,
    TableSchema,
)
from ..utils import build_key_condition, to_json
from .base import BaseHandler

logger = logging.getLogger(__name__)


class ReadHandler(BaseHandler):
    """Query or scan the collection according to the query parameters."""

    operation = Operation.READ

    def __init__(
        self,
        schema: TableSchema,
        store: KeyedStoreClient,
        planner: Optional[QueryPlanner] = None,
        error_status_policy: ErrorStatusPolicy = ErrorStatusPolicy.LEGACY
    ):
        super().__init__(schema, store, error_status_policy)
        self.planner = planner or QueryPlanner()

    def execute(self, plan: QueryPlan) -> Dict[str, Any]:
        """
        Run a query plan against the store.

        Raises:
            StoreError: If the store rejects the request (e.g. unknown index)
            TypeError: For an unrecognized plan variant
        """
        if isinstance(plan, PrimaryLookup):
            return self.store.query_all(
                KeyConditionExpression=build_key_condition(self.primary_key, plan.key)
            )
        elif isinstance(plan, IndexLookup):
            return self.store.query_all(
                IndexName=plan.index_name,
                KeyConditionExpression=build_key_condition(plan.index_name, plan.value)
            )
        elif isinstance(plan, FullScan):
            return self.store.scan_all()

        raise TypeError(f"Unsupported query plan: {plan!r}")

    def read(self, query_params: Optional[Mapping[str, str]]) -> OperationResult:
        """
        Read items selected by the query parameters.

        Args:
            query_params: Parameters in request order, or None for a full scan

        Returns:
            OperationResult with the serialized items, or the error message
        """
        result = OperationResult()
        try:
            plan = self.planner.plan(self.schema, query_params)
            response = self.execute(plan)
            logger.info(f"{plan.kind} on {self.store.table_name} returned {response.get('Count', 0)} items")
            result.body = to_json(response)
        except GenericTableError as e:
            return self._fail(result, e)

        return result

    def handle_event(self, event: Mapping[str, Any]) -> OperationResult:
        return self.read(self.query_parameters(event))
