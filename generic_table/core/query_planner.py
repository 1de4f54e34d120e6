"""
Query Planner

Chooses how a read request is served from its query parameters:

1. No parameters                 -> FullScan
2. Primary key among parameters  -> PrimaryLookup on its value (other parameters ignored)
3. Otherwise                     -> IndexLookup on the first parameter, in request order

Under IndexPolicy.DEFER_TO_STORE the candidate index in step 3 is not checked
against the schema; a name the table does not have is rejected by the store
when the query runs. IndexPolicy.STRICT rejects it here with UnknownIndexError.

Planning is pure: the same schema and parameters always give the same plan.
"""

import logging
from typing import Mapping, Optional

from ..exceptions import UnknownIndexError
from ..models import FullScan, IndexLookup, IndexPolicy, PrimaryLookup, QueryPlan, TableSchema

logger = logging.getLogger(__name__)


class QueryPlanner:
    """Maps (schema, query parameters) to a QueryPlan."""

    def __init__(self, index_policy: IndexPolicy = IndexPolicy.DEFER_TO_STORE):
        self.index_policy = index_policy

    def plan(self, schema: TableSchema, params: Optional[Mapping[str, str]]) -> QueryPlan:
        """
        Select the retrieval strategy for a read.

        Args:
            schema: Key layout of the collection
            params: Query parameters in request order, or None

        Returns:
            PrimaryLookup, IndexLookup or FullScan

        Raises:
            UnknownIndexError: Under IndexPolicy.STRICT, when the first parameter
                is not a declared secondary index
        """
        if not params:
            logger.debug("No query parameters, planning full scan")
            return FullScan()

        if schema.primary_key in params:
            logger.debug(f"Planning primary key lookup on '{schema.primary_key}'")
            return PrimaryLookup(key=params[schema.primary_key])

        candidate = next(iter(params))
        if self.index_policy == IndexPolicy.STRICT and not schema.is_secondary_index(candidate):
            raise UnknownIndexError(candidate, list(schema.secondary_indexes))

        logger.debug(f"Planning secondary index lookup on '{candidate}'")
        return IndexLookup(index_name=candidate, value=params[candidate])
