"""
Shared request handling for the CRUD handlers.

Every handler:
- Is constructed with its collaborators (schema, store, policies) and holds no
  per-request state, so one instance can serve concurrent requests
- Can be invoked with an API-Gateway-shaped event via ``handler(event, context)``
- Converts GenericTableError into the response body at its boundary; the
  status code follows the configured ErrorStatusPolicy
"""

import base64
import binascii
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Optional

from ..core import KeyedStoreClient
from ..exceptions import GenericTableError, MalformedRequestError
from ..models import ErrorStatusPolicy, Operation, OperationResult, TableSchema
from ..utils import parse_json_body

logger = logging.getLogger(__name__)


class BaseHandler(ABC):
    """Base class for the four CRUD handlers."""

    operation: Operation

    def __init__(
        self,
        schema: TableSchema,
        store: KeyedStoreClient,
        error_status_policy: ErrorStatusPolicy = ErrorStatusPolicy.LEGACY
    ):
        """Initialize handler with its collaborators.

        Args:
            schema: Key layout of the collection
            store: Keyed store client bound to the collection's table
            error_status_policy: Whether failures change the response status
        """
        self.schema = schema
        self.store = store
        self.error_status_policy = error_status_policy

    @property
    def primary_key(self) -> str:
        return self.schema.primary_key

    def _fail(self, result: OperationResult, error: GenericTableError) -> OperationResult:
        """Report a caught error through the result."""
        logger.warning(f"{self.operation.value} on {self.store.table_name} failed: {error}")
        result.body = error.message
        if self.error_status_policy == ErrorStatusPolicy.STRICT:
            result.status_code = error.http_status
        return result

    @abstractmethod
    def handle_event(self, event: Mapping[str, Any]) -> OperationResult:
        """Serve one API-Gateway-shaped event."""

    def __call__(self, event: Mapping[str, Any], context: Any = None) -> Dict[str, Any]:
        """Lambda proxy entry point."""
        return self.handle_event(event or {}).to_response()

    @staticmethod
    def query_parameters(event: Mapping[str, Any]) -> Optional[Dict[str, str]]:
        """Query string parameters of an event, in request order."""
        params = event.get('queryStringParameters')
        return dict(params) if params else None

    @staticmethod
    def raw_body(event: Mapping[str, Any]) -> Any:
        """Request body of an event, base64-decoded when flagged."""
        body = event.get('body')
        if body is not None and event.get('isBase64Encoded') and isinstance(body, str):
            try:
                body = base64.b64decode(body).decode('utf-8')
            except (binascii.Error, UnicodeDecodeError) as e:
                raise MalformedRequestError(f"Request body is not valid base64: {e}", e) from e
        return body

    def primary_key_value(self, event: Mapping[str, Any]) -> Optional[str]:
        """Primary key value passed as a query parameter, if any."""
        params = self.query_parameters(event) or {}
        return params.get(self.primary_key) or None

    @staticmethod
    def parse_body(raw_body: Any) -> Optional[Dict[str, Any]]:
        return parse_json_body(raw_body)
