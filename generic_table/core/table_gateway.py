"""
DynamoDB-backed keyed store

TableGateway is the KeyedStoreClient the CRUD handlers run against. It knows
nothing about schemas or policies: handlers build the request parameters and
the gateway executes them on one table.

- Single-item calls: GetItem, PutItem, UpdateItem, DeleteItem
- Collection calls: Query and Scan, one page at a time or drained

boto3 failures leave the gateway as StoreError subclasses (see
map_dynamodb_error) whose message still carries DynamoDB's own text.

boto3 resources are not thread-safe, so each worker thread lazily builds its
own resource and Table handle.
"""

import logging
import threading
from typing import Any, Callable, Dict, List, Optional, Tuple, Type

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from ..config import DynamoDBConfig
from ..exceptions import (
    ConflictError,
    ConnectionError,
    RetryableError,
    StoreError,
    StoreValidationError,
)

logger = logging.getLogger(__name__)


def _codes(error_class: Type[StoreError], label: str, *codes: str) -> Dict[str, Tuple[Type[StoreError], str]]:
    return {code: (error_class, label) for code in codes}


# DynamoDB error code -> (StoreError subclass, message label)
_ERROR_CODES: Dict[str, Tuple[Type[StoreError], str]] = {
    **_codes(ConflictError, "Conditional check failed", 'ConditionalCheckFailedException'),
    **_codes(ConflictError, "Transaction conflict", 'TransactionConflictException'),
    **_codes(StoreValidationError, "Validation failed", 'ValidationException'),
    **_codes(StoreValidationError, "Limit exceeded",
             'ItemCollectionSizeLimitExceededException', 'LimitExceededException'),
    **_codes(ConnectionError, "Resource not found", 'ResourceNotFoundException'),
    **_codes(RetryableError, "Throttling",
             'ProvisionedThroughputExceededException', 'RequestLimitExceeded',
             'ThrottlingException', 'TooManyRequestsException'),
    **_codes(RetryableError, "Service unavailable",
             'InternalServerError', 'ServiceUnavailable', 'ServiceUnavailableException'),
    **_codes(ConnectionError, "Authentication/authorization failed",
             'UnrecognizedClientException', 'AccessDeniedException'),
    **_codes(ConnectionError, "Token expired", 'ExpiredTokenException', 'TokenRefreshRequiredException'),
}


def map_dynamodb_error(
    error: ClientError,
    operation: str,
    table_name: str,
    resource_id: Optional[str] = None
) -> StoreError:
    """Translate a boto3 ClientError into the matching StoreError.

    The message reads "<label> - <operation> on <table> (resource: <id>): <DynamoDB message>".
    Codes without an entry become ConnectionError.

    Args:
        error: ClientError raised by boto3
        operation: DynamoDB operation name, e.g. "Query"
        table_name: Table the call was made against
        resource_id: Primary key value of the item involved, if any
    """
    details = error.response.get('Error', {})
    code = details.get('Code', 'Unknown')
    store_message = details.get('Message', str(error))

    where = f"{operation} on {table_name}"
    if resource_id:
        where = f"{where} (resource: {resource_id})"

    error_class, label = _ERROR_CODES.get(code, (None, None))
    if error_class is None:
        logger.warning(f"DynamoDB returned unmapped error code '{code}'; reporting it as ConnectionError")
        error_class, label = ConnectionError, "DynamoDB operation failed"

    return error_class(f"{label} - {where}: {store_message}", operation, table_name, error)


def _request(required: Dict[str, Any], **optional: Any) -> Dict[str, Any]:
    """boto3 keyword arguments, leaving out optional parameters that are unset."""
    request = dict(required)
    request.update({name: value for name, value in optional.items() if value})
    return request


class TableGateway:
    """KeyedStoreClient over a single DynamoDB table."""

    def __init__(self, config: DynamoDBConfig, table_name: str, primary_key: Optional[str] = None):
        """
        Args:
            config: Connection settings (credentials, region, endpoint, retries)
            table_name: Full DynamoDB table name, prefix already applied
            primary_key: Primary key attribute, only used to label errors and logs
        """
        self.config = config
        self.table_name = table_name
        self.primary_key = primary_key
        self._local = threading.local()

    @property
    def dynamodb(self):
        """boto3 DynamoDB service resource owned by the calling thread."""
        resource = getattr(self._local, 'dynamodb', None)
        if resource is not None:
            return resource

        config = self.config
        resource_kwargs = {
            'region_name': config.region_name,
            'config': Config(
                retries={'max_attempts': config.retries},
                max_pool_connections=config.max_pool_connections,
                connect_timeout=config.timeout_seconds,
                read_timeout=config.timeout_seconds,
            ),
        }
        if config.endpoint_url:
            resource_kwargs['endpoint_url'] = config.endpoint_url

        try:
            session = boto3.Session(
                aws_access_key_id=config.aws_access_key_id,
                aws_secret_access_key=config.aws_secret_access_key,
                region_name=config.region_name
            )
            resource = session.resource('dynamodb', **resource_kwargs)
        except Exception as e:
            logger.error(f"Could not create DynamoDB resource in {config.region_name}: {e}")
            raise ConnectionError(f"Failed to connect to DynamoDB: {e}", original_error=e) from e

        self._local.dynamodb = resource
        return resource

    @property
    def table(self):
        """boto3 Table handle owned by the calling thread."""
        table = getattr(self._local, 'table', None)
        if table is not None:
            return table

        resource = self.dynamodb
        try:
            table = resource.Table(self.table_name)
        except Exception as e:
            logger.error(f"Could not open table {self.table_name}: {e}")
            raise ConnectionError(
                f"Failed to access table '{self.table_name}': {e}",
                table_name=self.table_name,
                original_error=e
            ) from e

        self._local.table = table
        return table

    def _resource_id(self, key: Dict[str, Any]) -> Optional[str]:
        value = key.get(self.primary_key) if self.primary_key else None
        return None if value is None else str(value)

    def _call(self, operation: str, method: Callable[..., Dict[str, Any]],
              resource_id: Optional[str] = None, **kwargs) -> Dict[str, Any]:
        """Invoke a boto3 Table method, translating its failures into StoreError."""
        try:
            return method(**kwargs)
        except ClientError as e:
            logger.error(f"{operation} on {self.table_name} rejected: {e}")
            raise map_dynamodb_error(e, operation, self.table_name, resource_id) from e
        except BotoCoreError as e:
            logger.error(f"{operation} on {self.table_name} could not be sent: {e}")
            raise ConnectionError(
                f"DynamoDB operation failed - {operation} on {self.table_name}: {e}",
                operation, self.table_name, e
            ) from e

    # ------------------------------------------------------------------
    # Single-item operations
    # ------------------------------------------------------------------

    def get_item(self, key: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """The item stored under ``key``, or None."""
        response = self._call("GetItem", self.table.get_item, self._resource_id(key), Key=key)
        return response.get('Item')

    def put_item(self, item: Dict[str, Any], condition_expression=None) -> None:
        """
        Write a whole item.

        With no condition an existing item under the same key is replaced.
        """
        self._call(
            "PutItem", self.table.put_item, self._resource_id(item),
            **_request({'Item': item}, ConditionExpression=condition_expression)
        )
        logger.info(f"PutItem {self._resource_id(item)} into {self.table_name}")

    def update_item(
        self,
        key: Dict[str, Any],
        update_expression: str,
        expression_attribute_values: Optional[Dict[str, Any]] = None,
        expression_attribute_names: Optional[Dict[str, str]] = None,
        condition_expression=None,
        return_values: str = 'NONE'
    ) -> Optional[Dict[str, Any]]:
        """
        Apply an update expression to one item.

        Args:
            key: Key of the item to change
            update_expression: e.g. "SET #xnew = :new"
            expression_attribute_values: Placeholder values (":new")
            expression_attribute_names: Placeholder names ("#xnew")
            condition_expression: Condition the current item must satisfy
            return_values: DynamoDB ReturnValues setting

        Returns:
            The returned attributes, or None when return_values is 'NONE'
        """
        request = _request(
            {'Key': key, 'UpdateExpression': update_expression, 'ReturnValues': return_values},
            ExpressionAttributeValues=expression_attribute_values,
            ExpressionAttributeNames=expression_attribute_names,
            ConditionExpression=condition_expression,
        )
        response = self._call("UpdateItem", self.table.update_item, self._resource_id(key), **request)
        logger.info(f"UpdateItem {self._resource_id(key)} in {self.table_name}")

        if return_values == 'NONE':
            return None
        return response.get('Attributes', {})

    def delete_item(
        self,
        key: Dict[str, Any],
        condition_expression=None,
        return_values: str = 'NONE'
    ) -> Optional[Dict[str, Any]]:
        """
        Remove one item.

        Without a condition, removing a key that holds no item still succeeds.
        """
        request = _request(
            {'Key': key, 'ReturnValues': return_values},
            ConditionExpression=condition_expression,
        )
        response = self._call("DeleteItem", self.table.delete_item, self._resource_id(key), **request)
        logger.info(f"DeleteItem {self._resource_id(key)} from {self.table_name}")

        if return_values == 'NONE':
            return None
        return response.get('Attributes')

    # ------------------------------------------------------------------
    # Collection operations
    # ------------------------------------------------------------------

    def query(self, **kwargs) -> Dict[str, Any]:
        """One Query page; kwargs are passed to boto3 unchanged."""
        return self._call("Query", self.table.query, **kwargs)

    def scan(self, **kwargs) -> Dict[str, Any]:
        """One Scan page; kwargs are passed to boto3 unchanged."""
        return self._call("Scan", self.table.scan, **kwargs)

    def _drain(self, fetch: Callable[..., Dict[str, Any]], **kwargs) -> Dict[str, Any]:
        items: List[Dict[str, Any]] = []
        scanned = 0
        start_key = None

        while True:
            if start_key is not None:
                kwargs['ExclusiveStartKey'] = start_key
            page = fetch(**kwargs)
            page_items = page.get('Items', [])
            items.extend(page_items)
            scanned += page.get('ScannedCount', len(page_items))
            start_key = page.get('LastEvaluatedKey')
            if start_key is None:
                break

        return {'Items': items, 'Count': len(items), 'ScannedCount': scanned}

    def query_all(self, **kwargs) -> Dict[str, Any]:
        """
        Run a Query across every result page.

        Returns:
            {'Items': [...], 'Count': n, 'ScannedCount': m}
        """
        result = self._drain(self.query, **kwargs)
        logger.info(f"Query on {self.table_name}: {result['Count']} items")
        return result

    def scan_all(self, **kwargs) -> Dict[str, Any]:
        """
        Run a Scan across every result page.

        The whole table comes back in one result; there is no page limit.
        """
        result = self._drain(self.scan, **kwargs)
        logger.info(f"Scan on {self.table_name}: {result['Count']} items")
        return result


def create_table_gateway(config: DynamoDBConfig, table_name: str, primary_key: Optional[str] = None) -> TableGateway:
    """Build a TableGateway for ``table_name`` with the configured prefix applied."""
    return TableGateway(config, config.get_table_name(table_name), primary_key)
