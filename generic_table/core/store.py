"""
Keyed store capability interface.

Handlers depend on this protocol rather than on boto3, so they can be driven
by the DynamoDB-backed TableGateway in production and by a mock in unit tests.
"""

from typing import Any, Dict, Optional, Protocol, runtime_checkable


@runtime_checkable
class KeyedStoreClient(Protocol):
    """Point-get/put/update/delete, key-condition query and scan over one table."""

    table_name: str

    def get_item(self, key: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        ...

    def put_item(self, item: Dict[str, Any], condition_expression=None) -> None:
        ...

    def update_item(
        self,
        key: Dict[str, Any],
        update_expression: str,
        expression_attribute_values: Optional[Dict[str, Any]] = None,
        expression_attribute_names: Optional[Dict[str, str]] = None,
        condition_expression=None,
        return_values: str = 'NONE'
    ) -> Optional[Dict[str, Any]]:
        ...

    def delete_item(
        self,
        key: Dict[str, Any],
        condition_expression=None,
        return_values: str = 'NONE'
    ) -> Optional[Dict[str, Any]]:
        ...

    def query_all(self, **kwargs) -> Dict[str, Any]:
        ...

    def scan_all(self, **kwargs) -> Dict[str, Any]:
        ...
