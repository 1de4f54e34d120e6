"""
Generic Table Utilities

Helpers shared by the gateway and the handlers:

- Request body parsing (JSON with Decimal numbers, as DynamoDB requires)
- Response serialization (Decimal and set aware JSON)
- Key condition building for equality queries
"""

import json
import logging
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional

from boto3.dynamodb.conditions import Key

from .exceptions import MalformedRequestError

logger = logging.getLogger(__name__)


# =============================================================================
# Request Parsing
# =============================================================================

def _to_store_value(obj: Any) -> Any:
    """Recursively convert floats to Decimal for DynamoDB storage."""
    if isinstance(obj, dict):
        return {k: _to_store_value(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_to_store_value(item) for item in obj]
    elif isinstance(obj, float):
        return Decimal(str(obj))
    return obj


def parse_json_body(body: Any) -> Optional[Dict[str, Any]]:
    """Parse a request body into a mutable item mapping.

    Accepts an already-structured mapping or its serialized string form.
    Numbers are converted to Decimal because the DynamoDB resource API
    rejects floats. Field order is preserved.

    Args:
        body: Raw request body (None, str, bytes or mapping)

    Returns:
        New dict with the body's fields, or None when the body is absent

    Raises:
        MalformedRequestError: If the body is not valid JSON or not a JSON object

    Example:
        >>> parse_json_body('{"name": "X", "size": 1.5}')
        {'name': 'X', 'size': Decimal('1.5')}
    """
    if body is None:
        return None

    if isinstance(body, (bytes, bytearray, str)):
        try:
            text = body.decode('utf-8') if isinstance(body, (bytes, bytearray)) else body
            if not text.strip():
                return None
            parsed = json.loads(text, parse_float=Decimal)
        except (UnicodeDecodeError, json.JSONDecodeError, RecursionError) as e:
            raise MalformedRequestError(f"Request body is not valid JSON: {e}", e) from e
    else:
        parsed = body

    if not isinstance(parsed, Mapping):
        raise MalformedRequestError(
            f"Request body must be a JSON object, got {type(parsed).__name__}"
        )

    return _to_store_value(dict(parsed))


# =============================================================================
# Response Serialization
# =============================================================================

def _json_default(obj: Any) -> Any:
    if isinstance(obj, Decimal):
        # Integral decimals come back from DynamoDB for every number
        return int(obj) if obj == obj.to_integral_value() else float(obj)
    if isinstance(obj, (set, frozenset)):
        return sorted(obj, key=str)
    if isinstance(obj, (bytes, bytearray)):
        return obj.decode('utf-8', errors='replace')
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def to_json(payload: Any) -> str:
    """Serialize a payload the way handler bodies are serialized.

    Example:
        >>> to_json({'Count': Decimal('2')})
        '{"Count": 2}'
    """
    return json.dumps(payload, default=_json_default)


# =============================================================================
# Query Building
# =============================================================================

def build_key_condition(partition_key: str, partition_value: Any):
    """Build an equality KeyConditionExpression on a partition key.

    Example:
        >>> build_key_condition('spaceId', 'abc-123')
        # Returns: Key('spaceId').eq('abc-123')
    """
    return Key(partition_key).eq(partition_value)


__all__ = [
    "parse_json_body",
    "to_json",
    "build_key_condition",
]
