from typing import Any, Dict

from pydantic import BaseModel, Field

DEFAULT_BODY = "Hello from DynamoDB"


class OperationResult(BaseModel):
    """HTTP-shaped outcome of a single handler invocation.

    Built fresh for every request. ``body`` is always a string: either a
    serialized JSON payload or a plain-text error message.
    """

    status_code: int = Field(200, ge=100, le=599, description="HTTP status code")
    body: str = Field(DEFAULT_BODY, description="Serialized response payload")

    @property
    def is_default(self) -> bool:
        """True when the handler did nothing and left the greeting body in place."""
        return self.body == DEFAULT_BODY

    def to_response(self) -> Dict[str, Any]:
        """Return the Lambda proxy response shape."""
        return {'statusCode': self.status_code, 'body': self.body}
