import logging
from typing import Any, Iterable, Mapping, Optional

from ..config import DEFAULT_REQUIRED_FIELDS
from ..exceptions import ValidationError

logger = logging.getLogger(__name__)


class ItemValidator:
    """Minimal required-field check run before an item is written.

    Every required field must be present and hold a non-empty string.
    The first failing field raises; nothing else about the item is checked.
    """

    def __init__(self, required_fields: Optional[Iterable[str]] = None):
        self.required_fields = tuple(required_fields) if required_fields is not None else DEFAULT_REQUIRED_FIELDS

    def validate(self, item: Any) -> None:
        """
        Check an item against the required fields.

        Args:
            item: Candidate item

        Raises:
            ValidationError: If the item is not a mapping, or a required field
                is missing or not a non-empty string
        """
        if not isinstance(item, Mapping):
            raise ValidationError(f"Item must be an object, got {type(item).__name__}")

        for field in self.required_fields:
            if field not in item or item[field] is None:
                raise ValidationError(
                    f"Value for {field} expected!",
                    errors={field: "missing"}
                )
            value = item[field]
            if not isinstance(value, str) or not value.strip():
                raise ValidationError(
                    f"Value for {field} must be a non-empty string!",
                    errors={field: "malformed"}
                )
