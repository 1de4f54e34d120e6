"""
Write handlers: Create, Update, Delete

- Create: assigns a fresh UUID primary key, validates, then puts unconditionally
- Update: applies one field of the patch body under attribute_exists(primary key)
- Delete: deletes unconditionally; deleting a missing key is not an error

Update and Delete do nothing (default greeting body) when the primary key
query parameter is absent; Update also when the patch body is absent or empty.
"""

import logging
import uuid
from typing import Any, Callable, Dict, Mapping, Optional

from boto3.dynamodb.conditions import Attr

from ..core import ItemValidator, KeyedStoreClient
from ..exceptions import GenericTableError, MalformedRequestError, ValidationError
from ..models import (
    ErrorStatusPolicy,
    Operation,
    OperationResult,
    TableSchema,
    UpdateFieldPolicy,
)
from ..utils import to_json
from .base import BaseHandler

logger = logging.getLogger(__name__)


def new_item_id() -> str:
    """Generate a globally unique primary key value."""
    return str(uuid.uuid4())


class CreateHandler(BaseHandler):
    """Create a new item with a server-generated primary key."""

    operation = Operation.CREATE

    def __init__(
        self,
        schema: TableSchema,
        store: KeyedStoreClient,
        validator: Optional[ItemValidator] = None,
        id_factory: Callable[[], str] = new_item_id,
        error_status_policy: ErrorStatusPolicy = ErrorStatusPolicy.LEGACY
    ):
        super().__init__(schema, store, error_status_policy)
        self.validator = validator or ItemValidator()
        self.id_factory = id_factory

    def create(self, raw_body: Any) -> OperationResult:
        """
        Create an item from a request body.

        DynamoDB Operation: PutItem without condition (overwrites on key collision)

        Args:
            raw_body: Item as a mapping or its JSON string form. Any
                client-supplied primary key value is replaced.

        Returns:
            OperationResult whose body is the JSON string
            "Created item with id=<id>", or the error message on failure
        """
        result = OperationResult()
        try:
            item = self.parse_body(raw_body)
            if item is None:
                raise MalformedRequestError("Request body is required")

            item[self.primary_key] = self.id_factory()
            self.validator.validate(item)

            self.store.put_item(item)
            logger.info(f"Created item {item[self.primary_key]} in {self.store.table_name}")
            result.body = to_json(f"Created item with id={item[self.primary_key]}")
        except GenericTableError as e:
            return self._fail(result, e)

        return result

    def handle_event(self, event: Mapping[str, Any]) -> OperationResult:
        try:
            raw_body = self.raw_body(event)
        except GenericTableError as e:
            return self._fail(OperationResult(), e)
        return self.create(raw_body)


class UpdateHandler(BaseHandler):
    """Set one field of an existing item."""

    operation = Operation.UPDATE

    def __init__(
        self,
        schema: TableSchema,
        store: KeyedStoreClient,
        update_field_policy: UpdateFieldPolicy = UpdateFieldPolicy.FIRST_FIELD,
        error_status_policy: ErrorStatusPolicy = ErrorStatusPolicy.LEGACY
    ):
        super().__init__(schema, store, error_status_policy)
        self.update_field_policy = update_field_policy

    def _select_field(self, patch: Dict[str, Any]) -> str:
        if len(patch) > 1 and self.update_field_policy == UpdateFieldPolicy.SINGLE_FIELD_ONLY:
            raise ValidationError(
                f"Only one field can be updated per request, got {len(patch)}: {', '.join(patch)}",
                errors={field: "extra" for field in list(patch)[1:]}
            )
        field = next(iter(patch))
        if len(patch) > 1:
            logger.debug(f"Ignoring extra patch fields {list(patch)[1:]}, updating '{field}' only")
        return field

    def update(self, primary_key_value: Optional[str], patch_body: Any) -> OperationResult:
        """
        Update a single field of the item with the given primary key.

        DynamoDB Operation: UpdateItem with SET #xnew = :new
        Condition: attribute_exists(primary key) - missing keys are a store error

        Args:
            primary_key_value: Primary key of the item to update
            patch_body: Mapping or JSON string; only its first field is applied
                (or, under SINGLE_FIELD_ONLY, more than one field is rejected)

        Returns:
            OperationResult whose body is {"Attributes": {...updated values}},
            the default greeting when there is nothing to do, or the error message
        """
        result = OperationResult()
        try:
            patch = self.parse_body(patch_body)
            if not primary_key_value or not patch:
                return result

            field = self._select_field(patch)
            attributes = self.store.update_item(
                key={self.primary_key: primary_key_value},
                update_expression='SET #xnew = :new',
                expression_attribute_names={'#xnew': field},
                expression_attribute_values={':new': patch[field]},
                condition_expression=Attr(self.primary_key).exists(),
                return_values='UPDATED_NEW'
            )
            result.body = to_json({'Attributes': attributes or {}})
        except GenericTableError as e:
            return self._fail(result, e)

        return result

    def handle_event(self, event: Mapping[str, Any]) -> OperationResult:
        try:
            raw_body = self.raw_body(event)
        except GenericTableError as e:
            return self._fail(OperationResult(), e)
        return self.update(self.primary_key_value(event), raw_body)


class DeleteHandler(BaseHandler):
    """Delete an item by primary key."""

    operation = Operation.DELETE

    def delete(self, primary_key_value: Optional[str]) -> OperationResult:
        """
        Delete the item with the given primary key.

        DynamoDB Operation: DeleteItem without condition (idempotent)

        Args:
            primary_key_value: Primary key of the item to delete

        Returns:
            OperationResult with body "{}" on success, the default greeting
            when no key is given, or the error message
        """
        result = OperationResult()
        if not primary_key_value:
            return result

        try:
            self.store.delete_item(key={self.primary_key: primary_key_value})
            result.body = to_json({})
        except GenericTableError as e:
            return self._fail(result, e)

        return result

    def handle_event(self, event: Mapping[str, Any]) -> OperationResult:
        return self.delete(self.primary_key_value(event))
