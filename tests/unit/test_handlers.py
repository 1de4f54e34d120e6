"""
Tests for the CRUD handlers (handlers/commands.py, handlers/queries.py)

Handlers are exercised against a Mock keyed store so that the exact store
calls, and the result bodies produced from them, can be asserted.
"""

import base64
import json
from decimal import Decimal

import pytest
from unittest.mock import Mock
from boto3.dynamodb.conditions import Attr, Key

from generic_table.core import ItemValidator, QueryPlanner
from generic_table.exceptions import ConflictError, StoreValidationError
from generic_table.handlers import CreateHandler, DeleteHandler, ReadHandler, UpdateHandler
from generic_table.models import (
    DEFAULT_BODY,
    ErrorStatusPolicy,
    FullScan,
    IndexPolicy,
    TableSchema,
    UpdateFieldPolicy,
)


@pytest.fixture
def schema():
    return TableSchema(primary_key="spaceId", secondary_indexes=["location"])


@pytest.fixture
def mock_store():
    """Mock keyed store client."""
    store = Mock()
    store.table_name = "SpacesTable"
    store.query_all.return_value = {'Items': [], 'Count': 0, 'ScannedCount': 0}
    store.scan_all.return_value = {'Items': [], 'Count': 0, 'ScannedCount': 0}
    store.update_item.return_value = {}
    return store


class TestCreateHandler:

    @pytest.fixture
    def handler(self, schema, mock_store):
        return CreateHandler(schema, mock_store, id_factory=lambda: "generated-id")

    def test_create_success(self, handler, mock_store):
        result = handler.create('{"name": "Best location", "location": "London", "capacity": 12}')

        assert result.status_code == 200
        assert result.body == '"Created item with id=generated-id"'
        mock_store.put_item.assert_called_once_with(
            {'name': 'Best location', 'location': 'London', 'capacity': 12, 'spaceId': 'generated-id'}
        )

    def test_client_primary_key_is_replaced(self, handler, mock_store):
        handler.create({'spaceId': 'client-chosen', 'name': 'A', 'location': 'B'})

        stored = mock_store.put_item.call_args[0][0]
        assert stored['spaceId'] == 'generated-id'

    def test_floats_stored_as_decimal(self, handler, mock_store):
        handler.create('{"name": "A", "location": "B", "rating": 4.5}')

        assert mock_store.put_item.call_args[0][0]['rating'] == Decimal('4.5')

    def test_default_id_factory_generates_unique_ids(self, schema, mock_store):
        handler = CreateHandler(schema, mock_store)

        for _ in range(3):
            handler.create({'name': 'A', 'location': 'B'})

        ids = {call[0][0]['spaceId'] for call in mock_store.put_item.call_args_list}
        assert len(ids) == 3

    def test_missing_required_field_does_not_write(self, handler, mock_store):
        result = handler.create({'name': 'Only a name'})

        assert result.status_code == 200
        assert result.body == "Value for location expected!"
        mock_store.put_item.assert_not_called()

    def test_custom_required_fields(self, schema, mock_store):
        handler = CreateHandler(schema, mock_store, validator=ItemValidator(["owner"]))

        result = handler.create({'name': 'A'})

        assert result.body == "Value for owner expected!"

    def test_malformed_body(self, handler, mock_store):
        result = handler.create('{not json')

        assert "not valid JSON" in result.body
        mock_store.put_item.assert_not_called()

    def test_body_not_utf8(self, handler, mock_store):
        result = handler.create(b'\xff\xfe{"name": "x"}')

        assert result.status_code == 200
        assert result.body.startswith("Request body is not valid JSON")
        mock_store.put_item.assert_not_called()

    def test_deeply_nested_body(self, handler, mock_store):
        result = handler.create('{"a": ' * 100000 + '1' + '}' * 100000)

        assert result.body.startswith("Request body is not valid JSON")
        mock_store.put_item.assert_not_called()

    def test_missing_body(self, handler, mock_store):
        result = handler.create(None)

        assert result.body == "Request body is required"
        mock_store.put_item.assert_not_called()

    def test_strict_status_policy(self, schema, mock_store):
        handler = CreateHandler(schema, mock_store, error_status_policy=ErrorStatusPolicy.STRICT)

        result = handler.create({'location': 'London'})

        assert result.status_code == 400
        assert result.body == "Value for name expected!"

    def test_store_error_in_body(self, handler, mock_store):
        mock_store.put_item.side_effect = StoreValidationError("Validation failed - item too large")

        result = handler.create({'name': 'A', 'location': 'B'})

        assert result.status_code == 200
        assert result.body == "Validation failed - item too large"


class TestReadHandler:

    @pytest.fixture
    def handler(self, schema, mock_store):
        return ReadHandler(schema, mock_store)

    def test_full_scan_without_parameters(self, handler, mock_store):
        mock_store.scan_all.return_value = {
            'Items': [{'spaceId': '1', 'capacity': Decimal('12')}], 'Count': 1, 'ScannedCount': 1
        }

        result = handler.read(None)

        mock_store.scan_all.assert_called_once_with()
        mock_store.query_all.assert_not_called()
        assert json.loads(result.body) == {
            'Items': [{'spaceId': '1', 'capacity': 12}], 'Count': 1, 'ScannedCount': 1
        }

    def test_primary_lookup(self, handler, mock_store):
        handler.read({'location': 'London', 'spaceId': 'abc'})

        mock_store.query_all.assert_called_once_with(KeyConditionExpression=Key('spaceId').eq('abc'))

    def test_index_lookup(self, handler, mock_store):
        handler.read({'location': 'London'})

        mock_store.query_all.assert_called_once_with(
            IndexName='location',
            KeyConditionExpression=Key('location').eq('London')
        )

    def test_undeclared_index_deferred_to_store(self, handler, mock_store):
        mock_store.query_all.side_effect = StoreValidationError(
            "Validation failed - Query on SpacesTable: The table does not have the specified index: bogus"
        )

        result = handler.read({'bogus': 'x'})

        assert result.status_code == 200
        assert "The table does not have the specified index: bogus" in result.body
        assert mock_store.query_all.call_args[1]['IndexName'] == 'bogus'

    def test_undeclared_index_rejected_under_strict_policy(self, schema, mock_store):
        handler = ReadHandler(
            schema, mock_store,
            planner=QueryPlanner(IndexPolicy.STRICT),
            error_status_policy=ErrorStatusPolicy.STRICT
        )

        result = handler.read({'bogus': 'x'})

        assert result.status_code == 400
        assert result.body == "The table does not have the specified index: bogus"
        mock_store.query_all.assert_not_called()

    def test_execute_rejects_unknown_plan(self, handler):
        with pytest.raises(TypeError):
            handler.execute(object())

    def test_execute_full_scan(self, handler, mock_store):
        assert handler.execute(FullScan()) == mock_store.scan_all.return_value


class TestUpdateHandler:

    @pytest.fixture
    def handler(self, schema, mock_store):
        return UpdateHandler(schema, mock_store)

    def test_update_first_field_only(self, handler, mock_store):
        mock_store.update_item.return_value = {'name': 'New name'}

        result = handler.update('abc', '{"name": "New name", "location": "Paris"}')

        mock_store.update_item.assert_called_once_with(
            key={'spaceId': 'abc'},
            update_expression='SET #xnew = :new',
            expression_attribute_names={'#xnew': 'name'},
            expression_attribute_values={':new': 'New name'},
            condition_expression=Attr('spaceId').exists(),
            return_values='UPDATED_NEW'
        )
        assert json.loads(result.body) == {'Attributes': {'name': 'New name'}}

    def test_single_field_only_policy_rejects_extra_fields(self, schema, mock_store):
        handler = UpdateHandler(
            schema, mock_store,
            update_field_policy=UpdateFieldPolicy.SINGLE_FIELD_ONLY,
            error_status_policy=ErrorStatusPolicy.STRICT
        )

        result = handler.update('abc', {'name': 'a', 'location': 'b'})

        assert result.status_code == 400
        assert result.body.startswith("Only one field can be updated per request")
        mock_store.update_item.assert_not_called()

    def test_single_field_only_policy_accepts_one_field(self, schema, mock_store):
        handler = UpdateHandler(schema, mock_store, update_field_policy=UpdateFieldPolicy.SINGLE_FIELD_ONLY)

        handler.update('abc', {'name': 'a'})

        mock_store.update_item.assert_called_once()

    @pytest.mark.parametrize("key,patch", [
        (None, '{"name": "a"}'),
        ('abc', None),
        ('abc', '{}'),
        ('', '{"name": "a"}'),
    ])
    def test_nothing_to_do_returns_default(self, handler, mock_store, key, patch):
        result = handler.update(key, patch)

        assert result.is_default
        assert result.status_code == 200
        mock_store.update_item.assert_not_called()

    def test_missing_item_surfaces_conflict(self, handler, mock_store):
        mock_store.update_item.side_effect = ConflictError(
            "Conditional check failed - UpdateItem on SpacesTable (resource: nope): The conditional request failed"
        )

        result = handler.update('nope', {'name': 'a'})

        assert result.status_code == 200
        assert "The conditional request failed" in result.body

    def test_patch_not_utf8(self, handler, mock_store):
        result = handler.update('abc', b'\xff')

        assert result.body.startswith("Request body is not valid JSON")
        mock_store.update_item.assert_not_called()

    def test_malformed_patch(self, handler, mock_store):
        result = handler.update('abc', '[1, 2]')

        assert result.body == "Request body must be a JSON object, got list"
        mock_store.update_item.assert_not_called()


class TestDeleteHandler:

    @pytest.fixture
    def handler(self, schema, mock_store):
        return DeleteHandler(schema, mock_store)

    def test_delete_success(self, handler, mock_store):
        result = handler.delete('abc')

        assert result.body == '{}'
        mock_store.delete_item.assert_called_once_with(key={'spaceId': 'abc'})

    def test_delete_without_key(self, handler, mock_store):
        result = handler.delete(None)

        assert result.is_default
        mock_store.delete_item.assert_not_called()

    def test_store_error_strict_status(self, schema, mock_store):
        from generic_table.exceptions import RetryableError

        mock_store.delete_item.side_effect = RetryableError("Throttling - DeleteItem on SpacesTable")
        handler = DeleteHandler(schema, mock_store, error_status_policy=ErrorStatusPolicy.STRICT)

        result = handler.delete('abc')

        assert result.status_code == 503
        assert result.body == "Throttling - DeleteItem on SpacesTable"


class TestLambdaEvents:
    """Handlers invoked with API-Gateway-shaped events."""

    def test_create_event_with_base64_body(self, schema, mock_store):
        handler = CreateHandler(schema, mock_store, id_factory=lambda: "id-1")
        body = base64.b64encode(b'{"name": "A", "location": "B"}').decode('ascii')

        response = handler({'body': body, 'isBase64Encoded': True}, None)

        assert response == {'statusCode': 200, 'body': '"Created item with id=id-1"'}

    def test_invalid_base64_body(self, schema, mock_store):
        handler = CreateHandler(schema, mock_store)

        response = handler({'body': 'abc', 'isBase64Encoded': True})

        assert response['body'].startswith("Request body is not valid base64")
        mock_store.put_item.assert_not_called()

    def test_read_event_uses_query_parameters(self, schema, mock_store):
        handler = ReadHandler(schema, mock_store)

        handler({'queryStringParameters': {'location': 'London'}})

        assert mock_store.query_all.call_args[1]['IndexName'] == 'location'

    def test_read_event_without_parameters(self, schema, mock_store):
        response = ReadHandler(schema, mock_store)({'queryStringParameters': None})

        assert json.loads(response['body'])['Count'] == 0
        mock_store.scan_all.assert_called_once()

    def test_update_event(self, schema, mock_store):
        handler = UpdateHandler(schema, mock_store)

        handler({'queryStringParameters': {'spaceId': 'abc'}, 'body': '{"name": "n"}'})

        assert mock_store.update_item.call_args[1]['key'] == {'spaceId': 'abc'}

    def test_delete_event_without_key(self, schema, mock_store):
        response = DeleteHandler(schema, mock_store)(None)

        assert response == {'statusCode': 200, 'body': DEFAULT_BODY}
