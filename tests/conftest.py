"""
Test configuration and fixtures for the generic table service.

Provides a moto-backed SpacesTable (primary key ``spaceId``, secondary index
``location``) and the settings, config and wired collection built on it.
"""

import sys
from pathlib import Path

# Add parent directory to path so we can import generic_table
sys.path.insert(0, str(Path(__file__).parent.parent))

import boto3
import pytest
from moto import mock_aws

from generic_table import DynamoDBConfig, GenericTable, TableSettings


@pytest.fixture
def mock_dynamodb_config():
    """DynamoDB configuration for mocked testing."""
    return DynamoDBConfig(
        aws_access_key_id="test_key",
        aws_secret_access_key="test_secret",
        region_name="us-east-1",
        endpoint_url=None,  # Use default AWS endpoint for moto
        table_prefix=""
    )


@pytest.fixture
def mock_dynamodb_resource():
    """Mock DynamoDB resource."""
    with mock_aws():
        yield boto3.resource(
            'dynamodb',
            region_name='us-east-1',
            aws_access_key_id="test_key",
            aws_secret_access_key="test_secret"
        )


@pytest.fixture
def spaces_table(mock_dynamodb_resource):
    """Create SpacesTable with a location index."""
    table = mock_dynamodb_resource.create_table(
        TableName='SpacesTable',
        KeySchema=[
            {'AttributeName': 'spaceId', 'KeyType': 'HASH'}
        ],
        AttributeDefinitions=[
            {'AttributeName': 'spaceId', 'AttributeType': 'S'},
            {'AttributeName': 'location', 'AttributeType': 'S'}
        ],
        GlobalSecondaryIndexes=[
            {
                'IndexName': 'location',
                'KeySchema': [
                    {'AttributeName': 'location', 'KeyType': 'HASH'}
                ],
                'Projection': {'ProjectionType': 'ALL'}
            }
        ],
        BillingMode='PAY_PER_REQUEST'
    )
    return table


@pytest.fixture
def spaces_settings():
    """Settings for the spaces collection with every operation enabled."""
    return TableSettings(
        table_name="SpacesTable",
        primary_key="spaceId",
        secondary_indexes=["location"],
        collection="spaces"
    )


@pytest.fixture
def spaces(spaces_settings, mock_dynamodb_config, spaces_table):
    """Spaces collection wired to the mocked table."""
    return GenericTable(spaces_settings, mock_dynamodb_config)


# Sample Data Fixtures

@pytest.fixture
def sample_space():
    """Sample space item as a client would post it."""
    return {
        "name": "Best location",
        "location": "London",
        "capacity": 12
    }
