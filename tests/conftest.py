"""
Test configuration and fixtures for dynamo-mapper.

Provides a configuration, a mocked connector for the item/query/batch calls and
a moto-backed DynamoDB resource for the table administration calls.
"""

import sys
from pathlib import Path
from unittest.mock import Mock

# Add parent directory to path so we can import dynamo_mapper
sys.path.insert(0, str(Path(__file__).parent.parent))

import boto3
import pytest
from moto import mock_aws

from dynamo_mapper import Connection, DynamoDBConfig


@pytest.fixture
def dynamodb_config():
    """DynamoDB configuration for testing."""
    return DynamoDBConfig(
        aws_access_key_id="test_key",
        aws_secret_access_key="test_secret",
        region_name="us-east-1",
        endpoint_url=None,
        table_wait_seconds=0,
        table_wait_attempts=3
    )


@pytest.fixture
def mock_connector():
    """Mock DynamoDB client with empty default responses."""
    connector = Mock()
    connector.put_item.return_value = {'ConsumedCapacityUnits': 1.0}
    connector.delete_item.return_value = {'ConsumedCapacityUnits': 1.0}
    connector.update_item.return_value = {'ConsumedCapacityUnits': 1.0}
    connector.get_item.return_value = {'ConsumedCapacityUnits': 0.5}
    connector.query.return_value = {'Count': 0, 'Items': [], 'ConsumedCapacityUnits': 0.5}
    connector.scan.return_value = {'Count': 0, 'ScannedCount': 0, 'Items': [], 'ConsumedCapacityUnits': 0.5}
    connector.batch_get_item.return_value = {'Responses': {}, 'UnprocessedKeys': {}}
    connector.batch_write_item.return_value = {'Responses': {}, 'UnprocessedItems': {}}
    return connector


@pytest.fixture
def connection(dynamodb_config, mock_connector):
    """Connection bound to the mocked connector."""
    return Connection(dynamodb_config, connector=mock_connector)


@pytest.fixture
def mock_dynamodb_resource():
    """Mock DynamoDB resource."""
    with mock_aws():
        yield boto3.resource('dynamodb', region_name='us-east-1')


@pytest.fixture
def events_table(mock_dynamodb_resource):
    """Create the events table for testing."""
    table = mock_dynamodb_resource.create_table(
        TableName='events',
        KeySchema=[
            {'AttributeName': 'user_id', 'KeyType': 'HASH'},
            {'AttributeName': 'created_at', 'KeyType': 'RANGE'}
        ],
        AttributeDefinitions=[
            {'AttributeName': 'user_id', 'AttributeType': 'S'},
            {'AttributeName': 'created_at', 'AttributeType': 'N'}
        ],
        BillingMode='PROVISIONED',
        ProvisionedThroughput={'ReadCapacityUnits': 5, 'WriteCapacityUnits': 5}
    )
    return table


# Sample Data Fixtures

@pytest.fixture
def sample_rows():
    """Raw rows as returned by a Query call."""
    return [
        {'user_id': {'S': 'user-1'}, 'created_at': {'N': '100'}, 'kind': {'S': 'login'}},
        {'user_id': {'S': 'user-1'}, 'created_at': {'N': '200'}, 'kind': {'S': 'logout'}},
    ]
