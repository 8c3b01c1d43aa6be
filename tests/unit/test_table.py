"""
Tests for table descriptors (core/table.py)
"""

from datetime import datetime

import pytest
from pydantic import ValidationError as PydanticValidationError

from dynamo_mapper.core.attribute import AttributeKind
from dynamo_mapper.core.table import (
    KeySchema,
    KeySchemaElement,
    ProvisionedThroughput,
    TableCollection,
    TableDescription,
)


class TestKeySchema:
    """Test key schema models."""

    def test_to_dynamodb(self):
        """Test the legacy key schema form."""
        key_schema = KeySchema(
            hash_key=KeySchemaElement(name='user_id'),
            range_key=KeySchemaElement(name='created_at', kind=AttributeKind.NUMBER),
        )

        assert key_schema.to_dynamodb() == {
            'HashKeyElement': {'AttributeName': 'user_id', 'AttributeType': 'S'},
            'RangeKeyElement': {'AttributeName': 'created_at', 'AttributeType': 'N'},
        }

    def test_hash_only(self):
        """Test a schema without range key."""
        key_schema = KeySchema(hash_key=KeySchemaElement(name='id', kind='N'))

        assert key_schema.to_dynamodb() == {'HashKeyElement': {'AttributeName': 'id', 'AttributeType': 'N'}}

    @pytest.mark.parametrize("kind", ['SS', 'NS', 'array', 'B'])
    def test_invalid_key_kind(self, kind):
        """Test that keys are scalar strings or numbers."""
        with pytest.raises(PydanticValidationError):
            KeySchemaElement(name='id', kind=kind)

    def test_from_legacy_form(self):
        """Test reading the legacy mapping form."""
        key_schema = KeySchema.from_dynamodb({
            'HashKeyElement': {'AttributeName': 'user_id', 'AttributeType': 'S'},
            'RangeKeyElement': {'AttributeName': 'created_at', 'AttributeType': 'N'},
        })

        assert key_schema.hash_key.name == 'user_id'
        assert key_schema.range_key.kind == AttributeKind.NUMBER

    def test_from_list_form(self):
        """Test reading the KeySchema list plus AttributeDefinitions form."""
        key_schema = KeySchema.from_dynamodb(
            [
                {'AttributeName': 'user_id', 'KeyType': 'HASH'},
                {'AttributeName': 'created_at', 'KeyType': 'RANGE'},
            ],
            [
                {'AttributeName': 'user_id', 'AttributeType': 'S'},
                {'AttributeName': 'created_at', 'AttributeType': 'N'},
            ],
        )

        assert key_schema.hash_key == KeySchemaElement(name='user_id', kind='S')
        assert key_schema.range_key == KeySchemaElement(name='created_at', kind='N')


class TestProvisionedThroughput:
    """Test throughput model."""

    def test_to_dynamodb(self):
        """Test the wire form."""
        throughput = ProvisionedThroughput(read_capacity_units=10, write_capacity_units=5)

        assert throughput.to_dynamodb() == {'ReadCapacityUnits': 10, 'WriteCapacityUnits': 5}

    def test_units_must_be_positive(self):
        """Test that capacity units are at least 1."""
        with pytest.raises(PydanticValidationError):
            ProvisionedThroughput(read_capacity_units=0, write_capacity_units=5)


class TestTableDescription:
    """Test table description parsing."""

    def test_from_dynamodb(self):
        """Test a full DescribeTable response."""
        created = datetime(2024, 1, 1, 12, 0, 0)
        description = TableDescription.from_dynamodb({
            'TableName': 'events',
            'TableStatus': 'ACTIVE',
            'CreationDateTime': created,
            'ItemCount': 12,
            'TableSizeBytes': 2048,
            'KeySchema': {'HashKeyElement': {'AttributeName': 'user_id', 'AttributeType': 'S'}},
            'ProvisionedThroughput': {'ReadCapacityUnits': 5, 'WriteCapacityUnits': 1},
        })

        assert description.name == 'events'
        assert description.status == 'ACTIVE'
        assert description.creation_date_time == created
        assert description.item_count == 12
        assert description.size_bytes == 2048
        assert description.key_schema.hash_key.name == 'user_id'
        assert description.provisioned_throughput.write_capacity_units == 1

    def test_on_demand_table(self):
        """Test that zero capacity (on-demand tables) leaves throughput unset."""
        description = TableDescription.from_dynamodb({
            'TableName': 'events',
            'TableStatus': 'ACTIVE',
            'ProvisionedThroughput': {'ReadCapacityUnits': 0, 'WriteCapacityUnits': 0},
        })

        assert description.provisioned_throughput is None
        assert description.key_schema is None


class TestTableCollection:
    """Test table name listing."""

    def test_names(self):
        """Test collected names and pagination state."""
        tables = TableCollection()
        tables.add('events')
        tables.add('users')

        assert list(tables) == ['events', 'users']
        assert len(tables) == 2
        assert 'users' in tables
        assert not tables.more()
        assert TableCollection('users').more()
