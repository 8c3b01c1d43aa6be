"""
Tests for request contexts (context/)

These tests verify that each context renders only the options that were set,
and that invalid options are rejected where they are set.
"""

import pytest

from dynamo_mapper.context import BatchGet, BatchWrite, Delete, Get, Put, Query, Scan, Update
from dynamo_mapper.core.attribute import Attribute
from dynamo_mapper.core.item import Item
from dynamo_mapper.exceptions import MissingTableError, UnsupportedOptionError, ValidationError
from dynamo_mapper.hydration import ItemHydrator


class TestGet:
    """Test Get context."""

    def test_empty_context(self):
        """Test that an empty context renders nothing."""
        assert Get().to_dynamodb() == {}

    def test_options(self):
        """Test projection and consistent read."""
        context = Get().set_attributes_to_get(['id', 'name']).set_consistent_read(True)

        assert context.to_dynamodb() == {
            'AttributesToGet': ['id', 'name'],
            'ConsistentRead': True,
        }


class TestConditionalWrites:
    """Test Put, Update and Delete contexts."""

    def test_expected_value(self):
        """Test an expected attribute value."""
        context = Put().expect('version', 3)

        assert context.to_dynamodb() == {'Expected': {'version': {'Value': {'N': '3'}}}}

    def test_expected_missing(self):
        """Test an expected missing attribute."""
        context = Put().expect_missing('id').set_return_values('all_old')

        assert context.to_dynamodb() == {
            'Expected': {'id': {'Exists': False}},
            'ReturnValues': 'ALL_OLD',
        }

    def test_put_rejects_update_return_values(self):
        """Test that Put only accepts NONE and ALL_OLD."""
        with pytest.raises(ValidationError, match="ReturnValues must be one of"):
            Put().set_return_values('ALL_NEW')

    def test_delete_return_values(self):
        """Test Delete ReturnValues."""
        assert Delete().set_return_values('NONE').to_dynamodb() == {'ReturnValues': 'NONE'}

    def test_update_return_values(self):
        """Test that Update accepts the updated-values options."""
        context = Update().set_return_values('UPDATED_NEW')

        assert context.to_dynamodb() == {'ReturnValues': 'UPDATED_NEW'}

    def test_update_rejects_unknown_return_values(self):
        """Test that unknown ReturnValues are rejected."""
        with pytest.raises(ValidationError):
            Update().set_return_values('EVERYTHING')


class TestQuery:
    """Test Query context."""

    def test_empty_context(self):
        """Test that an empty context renders nothing."""
        assert Query().to_dynamodb() == {}

    def test_full_context(self):
        """Test every query option."""
        cursor = {'HashKeyElement': {'S': 'user-1'}, 'RangeKeyElement': {'N': '200'}}
        context = (
            Query.create('BETWEEN', [100, 300])
            .set_scan_index_forward(False)
            .set_limit(25)
            .set_count(True)
            .set_exclusive_start_key(cursor)
            .set_consistent_read(True)
        )

        assert context.to_dynamodb() == {
            'Limit': 25,
            'Count': True,
            'ExclusiveStartKey': cursor,
            'ConsistentRead': True,
            'RangeKeyCondition': {
                'ComparisonOperator': 'BETWEEN',
                'AttributeValueList': [{'N': '100'}, {'N': '300'}],
            },
            'ScanIndexForward': False,
        }

    def test_range_condition_with_forced_kind(self):
        """Test a range condition on a string range key holding digits."""
        context = Query().set_range_condition('GE', '2024', kind='S')

        assert context.to_dynamodb()['RangeKeyCondition']['AttributeValueList'] == [{'S': '2024'}]

    @pytest.mark.parametrize("limit", [0, -1, True, "10", 1.5])
    def test_invalid_limit(self, limit):
        """Test that limits must be positive integers."""
        with pytest.raises(ValidationError, match="Limit must be a positive integer"):
            Query().set_limit(limit)

    def test_clone_is_independent(self):
        """Test that a cloned context does not share state with the original."""
        hydrator = ItemHydrator('events')
        context = Query(hydrator).set_attributes_to_get(['id']).set_limit(5)

        clone = context.clone()
        clone.set_exclusive_start_key({'HashKeyElement': {'S': 'x'}})
        clone.attributes_to_get.append('name')

        assert context.exclusive_start_key is None
        assert context.attributes_to_get == ['id']
        assert clone.limit == 5
        assert clone.hydrator is hydrator

    def test_set_hydrator(self):
        """Test replacing the hydrator of a context."""
        hydrator = ItemHydrator('events')
        context = Query(ItemHydrator('users'))

        assert context.set_hydrator(hydrator) is context
        assert context.hydrator is hydrator
        assert context.to_dynamodb() == {}


class TestScan:
    """Test Scan context."""

    def test_filters(self):
        """Test scan filters."""
        context = Scan().add_filter('age', 'GT', 18).add_filter('email', 'NOT_NULL')

        assert context.to_dynamodb() == {
            'ScanFilter': {
                'age': {'ComparisonOperator': 'GT', 'AttributeValueList': [{'N': '18'}]},
                'email': {'ComparisonOperator': 'NOT_NULL', 'AttributeValueList': []},
            }
        }

    def test_filter_on_same_name_is_replaced(self):
        """Test that a second filter on a name replaces the first."""
        context = Scan().add_filter('age', 'GT', 18).add_filter('age', 'LT', 65)

        assert context.to_dynamodb()['ScanFilter'] == {
            'age': {'ComparisonOperator': 'LT', 'AttributeValueList': [{'N': '65'}]}
        }

    def test_consistent_read_is_unsupported(self):
        """Test that scans refuse consistent reads."""
        with pytest.raises(UnsupportedOptionError, match="consistent read"):
            Scan().set_consistent_read(True)


class TestBatchGet:
    """Test BatchGet context."""

    def test_keys_by_table(self):
        """Test keys grouped by table with projections."""
        context = (
            BatchGet()
            .add_key('users', 'u-1')
            .add_key('users', 'u-2')
            .add_key('events', 'u-1', 100)
            .set_attributes_to_get('users', ['id', 'name'])
        )

        assert len(context) == 3
        assert context.tables == ['users', 'events']
        assert context.to_dynamodb() == {
            'RequestItems': {
                'users': {
                    'Keys': [
                        {'HashKeyElement': {'S': 'u-1'}},
                        {'HashKeyElement': {'S': 'u-2'}},
                    ],
                    'AttributesToGet': ['id', 'name'],
                },
                'events': {
                    'Keys': [
                        {'HashKeyElement': {'S': 'u-1'}, 'RangeKeyElement': {'N': '100'}},
                    ],
                },
            }
        }

    def test_get_keys(self):
        """Test reading back the keys of one table."""
        context = BatchGet().add_key('users', 'u-1').add_key('events', 'u-1', 100)

        keys = context.get_keys('events')
        keys.clear()

        assert context.get_keys('users') == [{'HashKeyElement': {'S': 'u-1'}}]
        assert context.get_keys('events') == [
            {'HashKeyElement': {'S': 'u-1'}, 'RangeKeyElement': {'N': '100'}}
        ]
        assert context.get_keys('orders') == []

    def test_missing_table(self):
        """Test that keys require a table."""
        with pytest.raises(MissingTableError, match="BatchGet requires a table name"):
            BatchGet().add_key('', 'u-1')

    def test_empty_context(self):
        """Test an empty context."""
        assert len(BatchGet()) == 0


class TestBatchWrite:
    """Test BatchWrite context."""

    def test_put_and_delete_requests(self):
        """Test put and delete requests across tables."""
        item = Item('users', {'id': 'u-1', 'nickname': '', 'age': 31})
        context = BatchWrite().add_item_to_put(item).add_key_to_delete('events', 'u-1', Attribute('100', 'N'))

        assert len(context) == 2
        assert context.to_dynamodb() == {
            'RequestItems': {
                'users': [{'PutRequest': {'Item': {'id': {'S': 'u-1'}, 'age': {'N': '31'}}}}],
                'events': [{'DeleteRequest': {'Key': {
                    'HashKeyElement': {'S': 'u-1'},
                    'RangeKeyElement': {'N': '100'},
                }}}],
            }
        }

    def test_item_without_table(self):
        """Test that items to put must name their table."""
        with pytest.raises(MissingTableError, match="BatchWrite"):
            BatchWrite().add_item_to_put(Item(attributes={'id': 'u-1'}))

    def test_get_requests(self):
        """Test per-table request access."""
        context = BatchWrite().add_key_to_delete('users', 'u-1')

        assert context.tables == ['users']
        assert context.get_requests('users') == [{'DeleteRequest': {'Key': {'HashKeyElement': {'S': 'u-1'}}}}]
        assert context.get_requests('orders') == []
