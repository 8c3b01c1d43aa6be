"""
DynamoDB Connection

The Connection is the only component that talks to the DynamoDB client. For
every operation it:

1. Builds the call parameters from keys, items and an optional request context
2. Issues the call through the client (the "connector")
3. Accounts the consumed capacity units per table
4. Interprets the response into Attributes, Collections or table descriptors

Hydration of rows into domain objects is delegated to a Hydrator, and
pagination or batch resubmission are left to the caller: a Collection exposes
the next page's context, and batch calls return a context holding whatever
the service left unprocessed.

The connector is any object exposing the snake_case DynamoDB operations
(``put_item``, ``query``, ``batch_write_item``, ...). When none is given, a
boto3 client is created lazily from the DynamoDBConfig. That client speaks the
current service API, so it only serves the calls whose shapes did not change
(describe, list, update and delete table). The item, query, scan, batch and
create table calls use the legacy key shapes and need an injected connector.
"""

import logging
import time
from typing import Any, Dict, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from .config import DynamoDBConfig
from .context import BatchGet, BatchWrite, CollectionContext, Delete, Get, Put, Query, Scan, Update
from .core.attribute import Attribute, AttributeUpdate, as_attribute, build_key
from .core.collection import BatchCollection, Collection
from .core.item import Item
from .core.table import KeySchema, ProvisionedThroughput, TableCollection, TableDescription
from .exceptions import (
    ConnectionError,
    EmptyBatchError,
    MissingTableError,
    RemoteFailureError,
    TableTimeoutError,
)
from .hydration import Hydrator, ItemHydrator

# Client methods whose parameters use the legacy HashKeyElement key shapes
LEGACY_SHAPE_METHODS = frozenset({
    'put_item',
    'get_item',
    'update_item',
    'delete_item',
    'query',
    'scan',
    'batch_get_item',
    'batch_write_item',
    'create_table',
})


def map_dynamodb_error(error: ClientError, operation: str, table_name: Optional[str] = None) -> RemoteFailureError:
    """Wrap a DynamoDB ClientError without interpreting it.

    Args:
        error: The boto3 ClientError
        operation: The operation that failed (e.g., "Put", "Query")
        table_name: The DynamoDB table name, if the operation targets one

    Returns:
        RemoteFailureError carrying the service error code and message
    """
    error_info = error.response.get('Error', {})
    error_code = error_info.get('Code', 'Unknown')
    error_message = error_info.get('Message', str(error))

    context = f"{operation} on {table_name}" if table_name else operation
    return RemoteFailureError(
        f"{context}: {error_message}",
        error_code=error_code,
        operation=operation,
        table_name=table_name,
        original_error=error
    )


class CapacityCounter:
    """Consumed capacity units, accumulated per table."""

    def __init__(self):
        self._units: Dict[str, float] = {}

    def add(self, table: str, units: float) -> None:
        self._units[table] = self._units.get(table, 0.0) + units

    def total(self, table: Optional[str] = None) -> float:
        """Units consumed on a table, or on all tables when table is None."""
        if table is None:
            return float(sum(self._units.values()))
        return self._units.get(table, 0.0)

    def reset(self, table: Optional[str] = None) -> None:
        if table is None:
            self._units.clear()
        else:
            self._units.pop(table, None)


class Connection:
    """
    Object-mapping access to DynamoDB tables.

    Key principles:
    - Requests are built from typed Attributes and request contexts
    - Responses are returned as Attributes, Items or hydrated models
    - Capacity counters belong to the connection instance, never to globals
    - Service errors are passed through as RemoteFailureError, never retried here
    """

    def __init__(
        self,
        config: Optional[DynamoDBConfig] = None,
        connector: Optional[Any] = None,
        logger: Optional[logging.Logger] = None
    ):
        """Initialize connection.

        Args:
            config: DynamoDB configuration (read from the environment if None)
            connector: DynamoDB client speaking the legacy item API; a boto3
                client for the table calls is created lazily if None
            logger: Logger receiving request/response messages
        """
        self.config = config or DynamoDBConfig()
        self._connector = connector
        self._injected_connector = connector is not None

        if logger is None:
            logger = logging.getLogger(__name__)
            if self.config.enable_debug_logging:
                # Keep the DEBUG level off the logger shared by other connections
                logger = logger.getChild("debug")
        if self.config.enable_debug_logging:
            logger.setLevel(logging.DEBUG)
        self.logger = logger

        self.read_units = CapacityCounter()
        self.write_units = CapacityCounter()

    @property
    def connector(self):
        """Lazy initialization of the DynamoDB client."""
        if self._connector is None:
            try:
                session = boto3.Session(
                    aws_access_key_id=self.config.aws_access_key_id,
                    aws_secret_access_key=self.config.aws_secret_access_key,
                    region_name=self.config.region_name
                )

                # Configure connection parameters
                client_config = {
                    'region_name': self.config.region_name
                }

                if self.config.endpoint_url:
                    client_config['endpoint_url'] = self.config.endpoint_url

                # Add retry and timeout configuration
                boto_config = Config(
                    retries={'max_attempts': self.config.retries},
                    max_pool_connections=self.config.max_pool_connections,
                    read_timeout=self.config.timeout_seconds,
                    connect_timeout=self.config.timeout_seconds
                )
                client_config['config'] = boto_config

                self._connector = session.client('dynamodb', **client_config)
            except Exception as e:
                self.logger.error(f"Failed to create DynamoDB client: {e}")
                raise ConnectionError(f"Failed to connect to DynamoDB: {e}", e) from e
        return self._connector

    def set_logger(self, logger: logging.Logger) -> None:
        self.logger = logger
        self.logger.info("Logger activated")

    # =========================================================================
    # Capacity Units
    # =========================================================================

    def get_consumed_read_units(self, table: Optional[str] = None) -> float:
        """Return read units consumed on a table, or on all tables when table is None."""
        return self.read_units.total(table)

    def get_consumed_write_units(self, table: Optional[str] = None) -> float:
        """Return write units consumed on a table, or on all tables when table is None."""
        return self.write_units.total(table)

    def reset_consumed_units(self, table: Optional[str] = None) -> None:
        """Reset the read and write counters of a table, or of all tables when table is None."""
        if table is None:
            self.logger.info("Reset all consumed units counters")
        else:
            self.logger.info(f"Reset consumed units counters for table {table}")
        self.read_units.reset(table)
        self.write_units.reset(table)

    def _add_consumed_read_units(self, table: str, response: Dict[str, Any]) -> None:
        units = float(response.get('ConsumedCapacityUnits', 0))
        self.logger.info(f"{units} consumed read units on table {table}")
        self.read_units.add(table, units)

    def _add_consumed_write_units(self, table: str, response: Dict[str, Any]) -> None:
        units = float(response.get('ConsumedCapacityUnits', 0))
        self.logger.info(f"{units} consumed write units on table {table}")
        self.write_units.add(table, units)

    # =========================================================================
    # Transport
    # =========================================================================

    def _call(
        self,
        method: str,
        operation: str,
        parameters: Dict[str, Any],
        table: Optional[str] = None
    ) -> Dict[str, Any]:
        """Issue one client call, logging parameters and response at DEBUG level."""
        if method in LEGACY_SHAPE_METHODS and not self._injected_connector:
            message = f"{operation} needs a connector speaking the legacy item API, pass one as Connection(connector=...)"
            self.logger.error(message)
            raise ConnectionError(message, context={'operation': operation})

        self.logger.debug(f"{operation} request parameters: {parameters}")
        try:
            response = getattr(self.connector, method)(**parameters)
        except ClientError as e:
            self.logger.error(f"{operation} request failed: {e}")
            raise map_dynamodb_error(e, operation, table) from e
        except BotoCoreError as e:
            self.logger.error(f"{operation} request failed: {e}")
            context = f"{operation} on {table}" if table else operation
            raise RemoteFailureError(
                f"{context}: {e}",
                error_code=type(e).__name__,
                operation=operation,
                table_name=table,
                original_error=e
            ) from e
        self.logger.debug(f"{operation} request response: {response}")
        return response

    @staticmethod
    def _populate_attributes(response: Dict[str, Any]) -> Optional[Dict[str, Attribute]]:
        """Extract the returned Attributes of a write response, if any."""
        if 'Attributes' not in response:
            return None
        return {name: Attribute.from_dynamodb(wire) for name, wire in response['Attributes'].items()}

    # =========================================================================
    # Item Operations
    # =========================================================================

    def put(self, item: Item, context: Optional[Put] = None) -> Optional[Dict[str, Attribute]]:
        """Write an item through PutItem.

        Empty string attributes are left out of the request.

        Args:
            item: Item to store; it must name its table
            context: Expected conditions and ReturnValues

        Returns:
            Returned attributes (with ReturnValues=ALL_OLD), None otherwise

        Raises:
            MissingTableError: If the item has no table
            RemoteFailureError: If the service rejects the request
        """
        table = item.table
        self.logger.info(f"Put on table {table}")

        if not table:
            raise MissingTableError("Put")

        parameters = {
            'TableName': table,
            'Item': item.to_dynamodb(skip_empty=True),
        }
        if context is not None:
            parameters.update(context.to_dynamodb())

        response = self._call('put_item', 'Put', parameters, table)
        self._add_consumed_write_units(table, response)

        return self._populate_attributes(response)

    def delete(
        self,
        table: str,
        hash_key: Any,
        range_key: Any = None,
        context: Optional[Delete] = None
    ) -> Optional[Dict[str, Attribute]]:
        """Delete an item through DeleteItem.

        Returns:
            Returned attributes (with ReturnValues=ALL_OLD), None otherwise
        """
        self.logger.info(f"Delete on table {table}")

        if not table:
            raise MissingTableError("Delete")

        parameters = {
            'TableName': table,
            'Key': build_key(hash_key, range_key),
        }
        if context is not None:
            parameters.update(context.to_dynamodb())

        response = self._call('delete_item', 'Delete', parameters, table)
        self._add_consumed_write_units(table, response)

        return self._populate_attributes(response)

    def get(
        self,
        table: str,
        hash_key: Any,
        range_key: Any = None,
        context: Optional[Get] = None,
        hydrator: Optional[Hydrator] = None
    ) -> Optional[Any]:
        """Read an item through GetItem.

        Args:
            table: Table name
            hash_key: Hash key value
            range_key: Range key value, if the table has one
            context: Projection and consistent read options
            hydrator: Converts the row; an ItemHydrator for the table if None

        Returns:
            The hydrated item, or None if it does not exist
        """
        self.logger.info(f"Get on table {table}")

        parameters = {
            'TableName': table,
            'Key': build_key(hash_key, range_key),
        }
        if context is not None:
            parameters.update(context.to_dynamodb())

        response = self._call('get_item', 'Get', parameters, table)
        self._add_consumed_read_units(table, response)

        if 'Item' not in response:
            self.logger.info("Didn't find item")
            return None

        return (hydrator or ItemHydrator(table)).hydrate(response['Item'])

    def update(
        self,
        table: str,
        hash_key: Any,
        update: AttributeUpdate,
        range_key: Any = None,
        context: Optional[Update] = None
    ) -> Optional[Dict[str, Attribute]]:
        """Update an item through UpdateItem.

        Args:
            table: Table name
            hash_key: Hash key value
            update: Attribute actions to apply
            range_key: Range key value, if the table has one
            context: Expected conditions and ReturnValues

        Returns:
            Returned attributes, depending on ReturnValues
        """
        self.logger.info(f"Update on table {table}")

        if not table:
            raise MissingTableError("Update")

        parameters = {
            'TableName': table,
            'Key': build_key(hash_key, range_key),
            'AttributeUpdates': update.to_dynamodb(),
        }
        if context is not None:
            parameters.update(context.to_dynamodb())

        response = self._call('update_item', 'Update', parameters, table)
        self._add_consumed_write_units(table, response)

        return self._populate_attributes(response)

    # =========================================================================
    # Query / Scan
    # =========================================================================

    def query(
        self,
        table: str,
        hash_key: Any,
        context: Optional[Query] = None,
        hydrator: Optional[Hydrator] = None
    ) -> Collection:
        """Read the items sharing a hash key through Query.

        Args:
            table: Table name
            hash_key: Hash key value
            context: Range condition, limit, cursor and other options
            hydrator: Converts rows; falls back to the context's hydrator, then
                to an ItemHydrator for the table

        Returns:
            Collection of hydrated items; ``more()`` tells if a page follows
        """
        response = self.get_query_response(table, hash_key, context)
        items = self.get_query_collection(response, context)
        return self.populate_items(items, hydrator or self._default_hydrator(table, context))

    def get_query_response(self, table: str, hash_key: Any, context: Optional[Query] = None) -> Dict[str, Any]:
        self.logger.info(f"Query on table {table}")

        parameters = {
            'TableName': table,
            'HashKeyValue': as_attribute(hash_key).to_dynamodb(),
        }
        if context is not None:
            parameters.update(context.to_dynamodb())

        response = self._call('query', 'Query', parameters, table)
        self._add_consumed_read_units(table, response)
        return response

    def get_query_collection(self, response: Dict[str, Any], context: Optional[Query] = None) -> Collection:
        """Create a collection of raw rows from a Query response."""
        return self._build_collection(response, context, Query)

    def scan(
        self,
        table: str,
        context: Optional[Scan] = None,
        hydrator: Optional[Hydrator] = None
    ) -> Collection:
        """Read a whole table through Scan.

        Returns:
            Collection of hydrated items; ``more()`` tells if a page follows
        """
        response = self.get_scan_response(table, context)
        items = self.get_scan_collection(response, context)
        return self.populate_items(items, hydrator or self._default_hydrator(table, context))

    def get_scan_response(self, table: str, context: Optional[Scan] = None) -> Dict[str, Any]:
        self.logger.info(f"Scan on table {table}")

        parameters = {
            'TableName': table,
        }
        if context is not None:
            parameters.update(context.to_dynamodb())

        response = self._call('scan', 'Scan', parameters, table)
        self.logger.info(f"{response.get('ScannedCount', 0)} scanned items")
        self._add_consumed_read_units(table, response)
        return response

    def get_scan_collection(self, response: Dict[str, Any], context: Optional[Scan] = None) -> Collection:
        """Create a collection of raw rows from a Scan response."""
        return self._build_collection(response, context, Scan)

    def populate_items(self, items: Collection, hydrator: Hydrator) -> Collection:
        """Hydrate the raw rows held by a collection into its items."""
        for row in items.request_items:
            items.add(hydrator.hydrate(row))
        items.request_items = []

        self.logger.info(f"Find {len(items)} items")
        return items

    def _build_collection(
        self,
        response: Dict[str, Any],
        context: Optional[CollectionContext],
        context_class: type
    ) -> Collection:
        last_evaluated_key = response.get('LastEvaluatedKey')
        if last_evaluated_key:
            next_context = context.clone() if context is not None else context_class()
            next_context.set_exclusive_start_key(last_evaluated_key)
            self.logger.info("More items to retrieve")
        else:
            next_context = None

        return Collection(
            next_context,
            response.get('Count', 0),
            response.get('Items') or []
        )

    @staticmethod
    def _default_hydrator(table: str, context: Optional[CollectionContext]) -> Hydrator:
        if context is not None and context.hydrator is not None:
            return context.hydrator
        return ItemHydrator(table)

    # =========================================================================
    # Batch Operations
    # =========================================================================

    def batch_get(
        self,
        context: BatchGet,
        hydrators: Optional[Dict[str, Hydrator]] = None
    ) -> BatchCollection:
        """Read items from several tables through BatchGetItem.

        Args:
            context: Keys to read, by table
            hydrators: Hydrator per table; ItemHydrator for tables not listed

        Returns:
            BatchCollection of per-table collections; its ``unprocessed_context``
            holds the keys the service did not process

        Raises:
            EmptyBatchError: If the context holds no key
        """
        self.logger.info("BatchGet")

        if len(context) == 0:
            message = "BatchGet context doesn't contain any key to get"
            self.logger.error(message)
            raise EmptyBatchError(message, "BatchGet")

        response = self._call('batch_get_item', 'BatchGet', context.to_dynamodb())

        unprocessed_keys = response.get('UnprocessedKeys') or {}
        if unprocessed_keys:
            unprocessed_context = BatchGet()
            for table, table_parameters in unprocessed_keys.items():
                for key in table_parameters.get('Keys', []):
                    range_element = key.get('RangeKeyElement')
                    unprocessed_context.add_key(
                        table,
                        Attribute.from_dynamodb(key['HashKeyElement']),
                        Attribute.from_dynamodb(range_element) if range_element else None
                    )
                if table_parameters.get('AttributesToGet'):
                    unprocessed_context.set_attributes_to_get(table, table_parameters['AttributesToGet'])
            self.logger.info("More unprocessed keys")
        else:
            unprocessed_context = None

        collection = BatchCollection(unprocessed_context)
        hydrators = hydrators or {}

        for table, table_response in (response.get('Responses') or {}).items():
            self._add_consumed_read_units(table, table_response)

            hydrator = hydrators.get(table) or ItemHydrator(table)
            items = Collection()
            for row in table_response.get('Items', []):
                items.add(hydrator.hydrate(row))

            self.logger.info(f"Find {len(items)} items on table {table}")
            collection.set_items(table, items)

        return collection

    def batch_write(self, context: BatchWrite) -> Optional[BatchWrite]:
        """Put and delete items across tables through BatchWriteItem.

        Returns:
            A new BatchWrite holding the unprocessed requests, or None when
            everything was processed

        Raises:
            EmptyBatchError: If the context holds no request
        """
        self.logger.info("BatchWrite")

        if len(context) == 0:
            message = "BatchWrite context doesn't contain anything to write"
            self.logger.error(message)
            raise EmptyBatchError(message, "BatchWrite")

        response = self._call('batch_write_item', 'BatchWrite', context.to_dynamodb())

        unprocessed_items = response.get('UnprocessedItems') or {}
        if unprocessed_items:
            unprocessed_context = BatchWrite()
            for table, requests in unprocessed_items.items():
                for request in requests:
                    if 'DeleteRequest' in request:
                        key = request['DeleteRequest']['Key']
                        range_element = key.get('RangeKeyElement')
                        unprocessed_context.add_key_to_delete(
                            table,
                            Attribute.from_dynamodb(key['HashKeyElement']),
                            Attribute.from_dynamodb(range_element) if range_element else None
                        )
                    elif 'PutRequest' in request:
                        item = Item(table).populate_from_dynamodb(request['PutRequest']['Item'])
                        unprocessed_context.add_item_to_put(item)
            self.logger.info("More unprocessed items")
        else:
            unprocessed_context = None

        for table, table_response in (response.get('Responses') or {}).items():
            self._add_consumed_write_units(table, table_response)

        return unprocessed_context

    # =========================================================================
    # Table Operations
    # =========================================================================

    def create_table(
        self,
        table: str,
        key_schema: KeySchema,
        provisioned_throughput: ProvisionedThroughput
    ) -> Optional[TableDescription]:
        """Create a table through CreateTable.

        Returns:
            Description of the table being created, if the service returned one
        """
        self.logger.info(f"Create table {table}")

        parameters = {
            'TableName': table,
            'KeySchema': key_schema.to_dynamodb(),
            'ProvisionedThroughput': provisioned_throughput.to_dynamodb(),
        }

        response = self._call('create_table', 'CreateTable', parameters, table)
        return self._table_description(response)

    def update_table(self, table: str, provisioned_throughput: ProvisionedThroughput) -> Optional[TableDescription]:
        """Change the provisioned throughput of a table through UpdateTable."""
        self.logger.info(f"Update table {table}")

        parameters = {
            'TableName': table,
            'ProvisionedThroughput': provisioned_throughput.to_dynamodb(),
        }

        response = self._call('update_table', 'UpdateTable', parameters, table)
        return self._table_description(response)

    def delete_table(self, table: str) -> Optional[TableDescription]:
        self.logger.info(f"Delete table {table}")

        response = self._call('delete_table', 'DeleteTable', {'TableName': table}, table)
        return self._table_description(response)

    def describe_table(self, table: str) -> TableDescription:
        self.logger.info(f"Describe table {table}")

        response = self._call('describe_table', 'DescribeTable', {'TableName': table}, table)
        return TableDescription.from_dynamodb(response['Table'])

    def list_tables(
        self,
        limit: Optional[int] = None,
        exclusive_start_table_name: Optional[str] = None
    ) -> TableCollection:
        """List table names through ListTables.

        Args:
            limit: Maximum number of names to return
            exclusive_start_table_name: Name to resume listing after

        Returns:
            TableCollection; ``more()`` tells if names remain
        """
        self.logger.info("List tables")

        parameters: Dict[str, Any] = {}
        if limit is not None:
            parameters['Limit'] = limit
        if exclusive_start_table_name is not None:
            parameters['ExclusiveStartTableName'] = exclusive_start_table_name

        response = self._call('list_tables', 'ListTables', parameters)

        tables = TableCollection(response.get('LastEvaluatedTableName'))
        for table_name in response.get('TableNames') or []:
            tables.add(table_name)
        return tables

    def wait_for_table_state(
        self,
        table: str,
        status: str,
        sleep: Optional[float] = None,
        max_attempts: Optional[int] = None
    ) -> TableDescription:
        """Poll a table until it reaches a status.

        Args:
            table: Table name
            status: Expected status (e.g. "ACTIVE")
            sleep: Seconds between checks (config.table_wait_seconds if None)
            max_attempts: Number of checks (config.table_wait_attempts if None)

        Returns:
            The description of the table once it has the status

        Raises:
            TableTimeoutError: If the status is not reached within max_attempts
        """
        sleep = self.config.table_wait_seconds if sleep is None else sleep
        max_attempts = self.config.table_wait_attempts if max_attempts is None else max_attempts

        last_status = None
        for attempt in range(1, max_attempts + 1):
            description = self.describe_table(table)
            if description.status == status:
                return description

            last_status = description.status
            self.logger.info(f"Table status is {last_status}, waiting")
            if attempt < max_attempts:
                time.sleep(sleep)

        self.logger.error(f"Timeout while waiting for table {table} to be {status}")
        raise TableTimeoutError(table, status, max_attempts, last_status)

    @staticmethod
    def _table_description(response: Dict[str, Any]) -> Optional[TableDescription]:
        if not response.get('TableDescription'):
            return None
        return TableDescription.from_dynamodb(response['TableDescription'])
