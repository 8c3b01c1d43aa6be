"""
Batch Request Contexts

BatchGet and BatchWrite gather keys and write requests across several tables
into a single RequestItems mapping. The Connection refuses to submit an empty
batch, and wraps whatever the service leaves unprocessed in a new context of
the same type so the caller can resubmit it:

    pending = connection.batch_write(context)
    while pending is not None:
        pending = connection.batch_write(pending)
"""

from typing import Any, Dict, Iterable, List

from ..core.attribute import build_key
from ..core.item import Item
from ..exceptions import MissingTableError


class BatchGet:
    """Keys to read through BatchGetItem, grouped by table."""

    def __init__(self):
        self._keys: Dict[str, List[Dict[str, Any]]] = {}
        self._attributes_to_get: Dict[str, List[str]] = {}

    def add_key(self, table: str, hash_key: Any, range_key: Any = None) -> 'BatchGet':
        """Add a primary key to read.

        Args:
            table: Table name
            hash_key: Hash key value or Attribute
            range_key: Range key value or Attribute, if the table has one
        """
        if not table:
            raise MissingTableError("BatchGet")
        self._keys.setdefault(table, []).append(build_key(hash_key, range_key))
        return self

    def set_attributes_to_get(self, table: str, names: Iterable[str]) -> 'BatchGet':
        self._attributes_to_get[table] = list(names)
        return self

    @property
    def tables(self) -> List[str]:
        return list(self._keys)

    def get_keys(self, table: str) -> List[Dict[str, Any]]:
        return list(self._keys.get(table, []))

    def __len__(self) -> int:
        return sum(len(keys) for keys in self._keys.values())

    def to_dynamodb(self) -> Dict[str, Any]:
        request_items = {}
        for table, keys in self._keys.items():
            table_parameters: Dict[str, Any] = {'Keys': list(keys)}
            if self._attributes_to_get.get(table):
                table_parameters['AttributesToGet'] = list(self._attributes_to_get[table])
            request_items[table] = table_parameters
        return {'RequestItems': request_items}


class BatchWrite:
    """Put and delete requests to send through BatchWriteItem, grouped by table."""

    def __init__(self):
        self._requests: Dict[str, List[Dict[str, Any]]] = {}

    def add_item_to_put(self, item: Item) -> 'BatchWrite':
        """Add an item to put; the item must name its table."""
        if not item.table:
            raise MissingTableError("BatchWrite")
        self._requests.setdefault(item.table, []).append(
            {'PutRequest': {'Item': item.to_dynamodb(skip_empty=True)}}
        )
        return self

    def add_key_to_delete(self, table: str, hash_key: Any, range_key: Any = None) -> 'BatchWrite':
        if not table:
            raise MissingTableError("BatchWrite")
        self._requests.setdefault(table, []).append(
            {'DeleteRequest': {'Key': build_key(hash_key, range_key)}}
        )
        return self

    @property
    def tables(self) -> List[str]:
        return list(self._requests)

    def get_requests(self, table: str) -> List[Dict[str, Any]]:
        return list(self._requests.get(table, []))

    def __len__(self) -> int:
        return sum(len(requests) for requests in self._requests.values())

    def to_dynamodb(self) -> Dict[str, Any]:
        return {'RequestItems': {table: list(requests) for table, requests in self._requests.items()}}
