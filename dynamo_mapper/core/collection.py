"""
Paginated Result Collections

A Collection holds the outcome of one Query or Scan call:
- ``request_items``: raw wire rows, not yet hydrated
- ``items``: hydrated domain objects (added by the connection's hydrator)
- ``next_context``: the request context for the following page, if any
- ``request_count``: the Count reported by the service

Count-only requests (``Count: True``) return no rows, so ``len()`` falls back to
``request_count`` while ``items`` is empty.

Pagination is driven by the caller:

    collection = connection.query("events", "user-1", context)
    while collection.more():
        collection = connection.query("events", "user-1", collection.next_context)
"""

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Mapping as MappingType, Optional, Tuple

if TYPE_CHECKING:
    from ..context import BatchGet, CollectionContext


def _field_value(item: Any, field: str) -> Any:
    """Read a field of an item; None when the item lacks it."""
    if isinstance(item, Mapping):
        return item.get(field)
    return getattr(item, field, None)


def _sort_key(item: Any, field: str) -> Tuple[bool, Any]:
    # Missing and None values order before any value
    value = _field_value(item, field)
    return (value is not None, value)


class Collection:
    """Ordered container of result items plus pagination state."""

    def __init__(
        self,
        next_context: Optional['CollectionContext'] = None,
        request_count: int = 0,
        request_items: Optional[List[Dict[str, Any]]] = None
    ):
        """
        Args:
            next_context: Context for the next page, None when exhausted
            request_count: Count reported by the service for this call
            request_items: Unparsed rows awaiting hydration
        """
        self.next_context = next_context
        self.request_count = request_count
        self.request_items: List[Dict[str, Any]] = list(request_items or [])
        self.items: List[Any] = []

    @property
    def next_cursor(self) -> Optional[Dict[str, Any]]:
        """The LastEvaluatedKey of the call, exactly as the service returned it."""
        if self.next_context is None:
            return None
        return self.next_context.exclusive_start_key

    def more(self) -> bool:
        """Return True if the previous request has more items to retrieve."""
        return self.next_context is not None

    def add(self, item: Any) -> None:
        self.items.append(item)

    def shift(self) -> Optional[Any]:
        """Remove and return the first item, or None when empty."""
        if not self.items:
            return None
        return self.items.pop(0)

    def slice(self, offset: int, length: Optional[int] = None) -> 'Collection':
        """Keep a slice of the items.

        Args:
            offset: Start index; a negative offset starts that far from the end
            length: Number of items to keep; a negative length stops that many
                items from the end; None keeps everything after offset

        Returns:
            self, for chaining
        """
        size = len(self.items)
        start = offset if offset >= 0 else max(size + offset, 0)
        if length is None:
            stop = size
        elif length >= 0:
            stop = start + length
        else:
            stop = size + length
        self.items = self.items[start:stop]
        return self

    def sort(self, criteria: MappingType[str, str]) -> 'Collection':
        """Sort items on several fields.

        Fields are sorted one stable pass at a time, from the last declared
        field to the first, so the first field is the primary sort key.
        Items lacking a field, or holding None in it, sort before the others
        in ascending order and after them in descending order.

        Args:
            criteria: Ordered mapping of field name to direction ("ASC" for
                ascending, anything else for descending)

        Returns:
            self, for chaining

        Example:
            >>> collection.sort({"last_name": "ASC", "age": "DESC"})
        """
        for field in reversed(list(criteria)):
            descending = str(criteria[field]).upper() != "ASC"
            self.items.sort(key=lambda item, f=field: _sort_key(item, f), reverse=descending)
        return self

    def merge(self, collection: 'Collection') -> None:
        """Append another collection's items and add up the reported counts."""
        self.request_count += len(collection)
        for item in collection:
            self.add(item)

    def count(self) -> int:
        return len(self)

    def first(self) -> Optional[Any]:
        return self.items[0] if self.items else None

    def last(self) -> Optional[Any]:
        return self.items[-1] if self.items else None

    def __iter__(self) -> Iterator[Any]:
        return iter(list(self.items))

    def __len__(self) -> int:
        if not self.items:
            # Collection from a count request
            return self.request_count
        return len(self.items)

    def __repr__(self) -> str:
        return f"Collection(count={len(self)}, more={self.more()})"


class BatchCollection:
    """Per-table results of a BatchGetItem call."""

    def __init__(self, unprocessed_context: Optional['BatchGet'] = None):
        """
        Args:
            unprocessed_context: BatchGet context holding the unprocessed keys,
                ready to be resubmitted
        """
        self.unprocessed_context = unprocessed_context
        self._tables: Dict[str, Collection] = {}

    def more(self) -> bool:
        return self.unprocessed_context is not None

    def set_items(self, table: str, items: Collection) -> None:
        self._tables[table] = items

    def get_items(self, table: str) -> Optional[Collection]:
        return self._tables.get(table)

    @property
    def tables(self) -> List[str]:
        return list(self._tables)

    def __iter__(self) -> Iterator[Tuple[str, Collection]]:
        return iter(list(self._tables.items()))

    def __len__(self) -> int:
        return len(self._tables)
