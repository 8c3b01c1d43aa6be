from typing import Any, Dict, Iterable, List, Optional

from .base import ConditionalWriteContext


class Get:
    """Options of a GetItem call."""

    def __init__(self):
        self.attributes_to_get: Optional[List[str]] = None
        self.consistent_read: Optional[bool] = None

    def set_attributes_to_get(self, names: Iterable[str]) -> 'Get':
        self.attributes_to_get = list(names)
        return self

    def set_consistent_read(self, consistent_read: bool) -> 'Get':
        self.consistent_read = bool(consistent_read)
        return self

    def to_dynamodb(self) -> Dict[str, Any]:
        parameters: Dict[str, Any] = {}
        if self.attributes_to_get:
            parameters['AttributesToGet'] = list(self.attributes_to_get)
        if self.consistent_read is not None:
            parameters['ConsistentRead'] = self.consistent_read
        return parameters


class Put(ConditionalWriteContext):
    """Options of a PutItem call: Expected and ReturnValues (NONE, ALL_OLD)."""


class Delete(ConditionalWriteContext):
    """Options of a DeleteItem call: Expected and ReturnValues (NONE, ALL_OLD)."""


class Update(ConditionalWriteContext):
    """Options of an UpdateItem call: Expected and ReturnValues."""

    RETURN_VALUES = ('NONE', 'ALL_OLD', 'UPDATED_OLD', 'ALL_NEW', 'UPDATED_NEW')
