"""
Request contexts: optional parameters for each DynamoDB operation.

- Get: projection and consistent read for GetItem
- Put / Update / Delete: Expected conditions and ReturnValues
- Query / Scan: limits, cursors, projections, range condition or scan filters
- BatchGet / BatchWrite: multi-table key and write request lists
"""

from .base import CollectionContext, ConditionalWriteContext
from .batch import BatchGet, BatchWrite
from .item import Delete, Get, Put, Update
from .query import Query
from .scan import Scan

__all__ = [
    "CollectionContext",
    "ConditionalWriteContext",
    "BatchGet",
    "BatchWrite",
    "Delete",
    "Get",
    "Put",
    "Update",
    "Query",
    "Scan",
]
