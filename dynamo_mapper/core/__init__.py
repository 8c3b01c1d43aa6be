"""
Core value types for DynamoDB item mapping.

This module contains the building blocks used by request contexts and the connection:
- Attribute / AttributeCondition / AttributeUpdate: typed values in wire form
- Item: a table row of named attributes
- Collection / BatchCollection: paginated results
- Table descriptors: key schemas, throughput and table descriptions
"""

from .attribute import (
    Attribute,
    AttributeAction,
    AttributeCondition,
    AttributeKind,
    AttributeUpdate,
    ComparisonOperator,
    UpdateAction,
    as_attribute,
    build_key,
)
from .collection import BatchCollection, Collection
from .item import Item
from .table import (
    KeySchema,
    KeySchemaElement,
    ProvisionedThroughput,
    TableCollection,
    TableDescription,
)

__all__ = [
    "Attribute",
    "AttributeAction",
    "AttributeCondition",
    "AttributeKind",
    "AttributeUpdate",
    "ComparisonOperator",
    "UpdateAction",
    "as_attribute",
    "build_key",
    "BatchCollection",
    "Collection",
    "Item",
    "KeySchema",
    "KeySchemaElement",
    "ProvisionedThroughput",
    "TableCollection",
    "TableDescription",
]
