from .config import DynamoDBConfig
from .exceptions import (
    ConnectionError,
    DynamoMapperError,
    EmptyBatchError,
    InvalidKindError,
    MissingTableError,
    NotIterableError,
    RemoteFailureError,
    TableTimeoutError,
    UnsupportedOptionError,
    ValidationError,
)
from .core import (
    # Typed values
    Attribute,
    AttributeAction,
    AttributeCondition,
    AttributeKind,
    AttributeUpdate,
    ComparisonOperator,
    UpdateAction,
    as_attribute,
    build_key,
    # Items and results
    Item,
    Collection,
    BatchCollection,
    # Table descriptors
    KeySchema,
    KeySchemaElement,
    ProvisionedThroughput,
    TableCollection,
    TableDescription,
)
from .context import (
    # Request contexts
    BatchGet,
    BatchWrite,
    Delete,
    Get,
    Put,
    Query,
    Scan,
    Update,
)
from .hydration import Hydrator, ItemHydrator, ModelHydrator, item_from_model
from .connection import CapacityCounter, Connection

__version__ = "1.0.0"
__all__ = [
    # Configuration
    "DynamoDBConfig",

    # Exceptions
    "ConnectionError",
    "DynamoMapperError",
    "EmptyBatchError",
    "InvalidKindError",
    "MissingTableError",
    "NotIterableError",
    "RemoteFailureError",
    "TableTimeoutError",
    "UnsupportedOptionError",
    "ValidationError",

    # Typed values
    "Attribute",
    "AttributeAction",
    "AttributeCondition",
    "AttributeKind",
    "AttributeUpdate",
    "ComparisonOperator",
    "UpdateAction",
    "as_attribute",
    "build_key",

    # Items and results
    "Item",
    "Collection",
    "BatchCollection",

    # Table descriptors
    "KeySchema",
    "KeySchemaElement",
    "ProvisionedThroughput",
    "TableCollection",
    "TableDescription",

    # Request contexts
    "BatchGet",
    "BatchWrite",
    "Delete",
    "Get",
    "Put",
    "Query",
    "Scan",
    "Update",

    # Hydration
    "Hydrator",
    "ItemHydrator",
    "ModelHydrator",
    "item_from_model",

    # Connection
    "CapacityCounter",
    "Connection",
]
