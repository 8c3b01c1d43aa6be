# Base exception class
from .base import DynamoMapperError

# Domain-specific exceptions
from .domain_exceptions import (
    ConnectionError,
    EmptyBatchError,
    InvalidKindError,
    MissingTableError,
    NotIterableError,
    RemoteFailureError,
    TableTimeoutError,
    UnsupportedOptionError,
    ValidationError,
)

__all__ = [
    # Base exception
    "DynamoMapperError",

    # Domain exceptions (alphabetically ordered)
    "ConnectionError",
    "EmptyBatchError",
    "InvalidKindError",
    "MissingTableError",
    "NotIterableError",
    "RemoteFailureError",
    "TableTimeoutError",
    "UnsupportedOptionError",
    "ValidationError",
]
