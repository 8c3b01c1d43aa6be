"""
Domain-Specific Exceptions for dynamo-mapper

Every failure raised by the mapping layer extends DynamoMapperError.
They are local and synchronous: each one is raised at the call that breaks
the contract and none of them is retried internally.

Organized by category:
1. Attribute Errors
2. Request Building Errors
3. Infrastructure Errors
"""

from typing import Any, Dict, Optional

from .base import DynamoMapperError


# =============================================================================
# Attribute Errors
# =============================================================================

class InvalidKindError(DynamoMapperError):
    """Raised when an attribute kind is unknown or a value cannot be coerced to it.

    Used for:
    - Explicit kinds that are not one of S, N, SS, NS, array
    - Number kinds built from non-numeric text
    - Kind inference on an empty sequence
    """

    def __init__(self, message: str, kind: Optional[Any] = None, original_error: Optional[Exception] = None):
        """Initialize invalid kind error.

        Args:
            message: Human-readable error message
            kind: The offending kind token, if any
            original_error: The original exception that caused this error
        """
        self.kind = kind
        context = {}
        if kind is not None:
            context['kind'] = kind
        super().__init__(message, original_error, context)


class NotIterableError(DynamoMapperError, TypeError):
    """Raised when iterating over an attribute that holds a scalar kind."""

    def __init__(self, kind: Any):
        self.kind = kind
        super().__init__("This attribute is not a set of values", context={'kind': kind})


class ValidationError(DynamoMapperError):
    """Raised when data validation fails.

    Used for:
    - Unknown comparison operators or ReturnValues options
    - Non-positive limits
    - Pydantic model hydration failures
    """

    def __init__(self, message: str, errors: Optional[Dict[str, Any]] = None, original_error: Optional[Exception] = None):
        """Initialize validation error.

        Args:
            message: Human-readable error message
            errors: Dictionary of field-level validation errors
            original_error: The original exception that caused this error
        """
        self.errors = errors or {}
        context = {}
        if self.errors:
            context['validation_errors'] = self.errors
        super().__init__(message, original_error, context)


# =============================================================================
# Request Building Errors
# =============================================================================

class MissingTableError(DynamoMapperError):
    """Raised when a write operation is requested without a table name."""

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"{operation} requires a table name", context={'operation': operation})


class EmptyBatchError(DynamoMapperError):
    """Raised when a batch operation is submitted with no entries."""

    def __init__(self, message: str, operation: Optional[str] = None):
        self.operation = operation
        context = {}
        if operation:
            context['operation'] = operation
        super().__init__(message, context=context)


class UnsupportedOptionError(DynamoMapperError):
    """Raised when an option is set on a context that cannot carry it.

    Scan requests, for example, cannot be consistent reads.
    """

    def __init__(self, message: str, option: Optional[str] = None):
        self.option = option
        context = {}
        if option:
            context['option'] = option
        super().__init__(message, context=context)


# =============================================================================
# Infrastructure Errors
# =============================================================================

class ConnectionError(DynamoMapperError):
    """Raised when the DynamoDB client cannot be created.

    Used for:
    - Invalid credentials or region settings
    - Invalid endpoint configurations
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None, context: Optional[Dict[str, Any]] = None):
        """Initialize connection error.

        Args:
            message: Human-readable error message
            original_error: The original exception that caused this error
            context: Additional context information (e.g., endpoint, region)
        """
        super().__init__(message, original_error, context)


class RemoteFailureError(DynamoMapperError):
    """Raised when the DynamoDB service rejects a request.

    The service error is passed through as-is: its code and message are kept
    for the caller, and nothing here decides whether it may be retried.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        operation: Optional[str] = None,
        table_name: Optional[str] = None,
        original_error: Optional[Exception] = None
    ):
        """Initialize remote failure error.

        Args:
            message: Human-readable error message
            error_code: Service error code (e.g. ConditionalCheckFailedException)
            operation: The operation that failed (e.g. "PutItem")
            table_name: The table the operation targeted
            original_error: The original exception that caused this error
        """
        self.error_code = error_code
        self.operation = operation
        self.table_name = table_name
        context = {}
        if error_code:
            context['error_code'] = error_code
        if operation:
            context['operation'] = operation
        if table_name:
            context['table_name'] = table_name
        super().__init__(message, original_error, context)


class TableTimeoutError(DynamoMapperError):
    """Raised when a table does not reach the expected status in time."""

    def __init__(self, table_name: str, status: str, attempts: int, last_status: Optional[str] = None):
        """Initialize table timeout error.

        Args:
            table_name: The table being polled
            status: The status that was expected
            attempts: Number of describe calls made
            last_status: The last status observed
        """
        self.table_name = table_name
        self.status = status
        self.attempts = attempts
        self.last_status = last_status
        message = f"Timeout while waiting for table '{table_name}' to be {status}"
        context = {
            'table_name': table_name,
            'expected_status': status,
            'attempts': attempts,
        }
        if last_status:
            context['last_status'] = last_status
        super().__init__(message, context=context)
