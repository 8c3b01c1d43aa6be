"""
Request Context Base Classes

A request context gathers the optional parameters of one DynamoDB call
(limits, consistency, projections, conditions, pagination cursors) and renders
them with ``to_dynamodb()``. Only options that were set are rendered, so the
output can be merged into the call parameters built by the Connection.

All setters return the context for chaining:

    context = Query().set_limit(50).set_consistent_read(True)
"""

import copy
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from ..core.attribute import AttributeKind, as_attribute
from ..exceptions import ValidationError


def validate_limit(limit: int) -> int:
    """Validate a page size limit.

    Raises:
        ValidationError: If the limit is not a positive integer
    """
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
        raise ValidationError(f"Limit must be a positive integer, got {limit!r}", errors={'limit': limit})
    return limit


def validate_return_values(return_values: str, allowed: Tuple[str, ...]) -> str:
    """Validate a ReturnValues option against the values an operation accepts.

    Raises:
        ValidationError: If the option is not accepted
    """
    value = str(return_values).upper()
    if value not in allowed:
        raise ValidationError(
            f"ReturnValues must be one of: {', '.join(allowed)}",
            errors={'return_values': return_values}
        )
    return value


# =============================================================================
# Conditional Write Contexts
# =============================================================================

class ConditionalWriteContext:
    """Shared options of single-item writes: expectations and ReturnValues."""

    RETURN_VALUES: Tuple[str, ...] = ('NONE', 'ALL_OLD')

    def __init__(self):
        self.expected: Dict[str, Dict[str, Any]] = {}
        self.return_values: Optional[str] = None

    def expect(
        self,
        name: str,
        value: Any,
        kind: Optional[Union[AttributeKind, str]] = None
    ) -> 'ConditionalWriteContext':
        """Only write if the attribute currently holds this value."""
        self.expected[name] = {'Value': as_attribute(value, kind)}
        return self

    def expect_missing(self, name: str) -> 'ConditionalWriteContext':
        """Only write if the attribute does not exist."""
        self.expected[name] = {'Exists': False}
        return self

    def set_return_values(self, return_values: str) -> 'ConditionalWriteContext':
        self.return_values = validate_return_values(return_values, self.RETURN_VALUES)
        return self

    def to_dynamodb(self) -> Dict[str, Any]:
        parameters: Dict[str, Any] = {}

        if self.expected:
            expected = {}
            for name, expectation in self.expected.items():
                if 'Value' in expectation:
                    expected[name] = {'Value': expectation['Value'].to_dynamodb()}
                else:
                    expected[name] = dict(expectation)
            parameters['Expected'] = expected

        if self.return_values is not None:
            parameters['ReturnValues'] = self.return_values

        return parameters


# =============================================================================
# Collection Contexts (Query / Scan)
# =============================================================================

class CollectionContext:
    """Shared options of multi-item reads.

    Attributes:
        limit: Maximum number of items evaluated per call
        count: Ask for the matching item count only
        exclusive_start_key: Cursor of the page to start from, passed through
            exactly as the service returned it
        attributes_to_get: Projection of returned attributes
        consistent_read: Strongly consistent read flag
        hydrator: Hydrator used for the items of this request, carried over
            to the next page
    """

    def __init__(self, hydrator: Optional[Any] = None):
        self.limit: Optional[int] = None
        self.count: bool = False
        self.exclusive_start_key: Optional[Dict[str, Any]] = None
        self.attributes_to_get: Optional[List[str]] = None
        self.consistent_read: Optional[bool] = None
        self.hydrator = hydrator

    def set_limit(self, limit: int) -> 'CollectionContext':
        self.limit = validate_limit(limit)
        return self

    def set_count(self, count: bool = True) -> 'CollectionContext':
        self.count = bool(count)
        return self

    def set_exclusive_start_key(self, exclusive_start_key: Optional[Dict[str, Any]]) -> 'CollectionContext':
        self.exclusive_start_key = exclusive_start_key
        return self

    def set_attributes_to_get(self, names: Iterable[str]) -> 'CollectionContext':
        self.attributes_to_get = list(names)
        return self

    def set_consistent_read(self, consistent_read: bool) -> 'CollectionContext':
        self.consistent_read = bool(consistent_read)
        return self

    def set_hydrator(self, hydrator: Any) -> 'CollectionContext':
        self.hydrator = hydrator
        return self

    def clone(self) -> 'CollectionContext':
        """Deep copy of the context; the hydrator is shared, not copied."""
        return copy.deepcopy(self, {id(self.hydrator): self.hydrator})

    def to_dynamodb(self) -> Dict[str, Any]:
        parameters: Dict[str, Any] = {}

        if self.limit is not None:
            parameters['Limit'] = self.limit
        if self.count:
            parameters['Count'] = True
        if self.exclusive_start_key is not None:
            parameters['ExclusiveStartKey'] = self.exclusive_start_key
        if self.attributes_to_get:
            parameters['AttributesToGet'] = list(self.attributes_to_get)
        if self.consistent_read is not None:
            parameters['ConsistentRead'] = self.consistent_read

        return parameters
