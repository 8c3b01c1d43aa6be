from typing import Any, Dict, Optional, Union

from ..core.attribute import AttributeCondition, AttributeKind, ComparisonOperator
from .base import CollectionContext


class Query(CollectionContext):
    """Options of a Query call.

    Adds an optional range key condition and the index traversal order to the
    shared collection options.

    Example:
        >>> context = Query.create("BETWEEN", [10, 20]).set_scan_index_forward(False)
        >>> context.to_dynamodb()["RangeKeyCondition"]["ComparisonOperator"]
        'BETWEEN'
    """

    def __init__(self, hydrator: Optional[Any] = None):
        super().__init__(hydrator)
        self.range_condition: Optional[AttributeCondition] = None
        self.scan_index_forward: Optional[bool] = None

    def set_range_condition(
        self,
        operator: Union[ComparisonOperator, str],
        values: Any,
        kind: Optional[Union[AttributeKind, str]] = None
    ) -> 'Query':
        """Set the range key condition.

        Args:
            operator: Comparison operator (EQ, LE, LT, GE, GT, BEGINS_WITH, BETWEEN)
            values: Value, or list of values for BETWEEN
            kind: Kind forced on the values, e.g. to match the range key's kind
        """
        self.range_condition = AttributeCondition(operator, values, kind)
        return self

    def set_scan_index_forward(self, scan_index_forward: bool) -> 'Query':
        """Traverse the range key ascending (True) or descending (False)."""
        self.scan_index_forward = bool(scan_index_forward)
        return self

    @classmethod
    def create(cls, operator: Union[ComparisonOperator, str], values: Any) -> 'Query':
        return cls().set_range_condition(operator, values)

    def to_dynamodb(self) -> Dict[str, Any]:
        parameters = super().to_dynamodb()

        if self.range_condition is not None:
            parameters['RangeKeyCondition'] = self.range_condition.to_dynamodb()
        if self.scan_index_forward is not None:
            parameters['ScanIndexForward'] = self.scan_index_forward

        return parameters
