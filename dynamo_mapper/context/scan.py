from typing import Any, Dict, Optional, Union

from ..core.attribute import AttributeCondition, AttributeKind, ComparisonOperator
from ..exceptions import UnsupportedOptionError
from .base import CollectionContext


class Scan(CollectionContext):
    """Options of a Scan call: the shared collection options plus named filters.

    Scans are never consistent reads; asking for one raises UnsupportedOptionError.
    """

    def __init__(self, hydrator: Optional[Any] = None):
        super().__init__(hydrator)
        self.filters: Dict[str, AttributeCondition] = {}

    def add_filter(
        self,
        name: str,
        operator: Union[ComparisonOperator, str],
        values: Any = None,
        kind: Optional[Union[AttributeKind, str]] = None
    ) -> 'Scan':
        """Filter scanned items on an attribute; replaces any filter on the same name."""
        self.filters[name] = AttributeCondition(operator, values, kind)
        return self

    def set_consistent_read(self, consistent_read: bool) -> 'Scan':
        raise UnsupportedOptionError("Scan does not support consistent read", option='ConsistentRead')

    def to_dynamodb(self) -> Dict[str, Any]:
        parameters = super().to_dynamodb()

        if self.filters:
            parameters['ScanFilter'] = {
                name: condition.to_dynamodb() for name, condition in self.filters.items()
            }

        return parameters
