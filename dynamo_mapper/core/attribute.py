"""
Typed Attribute Values

This module converts Python values to and from the DynamoDB attribute wire form:

    {"S": "text"} | {"N": "123"} | {"SS": ["a", "b"]} | {"NS": ["1", "2"]}

Each value is normalized once, when the Attribute is built:
- Scalars keep their first element when given a sequence
- Sets are coerced element-wise and sorted ascending (duplicates are kept)
- Structured values (kind "array") are JSON-decoded and written back as "S"

Conditions (AttributeCondition) and update actions (AttributeUpdate) are built
from Attributes and share the same wire conventions.
"""

import json
import re
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Dict, Iterator, List, Optional, Union

from ..exceptions import InvalidKindError, NotIterableError, ValidationError

_NUMERIC_PATTERN = re.compile(r'^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\s*$')
_SEQUENCE_TYPES = (list, tuple, set, frozenset)


# =============================================================================
# Kinds and Coercion
# =============================================================================

class AttributeKind(str, Enum):
    """Canonical attribute kinds."""
    STRING = "S"
    NUMBER = "N"
    STRING_SET = "SS"
    NUMBER_SET = "NS"
    ARRAY = "array"

    @classmethod
    def parse(cls, kind: Union['AttributeKind', str]) -> 'AttributeKind':
        """Return the kind matching an enum member or a wire token.

        Raises:
            InvalidKindError: If the token is not a known kind
        """
        if isinstance(kind, cls):
            return kind
        try:
            return cls(kind)
        except (ValueError, TypeError) as e:
            raise InvalidKindError(f"Invalid type {kind}", kind, e) from e


def is_numeric(value: Any) -> bool:
    """Return True for numbers and numeric strings (booleans excluded)."""
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float, Decimal)):
        return True
    if isinstance(value, str):
        return _NUMERIC_PATTERN.match(value) is not None
    return False


def to_number(value: Any) -> Union[int, float, Decimal]:
    """Coerce a value to a number.

    Integral text becomes an int, any other numeric text a Decimal, so
    precision survives the round trip through the wire's text encoding.

    Raises:
        InvalidKindError: If the value is not numeric
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float, Decimal)):
        return value
    if isinstance(value, str) and _NUMERIC_PATTERN.match(value):
        text = value.strip()
        if any(c in text for c in '.eE'):
            return Decimal(text)
        return int(text)
    raise InvalidKindError(f"Invalid number {value!r}", AttributeKind.NUMBER.value)


def to_text(value: Any) -> str:
    """Coerce a value to its wire text."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, dict):
        return json.dumps(value)
    return str(value)


def _first(value: Any) -> Any:
    if isinstance(value, _SEQUENCE_TYPES):
        return next(iter(value), None)
    return value


def _as_list(value: Any) -> List[Any]:
    if isinstance(value, _SEQUENCE_TYPES):
        return list(value)
    return [value]


def _decode_structure(value: Any) -> Any:
    if not isinstance(value, (str, bytes)):
        return value
    try:
        return json.loads(value)
    except ValueError as e:
        raise InvalidKindError(f"Invalid JSON structure {value!r}", AttributeKind.ARRAY.value, e) from e


_NORMALIZERS: Dict[AttributeKind, Callable[[Any], Any]] = {
    AttributeKind.STRING: lambda value: to_text(_first(value)),
    AttributeKind.NUMBER: lambda value: to_number(_first(value)),
    AttributeKind.STRING_SET: lambda value: sorted(to_text(v) for v in _as_list(value)),
    AttributeKind.NUMBER_SET: lambda value: sorted(to_number(v) for v in _as_list(value)),
    AttributeKind.ARRAY: _decode_structure,
}


# =============================================================================
# Attribute
# =============================================================================

class Attribute:
    """A single typed value, or a homogeneous set of values, in wire form.

    Example:
        >>> Attribute(["b", "a"]).to_dynamodb()
        {'SS': ['a', 'b']}
        >>> Attribute("42", "N").value
        42
    """

    def __init__(self, value: Any, kind: Optional[Union[AttributeKind, str]] = None):
        """Build an attribute from a raw value.

        Args:
            value: Raw value, scalar or sequence
            kind: Explicit kind; inferred from the value when None

        Raises:
            InvalidKindError: If the kind is unknown or the value does not fit it
        """
        if kind is None:
            kind = self._detect_kind(value)
        kind = AttributeKind.parse(kind)

        self._value = _NORMALIZERS[kind](value)
        self._kind = AttributeKind.STRING if kind is AttributeKind.ARRAY else kind

    @classmethod
    def from_dynamodb(cls, wire: Dict[str, Any]) -> 'Attribute':
        """Build an attribute from its wire form, e.g. {"N": "12"}."""
        if not isinstance(wire, dict) or len(wire) != 1:
            raise InvalidKindError(f"Invalid attribute wire value {wire!r}")
        kind, value = next(iter(wire.items()))
        return cls(value, kind)

    @property
    def value(self) -> Any:
        """The attribute value; sets holding 0 or 1 element collapse to a scalar."""
        if isinstance(self._value, list) and len(self._value) <= 1:
            return self._value[0] if self._value else None
        return self._value

    @property
    def kind(self) -> AttributeKind:
        return self._kind

    @property
    def is_collection_kind(self) -> bool:
        """True if this attribute holds a string or number set."""
        return self._kind in (AttributeKind.STRING_SET, AttributeKind.NUMBER_SET)

    def __iter__(self) -> Iterator[Any]:
        if not self.is_collection_kind:
            raise NotIterableError(self._kind.value)
        return iter(self._value)

    def __str__(self) -> str:
        if self.is_collection_kind:
            return ",".join(to_text(v) for v in self._value)
        return to_text(self.value)

    def __repr__(self) -> str:
        return f"Attribute({self._value!r}, {self._kind.value!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Attribute):
            return NotImplemented
        return self._kind == other._kind and self._value == other._value

    def to_dynamodb(self) -> Dict[str, Any]:
        """Return the attribute formatted for DynamoDB."""
        if self.is_collection_kind:
            wire = [to_text(v) for v in self._value]
        else:
            value = self.value
            wire = json.dumps(value) if isinstance(value, (list, dict)) else to_text(value)
        return {self._kind.value: wire}

    @staticmethod
    def _detect_kind(value: Any) -> AttributeKind:
        """Infer the kind of a raw value; mappings are stored as JSON structures."""
        if isinstance(value, dict):
            return AttributeKind.ARRAY
        if isinstance(value, _SEQUENCE_TYPES):
            if len(value) > 1:
                if all(is_numeric(v) for v in value):
                    return AttributeKind.NUMBER_SET
                return AttributeKind.STRING_SET
            if not value:
                raise InvalidKindError("Cannot infer the kind of an empty sequence")
            return AttributeKind.STRING if isinstance(_first(value), str) else AttributeKind.NUMBER
        if is_numeric(value):
            return AttributeKind.NUMBER
        return AttributeKind.STRING


def as_attribute(value: Any, kind: Optional[Union[AttributeKind, str]] = None) -> Attribute:
    """Wrap a raw value in an Attribute, leaving existing Attributes untouched."""
    if isinstance(value, Attribute):
        return value
    return Attribute(value, kind)


def build_key(hash_key: Any, range_key: Any = None) -> Dict[str, Any]:
    """Build a primary key in wire form.

    Example:
        >>> build_key("user-1", 3)
        {'HashKeyElement': {'S': 'user-1'}, 'RangeKeyElement': {'N': '3'}}
    """
    key = {'HashKeyElement': as_attribute(hash_key).to_dynamodb()}
    if range_key is not None:
        key['RangeKeyElement'] = as_attribute(range_key).to_dynamodb()
    return key


# =============================================================================
# Conditions
# =============================================================================

class ComparisonOperator(str, Enum):
    """Comparison operators accepted by range conditions and scan filters."""
    EQ = "EQ"
    NE = "NE"
    LE = "LE"
    LT = "LT"
    GE = "GE"
    GT = "GT"
    NOT_NULL = "NOT_NULL"
    NULL = "NULL"
    CONTAINS = "CONTAINS"
    NOT_CONTAINS = "NOT_CONTAINS"
    BEGINS_WITH = "BEGINS_WITH"
    IN = "IN"
    BETWEEN = "BETWEEN"

    @classmethod
    def parse(cls, operator: Union['ComparisonOperator', str]) -> 'ComparisonOperator':
        if isinstance(operator, cls):
            return operator
        try:
            return cls(str(operator).upper())
        except ValueError as e:
            raise ValidationError(
                f"Unsupported comparison operator: {operator}",
                errors={'operator': operator},
                original_error=e
            ) from e


class AttributeCondition:
    """A comparison operator applied to one or more attribute values.

    Example:
        >>> AttributeCondition("BETWEEN", [10, 20]).to_dynamodb()
        {'ComparisonOperator': 'BETWEEN', 'AttributeValueList': [{'N': '10'}, {'N': '20'}]}
    """

    def __init__(
        self,
        operator: Union[ComparisonOperator, str],
        values: Any = None,
        kind: Optional[Union[AttributeKind, str]] = None
    ):
        """
        Args:
            operator: Comparison operator token (case-insensitive)
            values: A single value or a list/tuple of values; None for NULL checks
            kind: Kind forced on every value; inferred per value when None
        """
        self.operator = ComparisonOperator.parse(operator)
        if values is None:
            values = []
        elif not isinstance(values, (list, tuple)):
            values = [values]
        self.attributes: List[Attribute] = [as_attribute(v, kind) for v in values]

    def to_dynamodb(self) -> Dict[str, Any]:
        return {
            'ComparisonOperator': self.operator.value,
            'AttributeValueList': [attribute.to_dynamodb() for attribute in self.attributes],
        }


# =============================================================================
# Updates
# =============================================================================

class UpdateAction(str, Enum):
    PUT = "PUT"
    ADD = "ADD"
    DELETE = "DELETE"


class AttributeAction:
    """A single AttributeUpdates entry: an action and an optional value."""

    def __init__(
        self,
        action: Union[UpdateAction, str],
        value: Any = None,
        kind: Optional[Union[AttributeKind, str]] = None
    ):
        try:
            self.action = UpdateAction(str(action).upper()) if not isinstance(action, UpdateAction) else action
        except ValueError as e:
            raise ValidationError(f"Unsupported update action: {action}", errors={'action': action}, original_error=e) from e
        self.attribute = None if value is None else as_attribute(value, kind)

    def to_dynamodb(self) -> Dict[str, Any]:
        parameters: Dict[str, Any] = {'Action': self.action.value}
        if self.attribute is not None:
            parameters['Value'] = self.attribute.to_dynamodb()
        return parameters


class AttributeUpdate:
    """Ordered set of attribute actions for an UpdateItem call.

    Example:
        >>> update = AttributeUpdate().put("status", "done").add("visits", 1).delete("draft")
        >>> update.to_dynamodb()["visits"]
        {'Action': 'ADD', 'Value': {'N': '1'}}
    """

    def __init__(self):
        self._actions: Dict[str, AttributeAction] = {}

    def put(self, name: str, value: Any, kind: Optional[Union[AttributeKind, str]] = None) -> 'AttributeUpdate':
        self._actions[name] = AttributeAction(UpdateAction.PUT, value, kind)
        return self

    def add(self, name: str, value: Any, kind: Optional[Union[AttributeKind, str]] = None) -> 'AttributeUpdate':
        self._actions[name] = AttributeAction(UpdateAction.ADD, value, kind)
        return self

    def delete(self, name: str, value: Any = None, kind: Optional[Union[AttributeKind, str]] = None) -> 'AttributeUpdate':
        """Remove an attribute, or only the given elements when it is a set."""
        self._actions[name] = AttributeAction(UpdateAction.DELETE, value, kind)
        return self

    def __getitem__(self, name: str) -> AttributeAction:
        return self._actions[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._actions)

    def __len__(self) -> int:
        return len(self._actions)

    def items(self):
        return self._actions.items()

    def to_dynamodb(self) -> Dict[str, Any]:
        return {name: action.to_dynamodb() for name, action in self._actions.items()}
