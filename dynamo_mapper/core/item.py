from collections.abc import MutableMapping
from typing import Any, Dict, Iterator, Optional, Union

from .attribute import Attribute, AttributeKind, as_attribute


class Item(MutableMapping):
    """A table row made of named Attributes.

    Subscript access reads and writes attribute values; the typed Attribute
    objects are available through ``attributes``.

    Example:
        >>> item = Item("users", {"id": "u-1", "age": 31})
        >>> item["age"]
        31
        >>> item.to_dynamodb()
        {'id': {'S': 'u-1'}, 'age': {'N': '31'}}
    """

    def __init__(self, table: Optional[str] = None, attributes: Optional[Dict[str, Any]] = None):
        self.table = table
        self._attributes: Dict[str, Attribute] = {}
        for name, value in (attributes or {}).items():
            self[name] = value

    @property
    def attributes(self) -> Dict[str, Attribute]:
        return self._attributes

    def get_attribute(self, name: str) -> Optional[Attribute]:
        return self._attributes.get(name)

    def set(self, name: str, value: Any, kind: Optional[Union[AttributeKind, str]] = None) -> 'Item':
        """Store a value under an explicit kind."""
        self._attributes[name] = as_attribute(value, kind)
        return self

    def __getitem__(self, name: str) -> Any:
        return self._attributes[name].value

    def __setitem__(self, name: str, value: Any) -> None:
        self._attributes[name] = as_attribute(value)

    def __delitem__(self, name: str) -> None:
        del self._attributes[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._attributes)

    def __len__(self) -> int:
        return len(self._attributes)

    def __repr__(self) -> str:
        return f"Item(table={self.table!r}, attributes={self._attributes!r})"

    def populate_from_dynamodb(self, row: Dict[str, Dict[str, Any]]) -> 'Item':
        """Fill the item from a wire row such as {"id": {"S": "u-1"}}."""
        for name, wire in row.items():
            self._attributes[name] = Attribute.from_dynamodb(wire)
        return self

    def to_dynamodb(self, skip_empty: bool = False) -> Dict[str, Dict[str, Any]]:
        """Return the item as a wire row.

        Args:
            skip_empty: Leave out attributes whose value is an empty string,
                which the service refuses to store
        """
        return {
            name: attribute.to_dynamodb()
            for name, attribute in self._attributes.items()
            if not (skip_empty and attribute.value == "")
        }
