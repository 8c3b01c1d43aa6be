"""
Hydration: converting wire rows into domain objects

The Connection never sets fields on domain objects itself. It hands every raw
row to a Hydrator, whose only capability is ``hydrate(row) -> T``:

- ItemHydrator builds generic Item objects (the default)
- ModelHydrator builds Pydantic models, keeping only their declared fields

``item_from_model`` goes the other way and turns a Pydantic model into an Item
ready for ``Connection.put`` or ``BatchWrite.add_item_to_put``.
"""

import json
import logging
import types
from abc import ABC, abstractmethod
from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Dict, Generic, Type, TypeVar, Union, get_args, get_origin

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .core.attribute import Attribute, AttributeKind, is_numeric
from .core.item import Item
from .exceptions import InvalidKindError, ValidationError

T = TypeVar('T')
M = TypeVar('M', bound=BaseModel)

logger = logging.getLogger(__name__)

_UNION_TYPES = tuple(t for t in (Union, getattr(types, "UnionType", None)) if t is not None)


def _is_text_annotation(annotation: Any) -> bool:
    """True for str, Optional[str] and Annotated[str, ...] field types."""
    origin = get_origin(annotation)
    if origin is Annotated:
        return _is_text_annotation(get_args(annotation)[0])
    if origin in _UNION_TYPES:
        members = [arg for arg in get_args(annotation) if arg is not type(None)]
        return bool(members) and all(_is_text_annotation(arg) for arg in members)
    return annotation is str


class Hydrator(ABC, Generic[T]):
    """Converts one raw wire row into a domain object."""

    @abstractmethod
    def hydrate(self, row: Dict[str, Dict[str, Any]]) -> T:
        """Build a domain object from a row such as {"id": {"S": "u-1"}}."""
        pass


class ItemHydrator(Hydrator[Item]):
    """Hydrates rows into Items bound to a table."""

    def __init__(self, table: str):
        self.table = table

    def hydrate(self, row: Dict[str, Dict[str, Any]]) -> Item:
        return Item(self.table).populate_from_dynamodb(row)


class ModelHydrator(Hydrator[M]):
    """Hydrates rows into Pydantic models.

    Attributes the model does not declare are ignored. Set kinds are passed as
    lists, even when they hold a single element, and JSON text is decoded for
    fields that are not plain strings.

    Example:
        >>> class User(BaseModel):
        ...     id: str
        ...     tags: List[str] = []
        >>> ModelHydrator(User).hydrate({"id": {"S": "u-1"}, "tags": {"SS": ["a"]}})
        User(id='u-1', tags=['a'])
    """

    def __init__(self, model_class: Type[M]):
        self.model_class = model_class

    def hydrate(self, row: Dict[str, Dict[str, Any]]) -> M:
        """Build a model instance from a wire row.

        Raises:
            ValidationError: If the row does not fit the model
        """
        fields = self.model_class.model_fields
        names = {field.alias or name: name for name, field in fields.items()}

        try:
            data = {}
            for name, wire in row.items():
                if name not in names:
                    continue
                attribute = Attribute.from_dynamodb(wire)
                data[name] = self._decode(attribute, _is_text_annotation(fields[names[name]].annotation))
            return self.model_class.model_validate(data)
        except (PydanticValidationError, InvalidKindError) as e:
            logger.error(f"Failed to convert item to {self.model_class.__name__}: {e}")
            raise ValidationError(
                f"Failed to convert item to {self.model_class.__name__}: {e}",
                original_error=e
            ) from e

    @staticmethod
    def _decode(attribute: Attribute, keep_text: bool) -> Any:
        if attribute.is_collection_kind:
            return list(attribute)

        value = attribute.value
        if not keep_text and isinstance(value, str) and value[:1] in ('{', '['):
            try:
                return json.loads(value)
            except ValueError:
                return value
        return value


def item_from_model(model: BaseModel, table: str) -> Item:
    """Convert a Pydantic model to an Item.

    None fields are left out, datetimes are stored as ISO strings, dicts as
    JSON text, and lists as string or number sets (empty lists are skipped,
    the service cannot store empty sets).

    Args:
        model: Pydantic model instance
        table: Table the item belongs to

    Returns:
        Item ready to be put
    """
    item = Item(table)
    for name, value in model.model_dump(exclude_none=True, by_alias=True).items():
        if isinstance(value, Enum):
            value = value.value

        if isinstance(value, datetime):
            item.set(name, value.isoformat(), AttributeKind.STRING)
        elif isinstance(value, dict):
            item.set(name, json.dumps(value, default=str), AttributeKind.ARRAY)
        elif isinstance(value, (list, tuple, set, frozenset)):
            if not value:
                continue
            numeric = all(is_numeric(v) and not isinstance(v, str) for v in value)
            item.set(name, value, AttributeKind.NUMBER_SET if numeric else AttributeKind.STRING_SET)
        elif is_numeric(value) and not isinstance(value, str):
            item.set(name, value, AttributeKind.NUMBER)
        else:
            item.set(name, value, AttributeKind.STRING)
    return item
