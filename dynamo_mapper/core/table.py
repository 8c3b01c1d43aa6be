"""
Table Descriptors

Pydantic models describing table schemas and throughput, used by the table
administration calls of the Connection (create/update/describe/list).

Key schemas are written in the legacy item-API form:

    {"HashKeyElement": {"AttributeName": "id", "AttributeType": "S"},
     "RangeKeyElement": {"AttributeName": "ts", "AttributeType": "N"}}

and can be read back from either that form or the KeySchema list plus
AttributeDefinitions returned by current service versions.
"""

from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional

from pydantic import BaseModel, Field, field_validator

from ..exceptions import InvalidKindError
from .attribute import AttributeKind


class KeySchemaElement(BaseModel):
    """One key attribute: its name and scalar kind."""

    name: str = Field(..., min_length=1, description="Key attribute name")
    kind: AttributeKind = Field(default=AttributeKind.STRING, description="Key attribute kind (S or N)")

    @field_validator('kind', mode='before')
    @classmethod
    def validate_kind(cls, v):
        """Key attributes are scalar strings or numbers."""
        try:
            kind = AttributeKind.parse(v)
        except InvalidKindError as e:
            raise ValueError(e.message) from e
        if kind not in (AttributeKind.STRING, AttributeKind.NUMBER):
            raise ValueError(f"Key attributes must be S or N, got {kind.value}")
        return kind

    def to_dynamodb(self) -> Dict[str, str]:
        return {'AttributeName': self.name, 'AttributeType': self.kind.value}


class KeySchema(BaseModel):
    """Primary key definition of a table."""

    hash_key: KeySchemaElement = Field(..., description="Hash (partition) key")
    range_key: Optional[KeySchemaElement] = Field(default=None, description="Range (sort) key")

    def to_dynamodb(self) -> Dict[str, Any]:
        key_schema = {'HashKeyElement': self.hash_key.to_dynamodb()}
        if self.range_key is not None:
            key_schema['RangeKeyElement'] = self.range_key.to_dynamodb()
        return key_schema

    @classmethod
    def from_dynamodb(
        cls,
        key_schema: Any,
        attribute_definitions: Optional[List[Dict[str, str]]] = None
    ) -> 'KeySchema':
        """Read a key schema from a DescribeTable response.

        Args:
            key_schema: Legacy mapping form or KeySchema list form
            attribute_definitions: AttributeDefinitions of the list form

        Returns:
            KeySchema instance
        """
        if isinstance(key_schema, dict):
            hash_element = key_schema['HashKeyElement']
            range_element = key_schema.get('RangeKeyElement')
            return cls(
                hash_key=KeySchemaElement(name=hash_element['AttributeName'], kind=hash_element['AttributeType']),
                range_key=(
                    KeySchemaElement(name=range_element['AttributeName'], kind=range_element['AttributeType'])
                    if range_element else None
                ),
            )

        kinds = {d['AttributeName']: d['AttributeType'] for d in attribute_definitions or []}
        elements = {}
        for element in key_schema:
            name = element['AttributeName']
            elements[element['KeyType']] = KeySchemaElement(name=name, kind=kinds.get(name, AttributeKind.STRING.value))
        return cls(hash_key=elements['HASH'], range_key=elements.get('RANGE'))


class ProvisionedThroughput(BaseModel):
    """Read/write capacity of a table."""

    read_capacity_units: int = Field(..., ge=1, description="Provisioned read capacity units")
    write_capacity_units: int = Field(..., ge=1, description="Provisioned write capacity units")
    last_increase_date_time: Optional[datetime] = Field(default=None)
    last_decrease_date_time: Optional[datetime] = Field(default=None)

    def to_dynamodb(self) -> Dict[str, int]:
        return {
            'ReadCapacityUnits': self.read_capacity_units,
            'WriteCapacityUnits': self.write_capacity_units,
        }

    @classmethod
    def from_dynamodb(cls, data: Dict[str, Any]) -> 'ProvisionedThroughput':
        return cls(
            read_capacity_units=data['ReadCapacityUnits'],
            write_capacity_units=data['WriteCapacityUnits'],
            last_increase_date_time=data.get('LastIncreaseDateTime'),
            last_decrease_date_time=data.get('LastDecreaseDateTime'),
        )


class TableDescription(BaseModel):
    """Result of a DescribeTable call."""

    name: str
    status: str
    creation_date_time: Optional[datetime] = None
    item_count: int = 0
    size_bytes: int = 0
    key_schema: Optional[KeySchema] = None
    provisioned_throughput: Optional[ProvisionedThroughput] = None

    @classmethod
    def from_dynamodb(cls, table: Dict[str, Any]) -> 'TableDescription':
        key_schema = table.get('KeySchema')
        throughput = table.get('ProvisionedThroughput')
        return cls(
            name=table['TableName'],
            status=table['TableStatus'],
            creation_date_time=table.get('CreationDateTime'),
            item_count=table.get('ItemCount', 0),
            size_bytes=table.get('TableSizeBytes', 0),
            key_schema=(
                KeySchema.from_dynamodb(key_schema, table.get('AttributeDefinitions'))
                if key_schema else None
            ),
            provisioned_throughput=(
                ProvisionedThroughput.from_dynamodb(throughput)
                if throughput and throughput.get('ReadCapacityUnits') else None
            ),
        )


class TableCollection:
    """Table names returned by a ListTables call."""

    def __init__(self, last_evaluated_table_name: Optional[str] = None):
        self.last_evaluated_table_name = last_evaluated_table_name
        self.table_names: List[str] = []

    def add(self, table_name: str) -> None:
        self.table_names.append(table_name)

    def more(self) -> bool:
        """Return True if more table names remain to be listed."""
        return self.last_evaluated_table_name is not None

    def __iter__(self) -> Iterator[str]:
        return iter(self.table_names)

    def __len__(self) -> int:
        return len(self.table_names)

    def __contains__(self, table_name: object) -> bool:
        return table_name in self.table_names
