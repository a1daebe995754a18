"""Typed rows returned by the catalog queries.

Raw driver rows are validated into these models immediately after each
query, so nothing past the catalog reader handles loose dicts.  Field
names match the snake_case aliases in ``db_compare.queries``.
"""

from pydantic import BaseModel


class TableRow(BaseModel):
    schema_name: str
    table_name: str


class ColumnRow(BaseModel):
    schema_name: str
    table_name: str
    column_name: str
    data_type: str
    max_length: int | None = None
    precision: int | None = None
    scale: int | None = None
    is_nullable: str | None = None  # YES / NO
    default_value: str | None = None
    collation_name: str | None = None
    is_identity: int | None = None  # COLUMNPROPERTY(..., 'IsIdentity')
    identity_seed: int | None = None
    identity_increment: int | None = None


class IndexRow(BaseModel):
    schema_name: str
    table_name: str
    index_name: str
    index_type: str
    is_unique: bool = False
    is_primary_key: bool = False
    filter_definition: str | None = None
    columns: str | None = None  # delimited key columns
    included_columns: str | None = None  # delimited included columns


class ConstraintRow(BaseModel):
    schema_name: str
    table_name: str
    constraint_name: str
    constraint_type: str
    definition: str | None = None
    columns: str | None = None
    referenced_table: str | None = None
    referenced_columns: str | None = None


class TriggerRow(BaseModel):
    schema_name: str
    table_name: str
    trigger_name: str
    trigger_type: str
    definition: str | None = None
    is_disabled: bool = False
