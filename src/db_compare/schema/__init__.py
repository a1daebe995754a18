"""Schema extraction and comparison.

Provides live catalog introspection (``SchemaIntrospector``), row
assembly (``assemble``), and five-pass schema comparison
(``compare_schemas``).

Usage:
    from db_compare.schema import SchemaIntrospector, compare_schemas
"""

from db_compare.schema.assembler import assemble, split_list
from db_compare.schema.comparator import (
    compare_schemas,
    format_column_length,
    format_column_type,
)
from db_compare.schema.introspector import SchemaIntrospector
from db_compare.schema.models import (
    ColumnSchema,
    ConstraintSchema,
    IndexSchema,
    SchemaComparisonResult,
    SchemaDifference,
    SchemaDifferenceType,
    Severity,
    TableSchema,
    TriggerSchema,
)

__all__ = [
    "assemble",
    "split_list",
    "compare_schemas",
    "format_column_length",
    "format_column_type",
    "SchemaIntrospector",
    "ColumnSchema",
    "ConstraintSchema",
    "IndexSchema",
    "SchemaComparisonResult",
    "SchemaDifference",
    "SchemaDifferenceType",
    "Severity",
    "TableSchema",
    "TriggerSchema",
]
