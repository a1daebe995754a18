"""Pydantic models for schema extraction and comparison.

This module contains schema-domain models:
- Shared: Severity, ComparisonModel (camelCase JSON base)
- Introspection models: ColumnSchema, IndexSchema, ConstraintSchema,
  TriggerSchema, TableSchema
- Comparison models: SchemaDifferenceType, SchemaDifference,
  SchemaComparisonResult

Every model serializes with camelCase aliases (``objectName``,
``totalDifferences``, ...) and accepts either spelling on input.
"""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel


class ComparisonModel(BaseModel):
    """Base for all snapshot and result models."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    def to_json(self, indent: int | None = 2) -> str:
        """Serialize with camelCase field names."""
        return self.model_dump_json(by_alias=True, indent=indent)


# ============================================================================
# Severity
# ============================================================================


class Severity(StrEnum):
    """Three-level ranking attached to every difference.

    Example:
        >>> Severity.HIGH.rank > Severity.LOW.rank
        True
    """

    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"

    @property
    def rank(self) -> int:
        """Sort rank: High=3, Medium=2, Low=1."""
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {Severity.HIGH: 3, Severity.MEDIUM: 2, Severity.LOW: 1}


def count_by_severity(severities) -> dict[str, int]:
    """Count severities, always reporting all three levels."""
    counts = {severity.value: 0 for severity in Severity}
    for severity in severities:
        counts[Severity(severity).value] += 1
    return counts


# ============================================================================
# Schema Introspection Models
# ============================================================================


class ColumnSchema(ComparisonModel):
    """Schema for a table column.

    Example:
        >>> col = ColumnSchema(name="Total", data_type="decimal", precision=10, scale=2)
        >>> col.is_nullable
        True
    """

    name: str
    data_type: str
    max_length: int | None = None
    precision: int | None = None
    scale: int | None = None
    is_nullable: bool = True
    default_value: str | None = None
    is_identity: bool = False
    identity_seed: int | None = None
    identity_increment: int | None = None
    collation_name: str | None = None


class IndexSchema(ComparisonModel):
    """Schema for an index (heaps are never represented)."""

    name: str
    index_type: str  # CLUSTERED, NONCLUSTERED, ...
    is_unique: bool = False
    is_primary_key: bool = False
    columns: list[str] = Field(default_factory=list)
    included_columns: list[str] = Field(default_factory=list)
    filter_definition: str | None = None


class ConstraintSchema(ComparisonModel):
    """Schema for a check or foreign-key constraint."""

    name: str
    constraint_type: str  # CHECK_CONSTRAINT, FOREIGN_KEY
    definition: str | None = None
    columns: list[str] = Field(default_factory=list)
    referenced_table: str | None = None
    referenced_columns: list[str] | None = None

    @property
    def is_foreign_key(self) -> bool:
        return self.constraint_type == "FOREIGN_KEY"


class TriggerSchema(ComparisonModel):
    """Schema for a DML trigger."""

    name: str
    trigger_type: str  # SQL_TRIGGER, CLR_TRIGGER
    definition: str = ""
    is_enabled: bool = True


class TableSchema(ComparisonModel):
    """Schema for a base table and everything it owns."""

    schema_name: str
    table_name: str
    columns: list[ColumnSchema] = Field(default_factory=list)
    indexes: list[IndexSchema] = Field(default_factory=list)
    constraints: list[ConstraintSchema] = Field(default_factory=list)
    triggers: list[TriggerSchema] = Field(default_factory=list)

    @property
    def key(self) -> tuple[str, str]:
        """Identity across snapshots: ``(schema_name, table_name)``."""
        return (self.schema_name, self.table_name)

    @property
    def qualified_name(self) -> str:
        return f"{self.schema_name}.{self.table_name}"


# ============================================================================
# Comparison Models
# ============================================================================


class SchemaDifferenceType(StrEnum):
    """Kind of schema difference."""

    TABLE_MISSING = "TableMissing"
    TABLE_EXTRA = "TableExtra"
    COLUMN_MISSING = "ColumnMissing"
    COLUMN_EXTRA = "ColumnExtra"
    COLUMN_TYPE = "ColumnType"  # type/length/precision/scale or nullability
    INDEX_MISSING = "IndexMissing"
    CONSTRAINT_MISSING = "ConstraintMissing"
    TRIGGER_MISSING = "TriggerMissing"


class SchemaDifference(ComparisonModel):
    """A single classified schema difference."""

    type: SchemaDifferenceType
    object_name: str
    difference: str
    source_value: str
    target_value: str
    severity: Severity


class SchemaComparisonResult(ComparisonModel):
    """Result of a schema comparison.

    ``total_differences`` and ``schema_differences`` are derived from the
    difference list, so they always equal ``len(differences)``.

    Example:
        >>> result = SchemaComparisonResult(source_table_count=0, target_table_count=0)
        >>> result.total_differences
        0
    """

    differences: list[SchemaDifference] = Field(default_factory=list)
    source_table_count: int = 0
    target_table_count: int = 0

    @computed_field(alias="totalDifferences")
    @property
    def total_differences(self) -> int:
        return len(self.differences)

    @computed_field(alias="schemaDifferences")
    @property
    def schema_differences(self) -> int:
        return len(self.differences)

    def severity_counts(self) -> dict[str, int]:
        """Number of differences per severity level."""
        return count_by_severity(d.severity for d in self.differences)
