"""Pydantic models for row-count extraction and data comparison.

- Extraction models: TableRowCount, RowCountTier, RowCountExtraction
- Comparison models: DataDifferenceType, DataDifference,
  DataComparisonResult
"""

from enum import StrEnum

from pydantic import Field, computed_field, field_validator

from db_compare.schema.models import ComparisonModel, Severity, count_by_severity


# ============================================================================
# Extraction Models
# ============================================================================


class TableRowCount(ComparisonModel):
    """Row count for one table.

    Zero is a real count, not a failure marker.  NULL or negative counts
    from the catalog are stored as 0.

    Example:
        >>> TableRowCount(schema_name="dbo", table_name="Users", row_count=None).row_count
        0
    """

    schema_name: str
    table_name: str
    row_count: int = 0

    @field_validator("row_count", mode="before")
    @classmethod
    def _clamp_row_count(cls, value):
        if value is None:
            return 0
        value = int(value)
        return value if value > 0 else 0

    @property
    def key(self) -> tuple[str, str]:
        return (self.schema_name, self.table_name)


class RowCountTier(StrEnum):
    """Which row-count query produced a snapshot, most accurate first."""

    PRIMARY = "primary"
    FALLBACK = "fallback"
    SIMPLE = "simple"  # zero-filled table listing


class RowCountExtraction(ComparisonModel):
    """Row counts from exactly one tier."""

    tier: RowCountTier
    counts: list[TableRowCount] = Field(default_factory=list)

    @property
    def degraded(self) -> bool:
        """True when counts are zero-filled rather than measured."""
        return self.tier == RowCountTier.SIMPLE


# ============================================================================
# Comparison Models
# ============================================================================


class DataDifferenceType(StrEnum):
    """Kind of row-count difference."""

    ROW_COUNT_MISMATCH = "RowCountMismatch"
    TABLE_MISSING_IN_SOURCE = "TableMissingInSource"
    TABLE_MISSING_IN_TARGET = "TableMissingInTarget"
    EMPTY_TABLE = "EmptyTable"
    LARGE_DIFFERENCE = "LargeDifference"


class DataDifference(ComparisonModel):
    """A single classified row-count difference."""

    schema_name: str
    table_name: str
    difference_type: DataDifferenceType
    source_row_count: int
    target_row_count: int
    difference: int  # absolute
    percentage_difference: float
    description: str
    severity: Severity

    @property
    def qualified_name(self) -> str:
        return f"{self.schema_name}.{self.table_name}"


class DataComparisonResult(ComparisonModel):
    """Result of a row-count comparison.

    ``total_differences`` is derived from the difference list.  When a
    side's counts came from a fallback tier, ``warnings`` says so.
    """

    differences: list[DataDifference] = Field(default_factory=list)
    source_table_count: int = 0
    target_table_count: int = 0
    total_row_count_source: int = 0
    total_row_count_target: int = 0
    tables_compared: int = 0
    source_count_tier: RowCountTier | None = None
    target_count_tier: RowCountTier | None = None
    warnings: list[str] = Field(default_factory=list)

    @computed_field(alias="totalDifferences")
    @property
    def total_differences(self) -> int:
        return len(self.differences)

    def severity_counts(self) -> dict[str, int]:
        """Number of differences per severity level."""
        return count_by_severity(d.severity for d in self.differences)
