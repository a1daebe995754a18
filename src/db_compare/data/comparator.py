"""Row-count comparison between two snapshots.

Pure logic -- no I/O.  Tables are matched by ``(schema_name,
table_name)``.  Classification for tables present on both sides with
different counts:

- either count is 0            -> EmptyTable, Medium
- percentage difference > 50   -> LargeDifference, High
- percentage difference > 10   -> RowCountMismatch, Medium
- otherwise                    -> RowCountMismatch, Low

Both thresholds are strict: exactly 10.0% is Low and exactly 50.0% is
Medium.  Output is sorted by severity (High first), then by absolute
difference, largest first.

Usage:
    from db_compare.data.comparator import compare_row_counts

    result = compare_row_counts(source_counts, target_counts)
"""

from db_compare.data.models import (
    DataComparisonResult,
    DataDifference,
    DataDifferenceType,
    TableRowCount,
)
from db_compare.schema.models import Severity

LARGE_DIFFERENCE_PERCENT = 50.0
MISMATCH_PERCENT = 10.0


def percentage_difference(source_rows: int, target_rows: int) -> float:
    """Absolute difference as a percentage of the larger count.

    Examples:
        >>> percentage_difference(10_000, 9_000)
        10.0
        >>> percentage_difference(0, 0)
        0.0
    """
    max_rows = max(source_rows, target_rows)
    if max_rows == 0:
        return 0.0
    return abs(source_rows - target_rows) * 100 / max_rows


def classify(
    source_rows: int, target_rows: int, percentage: float
) -> tuple[DataDifferenceType, Severity]:
    """Pick the difference type and severity for unequal counts."""
    if source_rows == 0 or target_rows == 0:
        return DataDifferenceType.EMPTY_TABLE, Severity.MEDIUM
    if percentage > LARGE_DIFFERENCE_PERCENT:
        return DataDifferenceType.LARGE_DIFFERENCE, Severity.HIGH
    if percentage > MISMATCH_PERCENT:
        return DataDifferenceType.ROW_COUNT_MISMATCH, Severity.MEDIUM
    return DataDifferenceType.ROW_COUNT_MISMATCH, Severity.LOW


def _missing_table(
    table: TableRowCount, difference_type: DataDifferenceType
) -> DataDifference:
    only_in_target = difference_type == DataDifferenceType.TABLE_MISSING_IN_SOURCE
    present, absent = ("target", "source") if only_in_target else ("source", "target")
    return DataDifference(
        schema_name=table.schema_name,
        table_name=table.table_name,
        difference_type=difference_type,
        source_row_count=0 if only_in_target else table.row_count,
        target_row_count=table.row_count if only_in_target else 0,
        difference=table.row_count,
        percentage_difference=100.0,
        description=(
            f"Table exists in {present} with {table.row_count:,} rows "
            f"but is missing in {absent}"
        ),
        severity=Severity.HIGH if table.row_count > 0 else Severity.MEDIUM,
    )


def _count_mismatch(source: TableRowCount, target: TableRowCount) -> DataDifference:
    difference = abs(source.row_count - target.row_count)
    percentage = percentage_difference(source.row_count, target.row_count)
    difference_type, severity = classify(
        source.row_count, target.row_count, percentage
    )

    description = (
        f"Row count difference: Source has {source.row_count:,}, "
        f"Target has {target.row_count:,}"
    )
    if percentage > 0:
        description += f" ({percentage:.1f}% difference)"

    return DataDifference(
        schema_name=source.schema_name,
        table_name=source.table_name,
        difference_type=difference_type,
        source_row_count=source.row_count,
        target_row_count=target.row_count,
        difference=difference,
        percentage_difference=percentage,
        description=description,
        severity=severity,
    )


def sort_differences(differences: list[DataDifference]) -> list[DataDifference]:
    """Order by severity (High first), then absolute difference descending."""
    return sorted(
        differences,
        key=lambda d: (d.severity.rank, d.difference),
        reverse=True,
    )


def compare_row_counts(
    source_counts: list[TableRowCount],
    target_counts: list[TableRowCount],
) -> DataComparisonResult:
    """Compare two row-count snapshots.

    Args:
        source_counts: Row counts extracted from the source database.
        target_counts: Row counts extracted from the target database.

    Returns:
        ``DataComparisonResult`` with sorted differences and totals.

    Examples:
        >>> from db_compare.data.models import TableRowCount
        >>> src = [TableRowCount(schema_name="dbo", table_name="Legacy", row_count=0)]
        >>> tgt = [TableRowCount(schema_name="dbo", table_name="Legacy", row_count=500)]
        >>> diff = compare_row_counts(src, tgt).differences[0]
        >>> diff.difference_type.value, diff.severity.value, diff.percentage_difference
        ('EmptyTable', 'Medium', 100.0)
    """
    source_map = {table.key: table for table in source_counts}
    target_map = {table.key: table for table in target_counts}

    differences: list[DataDifference] = []

    for source in source_counts:
        target = target_map.get(source.key)
        if target is None:
            differences.append(
                _missing_table(source, DataDifferenceType.TABLE_MISSING_IN_TARGET)
            )
        elif source.row_count != target.row_count:
            differences.append(_count_mismatch(source, target))

    for target in target_counts:
        if target.key not in source_map:
            differences.append(
                _missing_table(target, DataDifferenceType.TABLE_MISSING_IN_SOURCE)
            )

    return DataComparisonResult(
        differences=sort_differences(differences),
        source_table_count=len(source_counts),
        target_table_count=len(target_counts),
        total_row_count_source=sum(t.row_count for t in source_counts),
        total_row_count_target=sum(t.row_count for t in target_counts),
        tables_compared=max(len(source_counts), len(target_counts)),
    )
