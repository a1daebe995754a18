"""Schema comparison between two extracted snapshots.

Pure logic -- no I/O, no database connections.  Five passes append to a
single difference list in a fixed order: tables, columns, indexes,
constraints, triggers.  Tables are matched by ``(schema_name,
table_name)``; everything inside a matched table pair is matched by exact
name.  Tables present on one side only are reported by the table pass and
skipped by every later pass.

Usage:
    from db_compare.schema.comparator import compare_schemas

    result = compare_schemas(source_tables, target_tables)
    for diff in result.differences:
        print(diff.severity, diff.object_name, diff.difference)
"""

from collections.abc import Iterable, Iterator
from typing import TypeVar

from db_compare.schema.models import (
    ColumnSchema,
    SchemaComparisonResult,
    SchemaDifference,
    SchemaDifferenceType,
    Severity,
    TableSchema,
)

EXISTS = "EXISTS"
MISSING = "MISSING"

NamedT = TypeVar("NamedT")


def format_column_type(column: ColumnSchema) -> str:
    """Render a column type with its length, precision or scale.

    Examples:
        >>> format_column_type(ColumnSchema(name="c", data_type="nvarchar", max_length=50))
        'nvarchar(50)'
        >>> format_column_type(ColumnSchema(name="c", data_type="varbinary", max_length=-1))
        'varbinary(MAX)'
        >>> format_column_type(ColumnSchema(name="c", data_type="decimal", precision=10, scale=2))
        'decimal(10,2)'
        >>> format_column_type(ColumnSchema(name="c", data_type="float", precision=53))
        'float(53)'
        >>> format_column_type(ColumnSchema(name="c", data_type="date"))
        'date'
    """
    if column.max_length == -1:
        return f"{column.data_type}(MAX)"
    if column.max_length and column.max_length > 0:
        return f"{column.data_type}({column.max_length})"
    if column.precision and column.scale is not None:
        return f"{column.data_type}({column.precision},{column.scale})"
    if column.precision:
        return f"{column.data_type}({column.precision})"
    return column.data_type


def format_column_length(column: ColumnSchema) -> str:
    """Render a column type with its length only, for presence differences.

    Examples:
        >>> format_column_length(ColumnSchema(name="c", data_type="int", precision=10, scale=0))
        'int'
        >>> format_column_length(ColumnSchema(name="c", data_type="nvarchar", max_length=-1))
        'nvarchar(MAX)'
    """
    if column.max_length == -1:
        return f"{column.data_type}(MAX)"
    if column.max_length and column.max_length > 0:
        return f"{column.data_type}({column.max_length})"
    return column.data_type


def _format_nullability(column: ColumnSchema) -> str:
    return "NULL" if column.is_nullable else "NOT NULL"


def _by_name(items: Iterable[NamedT]) -> dict[str, NamedT]:
    """Index objects by name, keeping the first of any duplicates."""
    index: dict[str, NamedT] = {}
    for item in items:
        index.setdefault(item.name, item)
    return index


def _matched_pairs(
    source_tables: list[TableSchema],
    target_tables: list[TableSchema],
) -> Iterator[tuple[TableSchema, TableSchema]]:
    """Yield (source, target) for every table present on both sides,
    in source order."""
    targets: dict[tuple[str, str], TableSchema] = {}
    for table in target_tables:
        targets.setdefault(table.key, table)
    for source in source_tables:
        target = targets.get(source.key)
        if target is not None:
            yield source, target


# ============================================================================
# Passes
# ============================================================================


def _compare_tables(
    source_tables: list[TableSchema],
    target_tables: list[TableSchema],
    differences: list[SchemaDifference],
) -> None:
    source_keys = {table.key for table in source_tables}
    target_keys = {table.key for table in target_tables}

    for table in source_tables:
        if table.key not in target_keys:
            differences.append(
                SchemaDifference(
                    type=SchemaDifferenceType.TABLE_MISSING,
                    object_name=table.qualified_name,
                    difference="Table exists in source but not in target",
                    source_value=EXISTS,
                    target_value=MISSING,
                    severity=Severity.HIGH,
                )
            )

    for table in target_tables:
        if table.key not in source_keys:
            differences.append(
                SchemaDifference(
                    type=SchemaDifferenceType.TABLE_EXTRA,
                    object_name=table.qualified_name,
                    difference="Table exists in target but not in source",
                    source_value=MISSING,
                    target_value=EXISTS,
                    severity=Severity.MEDIUM,
                )
            )


def _compare_columns(
    pairs: list[tuple[TableSchema, TableSchema]],
    differences: list[SchemaDifference],
) -> None:
    for source_table, target_table in pairs:
        source_columns = _by_name(source_table.columns)
        target_columns = _by_name(target_table.columns)

        for source_column in source_table.columns:
            object_name = f"{source_table.qualified_name}.{source_column.name}"
            target_column = target_columns.get(source_column.name)

            if target_column is None:
                differences.append(
                    SchemaDifference(
                        type=SchemaDifferenceType.COLUMN_MISSING,
                        object_name=object_name,
                        difference="Column exists in source but not in target",
                        source_value=format_column_length(source_column),
                        target_value=MISSING,
                        severity=Severity.HIGH,
                    )
                )
                continue

            if (
                source_column.data_type != target_column.data_type
                or source_column.max_length != target_column.max_length
                or source_column.precision != target_column.precision
                or source_column.scale != target_column.scale
            ):
                differences.append(
                    SchemaDifference(
                        type=SchemaDifferenceType.COLUMN_TYPE,
                        object_name=object_name,
                        difference="Column data type differs",
                        source_value=format_column_type(source_column),
                        target_value=format_column_type(target_column),
                        severity=Severity.HIGH,
                    )
                )

            # Reported separately from the type check, even when types match
            if source_column.is_nullable != target_column.is_nullable:
                differences.append(
                    SchemaDifference(
                        type=SchemaDifferenceType.COLUMN_TYPE,
                        object_name=object_name,
                        difference="Column nullability differs",
                        source_value=_format_nullability(source_column),
                        target_value=_format_nullability(target_column),
                        severity=Severity.MEDIUM,
                    )
                )

        for target_column in target_table.columns:
            if target_column.name not in source_columns:
                differences.append(
                    SchemaDifference(
                        type=SchemaDifferenceType.COLUMN_EXTRA,
                        object_name=f"{target_table.qualified_name}.{target_column.name}",
                        difference="Column exists in target but not in source",
                        source_value=MISSING,
                        target_value=format_column_length(target_column),
                        severity=Severity.MEDIUM,
                    )
                )


def _compare_indexes(
    pairs: list[tuple[TableSchema, TableSchema]],
    differences: list[SchemaDifference],
) -> None:
    # Missing indexes only: extra or altered indexes are not reported
    for source_table, target_table in pairs:
        target_indexes = _by_name(target_table.indexes)
        for index in source_table.indexes:
            if index.name in target_indexes:
                continue
            differences.append(
                SchemaDifference(
                    type=SchemaDifferenceType.INDEX_MISSING,
                    object_name=f"{source_table.qualified_name}.{index.name}",
                    difference="Index exists in source but not in target",
                    source_value=f"{index.index_type} ({', '.join(index.columns)})",
                    target_value=MISSING,
                    severity=Severity.HIGH if index.is_primary_key else Severity.MEDIUM,
                )
            )


def _compare_constraints(
    pairs: list[tuple[TableSchema, TableSchema]],
    differences: list[SchemaDifference],
) -> None:
    for source_table, target_table in pairs:
        target_constraints = _by_name(target_table.constraints)
        for constraint in source_table.constraints:
            if constraint.name in target_constraints:
                continue
            detail = constraint.definition or ", ".join(constraint.columns)
            differences.append(
                SchemaDifference(
                    type=SchemaDifferenceType.CONSTRAINT_MISSING,
                    object_name=f"{source_table.qualified_name}.{constraint.name}",
                    difference="Constraint exists in source but not in target",
                    source_value=f"{constraint.constraint_type}: {detail}",
                    target_value=MISSING,
                    severity=Severity.HIGH,
                )
            )


def _compare_triggers(
    pairs: list[tuple[TableSchema, TableSchema]],
    differences: list[SchemaDifference],
) -> None:
    for source_table, target_table in pairs:
        target_triggers = _by_name(target_table.triggers)
        for trigger in source_table.triggers:
            if trigger.name in target_triggers:
                continue
            state = "Enabled" if trigger.is_enabled else "Disabled"
            differences.append(
                SchemaDifference(
                    type=SchemaDifferenceType.TRIGGER_MISSING,
                    object_name=f"{source_table.qualified_name}.{trigger.name}",
                    difference="Trigger exists in source but not in target",
                    source_value=f"{trigger.trigger_type} ({state})",
                    target_value=MISSING,
                    severity=Severity.LOW,
                )
            )


# ============================================================================
# Public API
# ============================================================================


def compare_schemas(
    source_tables: list[TableSchema],
    target_tables: list[TableSchema],
) -> SchemaComparisonResult:
    """Compare two schema snapshots.

    Args:
        source_tables: Tables extracted from the source database.
        target_tables: Tables extracted from the target database.

    Returns:
        ``SchemaComparisonResult`` whose ``differences`` list holds, in
        order, the table, column, index, constraint and trigger findings.

    Examples:
        >>> from db_compare.schema.models import TableSchema
        >>> orders = TableSchema(schema_name="dbo", table_name="Orders")
        >>> audit = TableSchema(schema_name="dbo", table_name="Audit")
        >>> result = compare_schemas([orders], [orders, audit])
        >>> [(d.type.value, d.object_name, d.severity.value) for d in result.differences]
        [('TableExtra', 'dbo.Audit', 'Medium')]
    """
    differences: list[SchemaDifference] = []
    pairs = list(_matched_pairs(source_tables, target_tables))

    _compare_tables(source_tables, target_tables, differences)
    _compare_columns(pairs, differences)
    _compare_indexes(pairs, differences)
    _compare_constraints(pairs, differences)
    _compare_triggers(pairs, differences)

    return SchemaComparisonResult(
        differences=differences,
        source_table_count=len(source_tables),
        target_table_count=len(target_tables),
    )
