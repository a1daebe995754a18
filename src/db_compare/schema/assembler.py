"""Assemble typed catalog rows into ``TableSchema`` trees.

Pure logic -- no I/O.  Each metadata stream is filtered per table by
``(schema_name, table_name)`` and mapped into the snapshot models,
preserving the order the catalog returned.

Usage:
    from db_compare.schema.assembler import assemble

    tables = assemble(table_rows, column_rows, index_rows,
                      constraint_rows, trigger_rows)
"""

from collections import defaultdict
from collections.abc import Iterable
from typing import TypeVar

from db_compare.queries import LIST_DELIMITER
from db_compare.schema.models import (
    ColumnSchema,
    ConstraintSchema,
    IndexSchema,
    TableSchema,
    TriggerSchema,
)
from db_compare.schema.rows import (
    ColumnRow,
    ConstraintRow,
    IndexRow,
    TableRow,
    TriggerRow,
)

RowT = TypeVar("RowT", ColumnRow, IndexRow, ConstraintRow, TriggerRow)


def split_list(value: str | None) -> list[str]:
    """Split a delimited catalog aggregate into an ordered list.

    Examples:
        >>> split_list("Id, Name")
        ['Id', 'Name']
        >>> split_list(None)
        []
        >>> split_list("")
        []
    """
    if not value:
        return []
    parts = (part.strip() for part in value.split(LIST_DELIMITER))
    return [part for part in parts if part]


def _group_by_table(rows: Iterable[RowT]) -> dict[tuple[str, str], list[RowT]]:
    grouped: dict[tuple[str, str], list[RowT]] = defaultdict(list)
    for row in rows:
        grouped[(row.schema_name, row.table_name)].append(row)
    return grouped


def _to_column(row: ColumnRow) -> ColumnSchema:
    is_identity = row.is_identity == 1
    return ColumnSchema(
        name=row.column_name,
        data_type=row.data_type,
        max_length=row.max_length,
        precision=row.precision,
        scale=row.scale,
        is_nullable=row.is_nullable == "YES",
        default_value=row.default_value,
        is_identity=is_identity,
        identity_seed=row.identity_seed if is_identity else None,
        identity_increment=row.identity_increment if is_identity else None,
        collation_name=row.collation_name,
    )


def _to_index(row: IndexRow) -> IndexSchema:
    return IndexSchema(
        name=row.index_name,
        index_type=row.index_type,
        is_unique=row.is_unique,
        is_primary_key=row.is_primary_key,
        columns=split_list(row.columns),
        included_columns=split_list(row.included_columns),
        filter_definition=row.filter_definition,
    )


def _to_constraint(row: ConstraintRow) -> ConstraintSchema:
    return ConstraintSchema(
        name=row.constraint_name,
        constraint_type=row.constraint_type,
        definition=row.definition,
        columns=split_list(row.columns),
        referenced_table=row.referenced_table,
        referenced_columns=(
            split_list(row.referenced_columns) if row.referenced_columns else None
        ),
    )


def _to_trigger(row: TriggerRow) -> TriggerSchema:
    return TriggerSchema(
        name=row.trigger_name,
        trigger_type=row.trigger_type,
        definition=row.definition or "",
        is_enabled=not row.is_disabled,
    )


def assemble(
    tables: Iterable[TableRow],
    columns: Iterable[ColumnRow],
    indexes: Iterable[IndexRow],
    constraints: Iterable[ConstraintRow],
    triggers: Iterable[TriggerRow],
) -> list[TableSchema]:
    """Build one ``TableSchema`` per table row.

    Rows whose table is not in *tables* are ignored; a table with no
    matching rows gets empty lists.

    Args:
        tables: Base tables, in output order.
        columns: Column rows (ordinal order within a table).
        indexes: Index rows.
        constraints: Check and foreign-key constraint rows.
        triggers: Trigger rows.

    Returns:
        List of ``TableSchema`` in the order of *tables*.
    """
    columns_by_table = _group_by_table(columns)
    indexes_by_table = _group_by_table(indexes)
    constraints_by_table = _group_by_table(constraints)
    triggers_by_table = _group_by_table(triggers)

    result: list[TableSchema] = []
    for table in tables:
        key = (table.schema_name, table.table_name)
        result.append(
            TableSchema(
                schema_name=table.schema_name,
                table_name=table.table_name,
                columns=[_to_column(r) for r in columns_by_table.get(key, [])],
                indexes=[_to_index(r) for r in indexes_by_table.get(key, [])],
                constraints=[
                    _to_constraint(r) for r in constraints_by_table.get(key, [])
                ],
                triggers=[_to_trigger(r) for r in triggers_by_table.get(key, [])],
            )
        )
    return result
