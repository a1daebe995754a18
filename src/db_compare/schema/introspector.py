"""SQL Server schema introspection via the system catalog.

This module queries a live database to extract schema information:
- Base tables
- Columns, data types, lengths, nullability, defaults, identity, collation
- Indexes (type, uniqueness, primary key, key and included columns, filter)
- Check constraints and foreign keys
- Triggers (type, definition, enabled state)

Raw rows are validated into the typed models in ``db_compare.schema.rows``
straight after each query.  Query errors propagate unmodified.
"""

import logging

from db_compare.adapters.base import CatalogClient
from db_compare.queries import (
    COLUMNS_QUERY,
    CONSTRAINTS_QUERY,
    INDEXES_QUERY,
    TABLES_QUERY,
    TRIGGERS_QUERY,
)
from db_compare.schema.assembler import assemble
from db_compare.schema.models import TableSchema
from db_compare.schema.rows import (
    ColumnRow,
    ConstraintRow,
    IndexRow,
    TableRow,
    TriggerRow,
)

logger = logging.getLogger(__name__)


class SchemaIntrospector:
    """Reads the catalog of one database through an open ``CatalogClient``.

    The introspector does not own the connection; the caller opens and
    closes the client.

    Usage:
        async with AsyncSqlServerClient(url) as client:
            tables = await SchemaIntrospector(client).introspect()
    """

    def __init__(self, client: CatalogClient):
        self._client = client

    async def introspect(self) -> list[TableSchema]:
        """Extract every base table with its columns, indexes, constraints
        and triggers.

        Returns:
            List of ``TableSchema`` ordered by schema and table name.
        """
        tables = await self.get_tables()
        columns = await self.get_columns()
        indexes = await self.get_indexes()
        constraints = await self.get_constraints()
        triggers = await self.get_triggers()

        logger.debug(
            f"Catalog rows: {len(tables)} tables, {len(columns)} columns, "
            f"{len(indexes)} indexes, {len(constraints)} constraints, "
            f"{len(triggers)} triggers"
        )
        return assemble(tables, columns, indexes, constraints, triggers)

    async def get_tables(self) -> list[TableRow]:
        """Get all base tables."""
        rows = await self._client.fetch_all(TABLES_QUERY)
        return [TableRow.model_validate(row) for row in rows]

    async def get_columns(self) -> list[ColumnRow]:
        """Get all columns of base tables, with identity metadata."""
        rows = await self._client.fetch_all(COLUMNS_QUERY)
        return [ColumnRow.model_validate(row) for row in rows]

    async def get_indexes(self) -> list[IndexRow]:
        """Get all non-heap indexes with aggregated column lists."""
        rows = await self._client.fetch_all(INDEXES_QUERY)
        return [IndexRow.model_validate(row) for row in rows]

    async def get_constraints(self) -> list[ConstraintRow]:
        """Get check constraints and foreign keys as one stream."""
        rows = await self._client.fetch_all(CONSTRAINTS_QUERY)
        return [ConstraintRow.model_validate(row) for row in rows]

    async def get_triggers(self) -> list[TriggerRow]:
        """Get table triggers with definition and disabled flag."""
        rows = await self._client.fetch_all(TRIGGERS_QUERY)
        return [TriggerRow.model_validate(row) for row in rows]
