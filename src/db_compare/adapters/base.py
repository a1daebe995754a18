"""Catalog client protocol definition.

Defines the ``CatalogClient`` Protocol that the catalog reader and
row-count reader consume.  A client owns exactly one live connection for
the duration of an ``async with`` block and only ever runs read-only SQL.

Usage:
    from db_compare.adapters.base import CatalogClient

    async def list_tables(client: CatalogClient) -> list[str]:
        async with client:
            rows = await client.fetch_all("SELECT name FROM sys.tables")
        return [row["name"] for row in rows]
"""

from typing import Any, Protocol


class CatalogClient(Protocol):
    """Read-only database handle used for catalog introspection.

    All methods are async -- callers must ``await`` every operation.
    The connection is acquired on ``__aenter__`` and released on
    ``__aexit__``, including when the block raises.
    """

    async def __aenter__(self) -> "CatalogClient":
        """Open the connection."""
        ...

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Close the connection unconditionally."""
        ...

    async def fetch_all(self, sql: str) -> list[dict[str, Any]]:
        """Run a read-only query and return every row.

        Args:
            sql: Query text.  No bind parameters -- catalog queries are
                fixed strings.

        Returns:
            List of dicts keyed by the query's column aliases.

        Raises:
            Exception: Driver errors propagate unmodified.
        """
        ...

    async def test_connection(self) -> bool:
        """Run a trivial query (``SELECT 1``) to verify the connection.

        Returns:
            ``True`` if the query returned 1.
        """
        ...
