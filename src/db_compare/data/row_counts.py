"""Per-table row-count extraction with tiered query fallback.

Strategies are tried in order and the first one that succeeds is used:

1. ``primary``  -- sys.partitions for the heap / clustered index, summed.
2. ``fallback`` -- partitions joined to sys.indexes (different join shape,
   survives some permission and catalog-view differences).
3. ``simple``   -- INFORMATION_SCHEMA table listing with every count 0.
   This is a visible degradation, not a claim that tables are empty.

Each failure is logged and swallowed; only when every strategy fails is
``ExtractionError`` raised.  Results never mix tiers.

Usage:
    async with AsyncSqlServerClient(url) as client:
        extraction = await RowCountReader(client).extract()
    if extraction.degraded:
        ...
"""

import logging
from typing import NamedTuple

from db_compare.adapters.base import CatalogClient
from db_compare.data.models import RowCountExtraction, RowCountTier, TableRowCount
from db_compare.errors import ExtractionError
from db_compare.queries import (
    ROW_COUNT_QUERY,
    ROW_COUNT_QUERY_FALLBACK,
    ROW_COUNT_QUERY_SIMPLE,
)

logger = logging.getLogger(__name__)


class RowCountStrategy(NamedTuple):
    tier: RowCountTier
    query: str


DEFAULT_STRATEGIES: tuple[RowCountStrategy, ...] = (
    RowCountStrategy(RowCountTier.PRIMARY, ROW_COUNT_QUERY),
    RowCountStrategy(RowCountTier.FALLBACK, ROW_COUNT_QUERY_FALLBACK),
    RowCountStrategy(RowCountTier.SIMPLE, ROW_COUNT_QUERY_SIMPLE),
)


class RowCountReader:
    """Extracts table row counts through an open ``CatalogClient``.

    Args:
        client: Open catalog client (owned by the caller).
        strategies: Ordered strategies; defaults to primary, fallback,
            simple.
    """

    def __init__(
        self,
        client: CatalogClient,
        strategies: tuple[RowCountStrategy, ...] = DEFAULT_STRATEGIES,
    ):
        self._client = client
        self._strategies = strategies

    async def extract(self) -> RowCountExtraction:
        """Run the first strategy that succeeds.

        Returns:
            ``RowCountExtraction`` with the tier used and its counts.

        Raises:
            ExtractionError: If every strategy failed.
        """
        last_error: Exception | None = None

        for strategy in self._strategies:
            try:
                rows = await self._client.fetch_all(strategy.query)
                counts = [TableRowCount.model_validate(row) for row in rows]
            except Exception as e:
                logger.warning(f"Row count query '{strategy.tier}' failed: {e}")
                last_error = e
                continue

            if strategy.tier == RowCountTier.SIMPLE:
                logger.warning(
                    "Using simple row count query - row counts will be 0 "
                    "(table structure only)"
                )
            logger.info(
                f"Row count query '{strategy.tier}' returned {len(counts)} tables"
            )
            return RowCountExtraction(tier=strategy.tier, counts=counts)

        raise ExtractionError(
            f"Failed to execute any row count query: {last_error}"
        ) from last_error


async def extract_row_counts(client: CatalogClient) -> list[TableRowCount]:
    """Convenience wrapper returning only the counts."""
    extraction = await RowCountReader(client).extract()
    return extraction.counts
