"""Comparison orchestrator: the public entry point of the engine.

``ComparisonEngine`` probes both databases, extracts both sides
sequentially (source first), runs the matching differ and returns its
result.  Every database connection is scoped to one ``async with``
block, so it is released even when a query fails.

Usage:
    from db_compare.engine import ComparisonEngine

    engine = ComparisonEngine()
    schema_result = await engine.compare_schemas(source_url, target_url)
    data_result = await engine.compare_data(source_url, target_url)

    # Both, with independent failure handling
    result = await engine.compare(source_url, target_url)
    print(result.to_json())
"""

import logging
from collections.abc import Callable

from pydantic import Field, computed_field

from db_compare.adapters.base import CatalogClient
from db_compare.adapters.sqlserver import AsyncSqlServerClient
from db_compare.data.comparator import compare_row_counts
from db_compare.data.models import DataComparisonResult, RowCountExtraction
from db_compare.data.row_counts import RowCountReader
from db_compare.errors import ConnectivityError, ExtractionError
from db_compare.factory import redact_url
from db_compare.schema.comparator import compare_schemas
from db_compare.schema.introspector import SchemaIntrospector
from db_compare.schema.models import ComparisonModel, SchemaComparisonResult, TableSchema

logger = logging.getLogger(__name__)

SOURCE = "source"
TARGET = "target"


class CompleteComparisonResult(ComparisonModel):
    """Schema and/or data comparison results with combined totals.

    A comparison that was not requested, or that failed, is ``None``;
    failures are described in ``errors``.
    """

    schema_comparison: SchemaComparisonResult | None = None
    data_comparison: DataComparisonResult | None = None
    errors: list[str] = Field(default_factory=list)

    @computed_field(alias="schemaDifferences")
    @property
    def schema_differences(self) -> int:
        return self.schema_comparison.total_differences if self.schema_comparison else 0

    @computed_field(alias="dataDifferences")
    @property
    def data_differences(self) -> int:
        return self.data_comparison.total_differences if self.data_comparison else 0

    @computed_field(alias="totalDifferences")
    @property
    def total_differences(self) -> int:
        return self.schema_differences + self.data_differences

    @property
    def succeeded(self) -> bool:
        return not self.errors


class ComparisonEngine:
    """Compares the schema and row counts of two databases.

    Holds no state between calls; every comparison opens and closes its
    own connections.

    Args:
        connect: Callable turning a connection URL into an unopened
            ``CatalogClient``.  Defaults to ``AsyncSqlServerClient``.
    """

    def __init__(
        self,
        connect: Callable[[str], CatalogClient] = AsyncSqlServerClient,
    ) -> None:
        self._connect = connect

    # ------------------------------------------------------------------
    # Connectivity
    # ------------------------------------------------------------------

    async def test_connection(self, database_url: str) -> bool:
        """Open a connection and run ``SELECT 1``.

        Returns:
            ``True`` on success, ``False`` on any failure (logged, never
            raised).
        """
        logger.info(f"Testing connection: {redact_url(database_url)}")
        try:
            async with self._connect(database_url) as client:
                success = await client.test_connection()
        except Exception as e:
            logger.error(f"Connection test failed: {e}")
            return False
        logger.info(f"Connection test {'successful' if success else 'failed'}")
        return success

    async def _probe_both(
        self, source_url: str, target_url: str, purpose: str
    ) -> None:
        for side, url in ((SOURCE, source_url), (TARGET, target_url)):
            logger.info(f"Testing {side} database connection for {purpose}...")
            if not await self.test_connection(url):
                raise ConnectivityError(
                    side, f"Failed to connect to {side} database for {purpose}"
                )

    # ------------------------------------------------------------------
    # Extraction
    # ------------------------------------------------------------------

    async def extract_schema(self, database_url: str) -> list[TableSchema]:
        """Extract the full schema of one database."""
        async with self._connect(database_url) as client:
            return await SchemaIntrospector(client).introspect()

    async def extract_row_counts(self, database_url: str) -> RowCountExtraction:
        """Extract per-table row counts of one database."""
        async with self._connect(database_url) as client:
            return await RowCountReader(client).extract()

    # ------------------------------------------------------------------
    # Comparisons
    # ------------------------------------------------------------------

    async def compare_schemas(
        self, source_url: str, target_url: str
    ) -> SchemaComparisonResult:
        """Compare the schemas of two databases.

        Raises:
            ConnectivityError: If either database fails the probe; nothing
                is extracted in that case.
            ExtractionError: If a catalog query fails.
        """
        logger.info("Starting schema comparison")
        await self._probe_both(source_url, target_url, "schema comparison")

        try:
            logger.info("Extracting source database schema...")
            source_tables = await self.extract_schema(source_url)
            logger.info(f"Source schema extracted: {len(source_tables)} tables")

            logger.info("Extracting target database schema...")
            target_tables = await self.extract_schema(target_url)
            logger.info(f"Target schema extracted: {len(target_tables)} tables")
        except Exception as e:
            raise ExtractionError(f"Schema extraction failed: {e}") from e

        result = compare_schemas(source_tables, target_tables)
        logger.info(
            f"Schema comparison completed. Found {result.total_differences} differences"
        )
        return result

    async def compare_data(
        self, source_url: str, target_url: str
    ) -> DataComparisonResult:
        """Compare per-table row counts of two databases.

        Raises:
            ConnectivityError: If either database fails the probe.
            ExtractionError: If no row-count query succeeds on a side.
        """
        logger.info("Starting data comparison (row counts)")
        await self._probe_both(source_url, target_url, "data comparison")

        try:
            logger.info("Extracting source database row counts...")
            source = await self.extract_row_counts(source_url)
            logger.info(f"Source row counts extracted: {len(source.counts)} tables")

            logger.info("Extracting target database row counts...")
            target = await self.extract_row_counts(target_url)
            logger.info(f"Target row counts extracted: {len(target.counts)} tables")
        except ExtractionError:
            raise
        except Exception as e:
            raise ExtractionError(f"Row count extraction failed: {e}") from e

        warnings = [
            f"{side.capitalize()} row counts come from the simple table listing; "
            f"all {side} counts are reported as 0"
            for side, extraction in ((SOURCE, source), (TARGET, target))
            if extraction.degraded
        ]

        result = compare_row_counts(source.counts, target.counts).model_copy(
            update={
                "source_count_tier": source.tier,
                "target_count_tier": target.tier,
                "warnings": warnings,
            }
        )
        logger.info(
            f"Data comparison completed: {result.total_differences} differences found"
        )
        return result

    async def compare(
        self,
        source_url: str,
        target_url: str,
        schema: bool = True,
        data: bool = True,
    ) -> CompleteComparisonResult:
        """Run the selected comparisons independently.

        A failure in one comparison is recorded in ``errors`` and does not
        discard the other's result.

        Raises:
            ValueError: If neither comparison is selected.
        """
        if not schema and not data:
            raise ValueError("Select at least one of schema or data comparison")

        schema_result: SchemaComparisonResult | None = None
        data_result: DataComparisonResult | None = None
        errors: list[str] = []

        if schema:
            try:
                schema_result = await self.compare_schemas(source_url, target_url)
            except (ConnectivityError, ExtractionError) as e:
                logger.error(f"Schema comparison failed: {e}")
                errors.append(f"Schema comparison failed: {e}")

        if data:
            try:
                data_result = await self.compare_data(source_url, target_url)
            except (ConnectivityError, ExtractionError) as e:
                logger.error(f"Data comparison failed: {e}")
                errors.append(f"Data comparison failed: {e}")

        return CompleteComparisonResult(
            schema_comparison=schema_result,
            data_comparison=data_result,
            errors=errors,
        )
