"""db-compare: Schema and row-count comparison for SQL Server databases.

Extracts tables, columns, indexes, constraints, triggers and per-table
row counts from a source and a target database and reports every
difference with a High/Medium/Low severity.

Usage:
    from db_compare import ComparisonEngine, compare_schemas, compare_row_counts
    from db_compare import load_db_config, resolve_reference, get_client
"""

__version__ = "0.1.0"

# Adapters
from db_compare.adapters.base import CatalogClient
from db_compare.adapters.sqlserver import AsyncSqlServerClient

# Config
from db_compare.config.loader import load_db_config
from db_compare.config.models import CompareSettings, DatabaseConfig, DatabaseProfile

# Data (row counts)
from db_compare.data.comparator import compare_row_counts
from db_compare.data.models import (
    DataComparisonResult,
    DataDifference,
    DataDifferenceType,
    RowCountTier,
    TableRowCount,
)

# Engine
from db_compare.engine import ComparisonEngine, CompleteComparisonResult
from db_compare.errors import ComparisonError, ConnectivityError, ExtractionError

# Factory
from db_compare.factory import (
    ProfileNotFoundError,
    get_client,
    redact_url,
    resolve_reference,
    resolve_url,
)

# Schema
from db_compare.schema.assembler import assemble
from db_compare.schema.comparator import compare_schemas
from db_compare.schema.models import (
    SchemaComparisonResult,
    SchemaDifference,
    SchemaDifferenceType,
    Severity,
    TableSchema,
)

__all__ = [
    # Adapters
    "CatalogClient",
    "AsyncSqlServerClient",
    # Config
    "load_db_config",
    "CompareSettings",
    "DatabaseConfig",
    "DatabaseProfile",
    # Data
    "compare_row_counts",
    "DataComparisonResult",
    "DataDifference",
    "DataDifferenceType",
    "RowCountTier",
    "TableRowCount",
    # Engine
    "ComparisonEngine",
    "CompleteComparisonResult",
    "ComparisonError",
    "ConnectivityError",
    "ExtractionError",
    # Factory
    "ProfileNotFoundError",
    "get_client",
    "redact_url",
    "resolve_reference",
    "resolve_url",
    # Schema
    "assemble",
    "compare_schemas",
    "SchemaComparisonResult",
    "SchemaDifference",
    "SchemaDifferenceType",
    "Severity",
    "TableSchema",
]
