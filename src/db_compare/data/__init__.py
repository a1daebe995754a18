"""Row-count extraction and data comparison.

Usage:
    from db_compare.data import RowCountReader, compare_row_counts
"""

from db_compare.data.comparator import (
    classify,
    compare_row_counts,
    percentage_difference,
    sort_differences,
)
from db_compare.data.models import (
    DataComparisonResult,
    DataDifference,
    DataDifferenceType,
    RowCountExtraction,
    RowCountTier,
    TableRowCount,
)
from db_compare.data.row_counts import (
    DEFAULT_STRATEGIES,
    RowCountReader,
    RowCountStrategy,
    extract_row_counts,
)

__all__ = [
    "classify",
    "compare_row_counts",
    "percentage_difference",
    "sort_differences",
    "DataComparisonResult",
    "DataDifference",
    "DataDifferenceType",
    "RowCountExtraction",
    "RowCountTier",
    "TableRowCount",
    "DEFAULT_STRATEGIES",
    "RowCountReader",
    "RowCountStrategy",
    "extract_row_counts",
]
