"""Exceptions raised by the comparison engine.

``ConnectivityError`` and ``ExtractionError`` are fatal for the comparison
that raised them only; schema and data comparisons fail independently.
A row-count fallback tier being used is not an error -- it is reported as
a warning on the data result.
"""


class ComparisonError(Exception):
    """Base class for comparison failures."""

    pass


class ConnectivityError(ComparisonError):
    """Raised when the source or target database cannot be reached.

    Attributes:
        side: ``"source"`` or ``"target"``.
    """

    def __init__(self, side: str, message: str | None = None) -> None:
        self.side = side
        super().__init__(message or f"Failed to connect to {side} database")


class ExtractionError(ComparisonError):
    """Raised when a catalog query fails with no fallback left."""

    pass
