"""Catalog clients: protocol and SQL Server implementation."""

from db_compare.adapters.base import CatalogClient
from db_compare.adapters.sqlserver import AsyncSqlServerClient

__all__ = ["CatalogClient", "AsyncSqlServerClient"]
