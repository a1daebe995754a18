"""Tests for the async SQL Server catalog client.

The SQLAlchemy engine is mocked; no ODBC driver is needed.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from db_compare.adapters.sqlserver import AsyncSqlServerClient, normalize_url
from db_compare.adapters.base import CatalogClient


class TestNormalizeUrl:
    """Verify scheme normalization to mssql+aioodbc."""

    def test_plain_mssql(self) -> None:
        assert normalize_url("mssql://u:p@h/db") == "mssql+aioodbc://u:p@h/db"

    def test_pyodbc(self) -> None:
        assert normalize_url("mssql+pyodbc://u:p@h/db") == "mssql+aioodbc://u:p@h/db"

    def test_already_async(self) -> None:
        assert normalize_url("mssql+aioodbc://u:p@h/db") == "mssql+aioodbc://u:p@h/db"

    def test_raw_odbc_string(self) -> None:
        url = normalize_url("Driver={ODBC Driver 18 for SQL Server};Server=h")
        assert url.startswith("mssql+aioodbc:///?odbc_connect=")
        assert ";" not in url


def _mock_engine(conn: MagicMock | None = None, connect_error: Exception | None = None):
    engine = MagicMock()
    engine.dispose = AsyncMock()
    if connect_error is not None:
        engine.connect = AsyncMock(side_effect=connect_error)
    else:
        engine.connect = AsyncMock(return_value=conn)
    return engine


class TestAsyncSqlServerClient:
    """Verify connection lifecycle and query helpers."""

    def test_satisfies_protocol_shape(self) -> None:
        for name in ("__aenter__", "__aexit__", "fetch_all", "test_connection"):
            assert hasattr(AsyncSqlServerClient, name)
            assert hasattr(CatalogClient, name)

    @pytest.mark.asyncio
    async def test_not_connected(self) -> None:
        client = AsyncSqlServerClient("mssql://u:p@h/db")
        with pytest.raises(RuntimeError, match="not connected"):
            await client.fetch_all("SELECT 1")
        with pytest.raises(RuntimeError, match="not connected"):
            await client.test_connection()

    @pytest.mark.asyncio
    async def test_engine_created_with_null_pool_and_timeout(self) -> None:
        conn = MagicMock()
        conn.close = AsyncMock()
        engine = _mock_engine(conn)

        with patch(
            "db_compare.adapters.sqlserver.create_async_engine", return_value=engine
        ) as mock_create:
            async with AsyncSqlServerClient("mssql://u:p@h/db", connect_timeout=3):
                pass

        args, kwargs = mock_create.call_args
        assert args[0] == "mssql+aioodbc://u:p@h/db"
        assert kwargs["connect_args"] == {"timeout": 3}
        assert kwargs["poolclass"].__name__ == "NullPool"
        conn.close.assert_awaited_once()
        engine.dispose.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_released_when_block_raises(self) -> None:
        conn = MagicMock()
        conn.close = AsyncMock()
        engine = _mock_engine(conn)

        with patch("db_compare.adapters.sqlserver.create_async_engine", return_value=engine):
            with pytest.raises(ValueError):
                async with AsyncSqlServerClient("mssql://u:p@h/db"):
                    raise ValueError("query blew up")

        conn.close.assert_awaited_once()
        engine.dispose.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_engine_disposed_when_connect_fails(self) -> None:
        engine = _mock_engine(connect_error=OSError("login timeout"))

        with patch("db_compare.adapters.sqlserver.create_async_engine", return_value=engine):
            with pytest.raises(OSError):
                async with AsyncSqlServerClient("mssql://u:p@h/db"):
                    pass

        engine.dispose.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_fetch_all_returns_dicts(self) -> None:
        result = MagicMock()
        result.mappings.return_value.all.return_value = [
            {"schema_name": "dbo", "table_name": "Users"}
        ]
        conn = MagicMock()
        conn.execute = AsyncMock(return_value=result)
        conn.close = AsyncMock()

        with patch(
            "db_compare.adapters.sqlserver.create_async_engine",
            return_value=_mock_engine(conn),
        ):
            async with AsyncSqlServerClient("mssql://u:p@h/db") as client:
                rows = await client.fetch_all("SELECT ...")

        assert rows == [{"schema_name": "dbo", "table_name": "Users"}]

    @pytest.mark.asyncio
    async def test_test_connection(self) -> None:
        result = MagicMock()
        result.scalar.return_value = 1
        conn = MagicMock()
        conn.execute = AsyncMock(return_value=result)
        conn.close = AsyncMock()

        with patch(
            "db_compare.adapters.sqlserver.create_async_engine",
            return_value=_mock_engine(conn),
        ):
            async with AsyncSqlServerClient("mssql://u:p@h/db") as client:
                assert await client.test_connection() is True
