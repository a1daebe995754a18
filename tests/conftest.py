"""Shared fixtures: an in-memory catalog client keyed by SQL text."""

from typing import Any

import pytest

from db_compare.queries import (
    COLUMNS_QUERY,
    CONSTRAINTS_QUERY,
    INDEXES_QUERY,
    ROW_COUNT_QUERY,
    ROW_COUNT_QUERY_FALLBACK,
    ROW_COUNT_QUERY_SIMPLE,
    TABLES_QUERY,
    TRIGGERS_QUERY,
)


class FakeCatalogClient:
    """``CatalogClient`` that answers fixed queries from a dict.

    A response that is an exception instance is raised instead of
    returned.  Unknown queries return no rows.
    """

    def __init__(
        self,
        responses: dict[str, Any] | None = None,
        healthy: bool = True,
        fail_on_enter: Exception | None = None,
    ) -> None:
        self.responses = responses or {}
        self.healthy = healthy
        self.fail_on_enter = fail_on_enter
        self.queries: list[str] = []
        self.entered = 0
        self.exited = 0

    async def __aenter__(self) -> "FakeCatalogClient":
        if self.fail_on_enter is not None:
            raise self.fail_on_enter
        self.entered += 1
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        self.exited += 1

    async def fetch_all(self, sql: str) -> list[dict[str, Any]]:
        self.queries.append(sql)
        response = self.responses.get(sql, [])
        if isinstance(response, Exception):
            raise response
        return response

    async def test_connection(self) -> bool:
        return self.healthy


def catalog_responses(
    tables: list[dict] | None = None,
    columns: list[dict] | None = None,
    indexes: list[dict] | None = None,
    constraints: list[dict] | None = None,
    triggers: list[dict] | None = None,
    row_counts: list[dict] | None = None,
) -> dict[str, Any]:
    """Build a response map for one database."""
    return {
        TABLES_QUERY: tables or [],
        COLUMNS_QUERY: columns or [],
        INDEXES_QUERY: indexes or [],
        CONSTRAINTS_QUERY: constraints or [],
        TRIGGERS_QUERY: triggers or [],
        ROW_COUNT_QUERY: row_counts or [],
    }


@pytest.fixture
def fake_client_cls() -> type[FakeCatalogClient]:
    return FakeCatalogClient


@pytest.fixture
def make_responses():
    return catalog_responses


@pytest.fixture
def row_count_queries() -> tuple[str, str, str]:
    return ROW_COUNT_QUERY, ROW_COUNT_QUERY_FALLBACK, ROW_COUNT_QUERY_SIMPLE
