"""Helpers shared by the test modules: ids, Supabase query mocks."""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

from supabase import PostgrestAPIError

USER_ID = "11111111-1111-1111-1111-111111111111"
OTHER_USER_ID = "22222222-2222-2222-2222-222222222222"


def chainable_table_mock(data: Any = None, count: int | None = None) -> MagicMock:
    """Return a table mock whose query builders chain back to itself."""
    m = MagicMock()
    for method in (
        "select", "insert", "upsert", "update", "delete", "eq", "in_",
        "order", "range", "limit", "single",
    ):
        getattr(m, method).return_value = m
    m.execute.return_value = MagicMock(data=data, count=count)
    return m


def dispatch_tables(client: MagicMock, tables: dict[str, Any]) -> None:
    """Route ``client.table(name)`` to per-table mocks.

    A list value hands out its mocks one call at a time, for handlers that
    query the same table more than once.
    """
    queues = {
        name: list(mock) if isinstance(mock, list) else mock
        for name, mock in tables.items()
    }

    def table(name: str) -> MagicMock:
        mock = queues[name]
        if isinstance(mock, list):
            return mock.pop(0)
        return mock

    client.table.side_effect = table


def not_found_error() -> PostgrestAPIError:
    """The error PostgREST raises when ``.single()`` matches no rows."""
    return PostgrestAPIError(
        {
            "code": "PGRST116",
            "message": "JSON object requested, multiple (or no) rows returned",
        }
    )
