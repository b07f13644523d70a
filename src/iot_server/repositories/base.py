"""Shared helpers for repositories that run inside a caller-owned transaction."""
from __future__ import annotations

from typing import Any, List

from asyncpg import Connection, Record  # type: ignore[import-untyped]


class BaseRepository:
    """Thin wrappers over asyncpg; every call runs on the connection it is given."""

    @staticmethod
    async def _fetchrow(conn: Connection, query: str, *args: Any) -> Record | None:
        return await conn.fetchrow(query, *args)

    @staticmethod
    async def _fetch(conn: Connection, query: str, *args: Any) -> List[Record]:
        return await conn.fetch(query, *args)

    @staticmethod
    async def _fetchval(conn: Connection, query: str, *args: Any) -> Any:
        return await conn.fetchval(query, *args)

    @staticmethod
    async def _execute(conn: Connection, query: str, *args: Any) -> str:
        return await conn.execute(query, *args)
