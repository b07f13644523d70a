"""Database maintenance commands: create the schema or reset the database."""
from __future__ import annotations

import argparse
import asyncio
from pathlib import Path

import asyncpg  # type: ignore[import-untyped]
import structlog

from iot_server.logging_config import configure_logging
from iot_server.settings import settings

logger = structlog.get_logger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parent / "schema.sql"


def split_dsn(dsn: str) -> tuple[str, str]:
    """Split a DSN into (maintenance DSN pointing at ``postgres``, database name)."""
    base, _, tail = dsn.rpartition("/")
    if not base or "://" not in base:
        raise ValueError(f"DSN has no database name: {dsn}")
    name, sep, query = tail.partition("?")
    if not name:
        raise ValueError(f"DSN has no database name: {dsn}")
    return f"{base}/postgres{sep}{query}", name


async def apply_schema(dsn: str, schema_path: Path = SCHEMA_PATH) -> None:
    conn = await asyncpg.connect(dsn=dsn)
    try:
        await conn.execute(schema_path.read_text(encoding="utf-8"))
    finally:
        await conn.close()
    logger.info("schema_applied", schema=str(schema_path))


async def reset_database(dsn: str, schema_path: Path = SCHEMA_PATH) -> None:
    """Drop and recreate the database, then apply the schema."""
    admin_dsn, name = split_dsn(dsn)
    conn = await asyncpg.connect(dsn=admin_dsn)
    try:
        await conn.execute(
            """
            SELECT pg_terminate_backend(pg_stat_activity.pid)
            FROM pg_stat_activity
            WHERE pg_stat_activity.datname = $1
              AND pid <> pg_backend_pid()
            """,
            name,
        )
        quoted = '"' + name.replace('"', '""') + '"'
        await conn.execute(f"DROP DATABASE IF EXISTS {quoted}")
        await conn.execute(f"CREATE DATABASE {quoted}")
    finally:
        await conn.close()
    logger.info("database_recreated", database=name)
    await apply_schema(dsn, schema_path)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="iot-server-db")
    parser.add_argument(
        "command",
        choices=("init", "reset"),
        help="init: apply schema; reset: drop, recreate and apply schema",
    )
    parser.add_argument("--dsn", default=None, help="Database URL (defaults to settings)")
    parser.add_argument("--schema", type=Path, default=SCHEMA_PATH, help="Path to schema SQL")
    args = parser.parse_args(argv)

    configure_logging(settings.log_level, json=settings.log_json)
    dsn = args.dsn or str(settings.database_url)
    if args.command == "reset":
        asyncio.run(reset_database(dsn, args.schema))
    else:
        asyncio.run(apply_schema(dsn, args.schema))


if __name__ == "__main__":
    main()
