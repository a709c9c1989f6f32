"""Database engine creation and schema migration."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import Connection, event, inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from pantry_store.errors import StorageMigrationError
from pantry_store.models import Base

logger = logging.getLogger(__name__)


def create_engine(database_url: str, *, echo: bool = False, pool_size: int = 1) -> AsyncEngine:
    """Create an async engine for ``database_url``.

    SQLite connections get foreign key enforcement and explicit
    ``BEGIN IMMEDIATE`` transactions. The pysqlite driver would otherwise
    defer BEGIN until the first write, which breaks savepoints and lets
    another process write between our read and our insert.
    """
    if database_url.startswith("sqlite"):
        engine = create_async_engine(database_url, echo=echo)
        _configure_sqlite(engine)
    else:
        engine = create_async_engine(database_url, echo=echo, pool_size=pool_size)
    return engine


def _configure_sqlite(engine: AsyncEngine) -> None:
    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection: Any, connection_record: Any) -> None:
        # Hand transaction control to SQLAlchemy.
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn: Connection) -> None:
        conn.exec_driver_sql("BEGIN IMMEDIATE")


async def migrate(engine: AsyncEngine) -> list[str]:
    """Create missing tables and check existing ones against the models.

    Safe to run on every start: tables that already exist are left alone.
    Columns are never added or altered here.

    Returns:
        Descriptions of the migration actions taken, empty if none.

    Raises:
        StorageMigrationError: If an existing table lacks a column the models
            require, or the schema could not be created.
    """
    try:
        async with engine.begin() as conn:
            actions = await conn.run_sync(_migrate_sync)
    except SQLAlchemyError as exc:
        raise StorageMigrationError(f"Failed to migrate storage schema: {exc}") from exc
    for action in actions:
        logger.debug("Migration output: %s", action)
    return actions


def _migrate_sync(conn: Connection) -> list[str]:
    inspector = inspect(conn)
    existing_tables = set(inspector.get_table_names())

    missing_tables = []
    for table in Base.metadata.sorted_tables:
        if table.name not in existing_tables:
            missing_tables.append(table)
            continue
        stored_columns = {column["name"] for column in inspector.get_columns(table.name)}
        missing_columns = sorted(
            column.name for column in table.columns if column.name not in stored_columns
        )
        if missing_columns:
            raise StorageMigrationError(
                f"Table {table.name!r} is missing columns {missing_columns}. "
                "The storage file was written by an incompatible version; "
                "move it aside to rebuild the cache."
            )

    Base.metadata.create_all(conn, tables=missing_tables)
    return [f"CREATE TABLE {table.name}" for table in missing_tables]
