"""Async SQLite access with WAL mode and transaction support.

Uses aiosqlite, which runs SQLite on a dedicated background thread, so
coroutines share one connection. Writers that need several statements to
commit together use ``transaction()``.
"""

from __future__ import annotations

import asyncio
import logging
import sqlite3
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

import aiosqlite

from bodymetrics.db.migrate import run_migrations

logger = logging.getLogger(__name__)


class Database:
    """Single-connection async SQLite database."""

    def __init__(self) -> None:
        self._conn: aiosqlite.Connection | None = None
        self._path: Path | None = None
        self._tx_owner: asyncio.Task | None = None
        self._tx_lock = asyncio.Lock()

    async def init(self, db_path: str | Path) -> None:
        """Open or create the database file and apply pending migrations.

        Args:
            db_path: Path to the SQLite database file.
        """
        self._path = Path(db_path)
        self._path.parent.mkdir(parents=True, exist_ok=True)

        await asyncio.to_thread(run_migrations, self._path)

        self._conn = await aiosqlite.connect(str(self._path))
        self._conn.row_factory = sqlite3.Row
        await self._conn.execute("PRAGMA journal_mode=WAL")
        await self._conn.execute("PRAGMA foreign_keys=ON")

        logger.info("db.initialized", extra={"db_path": str(self._path)})

    @property
    def conn(self) -> aiosqlite.Connection:
        if self._conn is None:
            raise RuntimeError("Database not initialized. Call await db.init() first.")
        return self._conn

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """Atomic read+write block. Rolls back on exception.

        BEGIN IMMEDIATE takes the write lock upfront; the asyncio.Lock
        serializes coroutines sharing the connection. Writes issued by the
        owning task through ``execute_write`` join the open transaction.
        """
        async with self._tx_lock:
            self._tx_owner = asyncio.current_task()
            try:
                await self.conn.execute("BEGIN IMMEDIATE")
                try:
                    yield self.conn
                    await self.conn.commit()
                except Exception:
                    await self.conn.rollback()
                    raise
            finally:
                self._tx_owner = None

    async def execute_write(self, sql: str, params: tuple | list = ()) -> aiosqlite.Cursor:
        """Execute a write statement, committing unless inside transaction()."""
        if self._tx_owner is not None and self._tx_owner is asyncio.current_task():
            return await self.conn.execute(sql, params)

        async with self._tx_lock:
            try:
                cursor = await self.conn.execute(sql, params)
            except sqlite3.Error:
                await self.conn.rollback()
                raise
            await self.conn.commit()
            return cursor

    async def fetchone(self, sql: str, params: tuple | list = ()) -> sqlite3.Row | None:
        cursor = await self.conn.execute(sql, params)
        return await cursor.fetchone()

    async def fetchall(self, sql: str, params: tuple | list = ()) -> list[sqlite3.Row]:
        cursor = await self.conn.execute(sql, params)
        return list(await cursor.fetchall())

    async def close(self) -> None:
        if self._conn:
            await self._conn.close()
            self._conn = None
            logger.info("db.closed", extra={"db_path": str(self._path)})
