import asyncio
import logging
import os
import sqlite3
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import aiosqlite

from fleet_usage.config import config

logger = logging.getLogger(__name__)

Params = Union[Tuple, Dict[str, Any], None]


class Database:
    """Asynchronous SQLite database wrapper."""

    def __init__(self, db_path: Optional[Union[str, Path]] = None):
        """Initialize the database."""
        self._db_path = Path(db_path) if db_path else config.db_file()
        self._conn: Optional[aiosqlite.Connection] = None
        self._initialized = False
        self._lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        return self._db_path

    async def initialize(self) -> None:
        """Initialize the database connection and schema."""
        os.makedirs(self._db_path.parent, exist_ok=True)

        async with self._lock:
            if self._initialized:
                return

            logger.info(f"Initializing database at {self._db_path}")

            self._conn = await aiosqlite.connect(self._db_path)
            self._conn.row_factory = sqlite3.Row

            # WAL keeps readers from blocking the single writer
            await self._conn.execute("PRAGMA journal_mode = WAL")

            await self._create_tables()

            self._initialized = True
            logger.info("Database initialization complete")

    async def close(self) -> None:
        """Close the database connection."""
        async with self._lock:
            if self._conn:
                await self._conn.close()
                self._conn = None
                self._initialized = False
                logger.info("Database connection closed")

    async def _create_tables(self) -> None:
        """Create the database tables if they don't exist."""
        conn = self._require_connection()

        await conn.execute("""
        CREATE TABLE IF NOT EXISTS drivers (
            id TEXT PRIMARY KEY,
            name TEXT NOT NULL
        )
        """)

        await conn.execute("""
        CREATE TABLE IF NOT EXISTS automobiles (
            id TEXT PRIMARY KEY,
            license_plate TEXT NOT NULL UNIQUE,
            brand TEXT NOT NULL,
            color TEXT NOT NULL
        )
        """)

        # Driver and automobile columns are snapshots, not foreign keys
        await conn.execute("""
        CREATE TABLE IF NOT EXISTS automobile_usages (
            id TEXT PRIMARY KEY,
            start_date TEXT NOT NULL,
            end_date TEXT,
            reason TEXT NOT NULL,
            driver_id TEXT NOT NULL,
            driver_name TEXT NOT NULL,
            automobile_id TEXT NOT NULL,
            license_plate TEXT NOT NULL,
            brand TEXT NOT NULL,
            color TEXT NOT NULL
        )
        """)

        # At most one open usage per driver
        await conn.execute("""
        CREATE UNIQUE INDEX IF NOT EXISTS idx_automobile_usages_open_driver
        ON automobile_usages (driver_id) WHERE end_date IS NULL
        """)
        await conn.execute("CREATE INDEX IF NOT EXISTS idx_drivers_name ON drivers (name)")

        await conn.commit()

    def _require_connection(self) -> aiosqlite.Connection:
        if not self._conn:
            raise RuntimeError("Database not initialized")
        return self._conn

    async def execute_and_fetchall(self, query: str, params: Params = None) -> List[sqlite3.Row]:
        """Execute a SQL query and fetch all results."""
        conn = self._require_connection()

        async with self._lock:
            cursor = await conn.execute(query, params or ())
            return await cursor.fetchall()

    async def execute_and_fetchone(self, query: str, params: Params = None) -> Optional[sqlite3.Row]:
        """Execute a SQL query and fetch one result."""
        conn = self._require_connection()

        async with self._lock:
            cursor = await conn.execute(query, params or ())
            return await cursor.fetchone()

    def transaction(self) -> "Transaction":
        """Context manager for a transaction.

        The database lock is held for the whole block, so statements inside it
        must go through the yielded Transaction rather than the Database.
        """
        return Transaction(self)


class Transaction:
    """A unit of work that commits on success and rolls back on error."""

    def __init__(self, db: Database):
        self._db = db
        self._conn: Optional[aiosqlite.Connection] = None

    async def __aenter__(self) -> "Transaction":
        await self._db._lock.acquire()
        try:
            self._conn = self._db._require_connection()
        except RuntimeError:
            self._db._lock.release()
            raise
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        try:
            if exc_type is not None:
                await self._conn.rollback()
            else:
                await self._conn.commit()
        finally:
            self._conn = None
            self._db._lock.release()

    async def execute(self, query: str, params: Params = None) -> int:
        """Execute a statement and return the number of affected rows."""
        cursor = await self._conn.execute(query, params or ())
        return cursor.rowcount

    async def fetchone(self, query: str, params: Params = None) -> Optional[sqlite3.Row]:
        cursor = await self._conn.execute(query, params or ())
        return await cursor.fetchone()

    async def fetchall(self, query: str, params: Params = None) -> List[sqlite3.Row]:
        cursor = await self._conn.execute(query, params or ())
        return await cursor.fetchall()
