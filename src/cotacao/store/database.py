"""Async SQLite connection manager for the quote store.

Uses aiosqlite so store writes never block the event loop. One connection is
opened at server startup and shared by every request until shutdown. The
schema is created on connect.
"""

import os
from typing import Self

import aiosqlite

from cotacao.logging import get_logger

logger = get_logger(__name__)

SCHEMA_VERSION = 1

IN_MEMORY = ":memory:"

_CREATE_TABLES_SQL = """
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER PRIMARY KEY
);

CREATE TABLE IF NOT EXISTS quotes (
    code TEXT PRIMARY KEY,
    codein TEXT NOT NULL DEFAULT '',
    name TEXT NOT NULL DEFAULT '',
    high TEXT NOT NULL DEFAULT '',
    low TEXT NOT NULL DEFAULT '',
    var_bid TEXT NOT NULL DEFAULT '',
    pct_change TEXT NOT NULL DEFAULT '',
    bid TEXT NOT NULL DEFAULT '',
    ask TEXT NOT NULL DEFAULT '',
    timestamp TEXT NOT NULL DEFAULT '',
    create_date TEXT NOT NULL DEFAULT ''
);
"""


class QuoteDatabase:
    """Owns the aiosqlite connection and the quote schema.

    Usage:
        async with QuoteDatabase(":memory:") as database:
            persister = SqliteQuotePersister(database, settings.store)

        database = QuoteDatabase("data/quotes.db")
        await database.connect()
        try:
            ...
        finally:
            await database.close()
    """

    def __init__(self, db_path: str = IN_MEMORY) -> None:
        self._db_path = db_path
        self._connection: aiosqlite.Connection | None = None

    @property
    def db(self) -> aiosqlite.Connection:
        """Access the raw aiosqlite connection.

        Raises RuntimeError if not connected.
        """
        if self._connection is None:
            raise RuntimeError("Database not connected. Call connect() first.")
        return self._connection

    @property
    def is_connected(self) -> bool:
        return self._connection is not None

    async def connect(self) -> None:
        """Open the connection and create the schema.

        File databases get their parent directory created and WAL journaling
        so reads are not blocked by the upsert path.
        """
        if self._db_path != IN_MEMORY:
            db_dir = os.path.dirname(self._db_path)
            if db_dir:
                os.makedirs(db_dir, exist_ok=True)

        self._connection = await aiosqlite.connect(self._db_path)

        if self._db_path != IN_MEMORY:
            await self._connection.execute("PRAGMA journal_mode=WAL")
            await self._connection.execute("PRAGMA synchronous=NORMAL")

        await self._create_tables()
        await self._ensure_schema_version()

        logger.info("quote_db_connected", db_path=self._db_path)

    async def close(self) -> None:
        """Close the connection if open."""
        if self._connection is not None:
            await self._connection.close()
            self._connection = None
            logger.info("quote_db_closed", db_path=self._db_path)

    async def _create_tables(self) -> None:
        assert self._connection is not None
        await self._connection.executescript(_CREATE_TABLES_SQL)
        await self._connection.commit()

    async def _ensure_schema_version(self) -> None:
        assert self._connection is not None
        cursor = await self._connection.execute(
            "SELECT version FROM schema_version LIMIT 1"
        )
        row = await cursor.fetchone()
        if row is None:
            await self._connection.execute(
                "INSERT INTO schema_version (version) VALUES (?)",
                (SCHEMA_VERSION,),
            )
            await self._connection.commit()
            logger.info("schema_version_set", version=SCHEMA_VERSION)

    async def __aenter__(self) -> Self:
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # type: ignore[no-untyped-def]
        await self.close()
