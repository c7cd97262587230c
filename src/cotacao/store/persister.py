"""Deadline-bounded quote persistence.

QuotePersister is the pluggable interface the service depends on; the
service runs without one in the non-persisting deployment.
SqliteQuotePersister upserts into the shared aiosqlite connection under a
10ms child deadline (by default). Writes are best-effort fast-path only, but
a failed write is never swallowed: the caller decides what it means.

All quote fields are stored as TEXT exactly as received.
"""

from abc import ABC, abstractmethod

import aiosqlite

from cotacao.config import StoreSettings
from cotacao.deadline import Deadline
from cotacao.exceptions import DeadlineExceededError, PersistenceError
from cotacao.logging import get_logger
from cotacao.models import Quote
from cotacao.store.database import QuoteDatabase

logger = get_logger(__name__)

_COLUMNS = Quote.column_names()

# One row per code: a repeated code replaces every column of the old row.
_UPSERT_SQL = (
    f"INSERT OR REPLACE INTO quotes ({', '.join(_COLUMNS)}) "
    f"VALUES ({', '.join('?' for _ in _COLUMNS)})"
)

_SELECT_SQL = f"SELECT {', '.join(_COLUMNS)} FROM quotes WHERE code = ?"


class QuotePersister(ABC):
    """Abstract store for fetched quotes."""

    @abstractmethod
    async def persist(self, parent: Deadline, quote: Quote) -> None:
        """Upsert the quote keyed by its code within the store deadline.

        Raises:
            DeadlineExceededError: The write outlived its deadline.
            PersistenceError: The store rejected the write.
        """
        ...


class SqliteQuotePersister(QuotePersister):
    """QuotePersister backed by the embedded SQLite quote table.

    No locking of its own: concurrent requests share the connection and rely
    on SQLite to apply each upsert atomically.
    """

    def __init__(self, database: QuoteDatabase, settings: StoreSettings) -> None:
        self._database = database
        self._settings = settings

    async def persist(self, parent: Deadline, quote: Quote) -> None:
        deadline = parent.child(self._settings.timeout_seconds, hop="persist")

        if not self._database.is_connected:
            logger.error("quote_persist_failed", code=quote.code, error="not connected")
            raise PersistenceError("quote store is not connected")

        db = self._database.db
        try:
            async with deadline.enforce():
                await db.execute(_UPSERT_SQL, quote.as_row())
                await db.commit()
        except DeadlineExceededError:
            logger.error(
                "quote_persist_deadline_exceeded",
                code=quote.code,
                budget_ms=round(self._settings.timeout_seconds * 1000),
            )
            raise
        except (aiosqlite.Error, ValueError) as exc:
            # aiosqlite raises ValueError once the connection has been closed
            logger.error("quote_persist_failed", code=quote.code, error=str(exc))
            raise PersistenceError(f"failed to store quote {quote.code!r}: {exc}") from exc

        logger.debug("quote_persisted", code=quote.code, bid=quote.bid)

    async def get_quote(self, code: str) -> Quote | None:
        """Return the stored quote for a code, or None."""
        cursor = await self._database.db.execute(_SELECT_SQL, (code,))
        row = await cursor.fetchone()
        if row is None:
            return None
        return Quote.from_row(tuple(row))

    async def count_quotes(self, code: str | None = None) -> int:
        """Count stored rows, optionally for a single code."""
        if code is None:
            cursor = await self._database.db.execute("SELECT COUNT(*) FROM quotes")
        else:
            cursor = await self._database.db.execute(
                "SELECT COUNT(*) FROM quotes WHERE code = ?", (code,)
            )
        row = await cursor.fetchone()
        return int(row[0]) if row else 0
