"""Quote store -- SQLite connection management and deadline-bounded upserts."""

from cotacao.store.database import QuoteDatabase
from cotacao.store.persister import QuotePersister, SqliteQuotePersister

__all__ = ["QuoteDatabase", "QuotePersister", "SqliteQuotePersister"]
