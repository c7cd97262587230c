"""Entry point for the quote service.

Wires the components, then serves GET /cotacao with uvicorn's programmatic
API. The FastAPI lifespan owns every process-lifetime resource:

1. AppSettings (configuration)
2. Logging setup
3. httpx.AsyncClient shared by all upstream calls
4. QuoteDatabase + SqliteQuotePersister (skipped when STORE_ENABLED=false)
5. UpstreamFetcher
6. QuoteService

SIGINT/SIGTERM are handled by uvicorn, which runs the lifespan shutdown.
"""

import asyncio
from contextlib import asynccontextmanager

import httpx
import uvicorn
from fastapi import FastAPI

from cotacao.config import AppSettings
from cotacao.logging import get_logger, setup_logging
from cotacao.service.app import create_app
from cotacao.service.handler import QuoteService
from cotacao.store.database import QuoteDatabase
from cotacao.store.persister import SqliteQuotePersister
from cotacao.upstream.fetcher import UpstreamFetcher


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the shared HTTP client and store, build the service, clean up after."""
    logger = get_logger("cotacao.server")
    settings: AppSettings = app.state.settings

    # Deadlines bound every upstream call; httpx's own timeouts stay out of the way.
    http_client = httpx.AsyncClient(timeout=None)

    database: QuoteDatabase | None = None
    persister: SqliteQuotePersister | None = None
    if settings.store.enabled:
        database = QuoteDatabase(settings.store.db_path)
        await database.connect()
        persister = SqliteQuotePersister(database, settings.store)

    fetcher = UpstreamFetcher(settings.upstream, http_client)
    app.state.quote_service = QuoteService(fetcher, persister)

    logger.info(
        "quote_service_started",
        upstream=settings.upstream.url,
        persisting=settings.store.enabled,
        upstream_budget_ms=round(settings.upstream.timeout_seconds * 1000),
        store_budget_ms=round(settings.store.timeout_seconds * 1000),
    )

    try:
        yield
    finally:
        await http_client.aclose()
        if database is not None:
            await database.close()
        logger.info("quote_service_stopped")


async def run(settings: AppSettings | None = None) -> None:
    """Serve the quote service until interrupted."""
    settings = settings or AppSettings()

    setup_logging(settings.log_level)
    logger = get_logger("cotacao.server")

    app = create_app(lifespan=lifespan)
    app.state.settings = settings

    logger.info(
        "starting_quote_service",
        host=settings.server.host,
        port=settings.server.port,
    )

    config = uvicorn.Config(
        app,
        host=settings.server.host,
        port=settings.server.port,
        log_level="warning",  # Suppress uvicorn access logs
    )
    server = uvicorn.Server(config)
    await server.serve()


def main() -> None:
    """Synchronous entry point."""
    asyncio.run(run())


if __name__ == "__main__":
    main()
