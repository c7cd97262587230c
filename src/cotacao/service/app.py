"""FastAPI application factory for the quote service."""

from __future__ import annotations

import uuid
from typing import Any

import structlog
from fastapi import FastAPI, Request

from cotacao.service.handler import QuoteService
from cotacao.service.routes import router


def create_app(quote_service: QuoteService | None = None, lifespan: Any = None) -> FastAPI:
    """Create and configure the quote service application.

    Args:
        quote_service: Service instance to serve. May be left out when the
                       lifespan stores one on app.state at startup.
        lifespan: Optional async context manager for startup/shutdown, used by
                  the server entry point to own the HTTP client and database.

    Returns:
        FastAPI app exposing GET /cotacao.
    """
    app = FastAPI(title="Cotacao Quote Service", lifespan=lifespan)
    app.state.quote_service = quote_service

    @app.middleware("http")
    async def bind_request_id(request: Request, call_next):  # type: ignore[no-untyped-def]
        request_id = request.headers.get("x-request-id") or uuid.uuid4().hex
        with structlog.contextvars.bound_contextvars(request_id=request_id):
            response = await call_next(request)
        response.headers["x-request-id"] = request_id
        return response

    app.include_router(router)

    return app
