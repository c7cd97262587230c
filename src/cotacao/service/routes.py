"""HTTP surface of the quote service.

GET /cotacao -> 200 {"bid": "<string>"} as application/json, or a bare 500.
Failure detail never reaches the wire; it is only logged.
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, Response

from cotacao.exceptions import DeadlineExceededError, QuoteError

log = structlog.get_logger(__name__)

router = APIRouter()


@router.get("/cotacao")
async def get_cotacao(request: Request) -> Response:
    """Relay the current bid, or answer 500 with an empty body."""
    service = request.app.state.quote_service

    try:
        bid = await service.current_bid()
    except DeadlineExceededError as exc:
        log.warning("cotacao_failed", reason="deadline", hop=exc.hop)
        return Response(status_code=500)
    except QuoteError as exc:
        log.warning("cotacao_failed", reason=type(exc).__name__)
        return Response(status_code=500)

    return JSONResponse(content=bid.to_dict())
