"""Deadline-bounded client for the external quote API.

One GET per call, no query parameters, no retry. The whole exchange, body
read included, runs under a child deadline capped at the upstream budget
(200ms by default) whatever the caller's own deadline is.

Response shape (AwesomeAPI "last" endpoint):
    {"USDBRL": {"code": "USD", "codein": "BRL", "bid": "5.4321", ...}}
"""

import time

import httpx

from cotacao.config import UpstreamSettings
from cotacao.deadline import Deadline
from cotacao.exceptions import (
    DeadlineExceededError,
    DecodeError,
    RequestConstructionError,
    TransportError,
)
from cotacao.logging import get_logger
from cotacao.models import Quote

logger = get_logger(__name__)


class UpstreamFetcher:
    """Fetches the latest quote for the configured currency pair.

    The httpx.AsyncClient is owned by the caller (the server lifespan) and
    shared by all concurrent requests.
    """

    def __init__(self, settings: UpstreamSettings, http_client: httpx.AsyncClient) -> None:
        self._settings = settings
        self._http = http_client

    async def fetch(self, parent: Deadline) -> Quote:
        """Fetch and decode one quote.

        Raises:
            RequestConstructionError: The configured URL cannot be requested.
            DeadlineExceededError: The upstream budget ran out.
            TransportError: Network failure or non-2xx status.
            DecodeError: Body is not the expected JSON envelope.
        """
        deadline = parent.child(self._settings.timeout_seconds, hop="upstream")
        url = self._settings.url
        started = time.monotonic()

        try:
            request = self._http.build_request("GET", url)
        except httpx.InvalidURL as exc:
            logger.error("upstream_request_invalid", url=url, error=str(exc))
            raise RequestConstructionError(f"cannot build request for {url}: {exc}") from exc

        try:
            async with deadline.enforce():
                response = await self._http.send(request)
        except DeadlineExceededError:
            logger.error(
                "upstream_deadline_exceeded",
                url=url,
                budget_ms=round(self._settings.timeout_seconds * 1000),
            )
            raise
        except httpx.UnsupportedProtocol as exc:
            logger.error("upstream_request_invalid", url=url, error=str(exc))
            raise RequestConstructionError(f"cannot request {url}: {exc}") from exc
        except httpx.HTTPError as exc:
            logger.error("upstream_transport_error", url=url, error=str(exc))
            raise TransportError(f"upstream request failed: {exc}") from exc

        if response.is_error:
            logger.error("upstream_bad_status", url=url, status=response.status_code)
            raise TransportError(f"upstream answered {response.status_code}")

        quote = self._decode(response)
        logger.debug(
            "upstream_quote_fetched",
            code=quote.code,
            codein=quote.codein,
            bid=quote.bid,
            elapsed_ms=round((time.monotonic() - started) * 1000, 1),
        )
        return quote

    def _decode(self, response: httpx.Response) -> Quote:
        """Decode the pair envelope into a Quote.

        Only the structure is checked; field values are trusted as sent.
        """
        key = self._settings.response_key
        try:
            payload = response.json()
        except ValueError as exc:
            logger.error("upstream_decode_failed", reason="invalid_json", error=str(exc))
            raise DecodeError(f"upstream body is not JSON: {exc}") from exc

        inner = payload.get(key) if isinstance(payload, dict) else None
        if not isinstance(inner, dict):
            logger.error("upstream_decode_failed", reason="missing_envelope", key=key)
            raise DecodeError(f"upstream body has no {key!r} object")

        try:
            return Quote.from_api(inner)
        except TypeError as exc:
            logger.error("upstream_decode_failed", reason="bad_field", error=str(exc))
            raise DecodeError(f"upstream {key!r} object malformed: {exc}") from exc
