"""One-shot quote client.

Asks the local quote service for the current bid and writes it to a sink
file as ``Dólar: <bid>``. The whole call runs under a deadline taken at
program start (300ms by default). Every failure is fatal: the single
top-level handler in run() logs it and the process exits with status 1.
The sink is only opened once a bid has been decoded, so a failed run leaves
any previous file untouched.
"""

import asyncio
import sys
from pathlib import Path

import httpx

from cotacao.config import AppSettings, ClientSettings
from cotacao.deadline import Deadline
from cotacao.exceptions import (
    DeadlineExceededError,
    DecodeError,
    QuoteError,
    RequestConstructionError,
    SinkWriteError,
    TransportError,
)
from cotacao.logging import get_logger, setup_logging

logger = get_logger(__name__)

SINK_LABEL = "Dólar"


class QuoteClient:
    """Calls GET /cotacao on the quote service and records the bid."""

    def __init__(self, settings: ClientSettings, http_client: httpx.AsyncClient) -> None:
        self._settings = settings
        self._http = http_client

    async def fetch_bid(self, deadline: Deadline) -> str:
        """Request the current bid within the given deadline.

        Raises:
            RequestConstructionError: The service URL cannot be requested.
            DeadlineExceededError: The client's own budget ran out.
            TransportError: Network failure or non-2xx status.
            DecodeError: Body is not ``{"bid": "<string>"}``.
        """
        url = self._settings.service_url

        try:
            request = self._http.build_request("GET", url)
        except httpx.InvalidURL as exc:
            logger.error("client_request_invalid", url=url, error=str(exc))
            raise RequestConstructionError(f"cannot build request for {url}: {exc}") from exc

        try:
            async with deadline.enforce():
                response = await self._http.send(request)
        except DeadlineExceededError:
            budget_ms = round(self._settings.timeout_seconds * 1000)
            logger.error(
                "client_deadline_exceeded",
                url=url,
                budget_ms=budget_ms,
                detail=f"quote service did not answer within the client's {budget_ms}ms budget",
            )
            raise
        except httpx.UnsupportedProtocol as exc:
            logger.error("client_request_invalid", url=url, error=str(exc))
            raise RequestConstructionError(f"cannot request {url}: {exc}") from exc
        except httpx.HTTPError as exc:
            logger.error("client_transport_error", url=url, error=str(exc))
            raise TransportError(f"quote service request failed: {exc}") from exc

        if response.is_error:
            logger.error("client_bad_status", url=url, status=response.status_code)
            raise TransportError(f"quote service answered {response.status_code}")

        return self._decode_bid(response)

    def _decode_bid(self, response: httpx.Response) -> str:
        try:
            payload = response.json()
        except ValueError as exc:
            logger.error("client_decode_failed", reason="invalid_json", error=str(exc))
            raise DecodeError(f"quote service body is not JSON: {exc}") from exc

        bid = payload.get("bid") if isinstance(payload, dict) else None
        if not isinstance(bid, str):
            logger.error("client_decode_failed", reason="missing_bid")
            raise DecodeError("quote service body has no string 'bid'")
        return bid

    def write_sink(self, bid: str) -> Path:
        """Create or truncate the sink and write ``Dólar: <bid>`` (UTF-8, no newline)."""
        path = Path(self._settings.output_path)
        try:
            path.write_text(f"{SINK_LABEL}: {bid}", encoding="utf-8")
        except OSError as exc:
            logger.error("client_sink_write_failed", path=str(path), error=str(exc))
            raise SinkWriteError(f"cannot write {path}: {exc}") from exc
        return path


async def run(
    settings: AppSettings,
    deadline: Deadline | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> int:
    """Run the client once and return the process exit code.

    Args:
        settings: Application settings; only the client section is used.
        deadline: Deadline taken at program start. Derived here when omitted.
        http_client: Optional client to use (tests inject a mock transport).

    Returns:
        0 when the sink was written, 1 on any failure.
    """
    if deadline is None:
        deadline = Deadline.after(settings.client.timeout_seconds, hop="client")

    owns_client = http_client is None
    if http_client is None:
        http_client = httpx.AsyncClient(timeout=None)

    try:
        client = QuoteClient(settings.client, http_client)
        bid = await client.fetch_bid(deadline)
        path = client.write_sink(bid)
    except QuoteError as exc:
        logger.error("client_failed", error_type=type(exc).__name__, error=str(exc))
        return 1
    finally:
        if owns_client:
            await http_client.aclose()

    logger.info("quote_written", path=str(path), bid=bid)
    return 0


def main() -> None:
    """Synchronous entry point; exits non-zero on any failure."""
    settings = AppSettings()
    deadline = Deadline.after(settings.client.timeout_seconds, hop="client")
    setup_logging(settings.log_level)
    sys.exit(asyncio.run(run(settings, deadline)))


if __name__ == "__main__":
    main()
