"""Quote service -- orchestrates one fetch and, optionally, one persist.

Every request starts a fresh background deadline: the service imposes its own
budgets no matter how the inbound request arrived. Fetch strictly precedes
persist, and persist strictly precedes the response.

Persisting deployment: a failed persist fails the whole request even though
the quote was fetched. Persistence is part of what a satisfied request means
there, so the bid is not relayed.
"""

from cotacao.deadline import Deadline
from cotacao.logging import get_logger
from cotacao.models import BidResponse
from cotacao.store.persister import QuotePersister
from cotacao.upstream.fetcher import UpstreamFetcher

logger = get_logger(__name__)


class QuoteService:
    """Fetch -> (persist) -> bid, with no retries.

    Args:
        fetcher: Upstream quote fetcher.
        persister: Optional store. None runs the non-persisting deployment.
    """

    def __init__(
        self,
        fetcher: UpstreamFetcher,
        persister: QuotePersister | None = None,
    ) -> None:
        self._fetcher = fetcher
        self._persister = persister

    @property
    def persists(self) -> bool:
        return self._persister is not None

    async def current_bid(self) -> BidResponse:
        """Run the request chain once.

        Raises:
            QuoteError: Any failure of the fetch or persist hop, unchanged.
        """
        root = Deadline.background()

        quote = await self._fetcher.fetch(root)

        if self._persister is not None:
            await self._persister.persist(root, quote)

        logger.info(
            "quote_relayed",
            code=quote.code,
            codein=quote.codein,
            bid=quote.bid,
            persisted=self.persists,
        )
        return BidResponse.from_quote(quote)
