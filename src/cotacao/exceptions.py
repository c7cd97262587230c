"""Exception hierarchy for the quote relay.

Every failure of a hop is raised as a QuoteError subclass so that the HTTP
layer can collapse them into one 500 and the client into one exit code.
Kept in a single module to avoid circular imports between adapters.
"""


class QuoteError(Exception):
    """Base exception for all quote relay errors."""


class RequestConstructionError(QuoteError):
    """Raised when an outbound request cannot be built (bad URL, scheme)."""


class TransportError(QuoteError):
    """Raised when a call fails on the wire or answers with a non-2xx status."""


class DeadlineExceededError(TransportError):
    """Raised when a hop runs past its own deadline.

    Handled like any TransportError for control flow, but kept distinct so
    logs can say which budget ran out.
    """

    def __init__(self, hop: str, budget_seconds: float) -> None:
        self.hop = hop
        self.budget_seconds = budget_seconds
        super().__init__(
            f"{hop} exceeded its {round(budget_seconds * 1000)}ms deadline"
        )


class DecodeError(QuoteError):
    """Raised when a response body is not the expected JSON shape."""


class PersistenceError(QuoteError):
    """Raised when the quote store rejects a write."""


class SinkWriteError(QuoteError):
    """Raised when the client cannot write the bid to its output file."""
