"""Explicit per-hop deadlines.

A Deadline is an absolute instant on the monotonic clock, derived at each call
boundary and passed down explicitly. Each hop derives a child from whatever
its caller hands it: the child expires at ``now + budget`` or at the parent's
instant, whichever comes first. There is no global timer state.

Usage:
    root = Deadline.background()
    upstream = root.child(0.2, hop="upstream")
    async with upstream.enforce():
        response = await client.get(url)

When the instant passes, enforce() cancels the awaiting task and raises
DeadlineExceededError naming the hop and its budget.
"""

import asyncio
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

from cotacao.exceptions import DeadlineExceededError


@dataclass(frozen=True)
class Deadline:
    """Absolute expiry instant for one hop of the request chain.

    expires_at is a time.monotonic() value, or None for an unbounded root.
    budget_seconds is the hop's own allowance, kept for diagnostics.
    """

    hop: str
    expires_at: float | None = None
    budget_seconds: float | None = None

    @classmethod
    def background(cls) -> "Deadline":
        """Unbounded root, the starting point for a fresh request chain."""
        return cls(hop="background")

    @classmethod
    def after(cls, seconds: float, hop: str) -> "Deadline":
        """Root deadline expiring ``seconds`` from now."""
        return cls.background().child(seconds, hop=hop)

    def child(self, seconds: float, hop: str) -> "Deadline":
        """Derive a deadline capped at ``seconds`` from now.

        The child never outlives its parent: if the parent expires first,
        the child inherits the parent's instant.
        """
        expires_at = time.monotonic() + seconds
        if self.expires_at is not None:
            expires_at = min(expires_at, self.expires_at)
        return Deadline(hop=hop, expires_at=expires_at, budget_seconds=seconds)

    def remaining(self) -> float | None:
        """Seconds left before expiry (negative once expired), None if unbounded."""
        if self.expires_at is None:
            return None
        return self.expires_at - time.monotonic()

    @property
    def expired(self) -> bool:
        remaining = self.remaining()
        return remaining is not None and remaining <= 0

    @asynccontextmanager
    async def enforce(self) -> AsyncIterator[None]:
        """Run the enclosed block under this deadline.

        Raises:
            DeadlineExceededError: The deadline fired and the block was cancelled.
        """
        remaining = self.remaining()
        if remaining is None:
            yield
            return

        loop = asyncio.get_running_loop()
        timeout = asyncio.timeout_at(loop.time() + remaining)
        try:
            async with timeout:
                yield
        except TimeoutError as exc:
            if not timeout.expired():
                raise
            raise DeadlineExceededError(self.hop, self.budget_seconds or 0.0) from exc
