"""Tests for Deadline derivation and enforcement."""

import asyncio
import time

import pytest

from cotacao.deadline import Deadline
from cotacao.exceptions import DeadlineExceededError, TransportError


class TestDerivation:
    """Child deadlines are capped by both their own budget and the parent."""

    def test_background_is_unbounded(self) -> None:
        root = Deadline.background()
        assert root.expires_at is None
        assert root.remaining() is None
        assert root.expired is False

    def test_child_of_background_gets_own_budget(self) -> None:
        before = time.monotonic()
        child = Deadline.background().child(0.2, hop="upstream")
        after = time.monotonic()

        assert child.hop == "upstream"
        assert child.budget_seconds == 0.2
        assert before + 0.2 <= child.expires_at <= after + 0.2

    def test_child_capped_even_when_parent_has_more_time(self) -> None:
        parent = Deadline.after(10.0, hop="client")
        child = parent.child(0.2, hop="upstream")
        assert child.expires_at < parent.expires_at
        assert child.remaining() <= 0.2

    def test_child_never_outlives_parent(self) -> None:
        parent = Deadline.after(0.05, hop="client")
        child = parent.child(5.0, hop="upstream")
        assert child.expires_at == parent.expires_at

    def test_expired_after_budget(self) -> None:
        deadline = Deadline.after(0.0, hop="persist")
        assert deadline.expired is True
        assert deadline.remaining() <= 0


class TestEnforce:
    """enforce() cancels the awaited work when the instant passes."""

    @pytest.mark.asyncio
    async def test_fast_block_completes(self) -> None:
        deadline = Deadline.after(1.0, hop="upstream")
        async with deadline.enforce():
            await asyncio.sleep(0)

    @pytest.mark.asyncio
    async def test_slow_block_raises_deadline_exceeded(self) -> None:
        deadline = Deadline.after(0.01, hop="persist")
        with pytest.raises(DeadlineExceededError) as exc_info:
            async with deadline.enforce():
                await asyncio.sleep(1)

        assert exc_info.value.hop == "persist"
        assert exc_info.value.budget_seconds == 0.01
        assert "10ms" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_slow_work_is_cancelled_not_awaited(self) -> None:
        """The operation under the deadline is aborted, not left running."""
        cancelled = asyncio.Event()

        async def slow() -> None:
            try:
                await asyncio.sleep(5)
            except asyncio.CancelledError:
                cancelled.set()
                raise

        started = time.monotonic()
        with pytest.raises(DeadlineExceededError):
            async with Deadline.after(0.02, hop="upstream").enforce():
                await slow()

        assert cancelled.is_set()
        assert time.monotonic() - started < 1

    @pytest.mark.asyncio
    async def test_deadline_error_is_a_transport_error(self) -> None:
        with pytest.raises(TransportError):
            async with Deadline.after(0.0, hop="client").enforce():
                await asyncio.sleep(0.1)

    @pytest.mark.asyncio
    async def test_unrelated_timeout_error_passes_through(self) -> None:
        with pytest.raises(TimeoutError) as exc_info:
            async with Deadline.after(5.0, hop="upstream").enforce():
                raise TimeoutError("socket")
        assert not isinstance(exc_info.value, DeadlineExceededError)

    @pytest.mark.asyncio
    async def test_background_never_fires(self) -> None:
        async with Deadline.background().enforce():
            await asyncio.sleep(0.01)
