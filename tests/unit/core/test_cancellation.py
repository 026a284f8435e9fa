"""Tests for CancellationToken and run_cancellable."""

import asyncio

import pytest

from stillframe.core.cancellation import (
    CancellationToken,
    OperationCancelledError,
    run_cancellable,
)


class TestCancellationToken:
    """Tests for CancellationToken state."""

    def test_starts_uncancelled(self):
        token = CancellationToken()
        assert token.is_cancelled is False
        assert token.reason is None
        token.raise_if_cancelled()

    def test_cancel_sets_reason(self):
        token = CancellationToken()
        token.cancel("client went away")
        assert token.is_cancelled is True
        assert token.reason == "client went away"

    def test_second_cancel_keeps_first_reason(self):
        token = CancellationToken()
        token.cancel("first")
        token.cancel("second")
        assert token.reason == "first"

    def test_raise_if_cancelled(self):
        token = CancellationToken()
        token.cancel("stop")
        with pytest.raises(OperationCancelledError, match="stop"):
            token.raise_if_cancelled()

    def test_operation_cancelled_is_not_an_exception(self):
        """Ordinary `except Exception` handlers must not swallow cancellation."""
        assert not issubclass(OperationCancelledError, Exception)
        assert issubclass(OperationCancelledError, asyncio.CancelledError)


class TestRunCancellable:
    """Tests for run_cancellable."""

    @pytest.mark.asyncio
    async def test_without_token_awaits(self):
        async def work():
            return 42

        assert await run_cancellable(work(), None) == 42

    @pytest.mark.asyncio
    async def test_completes_before_cancel(self):
        async def work():
            return "done"

        assert await run_cancellable(work(), CancellationToken()) == "done"

    @pytest.mark.asyncio
    async def test_already_cancelled_token_raises_immediately(self):
        started = False

        async def work():
            nonlocal started
            started = True

        token = CancellationToken()
        token.cancel()
        with pytest.raises(OperationCancelledError):
            await run_cancellable(work(), token)
        assert started is False

    @pytest.mark.asyncio
    async def test_cancel_during_work_cancels_inner_task(self):
        inner_cancelled = asyncio.Event()

        async def work():
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                inner_cancelled.set()
                raise

        token = CancellationToken()
        loop = asyncio.get_running_loop()
        loop.call_later(0.05, token.cancel, "abort")

        with pytest.raises(OperationCancelledError, match="abort"):
            await run_cancellable(work(), token)
        assert inner_cancelled.is_set()

    @pytest.mark.asyncio
    async def test_outer_task_cancellation_propagates(self):
        inner_cancelled = asyncio.Event()

        async def work():
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                inner_cancelled.set()
                raise

        task = asyncio.create_task(run_cancellable(work(), CancellationToken()))
        await asyncio.sleep(0.05)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert inner_cancelled.is_set()

    @pytest.mark.asyncio
    async def test_exceptions_propagate(self):
        async def work():
            raise ValueError("boom")

        with pytest.raises(ValueError, match="boom"):
            await run_cancellable(work(), CancellationToken())
