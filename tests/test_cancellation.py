"""
Tests for cancellation.py
"""

import asyncio
import time

import pytest

from nlu_batch_gauge.cancellation import CancellationToken, run_cancellable, sleep
from nlu_batch_gauge.domain.exceptions import OperationCancelledError


class TestCancellationToken:
    """Tests for CancellationToken"""

    def test_not_cancelled_by_default(self):
        token = CancellationToken()
        assert token.is_cancellation_requested is False
        token.raise_if_cancellation_requested()

    def test_cancel_raises_with_same_token(self):
        token = CancellationToken()
        token.cancel()
        token.cancel()  # idempotent

        with pytest.raises(OperationCancelledError) as excinfo:
            token.raise_if_cancellation_requested()
        assert excinfo.value.token is token

    def test_cancellation_is_not_a_generic_error(self):
        token = CancellationToken()
        token.cancel()
        with pytest.raises(asyncio.CancelledError):
            token.raise_if_cancellation_requested()
        assert not issubclass(OperationCancelledError, Exception)


class TestSleep:
    """Tests for sleep()"""

    @pytest.mark.asyncio
    async def test_sleeps_without_token(self):
        await sleep(0)

    @pytest.mark.asyncio
    async def test_negative_delay_returns_immediately(self):
        token = CancellationToken()
        start = time.monotonic()
        await sleep(-5, token)
        assert time.monotonic() - start < 0.5

    @pytest.mark.asyncio
    async def test_completes_delay_when_not_cancelled(self):
        token = CancellationToken()
        start = time.monotonic()
        await sleep(0.05, token)
        assert time.monotonic() - start >= 0.04

    @pytest.mark.asyncio
    async def test_already_cancelled_raises(self):
        token = CancellationToken()
        token.cancel()
        with pytest.raises(OperationCancelledError) as excinfo:
            await sleep(10, token)
        assert excinfo.value.token is token

    @pytest.mark.asyncio
    async def test_cancel_wakes_sleep_early(self):
        token = CancellationToken()
        asyncio.get_running_loop().call_later(0.01, token.cancel)

        start = time.monotonic()
        with pytest.raises(OperationCancelledError):
            await sleep(10, token)
        assert time.monotonic() - start < 5


class TestRunCancellable:
    """Tests for run_cancellable()"""

    @pytest.mark.asyncio
    async def test_returns_result_without_token(self):
        async def work():
            return 42

        assert await run_cancellable(work()) == 42

    @pytest.mark.asyncio
    async def test_returns_result_when_not_cancelled(self):
        async def work():
            await asyncio.sleep(0.01)
            return "done"

        assert await run_cancellable(work(), CancellationToken()) == "done"

    @pytest.mark.asyncio
    async def test_propagates_errors(self):
        async def work():
            raise KeyError("operationId")

        with pytest.raises(KeyError):
            await run_cancellable(work(), CancellationToken())

    @pytest.mark.asyncio
    async def test_already_cancelled_does_not_start(self):
        started = []

        async def work():
            started.append(True)

        token = CancellationToken()
        token.cancel()
        with pytest.raises(OperationCancelledError) as excinfo:
            await run_cancellable(work(), token)

        assert excinfo.value.token is token
        assert started == []

    @pytest.mark.asyncio
    async def test_cancel_abandons_running_work(self):
        finished = []
        interrupted = []

        async def work():
            try:
                await asyncio.sleep(10)
                finished.append(True)
            except asyncio.CancelledError:
                interrupted.append(True)
                raise

        token = CancellationToken()
        asyncio.get_running_loop().call_later(0.01, token.cancel)

        start = time.monotonic()
        with pytest.raises(OperationCancelledError):
            await run_cancellable(work(), token)

        assert time.monotonic() - start < 5
        assert interrupted == [True]
        assert finished == []
