"""Tests for CancellationToken."""

import asyncio

import pytest

from meiliclient.core.cancellation import CancellationToken
from meiliclient.core.errors import RequestAbortedError


class TestCancellationToken:
    """Tests for the token state and its interruptible sleep."""

    def test_cancel_is_idempotent(self):
        """Test that the first reason is kept."""
        token = CancellationToken()
        assert not token.cancelled

        token.cancel("first")
        token.cancel("second")

        assert token.cancelled
        assert token.reason == "first"

    def test_raise_if_cancelled(self):
        """Test the default abort message."""
        token = CancellationToken()
        token.raise_if_cancelled()
        token.cancel()

        with pytest.raises(RequestAbortedError) as exc_info:
            token.raise_if_cancelled("http://localhost:7700/health")

        assert exc_info.value.message == "The user aborted a request."
        assert exc_info.value.url == "http://localhost:7700/health"

    @pytest.mark.asyncio
    async def test_sleep_completes(self):
        """Test that an untouched token sleeps the full delay."""
        await CancellationToken().sleep(0.001)

    @pytest.mark.asyncio
    async def test_sleep_interrupted(self):
        """Test that cancelling wakes a sleeper immediately."""
        token = CancellationToken()
        loop = asyncio.get_running_loop()
        loop.call_later(0.01, token.cancel)
        started = loop.time()

        with pytest.raises(RequestAbortedError):
            await token.sleep(10)

        assert loop.time() - started < 5

    @pytest.mark.asyncio
    async def test_sleep_on_cancelled_token(self):
        """Test that sleeping on a fired token raises at once."""
        token = CancellationToken()
        token.cancel()

        with pytest.raises(RequestAbortedError):
            await token.sleep(10)
