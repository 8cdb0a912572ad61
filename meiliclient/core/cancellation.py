"""Client-local cancellation tokens."""

import asyncio

from meiliclient.core.errors import RequestAbortedError


class CancellationToken:
    """Externally triggerable abort signal.

    One token can be handed to any number of requests and task waits.
    Triggering it is idempotent and never touches server-side state.

    Example:
        token = CancellationToken()
        search = asyncio.create_task(index.search("prince", token=token))
        token.cancel()
        await search  # raises RequestAbortedError
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self._reason: str | None = None

    @property
    def cancelled(self) -> bool:
        """Whether the token has been triggered."""
        return self._event.is_set()

    @property
    def reason(self) -> str | None:
        return self._reason

    def cancel(self, reason: str | None = None) -> None:
        """Trigger the token. Later calls are no-ops."""
        if self._event.is_set():
            return
        self._reason = reason
        self._event.set()

    async def wait(self) -> None:
        """Block until the token is triggered."""
        await self._event.wait()

    async def sleep(self, seconds: float) -> None:
        """Sleep for ``seconds`` unless the token fires first.

        Raises:
            RequestAbortedError: If the token is or becomes triggered.
        """
        self.raise_if_cancelled()
        try:
            await asyncio.wait_for(self._event.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            return
        self.raise_if_cancelled()

    def raise_if_cancelled(self, url: str | None = None) -> None:
        if self._event.is_set():
            raise RequestAbortedError(url=url)
