"""HTTP transport built on ``httpx.AsyncClient``."""

import asyncio
import logging
from typing import Any

import httpx
import orjson

from meiliclient.config import ClientConfig
from meiliclient.core.cancellation import CancellationToken
from meiliclient.core.errors import (
    MalformedResponseError,
    ModelT,
    RequestAbortedError,
    classify_response,
    classify_transport_error,
    decode_response,
)
from meiliclient.core.urls import build_url

logger = logging.getLogger(__name__)


class _NoBody:
    """Marker for requests sent without content (distinct from a JSON ``null``)."""

    def __repr__(self) -> str:
        return "NO_BODY"


NO_BODY: Any = _NoBody()


class RequestTransport:
    """Issues requests against the configured host and decodes JSON replies.

    The transport owns a single ``httpx.AsyncClient`` whose connection pool is
    shared by every index handle of a client. It holds no per-request state,
    so any number of calls may be in flight at once.
    """

    def __init__(
        self,
        config: ClientConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the transport.

        Args:
            config: Immutable client configuration
            transport: Optional httpx transport (used to inject mocks)
        """
        self._config = config
        self._client = httpx.AsyncClient(
            headers=self._get_headers(),
            timeout=config.timeout,
            transport=transport,
        )

    @property
    def config(self) -> ClientConfig:
        return self._config

    def _get_headers(self) -> dict[str, str]:
        """Get headers sent with every request."""
        headers = {"Accept": "application/json"}
        if self._config.api_key:
            headers["Authorization"] = f"Bearer {self._config.api_key}"
        return headers

    def url_for(self, path: str) -> str:
        return build_url(self._config.host, path)

    def decode(self, model: type[ModelT], data: Any, path: str) -> ModelT:
        """Validate the body returned by ``path``; a shape mismatch is a malformed response."""
        return decode_response(model, data, self.url_for(path))

    async def get(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        token: CancellationToken | None = None,
    ) -> Any:
        return await self.request("GET", path, params=params, token=token)

    async def post(
        self,
        path: str,
        body: Any = NO_BODY,
        params: dict[str, Any] | None = None,
        token: CancellationToken | None = None,
    ) -> Any:
        return await self.request("POST", path, body=body, params=params, token=token)

    async def put(
        self,
        path: str,
        body: Any = NO_BODY,
        params: dict[str, Any] | None = None,
        token: CancellationToken | None = None,
    ) -> Any:
        return await self.request("PUT", path, body=body, params=params, token=token)

    async def patch(
        self,
        path: str,
        body: Any = NO_BODY,
        params: dict[str, Any] | None = None,
        token: CancellationToken | None = None,
    ) -> Any:
        return await self.request("PATCH", path, body=body, params=params, token=token)

    async def delete(
        self,
        path: str,
        body: Any = NO_BODY,
        params: dict[str, Any] | None = None,
        token: CancellationToken | None = None,
    ) -> Any:
        return await self.request("DELETE", path, body=body, params=params, token=token)

    async def request(
        self,
        method: str,
        path: str,
        body: Any = NO_BODY,
        params: dict[str, Any] | None = None,
        token: CancellationToken | None = None,
    ) -> Any:
        """Send one request and return the decoded JSON body.

        Args:
            method: HTTP method
            path: Resource path relative to the host
            body: JSON-serialisable body; ``NO_BODY`` sends no content
            params: Optional query string parameters
            token: Optional cancellation token

        Returns:
            Decoded JSON, or None when the response has no content

        Raises:
            MeiliConnectionError: If the server could not be reached
            RequestAbortedError: If the token fired before the response arrived
            MeiliApiError: If the server answered with a non-2xx status
            MalformedResponseError: If a 2xx body could not be decoded
        """
        url = self.url_for(path)
        if token is not None:
            token.raise_if_cancelled(url)

        headers: dict[str, str] = {}
        content: bytes | None = None
        if body is not NO_BODY:
            content = orjson.dumps(body)
            headers["Content-Type"] = "application/json"

        logger.debug(f"{method} {url}")
        response = await self._send(method, url, content, headers, params, token)
        logger.debug(f"{method} {url} -> {response.status_code}")

        if not response.is_success:
            raise classify_response(response)

        if not response.content:
            return None
        try:
            return orjson.loads(response.content)
        except orjson.JSONDecodeError as e:
            raise MalformedResponseError(
                f"request to {url} returned an undecodable body: {e}",
                url=url,
                body=response.content,
            ) from e

    async def _send(
        self,
        method: str,
        url: str,
        content: bytes | None,
        headers: dict[str, str],
        params: dict[str, Any] | None,
        token: CancellationToken | None,
    ) -> httpx.Response:
        call = self._client.request(
            method, url, content=content, headers=headers, params=params
        )
        try:
            if token is None:
                return await call
            return await self._race(call, token, url)
        except (httpx.TransportError, httpx.InvalidURL) as e:
            logger.debug(f"{method} {url} failed: {e!r}")
            raise classify_transport_error(e, url) from e

    async def _race(
        self, call: Any, token: CancellationToken, url: str
    ) -> httpx.Response:
        """Run ``call`` until it completes or ``token`` fires, whichever is first."""
        request_task = asyncio.ensure_future(call)
        abort_task = asyncio.ensure_future(token.wait())
        try:
            done, _ = await asyncio.wait(
                {request_task, abort_task}, return_when=asyncio.FIRST_COMPLETED
            )
        except asyncio.CancelledError:
            request_task.cancel()
            raise
        finally:
            abort_task.cancel()

        if request_task in done:
            # A response that arrived before the abort wins.
            return request_task.result()

        request_task.cancel()
        await asyncio.gather(request_task, return_exceptions=True)
        logger.debug(f"request to {url} aborted")
        raise RequestAbortedError(url=url)

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "RequestTransport":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()
