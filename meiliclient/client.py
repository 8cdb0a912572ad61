"""Client entry point."""

from collections.abc import Iterable
from typing import Any

import httpx

from meiliclient.config import ClientConfig
from meiliclient.core.cancellation import CancellationToken
from meiliclient.core.errors import ErrorCode, MeiliApiError, MeiliClientError
from meiliclient.core.tasks import get_task, wait_for_task, wait_for_tasks
from meiliclient.core.transport import RequestTransport
from meiliclient.core.urls import Routes
from meiliclient.index import Index
from meiliclient.models.index import IndexInfo, unwrap_results
from meiliclient.models.instance import Health, InstanceStats, Version
from meiliclient.models.task import EnqueuedTask, Task, TasksResponse


class Client:
    """Asynchronous client for a search engine instance.

    Example:
        async with Client("http://localhost:7700", api_key="masterKey") as client:
            task = await client.index("movies").add_documents(docs)
            await client.wait_for_task(task)
            result = await client.index("movies").search("prince")
    """

    def __init__(
        self,
        host: str | None = None,
        api_key: str | None = None,
        *,
        config: ClientConfig | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            host: Base URL of the engine; ignored when ``config`` is given
            api_key: Optional API key; ignored when ``config`` is given
            config: Complete configuration
            timeout: HTTP timeout in seconds; ignored when ``config`` is given
            transport: Optional httpx transport (used to inject mocks)
        """
        if config is None:
            values: dict[str, Any] = {"api_key": api_key}
            if host is not None:
                values["host"] = host
            if timeout is not None:
                values["timeout"] = timeout
            config = ClientConfig(**values)
        self.config = config
        self._transport = RequestTransport(config, transport=transport)

    @classmethod
    def from_env(cls, **overrides: Any) -> "Client":
        """Create a client configured from ``MEILI_URL`` and ``MEILI_MASTER_KEY``."""
        transport = overrides.pop("transport", None)
        return cls(config=ClientConfig.from_env(**overrides), transport=transport)

    def index(self, uid: str) -> Index:
        """Get a handle on an index. Does not contact the server."""
        return Index(self._transport, uid)

    # Indexes

    async def create_index(
        self,
        uid: str,
        primary_key: str | None = None,
        token: CancellationToken | None = None,
    ) -> EnqueuedTask:
        """Create an index."""
        payload: dict[str, Any] = {"uid": uid}
        if primary_key is not None:
            payload["primaryKey"] = primary_key
        data = await self._transport.post(Routes.INDEXES, payload, token=token)
        return self._transport.decode(EnqueuedTask, data, Routes.INDEXES)

    async def get_index(
        self, uid: str, token: CancellationToken | None = None
    ) -> Index:
        """Get a handle on an existing index, with its metadata loaded."""
        index = self.index(uid)
        await index.fetch_info(token=token)
        return index

    async def get_indexes(
        self, token: CancellationToken | None = None
    ) -> list[IndexInfo]:
        """List every index."""
        data = await self._transport.get(Routes.INDEXES, token=token)
        return [
            self._transport.decode(IndexInfo, item, Routes.INDEXES)
            for item in unwrap_results(data)
        ]

    async def delete_index(
        self, uid: str, token: CancellationToken | None = None
    ) -> EnqueuedTask:
        return await self.index(uid).delete(token=token)

    async def delete_index_if_exists(self, uid: str) -> EnqueuedTask | None:
        """Delete an index, returning None when it does not exist."""
        try:
            return await self.delete_index(uid)
        except MeiliApiError as e:
            if e.code != ErrorCode.INDEX_NOT_FOUND:
                raise
            return None

    # Tasks

    async def get_task(
        self, task_uid: int, token: CancellationToken | None = None
    ) -> Task:
        return await get_task(self._transport, task_uid, token=token)

    async def get_tasks(
        self,
        limit: int | None = None,
        from_uid: int | None = None,
        token: CancellationToken | None = None,
    ) -> TasksResponse:
        """List tasks, most recent first."""
        params: dict[str, Any] = {}
        if limit is not None:
            params["limit"] = limit
        if from_uid is not None:
            params["from"] = from_uid
        data = await self._transport.get(
            Routes.TASKS, params=params or None, token=token
        )
        if isinstance(data, list):
            data = {"results": data}
        return self._transport.decode(TasksResponse, data, Routes.TASKS)

    async def wait_for_task(
        self,
        task: int | EnqueuedTask | Task,
        timeout_ms: float | None = None,
        interval_ms: float | None = None,
        token: CancellationToken | None = None,
    ) -> Task:
        """Wait until a task reaches a terminal status.

        Args:
            task: Task uid, or the task returned by a mutating call
            timeout_ms: Deadline in milliseconds; defaults to the configured value
            interval_ms: Delay between polls; defaults to the configured value
            token: Optional cancellation token

        Raises:
            TaskTimeoutError: If the deadline elapses first
            RequestAbortedError: If the token fires
        """
        return await wait_for_task(
            self._transport,
            task,
            timeout_ms=self.config.task_timeout_ms if timeout_ms is None else timeout_ms,
            interval_ms=(
                self.config.task_interval_ms if interval_ms is None else interval_ms
            ),
            token=token,
        )

    async def wait_for_tasks(
        self,
        tasks: Iterable[int | EnqueuedTask | Task],
        timeout_ms: float | None = None,
        interval_ms: float | None = None,
        token: CancellationToken | None = None,
    ) -> list[Task]:
        """Wait on several tasks concurrently."""
        return await wait_for_tasks(
            self._transport,
            tasks,
            timeout_ms=self.config.task_timeout_ms if timeout_ms is None else timeout_ms,
            interval_ms=(
                self.config.task_interval_ms if interval_ms is None else interval_ms
            ),
            token=token,
        )

    # Instance

    async def health(self, token: CancellationToken | None = None) -> Health:
        data = await self._transport.get(Routes.HEALTH, token=token)
        return self._transport.decode(Health, data or {}, Routes.HEALTH)

    async def is_healthy(self) -> bool:
        """Check whether the server is reachable and available."""
        try:
            health = await self.health()
        except MeiliClientError:
            return False
        return health.is_available

    async def get_version(self, token: CancellationToken | None = None) -> Version:
        data = await self._transport.get(Routes.VERSION, token=token)
        return self._transport.decode(Version, data, Routes.VERSION)

    async def get_stats(self, token: CancellationToken | None = None) -> InstanceStats:
        data = await self._transport.get(Routes.STATS, token=token)
        return self._transport.decode(InstanceStats, data, Routes.STATS)

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._transport.close()

    async def __aenter__(self) -> "Client":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()
