"""Tests for the Client entry point."""

import asyncio
import json

import httpx
import pytest
import respx
from httpx import Response

from meiliclient.client import Client
from meiliclient.config import ClientConfig
from meiliclient.core.cancellation import CancellationToken
from meiliclient.core.errors import (
    MalformedResponseError,
    MeiliApiError,
    MeiliConnectionError,
    RequestAbortedError,
    TaskTimeoutError,
)
from meiliclient.models.task import TaskStatus, TaskType

HOST = "http://localhost:7700"


class TestClientConfiguration:
    """Tests for client construction."""

    def test_defaults(self):
        """Test the default configuration."""
        client = Client()

        assert client.config.host == "http://localhost:7700"
        assert client.config.api_key is None
        assert client.config.task_timeout_ms == 5000

    def test_explicit_config_wins(self):
        """Test that a config object is used as-is."""
        config = ClientConfig(host="http://search:7700", task_interval_ms=10)

        client = Client(config=config)

        assert client.config is config

    def test_from_env(self, monkeypatch):
        """Test configuration from the environment."""
        monkeypatch.setenv("MEILI_URL", "http://search:7700")
        monkeypatch.setenv("MEILI_MASTER_KEY", "masterKey")

        client = Client.from_env()

        assert client.config.host == "http://search:7700"
        assert client.config.api_key == "masterKey"

    def test_index_handle_does_no_io(self):
        """Test that an index handle is created locally."""
        index = Client(HOST).index("movies")

        assert index.uid == "movies"
        assert index.primary_key is None


class TestIndexes:
    """Tests for index routes."""

    @respx.mock
    @pytest.mark.asyncio
    async def test_create_index(self):
        """Test the create index body."""
        route = respx.post(f"{HOST}/indexes").mock(
            return_value=Response(
                202,
                json={"uid": 0, "indexUid": "movies", "status": "enqueued", "type": "indexCreation"},
            )
        )

        async with Client(HOST) as client:
            task = await client.create_index("movies", primary_key="id")

        assert json.loads(route.calls.last.request.content) == {
            "uid": "movies",
            "primaryKey": "id",
        }
        assert task.index_uid == "movies"
        assert task.task_type == TaskType.INDEX_CREATION

    @respx.mock
    @pytest.mark.asyncio
    async def test_get_indexes_both_shapes(self):
        """Test listing indexes from wrapped and bare responses."""
        respx.get(f"{HOST}/indexes").mock(
            side_effect=[
                Response(200, json=[{"uid": "movies", "primaryKey": "id"}]),
                Response(200, json={"results": [{"uid": "books"}], "limit": 20}),
            ]
        )

        async with Client(HOST) as client:
            first = await client.get_indexes()
            second = await client.get_indexes()

        assert [info.uid for info in first] == ["movies"]
        assert first[0].primary_key == "id"
        assert [info.uid for info in second] == ["books"]

    @respx.mock
    @pytest.mark.asyncio
    async def test_get_index_loads_primary_key(self):
        """Test that get_index fills the primary key."""
        respx.get(f"{HOST}/indexes/movies").mock(
            return_value=Response(200, json={"uid": "movies", "primaryKey": "id"})
        )

        async with Client(HOST) as client:
            index = await client.get_index("movies")

        assert index.primary_key == "id"

    @respx.mock
    @pytest.mark.asyncio
    async def test_delete_index_if_exists(self):
        """Test that a missing index is not an error."""
        respx.delete(f"{HOST}/indexes/movies").mock(
            return_value=Response(
                404,
                json={"message": "Index `movies` not found.", "code": "index_not_found"},
            )
        )
        respx.delete(f"{HOST}/indexes/books").mock(
            return_value=Response(
                403,
                json={"message": "The provided API key is invalid.", "code": "invalid_api_key"},
            )
        )

        async with Client(HOST) as client:
            assert await client.delete_index_if_exists("movies") is None
            with pytest.raises(MeiliApiError):
                await client.delete_index_if_exists("books")


class TestTasks:
    """Tests for task routes."""

    @respx.mock
    @pytest.mark.asyncio
    async def test_get_tasks_with_pagination(self):
        """Test the task list and its query parameters."""
        route = respx.get(f"{HOST}/tasks").mock(
            return_value=Response(
                200,
                json={
                    "results": [
                        {"uid": 2, "status": "succeeded", "type": "settingsUpdate"},
                        {"uid": 1, "status": "failed", "type": "documentAddition"},
                    ],
                    "limit": 2,
                    "from": 2,
                    "next": 0,
                },
            )
        )

        async with Client(HOST) as client:
            response = await client.get_tasks(limit=2, from_uid=2)

        params = route.calls.last.request.url.params
        assert params["limit"] == "2"
        assert params["from"] == "2"
        assert [t.uid for t in response.results] == [2, 1]
        assert response.next_uid == 0

    @respx.mock
    @pytest.mark.asyncio
    async def test_get_tasks_bare_list(self):
        """Test that older servers answering with a list are supported."""
        respx.get(f"{HOST}/tasks").mock(
            return_value=Response(200, json=[{"uid": 0, "status": "enqueued"}])
        )

        async with Client(HOST) as client:
            response = await client.get_tasks()

        assert response.results[0].status == TaskStatus.ENQUEUED

    @respx.mock
    @pytest.mark.asyncio
    async def test_wait_for_task_uses_config(self):
        """Test that the configured deadline applies by default."""
        respx.get(f"{HOST}/tasks/7").mock(
            return_value=Response(200, json={"uid": 7, "status": "processing"})
        )
        config = ClientConfig(host=HOST, task_timeout_ms=200, task_interval_ms=5)

        async with Client(config=config) as client:
            with pytest.raises(TaskTimeoutError) as exc_info:
                await client.wait_for_task(7)

        assert exc_info.value.task_uid == 7
        assert exc_info.value.timeout_ms == 200
        assert exc_info.value.last_status == TaskStatus.PROCESSING

    @respx.mock
    @pytest.mark.asyncio
    async def test_wait_for_tasks(self):
        """Test waiting on several tasks."""
        respx.get(f"{HOST}/tasks/1").mock(
            return_value=Response(200, json={"uid": 1, "status": "succeeded"})
        )
        respx.get(f"{HOST}/tasks/2").mock(
            return_value=Response(200, json={"uid": 2, "status": "failed"})
        )

        async with Client(HOST) as client:
            results = await client.wait_for_tasks([2, 1], interval_ms=1)

        assert [t.uid for t in results] == [2, 1]
        assert results[0].is_failed


class TestInstance:
    """Tests for instance routes."""

    @respx.mock
    @pytest.mark.asyncio
    async def test_health_and_version(self):
        """Test health and version decoding."""
        respx.get(f"{HOST}/health").mock(
            return_value=Response(200, json={"status": "available"})
        )
        respx.get(f"{HOST}/version").mock(
            return_value=Response(
                200,
                json={
                    "commitSha": "b46889b5f0f2f8b91438a08a358ba8f05fc09fc1",
                    "commitDate": "2022-01-10T10:47:05Z",
                    "pkgVersion": "0.25.2",
                },
            )
        )

        async with Client(HOST) as client:
            assert await client.is_healthy()
            found = await client.get_version()

        assert found.pkg_version == "0.25.2"
        assert found.is_at_least("0.25.0")
        assert not found.is_at_least("1.0.0")

    @respx.mock
    @pytest.mark.asyncio
    async def test_version_without_package_version(self):
        """Test that a version body missing its version is classified."""
        respx.get(f"{HOST}/version").mock(return_value=Response(200, json={}))

        async with Client(HOST) as client:
            with pytest.raises(MalformedResponseError) as exc_info:
                await client.get_version()

        assert exc_info.value.url == f"{HOST}/version"

    @respx.mock
    @pytest.mark.asyncio
    async def test_unhealthy_when_unreachable(self):
        """Test that a connection failure reports unhealthy."""
        respx.get(f"{HOST}/health").mock(side_effect=httpx.ConnectError("Connection refused"))

        async with Client(HOST) as client:
            assert not await client.is_healthy()

    @respx.mock
    @pytest.mark.asyncio
    async def test_stats(self):
        """Test global stats decoding."""
        respx.get(f"{HOST}/stats").mock(
            return_value=Response(
                200,
                json={
                    "databaseSize": 447819776,
                    "lastUpdate": "2022-01-10T12:00:00Z",
                    "indexes": {
                        "movies": {
                            "numberOfDocuments": 19654,
                            "isIndexing": False,
                            "fieldDistribution": {"id": 19654, "title": 19654},
                        }
                    },
                },
            )
        )

        async with Client(HOST) as client:
            stats = await client.get_stats()

        assert stats.database_size == 447819776
        assert stats.indexes["movies"].field_count == 2


class TestCancellation:
    """Tests for cancellation across index handles."""

    @pytest.mark.asyncio
    async def test_abort_one_of_several_searches(self):
        """Test that aborting one call leaves the others untouched."""
        release = asyncio.Event()

        async def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/indexes/slow/search":
                await release.wait()
            return httpx.Response(200, json={"hits": [], "query": ""})

        client = Client(HOST, transport=httpx.MockTransport(handler))
        token = CancellationToken()

        slow = asyncio.create_task(client.index("slow").search(token=token))
        others = [
            asyncio.create_task(client.index(uid).search("a"))
            for uid in ("movies", "books", "songs")
        ]
        await asyncio.sleep(0.01)
        token.cancel()

        with pytest.raises(RequestAbortedError) as exc_info:
            await slow
        results = await asyncio.gather(*others)
        release.set()
        await client.close()

        assert exc_info.value.message == "The user aborted a request."
        assert len(results) == 3

    @pytest.mark.asyncio
    async def test_connection_refused_per_host(self):
        """Test that a refused connection names the host and port."""

        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("All connection attempts failed", request=request)

        async with Client(
            "http://localhost:9345", transport=httpx.MockTransport(refuse)
        ) as client:
            with pytest.raises(MeiliConnectionError) as exc_info:
                await client.get_indexes()

        assert exc_info.value.message == (
            "request to http://localhost:9345/indexes failed, "
            "reason: connect ECONNREFUSED localhost:9345"
        )
