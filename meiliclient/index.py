"""Per-index operations: settings, documents and search."""

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from meiliclient.core.cancellation import CancellationToken
from meiliclient.core.tasks import get_task, wait_for_task
from meiliclient.core.transport import NO_BODY, RequestTransport
from meiliclient.core.urls import Routes
from meiliclient.models.attributes import AttributeSelection
from meiliclient.models.index import IndexInfo, IndexStats, unwrap_results
from meiliclient.models.search import SearchParameters, SearchResult
from meiliclient.models.settings import Settings, SettingsUpdate
from meiliclient.models.task import EnqueuedTask, Task

RANKING_RULES = "ranking-rules"
DISTINCT_ATTRIBUTE = "distinct-attribute"
SEARCHABLE_ATTRIBUTES = "searchable-attributes"
DISPLAYED_ATTRIBUTES = "displayed-attributes"
FILTERABLE_ATTRIBUTES = "filterable-attributes"
SORTABLE_ATTRIBUTES = "sortable-attributes"
STOP_WORDS = "stop-words"
SYNONYMS = "synonyms"


def _attributes_body(
    value: AttributeSelection | Iterable[str] | None,
) -> list[str] | None:
    if value is None:
        return None
    return AttributeSelection.parse(value).to_json()


class Index:
    """Operations on a single index.

    An ``Index`` is a lightweight handle: creating one does no I/O, and every
    handle of a client shares the client's transport and configuration.

    Every mutating method returns the ``EnqueuedTask`` immediately. Pass it to
    ``wait_for_task`` to block until the server has processed it.
    """

    def __init__(
        self,
        transport: RequestTransport,
        uid: str,
        primary_key: str | None = None,
    ):
        """Initialize the handle.

        Args:
            transport: Transport shared with the owning client
            uid: Index unique identifier
            primary_key: Primary key, if already known
        """
        self.uid = uid
        self.primary_key = primary_key
        self._transport = transport

    def __repr__(self) -> str:
        return f"Index(uid={self.uid!r}, primary_key={self.primary_key!r})"

    # Index lifecycle

    async def fetch_info(self, token: CancellationToken | None = None) -> IndexInfo:
        """Fetch the index metadata and refresh ``primary_key``."""
        route = Routes.index(self.uid)
        data = await self._transport.get(route, token=token)
        info = self._transport.decode(IndexInfo, data, route)
        self.primary_key = info.primary_key
        return info

    async def get_primary_key(
        self, token: CancellationToken | None = None
    ) -> str | None:
        info = await self.fetch_info(token=token)
        return info.primary_key

    async def update(
        self, primary_key: str, token: CancellationToken | None = None
    ) -> EnqueuedTask:
        """Set the primary key of the index."""
        return await self._enqueue(
            "PUT", Routes.index(self.uid), {"primaryKey": primary_key}, token=token
        )

    async def delete(self, token: CancellationToken | None = None) -> EnqueuedTask:
        """Delete the index."""
        return await self._enqueue("DELETE", Routes.index(self.uid), token=token)

    async def get_stats(self, token: CancellationToken | None = None) -> IndexStats:
        route = Routes.index_stats(self.uid)
        data = await self._transport.get(route, token=token)
        return self._transport.decode(IndexStats, data, route)

    # Tasks

    async def get_tasks(self, token: CancellationToken | None = None) -> list[Task]:
        """List the tasks of this index."""
        route = Routes.index_tasks(self.uid)
        data = await self._transport.get(route, token=token)
        return [
            self._transport.decode(Task, item, route) for item in unwrap_results(data)
        ]

    async def get_task(
        self, task_uid: int, token: CancellationToken | None = None
    ) -> Task:
        return await get_task(self._transport, task_uid, token=token)

    async def wait_for_task(
        self,
        task: int | EnqueuedTask | Task,
        timeout_ms: float | None = None,
        interval_ms: float | None = None,
        token: CancellationToken | None = None,
    ) -> Task:
        """Wait until a task reaches a terminal status.

        Defaults for the deadline and the poll interval come from the client
        configuration.
        """
        config = self._transport.config
        return await wait_for_task(
            self._transport,
            task,
            timeout_ms=config.task_timeout_ms if timeout_ms is None else timeout_ms,
            interval_ms=config.task_interval_ms if interval_ms is None else interval_ms,
            token=token,
        )

    # Search

    async def search(
        self,
        query: str | None = None,
        params: SearchParameters | Mapping[str, Any] | None = None,
        token: CancellationToken | None = None,
        **options: Any,
    ) -> SearchResult:
        """Search the index.

        Args:
            query: Words to search for. None or "" runs a placeholder search
                that returns every document matching the filters.
            params: Search options, as a model or a mapping of option names
            token: Optional cancellation token
            **options: Search options given as keyword arguments; they
                override ``params``

        Returns:
            Decoded search result

        Raises:
            MeiliApiError: If the server rejects the search, e.g. on an invalid filter
        """
        search_params = self._build_search_params(params, options)
        body = search_params.to_body(query)
        route = Routes.search(self.uid)
        data = await self._transport.post(route, body, token=token)
        return self._transport.decode(SearchResult, data, route)

    @staticmethod
    def _build_search_params(
        params: SearchParameters | Mapping[str, Any] | None,
        options: Mapping[str, Any],
    ) -> SearchParameters:
        if isinstance(params, SearchParameters):
            if not options:
                return params
            merged = params.model_dump(by_alias=False, exclude_unset=True)
            merged.update(options)
            return SearchParameters(**merged)
        merged = dict(params or {})
        merged.update(options)
        return SearchParameters(**merged)

    # Documents

    async def get_document(
        self, document_id: str | int, token: CancellationToken | None = None
    ) -> dict[str, Any]:
        return await self._transport.get(
            Routes.document(self.uid, document_id), token=token
        )

    async def get_documents(
        self,
        offset: int = 0,
        limit: int = 20,
        attributes_to_retrieve: Sequence[str] | None = None,
        token: CancellationToken | None = None,
    ) -> list[dict[str, Any]]:
        """Get a batch of documents."""
        params: dict[str, Any] = {"offset": offset, "limit": limit}
        if attributes_to_retrieve:
            params["attributesToRetrieve"] = ",".join(attributes_to_retrieve)
        data = await self._transport.get(
            Routes.documents(self.uid), params=params, token=token
        )
        return unwrap_results(data)

    async def add_documents(
        self,
        documents: Sequence[Mapping[str, Any]],
        primary_key: str | None = None,
        token: CancellationToken | None = None,
    ) -> EnqueuedTask:
        """Add documents, replacing any document with the same id."""
        return await self._enqueue(
            "POST",
            Routes.documents(self.uid),
            list(documents),
            params=self._primary_key_params(primary_key),
            token=token,
        )

    async def update_documents(
        self,
        documents: Sequence[Mapping[str, Any]],
        primary_key: str | None = None,
        token: CancellationToken | None = None,
    ) -> EnqueuedTask:
        """Add documents, merging fields into any document with the same id."""
        return await self._enqueue(
            "PUT",
            Routes.documents(self.uid),
            list(documents),
            params=self._primary_key_params(primary_key),
            token=token,
        )

    async def delete_document(
        self, document_id: str | int, token: CancellationToken | None = None
    ) -> EnqueuedTask:
        return await self._enqueue(
            "DELETE", Routes.document(self.uid, document_id), token=token
        )

    async def delete_documents(
        self, ids: Sequence[str | int], token: CancellationToken | None = None
    ) -> EnqueuedTask:
        return await self._enqueue(
            "POST", Routes.documents_delete_batch(self.uid), list(ids), token=token
        )

    async def delete_all_documents(
        self, token: CancellationToken | None = None
    ) -> EnqueuedTask:
        return await self._enqueue("DELETE", Routes.documents(self.uid), token=token)

    @staticmethod
    def _primary_key_params(primary_key: str | None) -> dict[str, str] | None:
        if primary_key is None:
            return None
        return {"primaryKey": primary_key}

    # Settings

    async def get_settings(self, token: CancellationToken | None = None) -> Settings:
        """Get the effective settings of the index."""
        route = Routes.settings(self.uid)
        data = await self._transport.get(route, token=token)
        return self._transport.decode(Settings, data, route)

    async def update_settings(
        self,
        settings: SettingsUpdate | Mapping[str, Any],
        token: CancellationToken | None = None,
    ) -> EnqueuedTask:
        """Partially update the settings.

        Fields left out are unchanged, fields set to None are reset to their
        default, other fields are replaced.
        """
        if not isinstance(settings, SettingsUpdate):
            settings = SettingsUpdate(**settings)
        return await self._enqueue(
            "POST", Routes.settings(self.uid), settings.to_payload(), token=token
        )

    async def reset_settings(self, token: CancellationToken | None = None) -> EnqueuedTask:
        """Reset every setting to its default in a single task."""
        return await self._enqueue("DELETE", Routes.settings(self.uid), token=token)

    async def get_ranking_rules(
        self, token: CancellationToken | None = None
    ) -> list[str]:
        return await self._get_setting(RANKING_RULES, token)

    async def update_ranking_rules(
        self,
        ranking_rules: Sequence[str] | None,
        token: CancellationToken | None = None,
    ) -> EnqueuedTask:
        body = None if ranking_rules is None else list(ranking_rules)
        return await self._update_setting(RANKING_RULES, body, token)

    async def reset_ranking_rules(
        self, token: CancellationToken | None = None
    ) -> EnqueuedTask:
        return await self._reset_setting(RANKING_RULES, token)

    async def get_distinct_attribute(
        self, token: CancellationToken | None = None
    ) -> str | None:
        return await self._get_setting(DISTINCT_ATTRIBUTE, token)

    async def update_distinct_attribute(
        self, attribute: str | None, token: CancellationToken | None = None
    ) -> EnqueuedTask:
        return await self._update_setting(DISTINCT_ATTRIBUTE, attribute, token)

    async def reset_distinct_attribute(
        self, token: CancellationToken | None = None
    ) -> EnqueuedTask:
        return await self._reset_setting(DISTINCT_ATTRIBUTE, token)

    async def get_searchable_attributes(
        self, token: CancellationToken | None = None
    ) -> AttributeSelection:
        return AttributeSelection.parse(
            await self._get_setting(SEARCHABLE_ATTRIBUTES, token)
        )

    async def update_searchable_attributes(
        self,
        attributes: AttributeSelection | Iterable[str] | None,
        token: CancellationToken | None = None,
    ) -> EnqueuedTask:
        return await self._update_setting(
            SEARCHABLE_ATTRIBUTES, _attributes_body(attributes), token
        )

    async def reset_searchable_attributes(
        self, token: CancellationToken | None = None
    ) -> EnqueuedTask:
        return await self._reset_setting(SEARCHABLE_ATTRIBUTES, token)

    async def get_displayed_attributes(
        self, token: CancellationToken | None = None
    ) -> AttributeSelection:
        return AttributeSelection.parse(
            await self._get_setting(DISPLAYED_ATTRIBUTES, token)
        )

    async def update_displayed_attributes(
        self,
        attributes: AttributeSelection | Iterable[str] | None,
        token: CancellationToken | None = None,
    ) -> EnqueuedTask:
        return await self._update_setting(
            DISPLAYED_ATTRIBUTES, _attributes_body(attributes), token
        )

    async def reset_displayed_attributes(
        self, token: CancellationToken | None = None
    ) -> EnqueuedTask:
        return await self._reset_setting(DISPLAYED_ATTRIBUTES, token)

    async def get_filterable_attributes(
        self, token: CancellationToken | None = None
    ) -> AttributeSelection:
        return AttributeSelection.parse(
            await self._get_setting(FILTERABLE_ATTRIBUTES, token) or []
        )

    async def update_filterable_attributes(
        self,
        attributes: AttributeSelection | Iterable[str] | None,
        token: CancellationToken | None = None,
    ) -> EnqueuedTask:
        return await self._update_setting(
            FILTERABLE_ATTRIBUTES, _attributes_body(attributes), token
        )

    async def reset_filterable_attributes(
        self, token: CancellationToken | None = None
    ) -> EnqueuedTask:
        return await self._reset_setting(FILTERABLE_ATTRIBUTES, token)

    async def get_sortable_attributes(
        self, token: CancellationToken | None = None
    ) -> AttributeSelection:
        return AttributeSelection.parse(
            await self._get_setting(SORTABLE_ATTRIBUTES, token) or []
        )

    async def update_sortable_attributes(
        self,
        attributes: AttributeSelection | Iterable[str] | None,
        token: CancellationToken | None = None,
    ) -> EnqueuedTask:
        return await self._update_setting(
            SORTABLE_ATTRIBUTES, _attributes_body(attributes), token
        )

    async def reset_sortable_attributes(
        self, token: CancellationToken | None = None
    ) -> EnqueuedTask:
        return await self._reset_setting(SORTABLE_ATTRIBUTES, token)

    async def get_stop_words(self, token: CancellationToken | None = None) -> list[str]:
        return await self._get_setting(STOP_WORDS, token) or []

    async def update_stop_words(
        self, stop_words: Iterable[str] | None, token: CancellationToken | None = None
    ) -> EnqueuedTask:
        body = None if stop_words is None else list(stop_words)
        return await self._update_setting(STOP_WORDS, body, token)

    async def reset_stop_words(
        self, token: CancellationToken | None = None
    ) -> EnqueuedTask:
        return await self._reset_setting(STOP_WORDS, token)

    async def get_synonyms(
        self, token: CancellationToken | None = None
    ) -> dict[str, list[str]]:
        return await self._get_setting(SYNONYMS, token) or {}

    async def update_synonyms(
        self,
        synonyms: Mapping[str, Sequence[str]] | None,
        token: CancellationToken | None = None,
    ) -> EnqueuedTask:
        body = None
        if synonyms is not None:
            body = {term: list(values) for term, values in synonyms.items()}
        return await self._update_setting(SYNONYMS, body, token)

    async def reset_synonyms(self, token: CancellationToken | None = None) -> EnqueuedTask:
        return await self._reset_setting(SYNONYMS, token)

    async def _get_setting(self, name: str, token: CancellationToken | None) -> Any:
        return await self._transport.get(Routes.settings(self.uid, name), token=token)

    async def _update_setting(
        self, name: str, body: Any, token: CancellationToken | None
    ) -> EnqueuedTask:
        # A None body is sent as JSON null, which resets the setting.
        return await self._enqueue(
            "POST", Routes.settings(self.uid, name), body, token=token
        )

    async def _reset_setting(
        self, name: str, token: CancellationToken | None
    ) -> EnqueuedTask:
        return await self._enqueue(
            "DELETE", Routes.settings(self.uid, name), token=token
        )

    async def _enqueue(
        self,
        method: str,
        route: str,
        body: Any = NO_BODY,
        params: dict[str, Any] | None = None,
        token: CancellationToken | None = None,
    ) -> EnqueuedTask:
        data = await self._transport.request(
            method, route, body=body, params=params, token=token
        )
        return self._transport.decode(EnqueuedTask, data, route)
