"""Asynchronous client for the Meilisearch search engine."""

__version__ = "0.1.0"

from meiliclient.client import Client
from meiliclient.config import ClientConfig
from meiliclient.core.cancellation import CancellationToken
from meiliclient.core.errors import (
    ErrorCode,
    ErrorKind,
    MalformedResponseError,
    MeiliApiError,
    MeiliClientError,
    MeiliConnectionError,
    RequestAbortedError,
    TaskTimeoutError,
)
from meiliclient.index import Index
from meiliclient.models.attributes import AttributeSelection
from meiliclient.models.search import SearchParameters, SearchResult
from meiliclient.models.settings import Settings, SettingsUpdate
from meiliclient.models.task import EnqueuedTask, Task, TaskStatus

__all__ = [
    "__version__",
    "Client",
    "ClientConfig",
    "Index",
    "CancellationToken",
    # Errors
    "ErrorCode",
    "ErrorKind",
    "MeiliClientError",
    "MeiliConnectionError",
    "RequestAbortedError",
    "MeiliApiError",
    "TaskTimeoutError",
    "MalformedResponseError",
    # Models
    "AttributeSelection",
    "SearchParameters",
    "SearchResult",
    "Settings",
    "SettingsUpdate",
    "EnqueuedTask",
    "Task",
    "TaskStatus",
]
