"""Models module initialization."""

from meiliclient.models.attributes import AttributeSelection, Attributes
from meiliclient.models.index import IndexInfo, IndexStats
from meiliclient.models.instance import Health, InstanceStats, Version
from meiliclient.models.search import (
    Hit,
    MatchRange,
    SearchParameters,
    SearchResult,
)
from meiliclient.models.settings import (
    DEFAULT_RANKING_RULES,
    FacetingSettings,
    PaginationSettings,
    Settings,
    SettingsUpdate,
    TypoToleranceSettings,
)
from meiliclient.models.task import (
    EnqueuedTask,
    Task,
    TaskError,
    TasksResponse,
    TaskStatus,
    TasksSummary,
    TaskType,
    TaskTypeValue,
    task_type_name,
)

__all__ = [
    # Attribute lists
    "AttributeSelection",
    "Attributes",
    # Index models
    "IndexInfo",
    "IndexStats",
    # Instance models
    "Health",
    "InstanceStats",
    "Version",
    # Search models
    "Hit",
    "MatchRange",
    "SearchParameters",
    "SearchResult",
    # Settings models
    "DEFAULT_RANKING_RULES",
    "FacetingSettings",
    "PaginationSettings",
    "Settings",
    "SettingsUpdate",
    "TypoToleranceSettings",
    # Task models
    "EnqueuedTask",
    "Task",
    "TaskError",
    "TasksResponse",
    "TaskStatus",
    "TasksSummary",
    "TaskType",
    "TaskTypeValue",
    "task_type_name",
]
