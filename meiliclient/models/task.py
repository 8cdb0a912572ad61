"""Task models for the engine's asynchronous task queue."""

from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Optional, Union

from pydantic import AliasChoices, BaseModel, Field


class TaskStatus(str, Enum):
    """Task status values."""

    ENQUEUED = "enqueued"
    PROCESSING = "processing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELED = "canceled"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


TERMINAL_STATUSES = frozenset(
    {TaskStatus.SUCCEEDED, TaskStatus.FAILED, TaskStatus.CANCELED}
)


class TaskType(str, Enum):
    """Task type values."""

    INDEX_CREATION = "indexCreation"
    INDEX_UPDATE = "indexUpdate"
    INDEX_DELETION = "indexDeletion"
    DOCUMENT_ADDITION = "documentAddition"
    DOCUMENT_PARTIAL = "documentPartial"
    DOCUMENT_ADDITION_OR_UPDATE = "documentAdditionOrUpdate"
    DOCUMENT_DELETION = "documentDeletion"
    CLEAR_ALL = "clearAll"
    SETTINGS_UPDATE = "settingsUpdate"


TaskTypeValue = Annotated[Union[TaskType, str], Field(union_mode="left_to_right")]
"""A known ``TaskType``, or the raw name of a type this client does not know."""


def task_type_name(task_type: TaskType | str | None) -> str | None:
    """Wire name of a task type."""
    if isinstance(task_type, TaskType):
        return task_type.value
    return task_type


class TaskError(BaseModel):
    """Error attached to a failed task."""

    message: str = ""
    code: str = ""
    type: str = ""
    link: str = ""

    model_config = {"populate_by_name": True}


class EnqueuedTask(BaseModel):
    """Summary returned immediately by every mutating call."""

    uid: int = Field(validation_alias=AliasChoices("uid", "taskUid"))
    index_uid: str | None = Field(default=None, alias="indexUid")
    status: TaskStatus = TaskStatus.ENQUEUED
    task_type: Optional[TaskTypeValue] = Field(default=None, alias="type")
    enqueued_at: datetime | None = Field(default=None, alias="enqueuedAt")

    model_config = {"populate_by_name": True}


class Task(BaseModel):
    """Full task record, as returned by the task status route."""

    uid: int = Field(validation_alias=AliasChoices("uid", "taskUid"))
    index_uid: str | None = Field(default=None, alias="indexUid")
    status: TaskStatus
    task_type: Optional[TaskTypeValue] = Field(default=None, alias="type")
    details: dict[str, Any] | None = None
    error: TaskError | None = None
    duration: str | None = None
    enqueued_at: datetime | None = Field(default=None, alias="enqueuedAt")
    started_at: datetime | None = Field(default=None, alias="startedAt")
    finished_at: datetime | None = Field(default=None, alias="finishedAt")

    model_config = {"populate_by_name": True}

    @property
    def is_finished(self) -> bool:
        """Check if task reached a terminal status."""
        return self.status.is_terminal

    @property
    def is_success(self) -> bool:
        """Check if task succeeded."""
        return self.status == TaskStatus.SUCCEEDED

    @property
    def is_failed(self) -> bool:
        """Check if task failed."""
        return self.status == TaskStatus.FAILED

    @property
    def duration_ms(self) -> int | None:
        """Parse ISO 8601 duration to milliseconds."""
        if not self.duration:
            return None
        try:
            # Format: PT0.029890209S
            if self.duration.startswith("PT") and self.duration.endswith("S"):
                seconds = float(self.duration[2:-1])
                return int(seconds * 1000)
        except ValueError:
            pass
        return None

    def format_duration(self) -> str:
        """Format duration as human-readable string."""
        ms = self.duration_ms
        if ms is None:
            return "-"
        if ms < 1000:
            return f"{ms}ms"
        elif ms < 60000:
            return f"{ms / 1000:.2f}s"
        else:
            minutes = ms // 60000
            seconds = (ms % 60000) / 1000
            return f"{minutes}m {seconds:.1f}s"


class TasksResponse(BaseModel):
    """Response from the task list routes."""

    results: list[Task] = Field(default_factory=list)
    limit: int | None = None
    from_uid: int | None = Field(default=None, alias="from")
    next_uid: int | None = Field(default=None, alias="next")

    model_config = {"populate_by_name": True}


class TasksSummary(BaseModel):
    """Counts of tasks per status."""

    total: int = 0
    succeeded: int = 0
    failed: int = 0
    processing: int = 0
    enqueued: int = 0
    canceled: int = 0

    @property
    def success_rate(self) -> float:
        """Calculate success rate as percentage."""
        finished = self.succeeded + self.failed
        if finished == 0:
            return 100.0
        return (self.succeeded / finished) * 100

    @property
    def has_active(self) -> bool:
        """Check if there are active (processing or enqueued) tasks."""
        return self.processing > 0 or self.enqueued > 0

    @classmethod
    def from_tasks(cls, tasks: list[Task]) -> "TasksSummary":
        """Create summary from list of tasks."""
        summary = cls(total=len(tasks))
        for task in tasks:
            field = task.status.value
            setattr(summary, field, getattr(summary, field) + 1)
        return summary
