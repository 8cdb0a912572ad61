"""Index and document models."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class IndexInfo(BaseModel):
    """Metadata of an index."""

    uid: str = Field(..., description="Index unique identifier")
    primary_key: str | None = Field(default=None, alias="primaryKey")
    created_at: datetime | None = Field(default=None, alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")

    model_config = {"populate_by_name": True}


class IndexStats(BaseModel):
    """Statistics for an index."""

    number_of_documents: int = Field(default=0, alias="numberOfDocuments")
    is_indexing: bool = Field(default=False, alias="isIndexing")
    field_distribution: dict[str, int] = Field(
        default_factory=dict, alias="fieldDistribution"
    )

    model_config = {"populate_by_name": True}

    @property
    def field_count(self) -> int:
        """Get the unique field count."""
        return len(self.field_distribution)


def unwrap_results(data: Any) -> list[Any]:
    """Return the items of a list route.

    Newer servers wrap list responses in ``{"results": [...]}`` while older
    ones answer with a bare list.
    """
    if isinstance(data, dict) and "results" in data:
        return list(data["results"])
    if isinstance(data, list):
        return data
    return []
