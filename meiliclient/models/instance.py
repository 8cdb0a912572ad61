"""Instance-level models: health, version and global statistics."""

from datetime import datetime

from packaging import version
from pydantic import BaseModel, Field

from meiliclient.models.index import IndexStats


class Health(BaseModel):
    """Response of the health route."""

    status: str = "available"

    @property
    def is_available(self) -> bool:
        return self.status == "available"


class Version(BaseModel):
    """Response of the version route."""

    pkg_version: str = Field(alias="pkgVersion")
    commit_sha: str | None = Field(default=None, alias="commitSha")
    commit_date: datetime | str | None = Field(default=None, alias="commitDate")

    model_config = {"populate_by_name": True}

    @property
    def parsed(self) -> version.Version | None:
        """Parsed package version, or None if it is not PEP 440 compatible."""
        try:
            return version.parse(self.pkg_version.lstrip("v"))
        except version.InvalidVersion:
            return None

    def is_at_least(self, minimum: str) -> bool:
        """Check the server version against a minimum such as ``"0.25.0"``."""
        current = self.parsed
        if current is None:
            return False
        return current >= version.parse(minimum)


class InstanceStats(BaseModel):
    """Response of the global stats route."""

    database_size: int = Field(default=0, alias="databaseSize")
    last_update: datetime | None = Field(default=None, alias="lastUpdate")
    indexes: dict[str, IndexStats] = Field(default_factory=dict)

    model_config = {"populate_by_name": True}
