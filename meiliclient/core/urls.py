"""Request URL construction and route table."""


def build_url(host: str, path: str) -> str:
    """Join a host and a resource path with exactly one slash.

    The host may carry a sub-path (``http://x/api``) or a trailing slash
    (``http://x/``). No validation of the scheme or host is done here;
    malformed hosts fail later as connection errors.

    Args:
        host: Base URL of the search engine
        path: Resource path relative to the host

    Returns:
        Absolute request URL
    """
    return f"{host.rstrip('/')}/{path.lstrip('/')}"


class Routes:
    """Relative paths of every resource the client talks to."""

    HEALTH = "health"
    VERSION = "version"
    STATS = "stats"
    INDEXES = "indexes"
    TASKS = "tasks"

    @staticmethod
    def index(uid: str) -> str:
        return f"indexes/{uid}"

    @staticmethod
    def index_stats(uid: str) -> str:
        return f"indexes/{uid}/stats"

    @staticmethod
    def index_tasks(uid: str) -> str:
        return f"indexes/{uid}/tasks"

    @staticmethod
    def search(uid: str) -> str:
        return f"indexes/{uid}/search"

    @staticmethod
    def documents(uid: str) -> str:
        return f"indexes/{uid}/documents"

    @staticmethod
    def document(uid: str, document_id: str | int) -> str:
        return f"indexes/{uid}/documents/{document_id}"

    @staticmethod
    def documents_delete_batch(uid: str) -> str:
        return f"indexes/{uid}/documents/delete-batch"

    @staticmethod
    def settings(uid: str, sub_setting: str | None = None) -> str:
        """Route of the settings object, or of one sub-setting (e.g. ``ranking-rules``)."""
        if sub_setting is None:
            return f"indexes/{uid}/settings"
        return f"indexes/{uid}/settings/{sub_setting}"

    @staticmethod
    def task(task_uid: int) -> str:
        return f"tasks/{task_uid}"
