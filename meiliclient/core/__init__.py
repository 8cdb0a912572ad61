"""Core module initialization."""

from meiliclient.core.cancellation import CancellationToken
from meiliclient.core.transport import NO_BODY, RequestTransport
from meiliclient.core.urls import Routes, build_url

__all__ = ["CancellationToken", "NO_BODY", "RequestTransport", "Routes", "build_url"]
