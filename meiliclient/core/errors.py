"""Error taxonomy and classification of transport outcomes.

Every failure raised by the client is one of the five kinds below. Callers
branch on ``error.kind`` or ``error.code``, never on the message text.
"""

from enum import Enum
from typing import Any, TypeVar

import httpx
import orjson
from pydantic import BaseModel, ValidationError


class ErrorKind(str, Enum):
    """Closed set of failure kinds."""

    CONNECTION = "connection"
    ABORTED = "aborted"
    HTTP = "http"
    TIMEOUT = "timeout"
    MALFORMED_RESPONSE = "malformed_response"


class ErrorCode(str, Enum):
    """Machine codes returned by the server in error bodies."""

    INDEX_NOT_FOUND = "index_not_found"
    INDEX_ALREADY_EXISTS = "index_already_exists"
    INVALID_INDEX_UID = "invalid_index_uid"
    INDEX_PRIMARY_KEY_ALREADY_EXISTS = "index_primary_key_already_exists"
    PRIMARY_KEY_INFERENCE_FAILED = "primary_key_inference_failed"
    DOCUMENT_NOT_FOUND = "document_not_found"
    INVALID_FILTER = "invalid_filter"
    INVALID_SORT = "invalid_sort"
    INVALID_RANKING_RULE = "invalid_ranking_rule"
    INVALID_API_KEY = "invalid_api_key"
    MISSING_AUTHORIZATION_HEADER = "missing_authorization_header"
    TASK_NOT_FOUND = "task_not_found"
    BAD_REQUEST = "bad_request"
    MALFORMED_PAYLOAD = "malformed_payload"
    MISSING_PAYLOAD = "missing_payload"
    INVALID_CONTENT_TYPE = "invalid_content_type"
    PAYLOAD_TOO_LARGE = "payload_too_large"
    INTERNAL = "internal"


ABORTED_MESSAGE = "The user aborted a request."

ModelT = TypeVar("ModelT", bound=BaseModel)


class MeiliClientError(Exception):
    """Base class of every error raised by the client."""

    kind: ErrorKind
    code: str

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class MeiliConnectionError(MeiliClientError):
    """The server could not be reached (DNS, refused, reset, request timeout)."""

    kind = ErrorKind.CONNECTION
    code = "connection_error"

    def __init__(self, message: str, url: str):
        super().__init__(message)
        self.url = url


class RequestAbortedError(MeiliClientError):
    """A cancellation token fired before the call settled."""

    kind = ErrorKind.ABORTED
    code = "request_aborted"

    def __init__(self, message: str = ABORTED_MESSAGE, url: str | None = None):
        super().__init__(message)
        self.url = url


class MeiliApiError(MeiliClientError):
    """The server answered with a non-2xx status."""

    kind = ErrorKind.HTTP

    def __init__(
        self,
        message: str,
        status_code: int,
        code: str | None = None,
        error_type: str | None = None,
        link: str | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.code = code or "http_error"
        self.type = error_type
        self.link = link

    def __str__(self) -> str:
        return f"{self.message} ({self.code}, HTTP {self.status_code})"


class TaskTimeoutError(MeiliClientError):
    """A task did not reach a terminal status before the client-side deadline."""

    kind = ErrorKind.TIMEOUT
    code = "task_timeout"

    def __init__(self, task_uid: int, timeout_ms: float, last_status: Any = None):
        super().__init__(
            f"timeout of {timeout_ms}ms has exceeded on task {task_uid} "
            f"when waiting for it to resolve (last status: {_status_value(last_status)})."
        )
        self.task_uid = task_uid
        self.timeout_ms = timeout_ms
        self.last_status = last_status


class MalformedResponseError(MeiliClientError):
    """A 2xx response whose body could not be decoded."""

    kind = ErrorKind.MALFORMED_RESPONSE
    code = "malformed_response"

    def __init__(self, message: str, url: str, body: bytes = b""):
        super().__init__(message)
        self.url = url
        self.body = body


def _status_value(status: Any) -> str:
    if status is None:
        return "unknown"
    return str(getattr(status, "value", status))


def _is_refused(detail: str) -> bool:
    # anyio reports refused connections to multi-address hosts this way
    lowered = detail.lower()
    return "refused" in lowered or "all connection attempts failed" in lowered


def _host_and_port(url: str) -> str:
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL:
        return url
    port = parsed.port
    if port is None:
        port = {"http": 80, "https": 443}.get(parsed.scheme)
    if port is None:
        return parsed.host
    return f"{parsed.host}:{port}"


def classify_transport_error(exc: Exception, url: str) -> MeiliClientError:
    """Map an ``httpx`` transport failure to a connection error.

    Args:
        exc: Exception raised by httpx while sending the request
        url: The URL that was requested

    Returns:
        The classified error
    """
    detail = str(exc) or exc.__class__.__name__
    if isinstance(exc, httpx.ConnectError) and _is_refused(detail):
        reason = f"connect ECONNREFUSED {_host_and_port(url)}"
    elif isinstance(exc, httpx.TimeoutException):
        reason = f"timeout ({exc.__class__.__name__})"
    else:
        reason = detail
    return MeiliConnectionError(f"request to {url} failed, reason: {reason}", url=url)


def classify_response(response: httpx.Response) -> MeiliApiError:
    """Build an API error from a non-2xx response.

    The server normally answers with ``{message, code, type, link}``. When the
    body is missing or not JSON, the status line is used as the message.
    """
    payload: Any = None
    if response.content:
        try:
            payload = orjson.loads(response.content)
        except orjson.JSONDecodeError:
            payload = None

    if isinstance(payload, dict):
        return MeiliApiError(
            message=str(payload.get("message") or response.reason_phrase),
            status_code=response.status_code,
            code=payload.get("code"),
            error_type=payload.get("type"),
            link=payload.get("link"),
        )

    message = response.text.strip() if response.content else ""
    return MeiliApiError(
        message=message or response.reason_phrase or f"HTTP {response.status_code}",
        status_code=response.status_code,
    )


def decode_response(model: type[ModelT], data: Any, url: str) -> ModelT:
    """Validate a decoded 2xx body against its response model.

    Raises:
        MalformedResponseError: If the body does not have the expected shape
    """
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise MalformedResponseError(
            f"request to {url} returned an unexpected {model.__name__} body: "
            f"{e.error_count()} validation error(s), first: {e.errors()[0]['msg']}",
            url=url,
            body=orjson.dumps(data),
        ) from e
