"""Polling of enqueued tasks until they reach a terminal status."""

import asyncio
import logging
from collections.abc import Iterable

from meiliclient.core.cancellation import CancellationToken
from meiliclient.core.errors import TaskTimeoutError
from meiliclient.core.transport import RequestTransport
from meiliclient.core.urls import Routes
from meiliclient.models.task import EnqueuedTask, Task, TaskStatus

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 5000
DEFAULT_INTERVAL_MS = 50


def _task_uid(task: int | EnqueuedTask | Task) -> int:
    if isinstance(task, (EnqueuedTask, Task)):
        return task.uid
    return task


async def get_task(
    transport: RequestTransport,
    task_uid: int,
    token: CancellationToken | None = None,
) -> Task:
    """Fetch the current record of a task."""
    route = Routes.task(task_uid)
    data = await transport.get(route, token=token)
    return transport.decode(Task, data, route)


def _give_up(
    task_uid: int, timeout_ms: float, last_status: TaskStatus | None
) -> TaskTimeoutError:
    status = last_status.value if last_status is not None else "unknown"
    logger.warning(
        f"Gave up waiting for task {task_uid} after {timeout_ms}ms "
        f"(last status: {status})"
    )
    return TaskTimeoutError(task_uid, timeout_ms, last_status)


async def wait_for_task(
    transport: RequestTransport,
    task: int | EnqueuedTask | Task,
    timeout_ms: float | None = DEFAULT_TIMEOUT_MS,
    interval_ms: float = DEFAULT_INTERVAL_MS,
    token: CancellationToken | None = None,
) -> Task:
    """Poll a task until it succeeds, fails or is canceled.

    Waiting only observes the task; the deadline and the token are local to
    this client and never stop the task on the server. The deadline bounds
    the status requests as well as the pauses between them.

    Args:
        transport: Transport used for the status requests
        task: Task uid, or the task returned by a mutating call
        timeout_ms: Deadline in milliseconds; None waits indefinitely
        interval_ms: Delay between two polls in milliseconds
        token: Optional cancellation token; stops polling immediately when fired

    Returns:
        The task record in its terminal status

    Raises:
        TaskTimeoutError: If the deadline elapses first. It carries the uid and
            the last observed status so the caller can resume waiting.
        RequestAbortedError: If the token fires
    """
    task_uid = _task_uid(task)
    loop = asyncio.get_running_loop()
    deadline = None if timeout_ms is None else loop.time() + timeout_ms / 1000
    last_status: TaskStatus | None = None

    while True:
        remaining = None if deadline is None else deadline - loop.time()
        if remaining is not None and remaining <= 0:
            raise _give_up(task_uid, timeout_ms, last_status)

        try:
            current = await asyncio.wait_for(
                get_task(transport, task_uid, token=token), timeout=remaining
            )
        except asyncio.TimeoutError:
            raise _give_up(task_uid, timeout_ms, last_status) from None

        if current.status != last_status:
            logger.debug(f"Task {task_uid} is {current.status.value}")
        last_status = current.status
        if current.is_finished:
            return current

        delay = interval_ms / 1000
        if deadline is not None:
            delay = min(delay, max(deadline - loop.time(), 0))
        if token is not None:
            await token.sleep(delay)
        else:
            await asyncio.sleep(delay)


async def wait_for_tasks(
    transport: RequestTransport,
    tasks: Iterable[int | EnqueuedTask | Task],
    timeout_ms: float | None = DEFAULT_TIMEOUT_MS,
    interval_ms: float = DEFAULT_INTERVAL_MS,
    token: CancellationToken | None = None,
) -> list[Task]:
    """Wait on several tasks concurrently.

    The first failure stops every other wait before it is raised.

    Returns:
        Terminal task records, in the order the tasks were given
    """
    waiters = [
        asyncio.ensure_future(
            wait_for_task(
                transport,
                task,
                timeout_ms=timeout_ms,
                interval_ms=interval_ms,
                token=token,
            )
        )
        for task in tasks
    ]
    try:
        return list(await asyncio.gather(*waiters))
    except BaseException:
        for waiter in waiters:
            waiter.cancel()
        await asyncio.gather(*waiters, return_exceptions=True)
        raise
