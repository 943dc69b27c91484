"""Awaiting asynchronous index mutations.

Every write to an index is applied by the service in the background and
answered with a task id. The mutation is visible to reads only once that
task reports ``published``; ``wait_for_task`` is the one place that polls for it.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from indexclient.errors import ServiceError, TaskTimeoutError, ValidationError
from indexclient.models import NOT_PUBLISHED, PUBLISHED

logger = logging.getLogger(__name__)


def wait_for_task(index, task_id, timeout=None, interval=None, max_interval=None):
    """Poll the status of ``task_id`` on ``index`` until it is published.

    The sleep between polls starts at ``interval`` and doubles up to
    ``max_interval``. Errors from the status read itself are not retried.
    Raises TaskTimeoutError once ``timeout`` seconds have passed.
    """
    config = index.client.config
    timeout = config.wait_timeout if timeout is None else timeout
    interval = config.poll_interval if interval is None else interval
    max_interval = config.max_poll_interval if max_interval is None else max_interval
    if timeout <= 0:
        raise ValidationError("timeout must be > 0")
    if interval <= 0:
        raise ValidationError("interval must be > 0")
    max_interval = max(max_interval, interval)

    deadline = time.monotonic() + timeout
    polls = 0
    while True:
        status = index.get_task_status(task_id)
        polls += 1
        state = status.get("status") if isinstance(status, dict) else None
        if state == PUBLISHED:
            logger.debug(
                "task %s on '%s' published after %d polls", task_id, index.name, polls
            )
            return status
        if state != NOT_PUBLISHED:
            raise ServiceError(200, f"unexpected task status {state!r}", status)

        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise TaskTimeoutError(index.name, task_id, timeout)
        logger.debug(
            "task %s on '%s' not published yet, sleeping %.2fs",
            task_id,
            index.name,
            min(interval, remaining),
        )
        time.sleep(min(interval, remaining))
        interval = min(interval * 2, max_interval)


@dataclass
class Task:
    """A pending mutation returned by every write operation."""

    index: Any
    task_id: Optional[int]
    response: Dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def object_id(self):
        return self.response.get("objectID")

    @property
    def object_ids(self):
        return self.response.get("objectIDs", [])

    def wait(self, timeout=None) -> Dict[str, Any]:
        # A task without an id has nothing left to publish, e.g. deleting a missing index.
        if self.task_id is None:
            return {"status": PUBLISHED}
        return self.index.wait_task(self.task_id, timeout=timeout)


def wait_all(tasks, timeout=None, max_workers=8):
    """Wait for several tasks concurrently; statuses come back in input order.

    Tasks are polled independently since publication order across tasks is
    not guaranteed. The first failure, in input order, is raised.
    """
    tasks = list(tasks)
    if not tasks:
        return []
    with ThreadPoolExecutor(max_workers=min(max_workers, len(tasks))) as executor:
        futures = [executor.submit(task.wait, timeout) for task in tasks]
        return [future.result() for future in futures]
