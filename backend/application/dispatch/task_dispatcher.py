"""
Task dispatcher.

Publishes named events to the Celery broker. The broker persists the
message before send_task returns, so a restart of the API process cannot
drop an accepted run.

Dependencies: celery, fastapi.concurrency, backend.workers
System role: Task dispatch contract (enqueue side)
"""

import logging
from typing import Any

from celery import Celery, Task
from fastapi.concurrency import run_in_threadpool

from backend.core.exceptions import QueueDispatchError
from backend.workers import celery_app

logger = logging.getLogger(__name__)


class TaskDispatcher:
    """
    Enqueue events for background processing.

    Args:
        app: Celery application; defaults to the worker app
    """

    def __init__(self, app: Celery | None = None) -> None:
        self._app = app or celery_app

    async def enqueue(self, event_name: str, payload: dict[str, Any]) -> str:
        """
        Publish one event.

        The blocking broker publish runs in the threadpool. With
        task_always_eager set, the registered task runs inline instead,
        since Celery ignores eager mode for send_task.

        Args:
            event_name: Registered task name, e.g. "therapy/session.message"
            payload: JSON-serializable task argument

        Returns:
            str: Celery task ID

        Raises:
            QueueDispatchError: If the broker rejects or cannot accept the message
        """
        try:
            if self._app.conf.task_always_eager:
                task = self._eager_task(event_name)
                result = await run_in_threadpool(task.apply_async, args=[payload])
            else:
                result = await run_in_threadpool(self._app.send_task, event_name, args=[payload])
        except Exception as e:
            logger.error(
                "Failed to enqueue event",
                extra={"event_name": event_name, "error": str(e)},
            )
            raise QueueDispatchError(event_name, {"error": str(e)}) from e

        logger.info(
            "Event enqueued",
            extra={"event_name": event_name, "task_id": result.id},
        )
        return result.id

    def _eager_task(self, event_name: str) -> Task:
        # The API process never imports the task modules on its own
        self._app.loader.import_default_modules()
        return self._app.tasks[event_name]
