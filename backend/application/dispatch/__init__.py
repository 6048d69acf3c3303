"""Durable hand-off of pipeline runs to the task queue."""

from backend.application.dispatch.task_dispatcher import TaskDispatcher

__all__ = ["TaskDispatcher"]
