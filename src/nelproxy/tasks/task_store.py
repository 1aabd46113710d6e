# src/nelproxy/tasks/task_store.py

from __future__ import annotations

import logging
import threading

from ..errors import DuplicateTaskError, EmptyQueueError, TaskNotFoundError
from .task_models import Task

logger = logging.getLogger(__name__)


class TaskStore:
    """
    In-memory task queue.

    Holds pending tasks in insertion order and the id counter that numbers them.
    Nothing survives a restart.

    Thread-safety:
    - every public method runs under one lock, so readers never see a half-applied
      create or delete
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._tasks: list[Task] = []
        self._current_id = 0
        logger.info("TaskStore ready (in-memory)")

    # ---- low-level helpers ----

    def _index_of(self, task_id: int) -> int:
        for index, item in enumerate(self._tasks):
            if item.id == task_id:
                return index
        return -1

    # ---- public API ----

    def count_tasks(self) -> int:
        with self._lock:
            return len(self._tasks)

    def create(self, candidate: Task) -> Task:
        """
        Append a new task and return it with its assigned id.

        Any id carried by the candidate is ignored. A rejected candidate does not
        consume an id.
        """
        with self._lock:
            key = candidate.dedup_key
            if any(item.dedup_key == key for item in self._tasks):
                raise DuplicateTaskError(candidate.inventory, candidate.command.playbook)

            self._current_id += 1
            task = candidate.with_id(self._current_id)
            self._tasks.append(task)

        logger.info(
            "Task added id=%s inventory=%s playbook=%s su=%s tags=%s user=%s",
            task.id,
            task.inventory,
            task.command.playbook,
            task.command.elevate,
            list(task.command.tags),
            task.command.user,
        )
        return task

    def list_tasks(self) -> list[Task]:
        """
        Return all pending tasks in insertion order.

        Raises EmptyQueueError when nothing is queued; callers that only need a
        snapshot should use count_tasks() first or catch it.
        """
        with self._lock:
            if not self._tasks:
                raise EmptyQueueError()
            return list(self._tasks)

    def get(self, task_id: int) -> Task:
        with self._lock:
            index = self._index_of(task_id)
            if index < 0:
                raise TaskNotFoundError(task_id)
            return self._tasks[index]

    def delete(self, task_id: int) -> Task:
        """Remove the task with task_id; the rest keep their relative order."""
        with self._lock:
            index = self._index_of(task_id)
            if index < 0:
                raise TaskNotFoundError(task_id)
            task = self._tasks.pop(index)

        logger.info("Deleted task id=%s", task_id)
        return task
