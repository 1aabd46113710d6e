# src/nelproxy/errors.py

"""
Error taxonomy.

Store-level errors are translated into HTTP status codes by the dispatch API.
Transport and configuration errors are mapped to process exit codes by the CLI.
Nothing here is retried automatically.
"""

from __future__ import annotations

from collections.abc import Sequence


class NelProxyError(Exception):
    """Base class for all nelproxy errors."""


class TaskValidationError(NelProxyError):
    """A create payload is malformed or fails validation."""


class DuplicateTaskError(NelProxyError):
    """A pending task already targets the same (inventory, playbook)."""

    def __init__(self, inventory: str, playbook: str) -> None:
        super().__init__(f"duplicated task inventory={inventory!r} playbook={playbook!r}")
        self.inventory = inventory
        self.playbook = playbook


class TaskNotFoundError(NelProxyError):
    """No pending task with the requested id."""

    def __init__(self, task_id: int | None = None, message: str | None = None) -> None:
        super().__init__(message or f"no such task id={task_id}")
        self.task_id = task_id


class EmptyQueueError(TaskNotFoundError):
    """Nothing is queued at all."""

    def __init__(self) -> None:
        super().__init__(None, "task queue is empty")


class TransportError(NelProxyError):
    """Talking to the dispatch API failed (network, status or decoding)."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class AcknowledgeError(TransportError):
    """One or more tasks were emitted but could not be deleted afterwards."""

    def __init__(self, failed_ids: Sequence[int], message: str | None = None) -> None:
        ids = list(failed_ids)
        super().__init__(message or f"acknowledge failed for task ids {ids}")
        self.failed_ids = ids


class ConfigurationError(NelProxyError):
    """A required startup parameter is missing or invalid."""
