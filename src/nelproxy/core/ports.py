# src/nelproxy/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used across the app.

The dispatch API depends on TaskRepo and the worker depends on DispatchPort instead
of concrete classes. This keeps the HTTP client swappable and makes testing easier.
"""

from collections.abc import Callable
from typing import Any, Protocol

CommandEmitter = Callable[[str], None]
# Receives one rendered command (text line or JSON document) per task.


class TaskRepo(Protocol):
    def count_tasks(self) -> int: ...
    def create(self, candidate: Any) -> Any: ...
    def list_tasks(self) -> list[Any]: ...
    def get(self, task_id: int) -> Any: ...
    def delete(self, task_id: int) -> Any: ...


class DispatchPort(Protocol):
    """
    Worker-side view of the dispatch API.

    fetch_tasks() returns an empty list when the server reports an empty queue.
    Both methods raise TransportError on network, status or decoding failures.
    """

    def fetch_tasks(self) -> list[Any]: ...
    def acknowledge(self, task_id: int) -> None: ...
