# tests/conftest.py

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from nelproxy.api.app import create_app
from nelproxy.tasks.task_models import Command, Task
from nelproxy.tasks.task_store import TaskStore


def make_task(
    inventory: str = "EH2",
    playbook: str = "deploy.yml",
    *,
    user: str = "ops",
    elevate: bool = False,
    tags: tuple[str, ...] = ("web",),
    task_id: int = 0,
) -> Task:
    return Task(
        id=task_id,
        inventory=inventory,
        command=Command(playbook=playbook, user=user, elevate=elevate, tags=tags),
    )


def task_payload(inventory: str = "EH2", playbook: str = "deploy.yml", **command) -> dict:
    """Wire-format create body, as a CI job would post it."""
    cmd = {"playbook": playbook, "user": "ops", "su": False, "tags": {"name": ["web"]}}
    cmd.update(command)
    return {"inventory": inventory, "command": cmd}


@pytest.fixture()
def store() -> TaskStore:
    return TaskStore()


@pytest.fixture()
def client(store: TaskStore) -> TestClient:
    """
    TestClient bound to a fresh app/store.

    The same object doubles as the worker's httpx client in end-to-end tests.
    """
    return TestClient(create_app(store))
